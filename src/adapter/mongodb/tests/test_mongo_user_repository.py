"""Tests for MongoUserRepository against a mocked collection."""

import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import DuplicateError, StorageError
from domain.model.user import User

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


class MongoUserRepositoryTestCase(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.repo = MongoUserRepository(self.db)


class TestCreate(MongoUserRepositoryTestCase):

    def test_uses_users_collection(self):
        self.db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)

    def test_create_native_user_omits_unset_fields(self):
        user = User.create_native('a@example.com', 'A', now=NOW)
        user.issue_otp('123456', NOW + timedelta(minutes=5))

        self.assertIs(self.repo.create(user), user)

        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], user.id)
        self.assertEqual(doc['email'], 'a@example.com')
        self.assertFalse(doc['is_google_user'])
        self.assertEqual(doc['otp'], '123456')
        self.assertNotIn('google_id', doc)
        self.assertNotIn('date_of_birth', doc)

    def test_create_google_user_has_no_otp_fields(self):
        user = User.create_google('g@example.com', 'G', google_id='g-1', now=NOW)

        self.repo.create(user)

        doc = self.collection.insert_one.call_args[0][0]
        self.assertTrue(doc['is_google_user'])
        self.assertTrue(doc['is_verified'])
        self.assertEqual(doc['google_id'], 'g-1')
        self.assertNotIn('otp', doc)
        self.assertNotIn('otp_expires', doc)

    def test_duplicate_key(self):
        self.collection.insert_one.side_effect = DuplicateKeyError('E11000 duplicate key')

        with self.assertRaises(DuplicateError):
            self.repo.create(User.create_native('a@example.com', 'A'))

    def test_driver_error(self):
        self.collection.insert_one.side_effect = PyMongoError('boom')

        with self.assertRaises(StorageError):
            self.repo.create(User.create_native('a@example.com', 'A'))


class TestSave(MongoUserRepositoryTestCase):

    def test_save_sets_fields_and_unsets_cleared_otp(self):
        self.collection.update_one.return_value = MagicMock(matched_count=1)
        user = User.create_native('a@example.com', 'A', now=NOW)
        user.is_verified = True

        self.assertTrue(self.repo.save(user))

        query, update = self.collection.update_one.call_args[0]
        self.assertEqual(query, {'_id': user.id})
        self.assertTrue(update['$set']['is_verified'])
        self.assertNotIn('is_google_user', update['$set'])
        self.assertNotIn('created_at', update['$set'])
        self.assertIn('otp', update['$unset'])
        self.assertIn('otp_expires', update['$unset'])
        self.assertGreater(user.updated_at, NOW)

    def test_save_keeps_pending_otp(self):
        self.collection.update_one.return_value = MagicMock(matched_count=1)
        user = User.create_native('a@example.com', 'A', now=NOW)
        user.issue_otp('654321', NOW + timedelta(minutes=5))

        self.repo.save(user)

        update = self.collection.update_one.call_args[0][1]
        self.assertEqual(update['$set']['otp'], '654321')
        self.assertNotIn('otp', update.get('$unset', {}))

    def test_save_unknown_user(self):
        self.collection.update_one.return_value = MagicMock(matched_count=0)
        self.assertFalse(self.repo.save(User.create_native('a@example.com', 'A')))

    def test_save_with_expected_otp_filters_on_stored_code(self):
        self.collection.update_one.return_value = MagicMock(matched_count=0)
        user = User.create_native('a@example.com', 'A', now=NOW)
        user.is_verified = True

        self.assertFalse(self.repo.save(user, expected_otp='123456'))

        query = self.collection.update_one.call_args[0][0]
        self.assertEqual(query, {'_id': user.id, 'otp': '123456'})

    def test_save_driver_error(self):
        self.collection.update_one.side_effect = PyMongoError('boom')
        with self.assertRaises(StorageError):
            self.repo.save(User.create_native('a@example.com', 'A'))


class TestRead(MongoUserRepositoryTestCase):

    def test_get_by_email(self):
        self.collection.find_one.return_value = {
            '_id': 'user-1',
            'email': 'a@example.com',
            'name': 'A',
            'created_at': NOW,
            'updated_at': NOW,
            'is_google_user': False,
            'is_verified': True,
        }

        user = self.repo.get_by_email('a@example.com')

        self.assertEqual(user.id, 'user-1')
        self.assertTrue(user.is_verified)
        self.assertIsNone(user.otp)
        self.assertIsNone(user.google_id)
        self.collection.find_one.assert_called_once_with({'email': 'a@example.com'})

    def test_get_by_id_not_found(self):
        self.collection.find_one.return_value = None

        self.assertIsNone(self.repo.get_by_id('missing'))
        self.collection.find_one.assert_called_once_with({'_id': 'missing'})

    def test_read_driver_error(self):
        self.collection.find_one.side_effect = PyMongoError('boom')

        with self.assertRaises(StorageError):
            self.repo.get_by_email('a@example.com')
        with self.assertRaises(StorageError):
            self.repo.get_by_id('user-1')


class TestEnsureIndexes(MongoUserRepositoryTestCase):

    def test_creates_unique_email_index(self):
        self.assertTrue(self.repo.ensure_indexes())

        self.collection.create_index.assert_any_call([('email', 1)], name='idx_users_email', unique=True)

    def test_failure_returns_false(self):
        self.collection.create_index.side_effect = PyMongoError('not authorized')

        self.assertFalse(self.repo.ensure_indexes())


if __name__ == '__main__':
    unittest.main()
