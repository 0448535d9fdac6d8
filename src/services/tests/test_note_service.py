"""Unit tests for note_service using the in-memory repository."""

import unittest
from datetime import datetime, timedelta, timezone

from adapter.fake.note_repository import FakeNoteRepository
from domain.model.errors import NotFoundError, ValidationError
from services import note_service
from services.token_service import AuthIdentity

ALICE = AuthIdentity(user_id='alice-id', email='alice@example.com')
BOB = AuthIdentity(user_id='bob-id', email='bob@example.com')


class TestNoteService(unittest.TestCase):

    def setUp(self):
        self.repo = FakeNoteRepository()

    def test_create_keeps_title_and_content_as_sent(self):
        note = note_service.create_note(self.repo, ALICE, title=' Groceries ', content=' milk ')

        self.assertEqual(note.title, ' Groceries ')
        self.assertEqual(note.content, ' milk ')
        self.assertEqual(note.user_id, 'alice-id')
        self.assertEqual([n.id for n in note_service.list_notes(self.repo, ALICE)], [note.id])

    def test_list_is_newest_first_and_scoped_to_caller(self):
        older = note_service.create_note(self.repo, ALICE, 'first', 'a')
        newer = note_service.create_note(self.repo, ALICE, 'second', 'b')
        note_service.create_note(self.repo, BOB, 'bob note', 'c')
        self.repo.store[older.id].created_at = datetime.now(timezone.utc) - timedelta(hours=1)

        notes = note_service.list_notes(self.repo, ALICE)

        self.assertEqual([n.id for n in notes], [newer.id, older.id])

    def test_list_empty(self):
        self.assertEqual(note_service.list_notes(self.repo, ALICE), [])

    def test_create_requires_title_and_content(self):
        for title, content in ((None, 'c'), ('   ', 'c'), ('t', None), ('t', '  ')):
            with self.subTest(title=title, content=content):
                with self.assertRaises(ValidationError) as ctx:
                    note_service.create_note(self.repo, ALICE, title, content)
                self.assertEqual(str(ctx.exception), 'Title and content are required')
        self.assertEqual(self.repo.store, {})

    def test_update_own_note(self):
        note = note_service.create_note(self.repo, ALICE, 'old', 'old body')

        updated = note_service.update_note(self.repo, ALICE, note.id, 'new', 'new body')

        self.assertEqual(updated.title, 'new')
        self.assertEqual(updated.content, 'new body')
        self.assertGreaterEqual(updated.updated_at, note.created_at)

    def test_update_someone_elses_note_is_not_found(self):
        note = note_service.create_note(self.repo, ALICE, 'mine', 'body')

        with self.assertRaises(NotFoundError) as ctx:
            note_service.update_note(self.repo, BOB, note.id, 'hijack', 'x')
        self.assertEqual(str(ctx.exception), 'Note not found')
        self.assertEqual(self.repo.store[note.id].title, 'mine')

    def test_update_missing_note(self):
        with self.assertRaises(NotFoundError):
            note_service.update_note(self.repo, ALICE, 'missing', 't', 'c')

    def test_update_validates_before_lookup(self):
        with self.assertRaises(ValidationError):
            note_service.update_note(self.repo, ALICE, 'missing', '', 'c')

    def test_delete_own_note(self):
        note = note_service.create_note(self.repo, ALICE, 't', 'c')

        note_service.delete_note(self.repo, ALICE, note.id)

        self.assertEqual(note_service.list_notes(self.repo, ALICE), [])

    def test_delete_someone_elses_note_is_not_found(self):
        note = note_service.create_note(self.repo, ALICE, 't', 'c')

        with self.assertRaises(NotFoundError):
            note_service.delete_note(self.repo, BOB, note.id)
        self.assertIn(note.id, self.repo.store)

    def test_delete_twice(self):
        note = note_service.create_note(self.repo, ALICE, 't', 'c')
        note_service.delete_note(self.repo, ALICE, note.id)

        with self.assertRaises(NotFoundError):
            note_service.delete_note(self.repo, ALICE, note.id)


if __name__ == '__main__':
    unittest.main()
