"""MongoDB implementation of UserRepository."""

from datetime import datetime, timezone
from logging import getLogger

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError, StorageError
from domain.model.user import User

logger = getLogger(__name__)

# Fields that are absent rather than null when unset (otp pair, google_id, ...)
_OPTIONAL_FIELDS = ('date_of_birth', 'otp', 'otp_expires', 'google_id')


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except Exception as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            name=doc['name'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            date_of_birth=doc.get('date_of_birth'),
            is_google_user=doc.get('is_google_user', False),
            is_verified=doc.get('is_verified', False),
            otp=doc.get('otp'),
            otp_expires=doc.get('otp_expires'),
            google_id=doc.get('google_id'),
        )

    def _to_document(self, user: User) -> dict:
        doc = {
            '_id': user.id,
            'email': user.email,
            'name': user.name,
            'created_at': user.created_at,
            'updated_at': user.updated_at,
            'is_google_user': user.is_google_user,
            'is_verified': user.is_verified,
        }
        for name in _OPTIONAL_FIELDS:
            value = getattr(user, name)
            if value is not None:
                doc[name] = value
        return doc

    # ── write operations ─────────────────────────────────────

    def create(self, user: User) -> User:
        """Insert a new user. Raise DuplicateError if the email is taken."""
        try:
            self.collection.insert_one(self._to_document(user))
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": user.email})
            raise DuplicateError("Email already exists. Please sign in.")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": user.email, "error": str(e)})
            raise StorageError("Failed to create user") from e

        logger.info("User created", extra={"userId": user.id, "email": user.email})
        return user

    def save(self, user: User, expected_otp: str | None = None) -> bool:
        """Persist mutable fields of an existing user. Return True if it matched.

        ``expected_otp`` adds the stored code to the filter, making consumption
        of a code a single atomic compare-and-set.
        """
        user.updated_at = datetime.now(timezone.utc)
        doc = self._to_document(user)
        doc.pop('_id')
        doc.pop('created_at')
        # is_google_user is fixed at creation
        doc.pop('is_google_user')

        update = {'$set': doc}
        unset = {name: '' for name in _OPTIONAL_FIELDS if name not in doc}
        if unset:
            update['$unset'] = unset

        query = {'_id': user.id}
        if expected_otp is not None:
            query['otp'] = expected_otp

        try:
            result = self.collection.update_one(query, update)
        except PyMongoError as e:
            logger.error("Failed to save user", extra={"userId": user.id, "error": str(e)})
            raise StorageError("Failed to save user") from e

        if result.matched_count == 0:
            logger.warning("User update matched nothing", extra={"userId": user.id, "conditional": expected_otp is not None})
            return False
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StorageError("Failed to load user") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to load user") from e
        return self._to_domain(doc) if doc else None
