"""MongoDB implementation of NoteRepository."""

from datetime import datetime, timezone
from logging import getLogger

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb.connection import NOTES_COLLECTION_NAME
from domain.model.errors import StorageError
from domain.model.note import Note

logger = getLogger(__name__)


class MongoNoteRepository:
    def __init__(self, db: Database):
        self.collection = db[NOTES_COLLECTION_NAME]

    # ── indexes ──────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for notes collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('user_id', 1), ('created_at', -1)], 'idx_notes_user_created')
            return True
        except Exception as e:
            logger.error("Failed to create notes indexes", extra={"error": str(e)})
            return False

    # ── helpers ──────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Note:
        """Convert MongoDB document to Note domain model."""
        return Note(
            id=doc['_id'],
            user_id=doc['user_id'],
            title=doc['title'],
            content=doc['content'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
        )

    # ── write operations ─────────────────────────────────────

    def create(self, note: Note) -> Note:
        try:
            self.collection.insert_one({
                '_id': note.id,
                'user_id': note.user_id,
                'title': note.title,
                'content': note.content,
                'created_at': note.created_at,
                'updated_at': note.updated_at,
            })
        except PyMongoError as e:
            logger.error("Failed to create note", extra={"userId": note.user_id, "error": str(e)})
            raise StorageError("Failed to create note") from e
        return note

    def update(self, note_id: str, user_id: str, title: str, content: str) -> Note | None:
        """Update a note only if ``user_id`` owns it. Return the updated note or None."""
        try:
            doc = self.collection.find_one_and_update(
                {'_id': note_id, 'user_id': user_id},
                {'$set': {'title': title, 'content': content, 'updated_at': datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update note", extra={"noteId": note_id, "error": str(e)})
            raise StorageError("Failed to update note") from e
        return self._to_domain(doc) if doc else None

    def delete(self, note_id: str, user_id: str) -> bool:
        """Hard delete a note only if ``user_id`` owns it."""
        try:
            result = self.collection.delete_one({'_id': note_id, 'user_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to delete note", extra={"noteId": note_id, "error": str(e)})
            raise StorageError("Failed to delete note") from e
        return result.deleted_count > 0

    # ── read operations ──────────────────────────────────────

    def find_by_user(self, user_id: str) -> list[Note]:
        try:
            cursor = self.collection.find({'user_id': user_id}).sort('created_at', DESCENDING)
            return [self._to_domain(doc) for doc in cursor]
        except PyMongoError as e:
            logger.error("Failed to list notes", extra={"userId": user_id, "error": str(e)})
            raise StorageError("Failed to list notes") from e
