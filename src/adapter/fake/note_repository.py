"""In-memory implementation of NoteRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone

from domain.model.note import Note


class FakeNoteRepository:
    def __init__(self):
        self.store: dict[str, Note] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, note: Note) -> Note:
        self.store[note.id] = replace(note)
        return note

    def update(self, note_id: str, user_id: str, title: str, content: str) -> Note | None:
        note = self.store.get(note_id)
        if not note or note.user_id != user_id:
            return None

        note.title = title
        note.content = content
        note.updated_at = datetime.now(timezone.utc)
        return replace(note)

    def delete(self, note_id: str, user_id: str) -> bool:
        note = self.store.get(note_id)
        if not note or note.user_id != user_id:
            return False

        del self.store[note_id]
        return True

    # ── read operations ──────────────────────────────────────

    def find_by_user(self, user_id: str) -> list[Note]:
        notes = [replace(n) for n in self.store.values() if n.user_id == user_id]
        notes.sort(key=lambda n: n.created_at, reverse=True)
        return notes
