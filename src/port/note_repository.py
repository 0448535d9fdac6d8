"""Port definition for NoteRepository."""

from typing import Protocol

from domain.model.note import Note


class NoteRepository(Protocol):
    def create(self, note: Note) -> Note: ...

    def find_by_user(self, user_id: str) -> list[Note]: ...

    def update(self, note_id: str, user_id: str, title: str, content: str) -> Note | None: ...

    def delete(self, note_id: str, user_id: str) -> bool: ...
