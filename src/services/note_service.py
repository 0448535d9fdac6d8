"""Note service: CRUD on notes owned by the authenticated user.

Every operation is scoped to ``identity.user_id``. A note owned by someone
else is reported exactly like a missing one, so callers cannot probe for
other users' note ids.
"""

import logging

from domain.model.errors import NotFoundError, ValidationError
from domain.model.note import Note
from port.note_repository import NoteRepository
from services.token_service import AuthIdentity

logger = logging.getLogger(__name__)


def _validate(title: str | None, content: str | None) -> tuple[str, str]:
    if not title or not title.strip() or not content or not content.strip():
        raise ValidationError("Title and content are required")
    return title, content


def list_notes(repo: NoteRepository, identity: AuthIdentity) -> list[Note]:
    """All of the caller's notes, newest first."""
    return repo.find_by_user(identity.user_id)


def create_note(
    repo: NoteRepository,
    identity: AuthIdentity,
    title: str | None,
    content: str | None,
) -> Note:
    title, content = _validate(title, content)
    note = repo.create(Note.create(user_id=identity.user_id, title=title, content=content))
    logger.info("Note created", extra={"noteId": note.id, "userId": identity.user_id})
    return note


def update_note(
    repo: NoteRepository,
    identity: AuthIdentity,
    note_id: str,
    title: str | None,
    content: str | None,
) -> Note:
    """Replace title and content of one of the caller's notes.

    Raises:
        ValidationError: blank title or content
        NotFoundError: no note with that id belongs to the caller
    """
    title, content = _validate(title, content)
    note = repo.update(note_id, identity.user_id, title, content)
    if note is None:
        raise NotFoundError("Note not found")
    logger.info("Note updated", extra={"noteId": note_id, "userId": identity.user_id})
    return note


def delete_note(repo: NoteRepository, identity: AuthIdentity, note_id: str) -> None:
    """Raises NotFoundError if no note with that id belongs to the caller."""
    if not repo.delete(note_id, identity.user_id):
        raise NotFoundError("Note not found")
    logger.info("Note deleted", extra={"noteId": note_id, "userId": identity.user_id})
