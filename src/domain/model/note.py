import uuid
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class Note:
    """A text note owned by exactly one user."""
    id: str
    user_id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def create(user_id: str, title: str, content: str) -> 'Note':
        """Factory method; assigns id and timestamps."""
        now = datetime.now(timezone.utc)
        return Note(
            id=uuid.uuid4().hex,
            user_id=user_id,
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        )
