"""Pydantic models for API request/response.

JSON bodies use camelCase field names (``dateOfBirth``, ``isGoogleUser``);
Python attributes stay snake_case.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.model.note import Note
from domain.model.user import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── auth ─────────────────────────────────────────────────────
# Request fields are optional so missing values surface as the service's
# own validation messages instead of a generic schema error.


class SignupRequest(CamelModel):
    email: Optional[str] = None
    name: Optional[str] = None
    date_of_birth: Optional[str] = None


class EmailAuthRequest(CamelModel):
    email: Optional[str] = None
    name: Optional[str] = None
    date_of_birth: Optional[str] = None


class VerifyOtpRequest(CamelModel):
    email: Optional[str] = None
    otp: Optional[str] = None


class GoogleAuthRequest(CamelModel):
    email: Optional[str] = None
    google_id: Optional[str] = None
    display_name: Optional[str] = None


class UserResponse(CamelModel):
    """Public projection of an account; never carries the OTP or its expiry."""
    id: str
    email: str
    name: str
    date_of_birth: Optional[datetime] = None
    is_google_user: bool

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            date_of_birth=user.date_of_birth,
            is_google_user=user.is_google_user,
        )


class AuthResponse(CamelModel):
    token: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str


# ── notes ────────────────────────────────────────────────────


class NoteRequest(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None


class NoteResponse(CamelModel):
    id: str = Field(..., description="Note ID")
    user_id: str = Field(..., description="Owner's user ID")
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, note: Note) -> "NoteResponse":
        return cls(
            id=note.id,
            user_id=note.user_id,
            title=note.title,
            content=note.content,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
