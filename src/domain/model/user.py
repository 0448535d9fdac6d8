import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from domain.model.errors import (
    InvalidOtpError,
    OtpExpiredError,
    ProviderMismatchError,
)
from domain.model.otp import is_otp_expired

EMAIL_PATTERN = re.compile(r'^\S+@\S+\.\S+$')


def normalize_email(email: str) -> str:
    """Canonical form used for every lookup and write keyed by email."""
    return email.strip().lower()


def is_valid_email(email: str | None) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


@dataclass
class User:
    """Domain model representing an account.

    An account is bound to exactly one sign-in method for its whole lifetime:
    native (email + OTP) or Google. ``is_google_user`` is fixed by the factory
    that created it and nothing mutates it afterwards.
    """
    id: str
    email: str
    name: str
    created_at: datetime
    updated_at: datetime
    date_of_birth: datetime | None = None
    is_google_user: bool = False
    is_verified: bool = False
    otp: str | None = None
    otp_expires: datetime | None = None
    google_id: str | None = None

    @staticmethod
    def create_native(
        email: str,
        name: str,
        date_of_birth: datetime | None = None,
        now: datetime | None = None,
    ) -> 'User':
        """New unverified email/OTP account."""
        now = now or datetime.now(timezone.utc)
        return User(
            id=uuid.uuid4().hex,
            email=normalize_email(email),
            name=name,
            created_at=now,
            updated_at=now,
            date_of_birth=date_of_birth,
            is_google_user=False,
            is_verified=False,
        )

    @staticmethod
    def create_google(
        email: str,
        name: str,
        google_id: str,
        now: datetime | None = None,
    ) -> 'User':
        """New Google account; verified from the start, never holds an OTP."""
        now = now or datetime.now(timezone.utc)
        return User(
            id=uuid.uuid4().hex,
            email=normalize_email(email),
            name=name,
            created_at=now,
            updated_at=now,
            is_google_user=True,
            is_verified=True,
            google_id=google_id,
        )

    # ── sign-in method ───────────────────────────────────────

    def ensure_native(self) -> None:
        if self.is_google_user:
            raise ProviderMismatchError("This email is registered with Google. Please use Google login.")

    def ensure_google(self) -> None:
        if not self.is_google_user:
            raise ProviderMismatchError("This email is registered with email/OTP. Please use email login.")

    # ── OTP cycle ────────────────────────────────────────────

    @property
    def has_pending_otp(self) -> bool:
        return self.otp is not None

    def issue_otp(self, code: str, expires_at: datetime) -> None:
        """Start (or restart) a verification cycle; replaces any pending code."""
        self.otp = code
        self.otp_expires = expires_at

    def clear_otp(self) -> None:
        self.otp = None
        self.otp_expires = None

    def verify_otp(self, code: str, now: datetime | None = None) -> None:
        """Consume the pending code.

        Raises:
            InvalidOtpError: no pending code, or it differs from ``code``
            OtpExpiredError: the pending code is past its expiry
        """
        if not self.otp or self.otp != code:
            raise InvalidOtpError("Invalid OTP")
        if self.otp_expires is None or is_otp_expired(self.otp_expires, now):
            raise OtpExpiredError("OTP has expired")

        self.is_verified = True
        self.clear_otp()
