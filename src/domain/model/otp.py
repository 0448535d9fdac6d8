"""One-time passcode generation and expiry checks."""

import secrets
from datetime import datetime, timedelta, timezone

OTP_LENGTH = 6
OTP_TTL = timedelta(minutes=5)

_OTP_MIN = 10 ** (OTP_LENGTH - 1)
_OTP_SPAN = 9 * _OTP_MIN


def generate_otp() -> str:
    """Return a uniformly random 6-digit code in 100000-999999."""
    return str(_OTP_MIN + secrets.randbelow(_OTP_SPAN))


def is_otp_expired(expires_at: datetime, now: datetime | None = None) -> bool:
    """True iff ``now`` is strictly after ``expires_at``."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now > _as_utc(expires_at)


def _as_utc(value: datetime) -> datetime:
    # pymongo hands back naive datetimes unless tz_aware=True
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
