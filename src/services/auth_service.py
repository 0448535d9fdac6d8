"""Auth service: signup, email OTP and Google sign-in business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that the API layer maps to HTTP status codes.

Account states:
    native:  (none) ──signup/email_auth──▶ OTP pending ──verify_otp──▶ verified
    google:  (none) ──google_auth──▶ verified

The branch is chosen when the account is first created and never changes;
using the other sign-in method for that email raises ProviderMismatchError.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from domain.model.errors import DomainError, DuplicateError, InvalidOtpError, NotFoundError, ValidationError
from domain.model.otp import OTP_LENGTH, generate_otp
from domain.model.user import User, is_valid_email, normalize_email
from port.notifier import OtpNotifier
from port.user_repository import UserRepository
from services.token_service import TokenIssuer
from utils.config import AppConfig

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25


@dataclass(frozen=True)
class AuthSession:
    """Result of a successful sign-in: a bearer token and the account it binds."""
    token: str
    user: User


# ── validation helpers ───────────────────────────────────────


def parse_date_of_birth(value: str) -> datetime | None:
    """Parse an ISO date or datetime; None if it cannot be parsed."""
    try:
        parsed = datetime.fromisoformat(value.strip())
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _require_email(email: str | None, message: str = "Valid email is required") -> str:
    email = normalize_email(email) if email else ""
    if not is_valid_email(email):
        raise ValidationError(message)
    return email


def _check_minimum_age(raw: str, config: AppConfig, now: datetime) -> datetime:
    """Return the parsed date of birth; reject unparseable dates and under-age users alike."""
    date_of_birth = parse_date_of_birth(raw)
    minimum = timedelta(days=config.minimum_age_years * DAYS_PER_YEAR)
    if date_of_birth is None or now - date_of_birth < minimum:
        raise ValidationError(f"You must be at least {config.minimum_age_years} years old")
    return date_of_birth


def _start_otp_cycle(user: User, config: AppConfig, now: datetime) -> str:
    code = generate_otp()
    user.issue_otp(code, now + config.otp_ttl)
    return code


def _dispatch_otp(notifier: OtpNotifier, email: str, code: str) -> None:
    """Best-effort delivery; a failed send never fails the calling operation."""
    try:
        notifier.send(email, code)
    except Exception as e:
        logger.error("Failed to dispatch OTP email", extra={"email": email, "error": str(e)})


def _derive_name(email: str) -> str:
    return email.split("@", 1)[0]


# ── operations ───────────────────────────────────────────────


def signup(
    repo: UserRepository,
    notifier: OtpNotifier,
    config: AppConfig,
    email: str | None,
    name: str | None,
    date_of_birth: str | None,
    now: datetime | None = None,
) -> User:
    """Register a new native account and send it a verification code.

    Returns the created (unverified) User.

    Raises:
        ValidationError: malformed email, blank name, missing or under-age date of birth
        DuplicateError: an account already exists for the email (any sign-in method)
    """
    now = now or datetime.now(timezone.utc)
    email = _require_email(email)

    if not name or not name.strip():
        raise ValidationError("Name is required")
    if not date_of_birth:
        raise ValidationError("Date of birth is required")
    dob = _check_minimum_age(date_of_birth, config, now)

    if repo.get_by_email(email):
        raise DuplicateError("Email already exists. Please sign in.")

    user = User.create_native(email=email, name=name.strip(), date_of_birth=dob, now=now)
    code = _start_otp_cycle(user, config, now)
    user = repo.create(user)

    _dispatch_otp(notifier, email, code)
    logger.info("User signed up, OTP issued", extra={"userId": user.id, "email": email})
    return user


def email_auth(
    repo: UserRepository,
    notifier: OtpNotifier,
    config: AppConfig,
    email: str | None,
    name: str | None = None,
    date_of_birth: str | None = None,
    now: datetime | None = None,
) -> User:
    """Sign up or re-authenticate a native account by emailing a fresh code.

    Creates the account when the email is unknown; otherwise replaces any
    pending code and updates name/date of birth when supplied.

    Raises:
        ValidationError: malformed email or under-age date of birth
        ProviderMismatchError: the email belongs to a Google account
        DuplicateError: a concurrent request created the account first
    """
    now = now or datetime.now(timezone.utc)
    email = _require_email(email)
    dob = _check_minimum_age(date_of_birth, config, now) if date_of_birth else None
    name = name.strip() if name and name.strip() else None

    user = repo.get_by_email(email)
    if user is None:
        user = User.create_native(
            email=email,
            name=name or _derive_name(email),
            date_of_birth=dob,
            now=now,
        )
        code = _start_otp_cycle(user, config, now)
        user = repo.create(user)
        logger.info("User created via email auth", extra={"userId": user.id, "email": email})
    else:
        user.ensure_native()
        code = _start_otp_cycle(user, config, now)
        if name:
            user.name = name
        if dob:
            user.date_of_birth = dob
        if not repo.save(user):
            raise DomainError("Failed to update user")
        logger.info("OTP re-issued", extra={"userId": user.id, "email": email})

    _dispatch_otp(notifier, email, code)
    return user


def verify_otp(
    repo: UserRepository,
    tokens: TokenIssuer,
    email: str | None,
    otp: str | None,
    now: datetime | None = None,
) -> AuthSession:
    """Consume the pending code for ``email`` and sign the user in.

    Raises:
        ValidationError: missing email/code or code of the wrong length
        NotFoundError: no account for the email
        InvalidOtpError: no pending code, a different one, or one already consumed
        OtpExpiredError: the pending code has expired
        TokenSigningError: the token could not be signed
    """
    if not otp:
        raise ValidationError("Email and OTP are required")
    email = _require_email(email, "Email and OTP are required")
    if len(otp) != OTP_LENGTH:
        raise ValidationError(f"OTP must be {OTP_LENGTH} digits")

    user = repo.get_by_email(email)
    if user is None:
        raise NotFoundError("User not found")

    user.verify_otp(otp, now)
    # Another request consumed the same code since it was read
    if not repo.save(user, expected_otp=otp):
        raise InvalidOtpError("Invalid OTP")

    token = tokens.issue(user.id, user.email)
    logger.info("OTP verified", extra={"userId": user.id, "email": email})
    return AuthSession(token=token, user=user)


def google_auth(
    repo: UserRepository,
    tokens: TokenIssuer,
    email: str | None,
    google_id: str | None,
    display_name: str | None,
) -> AuthSession:
    """Sign in with a Google identity, creating the account on first use.

    The Google subject id and email are taken as supplied by the client; no
    ID token is verified server-side.

    Raises:
        ValidationError: missing email, google id or display name
        ProviderMismatchError: the email belongs to a native account
        TokenSigningError: the token could not be signed
    """
    message = "Google authentication data required"
    email = _require_email(email, message)
    if not google_id or not google_id.strip():
        raise ValidationError(message)
    if not display_name or not display_name.strip():
        raise ValidationError(message)

    user = repo.get_by_email(email)
    if user is None:
        user = repo.create(User.create_google(
            email=email,
            name=display_name.strip(),
            google_id=google_id.strip(),
        ))
        logger.info("Google user created", extra={"userId": user.id, "email": email})
    else:
        user.ensure_google()

    token = tokens.issue(user.id, user.email)
    logger.info("Google sign-in", extra={"userId": user.id, "email": email})
    return AuthSession(token=token, user=user)


def get_profile(repo: UserRepository, user_id: str) -> User:
    """Look up the account a token was issued for.

    Raises:
        NotFoundError: the account no longer exists
    """
    user = repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
