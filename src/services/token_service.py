"""Bearer token issuance and verification (JWT, HMAC-signed)."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JOSEError, JWTError, jwt

from domain.model.errors import TokenSigningError, UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthIdentity:
    """Who a verified token speaks for."""
    user_id: str
    email: str


class TokenIssuer:
    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=1)):
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user_id: str, email: str, now: datetime | None = None) -> str:
        """Sign a token for ``user_id`` that expires ``ttl`` after issuance.

        Raises:
            TokenSigningError: the key or algorithm is unusable
        """
        issued_at = int((now or datetime.now(timezone.utc)).timestamp())
        payload = {
            "sub": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + int(self.ttl.total_seconds()),
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (JOSEError, TypeError, ValueError) as e:
            logger.error("Failed to sign access token", extra={"userId": user_id, "error": str(e)})
            raise TokenSigningError("Failed to issue access token") from e

    def verify(self, token: str) -> AuthIdentity:
        """Decode ``token``; every kind of failure is reported the same way.

        Raises:
            UnauthorizedError: expired, malformed or wrongly signed token
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug("JWT verification failed", extra={"error": str(e)})
            raise UnauthorizedError("Invalid or expired token") from e

        user_id = payload.get("sub")
        if not user_id:
            raise UnauthorizedError("Invalid or expired token")
        return AuthIdentity(user_id=user_id, email=payload.get("email", ""))
