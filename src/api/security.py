"""Bearer token authentication dependency."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies import get_token_issuer
from domain.model.errors import UnauthorizedError
from services.token_service import AuthIdentity, TokenIssuer

security = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> AuthIdentity:
    """Identity bound to the request's bearer token. Raises 401 if absent or invalid."""
    if not credentials:
        raise UnauthorizedError("Not authenticated")
    return tokens.verify(credentials.credentials)
