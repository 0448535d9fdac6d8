"""Authentication routes (signup, email OTP, Google sign-in)."""

from fastapi import APIRouter, Depends

from api.dependencies import get_config, get_otp_notifier, get_token_issuer, get_user_repo
from api.models import (
    AuthResponse,
    EmailAuthRequest,
    GoogleAuthRequest,
    MessageResponse,
    SignupRequest,
    UserResponse,
    VerifyOtpRequest,
)
from api.rate_limit import limit_otp_requests
from api.security import get_current_identity
from port.notifier import OtpNotifier
from port.user_repository import UserRepository
from services import auth_service
from services.auth_service import AuthSession
from services.token_service import AuthIdentity, TokenIssuer
from utils.config import AppConfig

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _to_auth_response(session: AuthSession) -> AuthResponse:
    return AuthResponse(token=session.token, user=UserResponse.from_domain(session.user))


@router.post("/signup", response_model=MessageResponse)
async def signup(
    request: SignupRequest,
    repo: UserRepository = Depends(get_user_repo),
    notifier: OtpNotifier = Depends(get_otp_notifier),
    config: AppConfig = Depends(get_config),
):
    """Register a new email account and email it a verification code."""
    auth_service.signup(
        repo, notifier, config,
        email=request.email,
        name=request.name,
        date_of_birth=request.date_of_birth,
    )
    return MessageResponse(message="OTP sent to your email for signup verification")


@router.post(
    "/email-auth",
    response_model=MessageResponse,
    dependencies=[Depends(limit_otp_requests)],
)
async def email_auth(
    request: EmailAuthRequest,
    repo: UserRepository = Depends(get_user_repo),
    notifier: OtpNotifier = Depends(get_otp_notifier),
    config: AppConfig = Depends(get_config),
):
    """Sign up or sign in by email; (re)sends a verification code."""
    auth_service.email_auth(
        repo, notifier, config,
        email=request.email,
        name=request.name,
        date_of_birth=request.date_of_birth,
    )
    return MessageResponse(message="OTP sent to your email")


@router.post("/verify-otp", response_model=AuthResponse)
async def verify_otp(
    request: VerifyOtpRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """Exchange a valid verification code for a bearer token."""
    session = auth_service.verify_otp(repo, tokens, email=request.email, otp=request.otp)
    return _to_auth_response(session)


@router.post("/google", response_model=AuthResponse)
async def google_auth(
    request: GoogleAuthRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """Sign in with a Google identity, creating the account on first use."""
    session = auth_service.google_auth(
        repo, tokens,
        email=request.email,
        google_id=request.google_id,
        display_name=request.display_name,
    )
    return _to_auth_response(session)


@router.get("/me", response_model=UserResponse)
async def get_me(
    identity: AuthIdentity = Depends(get_current_identity),
    repo: UserRepository = Depends(get_user_repo),
):
    """Public profile of the authenticated user."""
    return UserResponse.from_domain(auth_service.get_profile(repo, identity.user_id))
