from fastapi import BackgroundTasks, Depends, HTTPException, Request

from adapter.mail.background import BackgroundOtpNotifier
from adapter.mail.smtp_notifier import SmtpOtpNotifier
from adapter.mongodb.connection import get_mongodb_client
from adapter.mongodb.note_repository import MongoNoteRepository
from adapter.mongodb.user_repository import MongoUserRepository
from port.note_repository import NoteRepository
from port.notifier import OtpNotifier
from port.user_repository import UserRepository
from services.token_service import TokenIssuer
from utils.config import AppConfig


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def _get_db(config: AppConfig = Depends(get_config)):
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client(config.mongo_uri)
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[config.mongodb_database]


def get_user_repo(db=Depends(_get_db)) -> UserRepository:
    return MongoUserRepository(db)


def get_note_repo(db=Depends(_get_db)) -> NoteRepository:
    return MongoNoteRepository(db)


def get_otp_notifier(
    background_tasks: BackgroundTasks,
    config: AppConfig = Depends(get_config),
) -> OtpNotifier:
    """SMTP delivery, deferred until the response has been sent."""
    return BackgroundOtpNotifier(SmtpOtpNotifier(config), background_tasks)
