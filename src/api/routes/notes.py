"""Note CRUD routes. Every endpoint requires a bearer token."""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_note_repo
from api.models import MessageResponse, NoteRequest, NoteResponse
from api.security import get_current_identity
from port.note_repository import NoteRepository
from services import note_service
from services.token_service import AuthIdentity

router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("", response_model=list[NoteResponse])
async def list_notes(
    identity: AuthIdentity = Depends(get_current_identity),
    repo: NoteRepository = Depends(get_note_repo),
):
    return [NoteResponse.from_domain(n) for n in note_service.list_notes(repo, identity)]


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteRequest,
    identity: AuthIdentity = Depends(get_current_identity),
    repo: NoteRepository = Depends(get_note_repo),
):
    note = note_service.create_note(repo, identity, title=request.title, content=request.content)
    return NoteResponse.from_domain(note)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    request: NoteRequest,
    identity: AuthIdentity = Depends(get_current_identity),
    repo: NoteRepository = Depends(get_note_repo),
):
    """Replace a note's title and content. 404 if it is missing or not the caller's."""
    note = note_service.update_note(repo, identity, note_id, title=request.title, content=request.content)
    return NoteResponse.from_domain(note)


@router.delete("/{note_id}", response_model=MessageResponse)
async def delete_note(
    note_id: str,
    identity: AuthIdentity = Depends(get_current_identity),
    repo: NoteRepository = Depends(get_note_repo),
):
    note_service.delete_note(repo, identity, note_id)
    return MessageResponse(message="Note deleted successfully")
