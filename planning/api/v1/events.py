# planning/api/v1/events.py
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from planning.api.deps import get_db, get_current_user
from planning.core.event_rules import get_rules
from planning.crud.event import event_crud
from planning.models.event import Event as EventModel
from planning.models.user import User
from planning.schemas.attachment import EventPdfOut
from planning.schemas.event import EventCreate, EventDuplicate, EventOut, EventUpdate, ShowLimitOut
from planning.services import attachments, scheduling

router = APIRouter()

def _to_out(db: Session, event_id: int) -> EventOut:
    e = event_crud.get_full(db, event_id)
    if not e:
        raise HTTPException(status_code=404, detail="Événement non trouvé")
    return EventOut.model_validate(e)

def _get_or_404(db: Session, event_id: int) -> EventModel:
    e = event_crud.get(db, event_id)
    if not e:
        raise HTTPException(status_code=404, detail="Événement non trouvé")
    return e

@router.get("/", response_model=List[EventOut])
def list_events(
    room_id: Optional[int] = Query(None, alias="roomId"),
    type: Optional[str] = Query(None),
    creator_id: Optional[int] = Query(None, alias="creatorId"),
    day: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    if type is not None:
        try:
            type = get_rules().normalize_type(type)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
    rows = event_crud.list_filtered(db, room_id=room_id, type=type, creator_id=creator_id, day=day)
    return [EventOut.model_validate(e) for e in rows]

@router.get("/show-limit", response_model=ShowLimitOut)
def show_limit(
    room_id: int = Query(..., alias="roomId"),
    day: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return ShowLimitOut(**scheduling.show_limit_status(db, room_id, day))

@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(body: EventCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    e = scheduling.create_event(db, body, user)
    return _to_out(db, e.id)

@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return _to_out(db, event_id)

@router.patch("/{event_id}", response_model=EventOut)
def update_event(event_id: int, body: EventUpdate, db: Session = Depends(get_db),
                 user: User = Depends(get_current_user)):
    e = scheduling.update_event(db, event_id, body, user)
    return _to_out(db, e.id)

@router.post("/{event_id}/duplicate", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def duplicate_event(event_id: int, body: EventDuplicate, db: Session = Depends(get_db),
                    user: User = Depends(get_current_user)):
    e = scheduling.duplicate_event(db, event_id, body, user)
    return _to_out(db, e.id)

# restrição a administrador é aplicada no serviço (AuthorizationError -> 403)
@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    scheduling.delete_event(db, event_id, user)
    return None

# ----------------------- anexos PDF -----------------------

@router.get("/{event_id}/pdfs", response_model=List[EventPdfOut])
def list_pdfs(event_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    _get_or_404(db, event_id)
    return [EventPdfOut.model_validate(p) for p in attachments.list_pdfs(db, event_id)]

@router.post("/{event_id}/pdfs", response_model=List[EventPdfOut], status_code=status.HTTP_201_CREATED)
def upload_pdfs(
    event_id: int,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    e = _get_or_404(db, event_id)
    rows = attachments.add_pdfs(db, e, [(f.filename or "", f.file) for f in files])
    return [EventPdfOut.model_validate(p) for p in rows]

@router.get("/{event_id}/pdfs/{pdf_id}")
def download_pdf(event_id: int, pdf_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    pdf = attachments.get_pdf(db, event_id, pdf_id)
    return FileResponse(pdf.path, media_type="application/pdf", filename=pdf.name)

@router.delete("/{event_id}/pdfs/{pdf_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pdf(event_id: int, pdf_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    attachments.delete_pdf(db, event_id, pdf_id)
    return None
