# planning/api/v1/rooms.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.orm import Session

from planning.api.deps import get_db, get_current_user
from planning.core.rbac import require_admin
from planning.crud.room import room_crud
from planning.models.room import Room
from planning.schemas.room import RoomCreate, RoomOut, RoomUpdate

router = APIRouter()

def _get_or_404(db: Session, room_id: int) -> Room:
    room = room_crud.get(db, room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Salle non trouvée")
    return room

def _ensure_unique_name(db: Session, name: str, exclude_id: int | None = None) -> None:
    other = room_crud.get_by_name(db, name)
    if other and other.id != exclude_id:
        raise HTTPException(status_code=409, detail="Une salle porte déjà ce nom")

@router.get("/", response_model=List[RoomOut], dependencies=[Depends(get_current_user)])
def list_rooms(db: Session = Depends(get_db)):
    return room_crud.get_multi(db, limit=1000)

@router.get("/{room_id}", response_model=RoomOut, dependencies=[Depends(get_current_user)])
def get_room(room_id: int = Path(..., ge=1), db: Session = Depends(get_db)):
    return _get_or_404(db, room_id)

@router.post("/", response_model=RoomOut, status_code=201, dependencies=[Depends(require_admin)])
def create_room(body: RoomCreate, db: Session = Depends(get_db)):
    _ensure_unique_name(db, body.name)
    return room_crud.create(db, body)

@router.patch("/{room_id}", response_model=RoomOut, dependencies=[Depends(require_admin)])
def update_room(room_id: int, body: RoomUpdate, db: Session = Depends(get_db)):
    room = _get_or_404(db, room_id)
    data = body.model_dump(exclude_unset=True)
    if data.get("name") is None:
        data.pop("name", None)
    else:
        _ensure_unique_name(db, data["name"], exclude_id=room.id)
    return room_crud.update(db, room, data)

@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
def delete_room(room_id: int, db: Session = Depends(get_db)):
    room = _get_or_404(db, room_id)
    if room_crud.count_events(db, room.id):
        raise HTTPException(status_code=409, detail="La salle contient encore des événements")
    db.delete(room)
    db.commit()
    return None
