from sqlalchemy import select, func
from sqlalchemy.orm import Session

from planning.crud.base import CRUDBase
from planning.models.event import Event
from planning.models.room import Room
from planning.schemas.room import RoomCreate, RoomUpdate

class CRUDRoom(CRUDBase[Room, RoomCreate, RoomUpdate]):
    def get_by_name(self, db: Session, name: str) -> Room | None:
        return db.scalar(select(Room).where(Room.name == name))

    def count_events(self, db: Session, room_id: int) -> int:
        return db.scalar(select(func.count()).select_from(Event).where(Event.room_id == room_id)) or 0

room_crud = CRUDRoom(Room)
