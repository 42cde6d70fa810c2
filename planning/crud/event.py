from datetime import date, datetime, time, timedelta
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from planning.crud.base import CRUDBase
from planning.models.event import Event
from planning.models.user import User
from planning.schemas.event import EventCreate, EventUpdate


def day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):
    """Contrato de armazenamento usado pelo agendador."""

    def get_full(self, db: Session, event_id: int) -> Optional[Event]:
        return db.scalar(
            select(Event)
            .where(Event.id == event_id)
            .options(selectinload(Event.room), selectinload(Event.creator), selectinload(Event.pdfs))
        )

    def list_filtered(self, db: Session, *, room_id: int | None = None, type: str | None = None,
                      creator_id: int | None = None, day: date | None = None) -> List[Event]:
        stmt = select(Event).options(selectinload(Event.room), selectinload(Event.creator), selectinload(Event.pdfs))
        if room_id is not None:
            stmt = stmt.where(Event.room_id == room_id)
        if type is not None:
            stmt = stmt.where(Event.type == type)
        if creator_id is not None:
            stmt = stmt.where(Event.creator_id == creator_id)
        if day is not None:
            lo, hi = day_bounds(day)
            stmt = stmt.where(Event.start >= lo, Event.start < hi)
        return list(db.scalars(stmt.order_by(Event.start, Event.id)))

    def list_by_room(self, db: Session, room_id: int, exclude_event_id: int | None = None, *,
                     start: datetime | None = None, end: datetime | None = None) -> List[Event]:
        stmt = select(Event).where(Event.room_id == room_id)
        if exclude_event_id is not None:
            stmt = stmt.where(Event.id != exclude_event_id)
        # janela opcional; intervalos semiabertos (end == start não sobrepõe)
        if end is not None:
            stmt = stmt.where(Event.start < end)
        if start is not None:
            stmt = stmt.where(Event.end > start)
        return list(db.scalars(stmt.order_by(Event.start)))

    def list_by_room_and_date(self, db: Session, room_id: int, day: date, type: str,
                              exclude_event_id: int | None = None) -> List[Event]:
        lo, hi = day_bounds(day)
        stmt = select(Event).where(
            Event.room_id == room_id, Event.type == type, Event.start >= lo, Event.start < hi
        )
        if exclude_event_id is not None:
            stmt = stmt.where(Event.id != exclude_event_id)
        return list(db.scalars(stmt.order_by(Event.start)))

    def replace_assigned_users(self, db: Session, event: Event, users: Sequence[User]) -> None:
        # substituição total, nunca incremental
        event.assigned_users = list(users)
        db.flush()

event_crud = CRUDEvent(Event)
