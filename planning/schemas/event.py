# planning/schemas/event.py
from __future__ import annotations
from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from planning.core.event_rules import get_rules
from planning.schemas.common import CamelModel, to_local
from planning.schemas.room import RoomBrief
from planning.schemas.user import UserBrief
from planning.schemas.attachment import EventPdfOut


def _check_type(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    return get_rules().normalize_type(v)

def _check_show_status(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if v not in get_rules().show_statuses:
        raise ValueError(f"Statut de spectacle inconnu : {v!r}")
    return v

def _check_title(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Le titre est requis")
    return v


class EventFields(CamelModel):
    description: Optional[str] = None
    show_status: Optional[str] = None
    co_realization_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    ticketing_location: Optional[str] = None
    has_decor: Optional[bool] = None
    decor_details: Optional[str] = None

    check_show_status = field_validator("show_status")(_check_show_status)


class EventCreate(EventFields):
    title: str = Field(max_length=200)
    start: datetime
    end: datetime
    room_id: int
    type: str
    assigned_users: List[int] = Field(default_factory=list)

    check_title = field_validator("title")(_check_title)
    check_type = field_validator("type")(_check_type)
    localize = field_validator("start", "end")(to_local)

    @model_validator(mode="after")
    def check_range(self):
        if self.start >= self.end:
            raise ValueError("La date de fin doit être postérieure à la date de début")
        return self


class EventUpdate(EventFields):
    """PATCH parcial; start < end é validado no serviço contra o estado atual."""
    title: Optional[str] = Field(default=None, max_length=200)
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    room_id: Optional[int] = None
    type: Optional[str] = None
    assigned_users: Optional[List[int]] = None

    check_title = field_validator("title")(_check_title)
    check_type = field_validator("type")(_check_type)

    @field_validator("start", "end")
    @classmethod
    def localize(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_local(v) if v is not None else v


class EventDuplicate(CamelModel):
    start: datetime
    room_id: Optional[int] = None

    localize = field_validator("start")(to_local)


class EventOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    start: datetime
    end: datetime
    room_id: int
    type: str
    show_status: Optional[str] = None
    color: Optional[str] = None
    creator_id: int
    co_realization_percentage: Optional[float] = None
    ticketing_location: Optional[str] = None
    has_decor: bool = False
    decor_details: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    room: Optional[RoomBrief] = None
    creator: Optional[UserBrief] = None
    assigned_users: List[UserBrief] = Field(default_factory=list)
    pdfs: List[EventPdfOut] = Field(default_factory=list)


class ShowLimitOut(CamelModel):
    room_id: int
    day: date
    count: int
    limit: int
    valid: bool
