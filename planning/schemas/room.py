# planning/schemas/room.py
from typing import Optional
from pydantic import Field, field_validator

from planning.schemas.common import CamelModel

class RoomBase(CamelModel):
    name: str = Field(min_length=1, max_length=120)
    capacity: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Le nom de la salle est requis")
        return v

class RoomCreate(RoomBase):
    pass

class RoomUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    capacity: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Le nom de la salle est requis")
        return v

class RoomBrief(CamelModel):
    id: int
    name: str
    capacity: Optional[int] = None

class RoomOut(RoomBase):
    id: int
