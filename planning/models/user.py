from enum import Enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, func
from sqlalchemy.orm import relationship

from planning.db.base import Base
from planning.models.event import event_users  # garante que a tabela exista


class UserRole(str, Enum):
    administrateur = "administrateur"
    artiste = "artiste"
    permanence = "permanence"
    billeterie = "billeterie"
    regie = "regie"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    email = Column(String(160), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)
    role = Column(String(32), nullable=False, default=UserRole.artiste.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    created_events = relationship("Event", back_populates="creator")
    assigned_events = relationship("Event", secondary=event_users, back_populates="assigned_users")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.administrateur.value
