from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String, Text, Integer, Float, Boolean, ForeignKey, DateTime, CheckConstraint,
    Table, Column, Index, func,
)
from planning.db.base import Base

# M2M: eventos <-> usuários atribuídos
event_users = Table(
    "event_users",
    Base.metadata,
    Column("event_id", ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

class Event(Base):
    __tablename__ = "events"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    # hora local do teatro, sem tzinfo (ver schemas.common.to_local)
    start: Mapped[datetime] = mapped_column("start_at", DateTime())
    end: Mapped[datetime] = mapped_column("end_at", DateTime())
    room_id: Mapped[int] = mapped_column(ForeignKey("rooms.id"), index=True)
    type: Mapped[str] = mapped_column(String(20))
    show_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    color: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    creator_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    co_realization_percentage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ticketing_location: Mapped[Optional[str]] = mapped_column(String(160), nullable=True, default="")
    has_decor: Mapped[bool] = mapped_column(Boolean, default=False)
    decor_details: Mapped[Optional[str]] = mapped_column(Text(), nullable=True, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    room = relationship("Room", back_populates="events")
    creator = relationship("User", back_populates="created_events")
    assigned_users = relationship("User", secondary=event_users, back_populates="assigned_events", lazy="selectin")
    pdfs = relationship("EventPdf", back_populates="event", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("start_at < end_at", name="start_before_end"),
        Index("ix_events_room_start", "room_id", "start_at"),
    )
