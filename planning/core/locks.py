# planning/core/locks.py
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session

from planning.core.errors import BusyError, NotFoundError
from planning.models.room import Room

_registry_guard = threading.Lock()
_room_locks: Dict[int, threading.Lock] = {}

def _lock_for(room_id: int) -> threading.Lock:
    with _registry_guard:
        lock = _room_locks.get(room_id)
        if lock is None:
            lock = _room_locks[room_id] = threading.Lock()
        return lock

@contextmanager
def room_lock(db: Session, room_id: int, timeout: float = 10.0) -> Iterator[Room]:
    """
    Serializa leitura+escrita da agenda de uma sala.
    Lock local por sala + SELECT ... FOR UPDATE na linha da sala
    (PostgreSQL respeita; no SQLite as escritas já são serializadas).
    """
    lock = _lock_for(room_id)
    if not lock.acquire(timeout=timeout):
        raise BusyError(
            "La salle est en cours de modification, veuillez réessayer", details={"room_id": room_id}
        )
    try:
        room = db.execute(select(Room).where(Room.id == room_id).with_for_update()).scalar_one_or_none()
        if room is None:
            raise NotFoundError("Salle non trouvée", details={"room_id": room_id})
        yield room
    finally:
        lock.release()
