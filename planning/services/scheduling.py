# planning/services/scheduling.py
"""
Agendamento de eventos nas salas.

Regras aplicadas a cada criação/alteração, dentro de um lock por sala e de
uma única transação:
  * sobreposição de horário só é aceita entre tipos compatíveis;
  * no máximo N espetáculos (type="show") começando no mesmo dia por sala.
Qualquer falha faz rollback; nada é gravado parcialmente.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from planning.core.errors import (
    AuthorizationError, CapacityError, ConflictError, NotFoundError, StorageError, ValidationError,
)
from planning.core.event_rules import EventRules, get_rules
from planning.core.locks import room_lock
from planning.crud.event import event_crud
from planning.crud.room import room_crud
from planning.models.event import Event
from planning.models.user import User
from planning.schemas.event import EventCreate, EventDuplicate, EventUpdate
from planning.services import attachments
from planning.services.assignment import filter_assignable, resolve_assigned_users

logger = logging.getLogger(__name__)

SHOW = "show"
DEFAULT_SHOW_STATUS = "provisional"
REQUIRED_FIELDS = ("title", "start", "end", "room_id", "type")


# ----------------------------------------------------------------------
# Regras puras
# ----------------------------------------------------------------------
def overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    return start < other_end and end > other_start


def conflicting_types(candidate_type: str, start: datetime, end: datetime,
                      existing: Iterable[Event], rules: Optional[EventRules] = None) -> List[str]:
    """Tipos dos eventos existentes que se sobrepõem e não são compatíveis (sem repetição)."""
    rules = rules or get_rules()
    found = {
        e.type for e in existing
        if overlaps(start, end, e.start, e.end) and not rules.can_overlap(candidate_type, e.type)
    }
    return rules.ordered(found) + sorted(found - set(rules.types))


def show_fields(event_type: str, show_status: Optional[str], rules: Optional[EventRules] = None) -> Dict[str, Any]:
    """show_status só existe para espetáculos; a cor deriva do tipo/status."""
    rules = rules or get_rules()
    if event_type != SHOW:
        show_status = None
    elif show_status is None:
        show_status = DEFAULT_SHOW_STATUS
    return {"show_status": show_status, "color": rules.color_for(event_type, show_status)}


# ----------------------------------------------------------------------
# Verificações contra o banco
# ----------------------------------------------------------------------
def find_conflicts(db: Session, room_id: int, start: datetime, end: datetime, event_type: str,
                   exclude_event_id: int | None = None) -> List[str]:
    existing = event_crud.list_by_room(db, room_id, exclude_event_id, start=start, end=end)
    return conflicting_types(event_type, start, end, existing)


def check_overlap(db: Session, room_id: int, start: datetime, end: datetime, event_type: str,
                  exclude_event_id: int | None = None) -> None:
    types = find_conflicts(db, room_id, start, end, event_type, exclude_event_id)
    if types:
        logger.info("Conflito na sala %s (%s, %s-%s): %s", room_id, event_type, start, end, types)
        raise ConflictError(types)


def show_count(db: Session, room_id: int, day: date, exclude_event_id: int | None = None) -> int:
    return len(event_crud.list_by_room_and_date(db, room_id, day, SHOW, exclude_event_id))


def check_show_limit(db: Session, room_id: int, start: datetime, exclude_event_id: int | None = None) -> None:
    limit = get_rules().max_shows_per_room_per_day
    day = start.date()
    count = show_count(db, room_id, day, exclude_event_id)
    if count >= limit:
        logger.info("Limite diário de espetáculos atingido: sala %s em %s (%d)", room_id, day, count)
        raise CapacityError(limit, details={"room_id": room_id, "date": day.isoformat(), "count": count})


def show_limit_status(db: Session, room_id: int, day: date) -> Dict[str, Any]:
    if room_crud.get(db, room_id) is None:
        raise NotFoundError("Salle non trouvée", details={"room_id": room_id})
    limit = get_rules().max_shows_per_room_per_day
    count = show_count(db, room_id, day)
    return {"room_id": room_id, "day": day, "count": count, "limit": limit, "valid": count < limit}


# ----------------------------------------------------------------------
# Ciclo de vida
# ----------------------------------------------------------------------
@contextmanager
def _unit_of_work(db: Session) -> Iterator[None]:
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Falha de persistência")
        raise StorageError("Erreur lors de l'enregistrement", details=str(getattr(exc, "orig", exc))) from exc
    except Exception:
        db.rollback()
        raise


def _get_or_404(db: Session, event_id: int) -> Event:
    event = event_crud.get(db, event_id)
    if not event:
        raise NotFoundError("Événement non trouvé", details={"event_id": event_id})
    return event


def create_event(db: Session, data: EventCreate, creator: User) -> Event:
    payload = data.model_dump(exclude={"assigned_users"})
    payload["has_decor"] = bool(payload.get("has_decor"))
    payload.update(show_fields(payload["type"], payload.get("show_status")))

    with room_lock(db, data.room_id), _unit_of_work(db):
        if payload["type"] == SHOW:
            check_show_limit(db, data.room_id, data.start)
        check_overlap(db, data.room_id, data.start, data.end, payload["type"])
        users = resolve_assigned_users(db, payload["type"], data.assigned_users)

        event = event_crud.create(db, payload, extra={"creator_id": creator.id}, commit=False)
        event_crud.replace_assigned_users(db, event, users)

    logger.info("Evento %s criado (%s) na sala %s por usuário %s", event.id, event.type, event.room_id, creator.id)
    return event


def update_event(db: Session, event_id: int, data: EventUpdate, actor: User) -> Event:
    event = _get_or_404(db, event_id)
    changes = data.model_dump(exclude_unset=True)
    assigned_given = "assigned_users" in changes
    assigned_ids = changes.pop("assigned_users", None) or []

    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            raise ValidationError(f"Le champ {field} ne peut pas être vide", details={"field": field})
    if "has_decor" in changes and changes["has_decor"] is None:
        changes["has_decor"] = False

    room_id = changes.get("room_id", event.room_id)
    with room_lock(db, room_id), _unit_of_work(db):
        new_type = changes.get("type", event.type)
        new_start = changes.get("start", event.start)
        new_end = changes.get("end", event.end)
        if new_start >= new_end:
            raise ValidationError(
                "La date de fin doit être postérieure à la date de début", details={"field": "end"}
            )

        status = changes["show_status"] if "show_status" in changes else event.show_status
        changes.update(show_fields(new_type, status))

        placement_changed = (
            new_start != event.start or new_end != event.end
            or room_id != event.room_id or new_type != event.type
        )
        capacity_relevant = new_type == SHOW and (
            event.type != SHOW or room_id != event.room_id or new_start.date() != event.start.date()
        )
        if capacity_relevant:
            check_show_limit(db, room_id, new_start, exclude_event_id=event.id)
        if placement_changed:
            check_overlap(db, room_id, new_start, new_end, new_type, exclude_event_id=event.id)

        users = None
        if assigned_given:
            users = resolve_assigned_users(db, new_type, assigned_ids)
        elif new_type != event.type:
            # mantém só quem continua elegível (papel e conta ativa) para o novo tipo
            users = resolve_assigned_users(db, new_type, _carried_over(event, new_type))

        event_crud.update(db, event, changes, commit=False)
        if users is not None:
            event_crud.replace_assigned_users(db, event, users)

    logger.info("Evento %s atualizado por usuário %s", event.id, actor.id)
    return event


def _carried_over(event: Event, event_type: str) -> List[int]:
    """Atribuídos herdados de um evento existente: quem não é mais elegível sai sem erro."""
    return [u.id for u in filter_assignable(event.assigned_users, event_type, include_admins=True)]


def duplicate_event(db: Session, event_id: int, data: EventDuplicate, actor: User) -> Event:
    source = _get_or_404(db, event_id)
    duration = source.end - source.start
    copy = EventCreate(
        title=source.title,
        description=source.description,
        start=data.start,
        end=data.start + duration,
        room_id=data.room_id or source.room_id,
        type=source.type,
        show_status=source.show_status,
        co_realization_percentage=source.co_realization_percentage,
        ticketing_location=source.ticketing_location,
        has_decor=source.has_decor,
        decor_details=source.decor_details,
        assigned_users=_carried_over(source, source.type),
    )
    return create_event(db, copy, actor)


def delete_event(db: Session, event_id: int, actor: User) -> None:
    if not actor.is_admin:
        raise AuthorizationError("Vous n'avez pas la permission d'effectuer cette action")
    event = _get_or_404(db, event_id)
    paths = [pdf.path for pdf in event.pdfs]
    with _unit_of_work(db):
        event_crud.replace_assigned_users(db, event, [])
        event_crud.remove(db, event.id, commit=False)
    attachments.discard_blobs(paths)
    logger.info("Evento %s removido por usuário %s", event_id, actor.id)
