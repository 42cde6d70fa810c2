# planning/services/assignment.py
from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, List

from sqlalchemy.orm import Session

from planning.core.errors import ValidationError
from planning.core.event_rules import ADMIN_ROLE, get_rules
from planning.crud.user import user_crud
from planning.models.user import User

logger = logging.getLogger(__name__)


def eligible_roles(event_type: str) -> FrozenSet[str]:
    return get_rules().eligible_roles(event_type)


def filter_assignable(users: Iterable[User], event_type: str, include_admins: bool = False) -> List[User]:
    """Elegibilidade por tipo e, para exibição, exclusão dos administradores."""
    roles = eligible_roles(event_type)
    return [
        u for u in users
        if u.role in roles and u.is_active and (include_admins or u.role != ADMIN_ROLE)
    ]


def assignable_users(db: Session, event_type: str, include_admins: bool = False) -> List[User]:
    roles = eligible_roles(event_type)
    if not roles:
        return []
    return filter_assignable(user_crud.list_by_roles(db, roles), event_type, include_admins)


def resolve_assigned_users(db: Session, event_type: str, user_ids: Iterable[int]) -> List[User]:
    ids = list(dict.fromkeys(user_ids or []))
    if not get_rules().assignment_enabled(event_type):
        if ids:
            logger.info("Atribuição desativada para o tipo %s; %d usuário(s) ignorado(s)", event_type, len(ids))
        return []
    if not ids:
        return []

    users = user_crud.get_many(db, ids)
    found = {u.id for u in users}
    missing = [i for i in ids if i not in found]
    if missing:
        raise ValidationError("Utilisateurs inconnus", details={"unknown_user_ids": missing})

    eligible = {u.id for u in filter_assignable(users, event_type, include_admins=True)}
    refused = [i for i in ids if i not in eligible]
    if refused:
        raise ValidationError(
            f"Utilisateurs non assignables à un événement de type {event_type}",
            details={"ineligible_user_ids": refused, "eligible_roles": sorted(eligible_roles(event_type))},
        )
    by_id = {u.id: u for u in users}
    return [by_id[i] for i in ids]
