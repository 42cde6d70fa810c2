# planning/api/v1/users.py
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from planning.api.deps import get_db, get_current_user
from planning.core.event_rules import get_rules
from planning.core.rbac import require_admin
from planning.core.security import ensure_password_policy, hash_password
from planning.crud.user import user_crud
from planning.models.user import User, UserRole
from planning.schemas.user import UserOut, UserUpdate
from planning.services.assignment import assignable_users

router = APIRouter()

def _get_or_404(db: Session, user_id: int) -> User:
    u = user_crud.get(db, user_id)
    if not u:
        raise HTTPException(404, "Utilisateur non trouvé")
    return u

# --------------------------------------------------------------------------- #
# Endpoints
# --------------------------------------------------------------------------- #

@router.get("/", response_model=List[UserOut], dependencies=[Depends(get_current_user)])
def list_users(
    role: Optional[UserRole] = Query(None),
    q: Optional[str] = Query(None, description="filtra por nome/email"),
    db: Session = Depends(get_db),
):
    stmt = select(User)
    if role:
        stmt = stmt.where(User.role == role.value)
    if q:
        like = f"%{q.lower()}%"
        stmt = stmt.where(User.first_name.ilike(like) | User.last_name.ilike(like) | User.email.ilike(like))
    return db.scalars(stmt.order_by(User.last_name, User.first_name)).all()

@router.get("/assignable", response_model=List[UserOut], dependencies=[Depends(get_current_user)])
def list_assignable_users(
    type: str = Query(..., description="tipo do evento"),
    include_admins: bool = Query(False, alias="includeAdmins"),
    db: Session = Depends(get_db),
):
    try:
        event_type = get_rules().normalize_type(type)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    return assignable_users(db, event_type, include_admins=include_admins)

@router.get("/{user_id}", response_model=UserOut, dependencies=[Depends(require_admin)])
def get_user(user_id: int = Path(..., ge=1), db: Session = Depends(get_db)):
    return _get_or_404(db, user_id)

@router.patch("/{user_id}", response_model=UserOut, dependencies=[Depends(require_admin)])
def update_user(user_id: int, body: UserUpdate, db: Session = Depends(get_db)):
    u = _get_or_404(db, user_id)
    data = body.model_dump(exclude_unset=True)

    if data.get("email"):
        email = data["email"].strip().lower()
        other = user_crud.get_by_email(db, email)
        if other and other.id != u.id:
            raise HTTPException(409, detail="Cet email est déjà utilisé")
        data["email"] = email
    if data.get("role") is not None:
        data["role"] = UserRole(data["role"]).value
    if data.get("password"):
        ensure_password_policy(data["password"])
        data["hashed_password"] = hash_password(data["password"])
    data.pop("password", None)
    for field in ("first_name", "last_name", "email", "role", "is_active"):
        if field in data and data[field] is None:
            data.pop(field)

    return user_crud.update(db, u, data)

@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    u = _get_or_404(db, user_id)
    if u.id == admin.id:
        raise HTTPException(400, "Impossible de supprimer votre propre compte")
    if u.created_events:
        # eventos guardam o criador; a conta é só desativada
        u.is_active = False
        db.add(u); db.commit()
        return None
    u.assigned_events = []
    db.delete(u); db.commit()
    return None
