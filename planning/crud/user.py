from typing import Iterable, List
from sqlalchemy.orm import Session
from sqlalchemy import select
from planning.crud.base import CRUDBase
from planning.models.user import User, UserRole
from planning.schemas.user import UserCreate, UserUpdate

from planning.core.security import hash_password

class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def create(self, db: Session, obj_in: UserCreate, extra=None, commit: bool = True) -> User:
        data = obj_in.model_dump()
        data["hashed_password"] = hash_password(data.pop("password"))
        data["email"] = data["email"].strip().lower()
        data.setdefault("role", UserRole.artiste.value)
        if extra: data.update(extra)
        return super().create(db, data, commit=commit)

    def get_by_email(self, db: Session, email: str) -> User | None:
        return db.scalar(select(User).where(User.email == email.strip().lower()))

    def get_many(self, db: Session, ids: Iterable[int]) -> List[User]:
        ids = list(ids)
        if not ids:
            return []
        return list(db.scalars(select(User).where(User.id.in_(ids))))

    def list_by_roles(self, db: Session, roles: Iterable[str], active_only: bool = True) -> List[User]:
        stmt = select(User).where(User.role.in_(list(roles)))
        if active_only:
            stmt = stmt.where(User.is_active.is_(True))
        return list(db.scalars(stmt.order_by(User.last_name, User.first_name)))

user_crud = CRUDUser(User)
