# planning/db/init_db.py
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from planning.core.config import settings
from planning.core.security import hash_password
from planning.models.room import Room
from planning.models.user import User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_ROOMS = [
    {"name": "Comédie d'Aix", "capacity": 200, "description": "Salle principale de la Comédie d'Aix"},
    {"name": "Comédie des Suds", "capacity": 250, "description": "Salle principale de la Comédie des Suds"},
    {"name": "Comédie de Marseille", "capacity": 300, "description": "Salle principale de la Comédie de Marseille"},
    {"name": "Comédie Le Mans", "capacity": 180, "description": "Salle principale de la Comédie Le Mans"},
    {"name": "Comédie La Rochelle", "capacity": 220, "description": "Salle principale de la Comédie La Rochelle"},
    {"name": "La Fontaine d'Argent", "capacity": 150, "description": "Salle principale de La Fontaine d'Argent"},
]

def init_db(db: Session) -> None:
    existing = set(db.scalars(select(Room.name)).all())
    for data in DEFAULT_ROOMS:
        if data["name"] not in existing:
            db.add(Room(**data))
            logger.info("Sala '%s' criada", data["name"])

    email = settings.ADMIN_EMAIL.strip().lower()
    admin = db.scalar(select(User).where(User.email == email))
    if not admin:
        db.add(User(
            first_name="Admin",
            last_name="Planning",
            email=email,
            hashed_password=hash_password(settings.ADMIN_PASSWORD),
            role=UserRole.administrateur.value,
            is_active=True,
        ))
        logger.info("Administrador inicial %s criado", email)

    db.commit()
