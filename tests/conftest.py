"""
Fixtures compartilhadas: banco SQLite descartável por teste, sessão, cliente HTTP
com get_db sobrescrito e usuários/salas prontos.
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from planning.core.config import settings
from planning.core.security import hash_password
from planning.core.tokens import create_access_token
from planning.db.base import Base
from planning.db.session import get_db
from planning.main import api
from planning.models.room import Room
from planning.models.user import User, UserRole
from planning.schemas.event import EventCreate

PASSWORD = "motdepasse1"


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """Create test database session"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    api.dependency_overrides[get_db] = override_get_db
    # sem "with": o startup (migrações + seed) não roda nos testes
    yield TestClient(api)
    api.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(role=UserRole.artiste.value, is_active=True, password=PASSWORD):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            first_name=f"Prénom{n}",
            last_name=f"Nom{n}",
            email=f"{role}{n}@comedie-theatre.fr",
            hashed_password=hash_password(password),
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.administrateur.value)


@pytest.fixture
def artiste(make_user):
    return make_user(UserRole.artiste.value)


@pytest.fixture
def permanence_user(make_user):
    return make_user(UserRole.permanence.value)


@pytest.fixture
def make_room(db_session):
    def _make(name="Comédie d'Aix", capacity=200):
        room = Room(name=name, capacity=capacity)
        db_session.add(room)
        db_session.commit()
        db_session.refresh(room)
        return room

    return _make


@pytest.fixture
def room(make_room):
    return make_room()


@pytest.fixture
def other_room(make_room):
    return make_room("Comédie des Suds", 250)


def auth_header(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(sub=user.id, role=user.role)}"}


def at(hour, minute=0, day=1, month=6, year=2024) -> datetime:
    return datetime(year, month, day, hour, minute)


def event_data(room, type="show", start=None, end=None, **extra) -> EventCreate:
    return EventCreate(
        title=extra.pop("title", f"{type} test"),
        start=start or at(10),
        end=end or at(12),
        room_id=room.id,
        type=type,
        **extra,
    )
