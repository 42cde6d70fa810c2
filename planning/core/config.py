# planning/core/config.py
import os
from typing import ClassVar, List
from pydantic import BaseModel, Field

def _data_dir() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    os.makedirs(data_dir, exist_ok=True)
    return data_dir

def _default_database_url() -> str:
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(_data_dir(), 'planning.db')}")

def _default_upload_dir() -> str:
    return os.path.abspath(os.getenv("UPLOAD_DIR", os.path.join(_data_dir(), "uploads")))

def _cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()]

class Settings(BaseModel):
    # Constante (não vira campo Pydantic)
    DATA_DIR: ClassVar[str] = os.path.abspath(os.getenv("DATA_DIR", "./data"))

    DATABASE_URL: str = Field(default_factory=_default_database_url)
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720")))
    # fuso do teatro: horários são gravados em hora local "de parede"
    TIMEZONE: str = Field(default_factory=lambda: os.getenv("TIMEZONE", "Europe/Paris"))
    UPLOAD_DIR: str = Field(default_factory=_default_upload_dir)
    EVENT_RULES_FILE: str | None = Field(default_factory=lambda: os.getenv("EVENT_RULES_FILE") or None)
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    CORS_ORIGINS: List[str] = Field(default_factory=_cors_origins)
    ADMIN_EMAIL: str = Field(default_factory=lambda: os.getenv("ADMIN_EMAIL", "admin@comedie-theatre.fr"))
    ADMIN_PASSWORD: str = Field(default_factory=lambda: os.getenv("ADMIN_PASSWORD", "admin12345"))

settings = Settings()
