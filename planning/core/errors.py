# planning/core/errors.py
from __future__ import annotations
from typing import Any, Dict, List, Optional


class DomainError(Exception):
    """Erro de negócio; o handler em main.py devolve {code, message, details}."""

    status_code: int = 400
    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(DomainError):
    status_code = 400
    code = "VALIDATION_ERROR"


class ConflictError(DomainError):
    status_code = 400
    code = "SCHEDULE_CONFLICT"

    def __init__(self, conflicting_types: List[str]):
        self.conflicting_types = list(conflicting_types)
        super().__init__(
            "Conflit d'horaire avec des événements de type : " + ", ".join(self.conflicting_types),
            details={"conflicting_types": self.conflicting_types},
        )


class CapacityError(DomainError):
    status_code = 400
    code = "DAILY_SHOW_LIMIT"

    def __init__(self, limit: int, details: Optional[Any] = None):
        self.limit = limit
        super().__init__(f"Limite de {limit} spectacles par jour atteinte pour cette salle", details)


class NotFoundError(DomainError):
    status_code = 404
    code = "NOT_FOUND"


class AuthorizationError(DomainError):
    status_code = 403
    code = "FORBIDDEN"


class StorageError(DomainError):
    status_code = 500
    code = "STORAGE_ERROR"


class BusyError(DomainError):
    status_code = 503
    code = "ROOM_BUSY"
