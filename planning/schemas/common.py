# planning/schemas/common.py
from datetime import datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from planning.core.config import settings


class CamelModel(BaseModel):
    # JSON em camelCase (roomId, assignedUsers...); snake_case também é aceito
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def to_local(value: datetime) -> datetime:
    """
    Datetime com fuso -> hora local do teatro sem tzinfo; naive já é local.

    Na volta do horário de verão (fold de outubro) a hora local se repete:
    um intervalo que atravessa o fold pode ficar com start >= end e é
    recusado como intervalo inválido.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)
