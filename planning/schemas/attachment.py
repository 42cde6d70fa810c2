# planning/schemas/attachment.py
from datetime import datetime
from typing import Optional

from planning.schemas.common import CamelModel

class EventPdfOut(CamelModel):
    id: int
    event_id: int
    name: str
    url: str
    created_at: Optional[datetime] = None
