# planning/core/logging.py
import logging

from planning.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def setup_logging() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)
    # o access log do uvicorn já cobre as requisições
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
