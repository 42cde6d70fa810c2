# Carrega módulos para registrar tabelas no metadata:
from planning.db.base import Base  # noqa: F401
