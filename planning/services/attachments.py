# planning/services/attachments.py
"""PDFs anexados a eventos: arquivo em UPLOAD_DIR/<event_id>/, metadados em event_pdfs."""
from __future__ import annotations

import logging
import os
import shutil
import uuid
from typing import BinaryIO, Iterable, List, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from planning.core.config import settings
from planning.core.errors import NotFoundError, ValidationError
from planning.models.attachment import EventPdf
from planning.models.event import Event

logger = logging.getLogger(__name__)


def _event_dir(event_id: int) -> str:
    return os.path.join(settings.UPLOAD_DIR, str(event_id))


def _write_blob(event_id: int, stream: BinaryIO) -> str:
    folder = _event_dir(event_id)
    os.makedirs(folder, exist_ok=True)
    path = os.path.join(folder, f"{uuid.uuid4().hex}.pdf")
    with open(path, "wb") as out:
        shutil.copyfileobj(stream, out)
    return path


def discard_blobs(paths: Iterable[str]) -> None:
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning("Arquivo de anexo já ausente: %s", path)


def list_pdfs(db: Session, event_id: int) -> List[EventPdf]:
    return list(db.scalars(select(EventPdf).where(EventPdf.event_id == event_id).order_by(EventPdf.id)))


def get_pdf(db: Session, event_id: int, pdf_id: int) -> EventPdf:
    pdf = db.scalar(select(EventPdf).where(EventPdf.id == pdf_id, EventPdf.event_id == event_id))
    if not pdf:
        raise NotFoundError("PDF non trouvé", details={"event_id": event_id, "pdf_id": pdf_id})
    return pdf


def add_pdfs(db: Session, event: Event, files: Sequence[Tuple[str, BinaryIO]]) -> List[EventPdf]:
    """files: pares (nome original, stream). Grava tudo ou nada."""
    if not files:
        raise ValidationError("Aucun fichier téléchargé")
    bad = [name for name, _ in files if not (name or "").lower().endswith(".pdf")]
    if bad:
        raise ValidationError("Seuls les fichiers PDF sont acceptés", details={"rejected": bad})

    written: List[str] = []
    try:
        rows = []
        for name, stream in files:
            path = _write_blob(event.id, stream)
            written.append(path)
            pdf = EventPdf(event_id=event.id, name=os.path.basename(name), path=path, url="")
            db.add(pdf)
            db.flush()
            pdf.url = f"/api/v1/events/{event.id}/pdfs/{pdf.id}"
            rows.append(pdf)
        db.commit()
    except Exception:
        db.rollback()
        discard_blobs(written)
        raise
    logger.info("%d PDF(s) anexado(s) ao evento %s", len(rows), event.id)
    return rows


def delete_pdf(db: Session, event_id: int, pdf_id: int) -> None:
    pdf = get_pdf(db, event_id, pdf_id)
    path = pdf.path
    db.delete(pdf)
    db.commit()
    discard_blobs([path])
