"""Pdf model - catalog record for an uploaded document (bytes live in blob storage)."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Text, Integer, BigInteger, DateTime, JSON, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from app.models.base import Base, TimestampMixin

PDF_TYPES = ("book", "notes", "pyq")

# Canonical status values. Clients that display "ready" map it from "active".
PDF_STATUSES = ("processing", "active", "error")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Pdf(Base, TimestampMixin):
    __tablename__ = "pdfs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    display_name: Mapped[str] = mapped_column(String(500), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    course: Mapped[str] = mapped_column(String(200), nullable=False)
    author: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    semester: Mapped[int | None] = mapped_column(Integer, nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    university: Mapped[str | None] = mapped_column(String(200), nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="processing")
    uploaded_by: Mapped[str] = mapped_column(String(200), nullable=False)
    upload_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index("idx_pdfs_subject", "subject"),
        Index("idx_pdfs_course", "course"),
        Index("idx_pdfs_type", "type"),
        Index("idx_pdfs_upload_date", "upload_date"),
    )
