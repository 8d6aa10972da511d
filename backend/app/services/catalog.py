"""Document catalog: create records and answer filtered list queries.

List queries are assembled from independent predicates that are ANDed
together; `search` contributes a single OR across the text fields.

    query = PdfQuery.from_params(type="notes", search="thermo")
    pdfs = await catalog.list(query)
"""
import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, asc, desc, or_, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql.elements import ColumnElement

from app.errors import QueryError, StorageError, ValidationError
from app.models.pdf import Pdf
from app.schemas.pdf import PdfCreate

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
DEFAULT_SORT_FIELD = "uploadDate"
DEFAULT_SORT_DIRECTION = "desc"

SORT_COLUMNS = {
    "uploadDate": Pdf.upload_date,
    "displayName": Pdf.display_name,
    "subject": Pdf.subject,
    "fileSize": Pdf.file_size,
}
SEARCH_COLUMNS = (Pdf.display_name, Pdf.description, Pdf.subject, Pdf.course)
_SEMESTER_RE = re.compile(r"\s*(\d{1,3})\s*", re.ASCII)


def _contains(column, value: str) -> ColumnElement:
    """Case-insensitive literal substring match."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def _parse_semester(raw: str) -> int:
    """Plain decimal digits only; signs, underscores and huge values are rejected."""
    match = _SEMESTER_RE.fullmatch(raw)
    if match is None:
        raise ValidationError("Invalid semester")
    return int(match.group(1))


@dataclass
class PdfQuery:
    """Validated filters and sort order for a list query."""
    predicates: list[ColumnElement] = field(default_factory=list)
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: str = DEFAULT_SORT_DIRECTION

    @classmethod
    def from_params(
        cls,
        type: Optional[str] = None,
        subject: Optional[str] = None,
        course: Optional[str] = None,
        semester: Optional[str] = None,
        university: Optional[str] = None,
        search: Optional[str] = None,
        sort_field: Optional[str] = None,
        sort_direction: Optional[str] = None,
    ) -> "PdfQuery":
        """Build a query from raw string parameters. Empty values are ignored."""
        predicates = []
        if type and type != "all":
            predicates.append(Pdf.type == type)
        if subject:
            predicates.append(_contains(Pdf.subject, subject))
        if course:
            predicates.append(_contains(Pdf.course, course))
        if semester:
            predicates.append(Pdf.semester == _parse_semester(semester))
        if university:
            predicates.append(_contains(Pdf.university, university))
        if search:
            predicates.append(or_(*(_contains(col, search) for col in SEARCH_COLUMNS)))

        sort_field = sort_field or DEFAULT_SORT_FIELD
        if sort_field not in SORT_COLUMNS:
            raise ValidationError(f"Invalid sort field: {sort_field}")
        sort_direction = sort_direction or DEFAULT_SORT_DIRECTION
        if sort_direction not in ("asc", "desc"):
            raise ValidationError(f"Invalid sort direction: {sort_direction}")

        return cls(predicates=predicates, sort_field=sort_field, sort_direction=sort_direction)

    def where_clause(self) -> Optional[ColumnElement]:
        return and_(*self.predicates) if self.predicates else None

    def order_by(self) -> tuple:
        direction = desc if self.sort_direction == "desc" else asc
        # id keeps ordering stable between equal sort keys
        return direction(SORT_COLUMNS[self.sort_field]), direction(Pdf.id)


class CatalogService:
    """Owns the session factory for the pdfs table."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession], limit: int = DEFAULT_LIMIT):
        self._sessionmaker = sessionmaker
        self.limit = limit

    async def create(self, payload: PdfCreate) -> Pdf:
        """Persist a new record. Status is set to active, upload date to now."""
        pdf = Pdf(
            **payload.model_dump(),
            upload_date=datetime.now(timezone.utc),
            status="active",
        )
        try:
            async with self._sessionmaker() as db:
                db.add(pdf)
                await db.commit()
                await db.refresh(pdf)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error creating PDF: {e}")
            raise StorageError("Failed to create PDF") from e

        logger.info(f"Created PDF {pdf.id} ({pdf.display_name})")
        return pdf

    async def list(self, query: PdfQuery) -> list[Pdf]:
        """Run a list query. At most `limit` records are returned."""
        stmt = select(Pdf)
        where = query.where_clause()
        if where is not None:
            stmt = stmt.where(where)
        stmt = stmt.order_by(*query.order_by()).limit(self.limit)

        try:
            async with self._sessionmaker() as db:
                result = await db.execute(stmt)
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error fetching PDFs: {e}")
            raise QueryError("Failed to fetch PDFs") from e

    async def get(self, pdf_id: uuid.UUID) -> Optional[Pdf]:
        try:
            async with self._sessionmaker() as db:
                return await db.get(Pdf, pdf_id)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error fetching PDF {pdf_id}: {e}")
            raise QueryError("Failed to fetch PDF") from e

    async def ping(self) -> None:
        """Round-trip to the database. Raises on failure."""
        async with self._sessionmaker() as db:
            await db.execute(text("SELECT 1"))
