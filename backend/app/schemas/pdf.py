"""Pdf catalog request/response schemas."""
import uuid
from typing import Literal, Optional
from datetime import datetime
from pydantic import Field, field_validator
from app.schemas.base import CamelModel, CamelORMModel
from app.services.pdf_upload import MAX_FILE_SIZE

PdfType = Literal["book", "notes", "pyq"]


class PdfCreate(CamelModel):
    """Metadata payload sent after the file itself has been uploaded.

    id, status and uploadDate are assigned by the catalog; any values the
    client sends for them are ignored.
    """
    name: str = Field(min_length=1)
    display_name: str = Field(min_length=3)
    type: PdfType
    subject: str = Field(min_length=1)
    course: str = Field(min_length=1)
    author: Optional[str] = None
    description: Optional[str] = None
    semester: Optional[int] = Field(default=None, ge=1, le=8)
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    university: Optional[str] = None
    tags: list[str] = []
    file_url: str = Field(min_length=1)
    file_size: int = Field(ge=0, le=MAX_FILE_SIZE)
    uploaded_by: str = Field(min_length=1)


class PdfResponse(CamelORMModel):
    id: uuid.UUID
    name: str
    display_name: str
    type: str
    subject: str
    course: str
    author: Optional[str] = None
    description: Optional[str] = None
    semester: Optional[int] = None
    year: Optional[int] = None
    university: Optional[str] = None
    tags: list[str] = []
    file_url: str
    file_size: int
    status: str
    uploaded_by: str
    upload_date: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('tags', mode='before')
    @classmethod
    def none_to_list(cls, v):
        return v if v is not None else []
