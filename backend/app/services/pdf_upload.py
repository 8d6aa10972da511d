"""PDF upload pipeline: validate, name, store.

Checks run in a fixed order and the first failure wins. Nothing is written
to storage unless every check passes.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol

from app.errors import ValidationError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes
ALLOWED_FILE_TYPE = "application/pdf"
ALLOWED_EXTENSION = "pdf"


class BlobStorage(Protocol):
    def ensure_configured(self) -> None: ...
    def key_for(self, file_name: str) -> str: ...
    async def save(self, key: str, data: bytes, content_type: str) -> str: ...


@dataclass
class UploadResult:
    file_url: str
    file_name: str
    file_size: int
    content_type: str
    upload_date: datetime


def validate_pdf(filename: Optional[str], content_type: Optional[str], size: int) -> str:
    """Check type, size and extension. Returns the normalised extension."""
    if content_type != ALLOWED_FILE_TYPE:
        raise ValidationError("Invalid file type. Only PDFs are allowed.")
    if size > MAX_FILE_SIZE:
        raise ValidationError(f"File size exceeds {MAX_FILE_SIZE // (1024 * 1024)}MB limit.")

    name = filename or ""
    extension = name.rsplit(".", 1)[1].lower() if "." in name else ""
    if extension != ALLOWED_EXTENSION:
        raise ValidationError("Invalid file extension")
    return extension


def generate_file_name(extension: str) -> str:
    """Random object name. Never derived from the client's filename."""
    return f"{uuid.uuid4()}.{extension}"


async def upload_pdf(
    storage: BlobStorage,
    filename: Optional[str],
    content_type: Optional[str],
    contents: Optional[bytes],
) -> UploadResult:
    """Validate a PDF and write it to blob storage under a fresh key.

    Raises ConfigurationError before anything else if storage is not set up,
    ValidationError for a bad file, StorageError if the write fails.
    """
    storage.ensure_configured()

    if contents is None:
        raise ValidationError("No file provided")

    extension = validate_pdf(filename, content_type, len(contents))
    file_name = generate_file_name(extension)
    key = storage.key_for(file_name)

    file_url = await storage.save(key, contents, content_type)
    logger.info("Stored %s (%d bytes) as %s", filename, len(contents), key)

    return UploadResult(
        file_url=file_url,
        file_name=file_name,
        file_size=len(contents),
        content_type=content_type,
        upload_date=datetime.now(timezone.utc),
    )
