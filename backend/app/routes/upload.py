"""Upload API route."""
import logging
from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from app.dependencies import get_file_storage
from app.errors import ValidationError
from app.schemas.upload import UploadResponse
from app.services.file_storage import FileStorageService
from app.services.pdf_upload import upload_pdf, validate_pdf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["upload"])


@router.post("", response_model=UploadResponse)
async def upload_file(
    request: Request,
    storage: FileStorageService = Depends(get_file_storage),
):
    """Validate a PDF sent as the multipart `file` field and store it.

    The storage configuration is checked before the form is parsed. The
    catalog record is created separately.
    """
    storage.ensure_configured()
    logger.info("Upload request received")

    try:
        form = await request.form()
    except Exception as e:
        logger.warning(f"Error parsing form data: {e}")
        raise ValidationError("Invalid form data") from e

    try:
        file = form.get("file")
        if not isinstance(file, UploadFile):
            file = None

        # Reject from the declared size before reading the body into memory
        if file is not None and file.size is not None:
            validate_pdf(file.filename, file.content_type, file.size)

        contents = await file.read() if file is not None else None
        result = await upload_pdf(
            storage,
            filename=file.filename if file is not None else None,
            content_type=file.content_type if file is not None else None,
            contents=contents,
        )
    finally:
        await form.close()

    return UploadResponse(
        file_url=result.file_url,
        file_name=result.file_name,
        file_size=result.file_size,
        content_type=result.content_type,
        upload_date=result.upload_date,
    )
