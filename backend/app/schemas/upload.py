"""Upload response schema."""
from datetime import datetime
from app.schemas.base import CamelModel


class UploadResponse(CamelModel):
    success: bool = True
    file_url: str
    file_name: str
    file_size: int
    content_type: str
    upload_date: datetime
