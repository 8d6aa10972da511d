"""Files API routes. Serves PDFs written by the local storage backend."""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from app.dependencies import get_file_storage
from app.services.file_storage import FileStorageService

router = APIRouter(prefix="/api/files", tags=["files"])


@router.get("/{prefix}/{file_name}")
async def download_file(
    prefix: str,
    file_name: str,
    storage: FileStorageService = Depends(get_file_storage),
):
    """Download a locally stored PDF by its generated name."""
    path = storage.local_path(file_name) if prefix == storage.key_prefix else None
    if path is None:
        raise HTTPException(status_code=404, detail="File not found")

    return FileResponse(
        path=path,
        filename=file_name,
        media_type="application/pdf",
    )
