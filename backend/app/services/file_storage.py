"""File storage abstraction. S3 for production, local filesystem for dev."""
import logging
from pathlib import Path

import aiofiles
import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings
from app.errors import ConfigurationError, StorageError

logger = logging.getLogger(__name__)

_S3_REQUIRED = ("AWS_REGION", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_S3_BUCKET")


class FileStorageService:
    """Writes file bytes to S3 or local disk and derives their public URL."""

    def __init__(self, settings: Settings):
        self.storage_type = settings.FILE_STORAGE_TYPE
        self.key_prefix = settings.STORAGE_KEY_PREFIX.strip("/")
        self.region = settings.AWS_REGION
        self.bucket = settings.AWS_S3_BUCKET
        self._access_key = settings.AWS_ACCESS_KEY_ID
        self._secret_key = settings.AWS_SECRET_ACCESS_KEY
        self._missing = [name for name in _S3_REQUIRED if not getattr(settings, name)]
        self._session = None

        if self.storage_type == "local":
            self.base_path = Path(settings.FILE_STORAGE_PATH)
            self.public_base_url = settings.FILE_PUBLIC_BASE_URL.rstrip("/")

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if the selected backend is missing settings."""
        if self.storage_type == "local":
            return
        if self.storage_type != "s3":
            logger.error("Unknown storage type: %s", self.storage_type)
            raise ConfigurationError("Server configuration error")
        if self._missing:
            logger.error("Missing required environment variables: %s", ", ".join(self._missing))
            raise ConfigurationError("Server configuration error")

    def key_for(self, file_name: str) -> str:
        return f"{self.key_prefix}/{file_name}" if self.key_prefix else file_name

    def public_url(self, key: str) -> str:
        """Deterministic URL for an object key."""
        if self.storage_type == "local":
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def local_path(self, file_name: str) -> Path | None:
        """Path of a locally stored object, or None if it can't be served from disk."""
        if self.storage_type != "local" or Path(file_name).name != file_name:
            return None
        path = self.base_path / self.key_for(file_name)
        return path if path.is_file() else None

    async def save(self, key: str, data: bytes, content_type: str) -> str:
        """Write bytes under `key`. Returns the public URL."""
        self.ensure_configured()
        if self.storage_type == "local":
            await self._save_local(key, data)
        else:
            await self._save_s3(key, data, content_type)
        return self.public_url(key)

    async def _save_local(self, key: str, data: bytes) -> None:
        file_path = self.base_path / key
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error("Local storage write failed for %s: %s", key, e)
            raise StorageError("Failed to upload to storage") from e

    async def _save_s3(self, key: str, data: bytes, content_type: str) -> None:
        if self._session is None:
            self._session = aioboto3.Session(
                aws_access_key_id=self._access_key,
                aws_secret_access_key=self._secret_key,
                region_name=self.region,
            )
        try:
            async with self._session.client("s3") as s3:
                await s3.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=data,
                    ContentType=content_type,
                )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload error for %s: %s", key, e)
            raise StorageError("Failed to upload to storage") from e
