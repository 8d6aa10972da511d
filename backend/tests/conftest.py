"""Shared fixtures: SQLite-backed catalog, recording storage, ASGI client."""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.database import build_engine, build_sessionmaker
from app.main import app
from app.models import Base
from app.schemas.pdf import PdfCreate
from app.services.catalog import CatalogService


class RecordingStorage:
    """Blob storage stand-in that keeps every write in memory."""

    bucket = "test-bucket"
    region = "us-east-1"
    key_prefix = "pdfs"

    def __init__(self):
        self.writes = []

    def ensure_configured(self) -> None:
        pass

    def key_for(self, file_name: str) -> str:
        return f"{self.key_prefix}/{file_name}"

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def local_path(self, file_name: str):
        return None

    async def save(self, key: str, data: bytes, content_type: str) -> str:
        self.writes.append((key, data, content_type))
        return self.public_url(key)


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def catalog(engine):
    return CatalogService(build_sessionmaker(engine))


@pytest.fixture
def make_payload():
    """Factory for a valid create payload (camelCase, as the API receives it)."""
    def _make(**overrides) -> dict:
        payload = {
            "name": "thermo-ch1.pdf",
            "displayName": "Thermo Notes Ch1",
            "type": "notes",
            "subject": "Thermodynamics",
            "course": "Mechanical Engineering",
            "tags": ["heat", "entropy"],
            "fileUrl": "https://test-bucket.s3.us-east-1.amazonaws.com/pdfs/abc.pdf",
            "fileSize": 2048,
            "uploadedBy": "demo-user",
        }
        payload.update(overrides)
        return payload
    return _make


@pytest.fixture
def create_pdf(catalog, make_payload):
    """Insert a record through the catalog service."""
    async def _create(**overrides):
        return await catalog.create(PdfCreate.model_validate(make_payload(**overrides)))
    return _create


@pytest_asyncio.fixture
async def client(catalog, storage):
    app.state.catalog = catalog
    app.state.file_storage = storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
