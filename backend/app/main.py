"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import build_engine, build_sessionmaker
from app.errors import register_exception_handlers
from app.models import Base
from app.services.catalog import CatalogService
from app.services.file_storage import FileStorageService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and services on startup, dispose the engine on shutdown."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = build_engine(settings.DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.state.catalog = CatalogService(
        build_sessionmaker(engine), limit=settings.CATALOG_QUERY_LIMIT
    )
    app.state.file_storage = FileStorageService(settings)
    logger.info("PDF library API started (storage: %s)", settings.FILE_STORAGE_TYPE)

    yield

    # Cleanup
    await engine.dispose()


app = FastAPI(
    title="PDF Library API",
    version="1.0.0",
    description="Upload, catalog and search academic PDFs.",
    lifespan=lifespan,
)

# CORS
origins = [o.strip() for o in settings.CORS_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/api/health")
async def health_check(request: Request):
    """Verify API and database connectivity."""
    try:
        await request.app.state.catalog.ping()
        return {"status": "ok", "database": "connected"}
    except Exception as e:
        return {"status": "error", "database": str(e)}


# Register routers
from app.routes.upload import router as upload_router
from app.routes.pdfs import router as pdfs_router
from app.routes.files import router as files_router
app.include_router(upload_router)
app.include_router(pdfs_router)
app.include_router(files_router)
