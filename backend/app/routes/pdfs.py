"""PDF catalog API routes."""
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query

from app.dependencies import get_catalog
from app.schemas.pdf import PdfCreate, PdfResponse
from app.services.catalog import CatalogService, PdfQuery

router = APIRouter(prefix="/api/pdfs", tags=["pdfs"])


@router.get("", response_model=list[PdfResponse])
async def list_pdfs(
    type: str = Query(None),
    subject: str = Query(None),
    course: str = Query(None),
    semester: str = Query(None),
    university: str = Query(None),
    search: str = Query(None),
    sort_field: str = Query(None, alias="sortField"),
    sort_direction: str = Query(None, alias="sortDirection"),
    catalog: CatalogService = Depends(get_catalog),
):
    """List PDFs matching all given filters, capped at the catalog limit."""
    query = PdfQuery.from_params(
        type=type,
        subject=subject,
        course=course,
        semester=semester,
        university=university,
        search=search,
        sort_field=sort_field,
        sort_direction=sort_direction,
    )
    return await catalog.list(query)


@router.get("/{pdf_id}", response_model=PdfResponse)
async def get_pdf(
    pdf_id: UUID,
    catalog: CatalogService = Depends(get_catalog),
):
    """Get a single PDF record by ID."""
    pdf = await catalog.get(pdf_id)
    if not pdf:
        raise HTTPException(status_code=404, detail="PDF not found")
    return pdf


@router.post("", response_model=PdfResponse, status_code=201)
async def create_pdf(
    body: PdfCreate,
    catalog: CatalogService = Depends(get_catalog),
):
    """Create a catalog record for an already uploaded file."""
    return await catalog.create(body)
