"""Tests for the PDF upload pipeline."""
import pytest

from app.errors import ConfigurationError, ValidationError
from app.services.pdf_upload import MAX_FILE_SIZE, upload_pdf, validate_pdf

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"


@pytest.mark.parametrize("content_type", ["text/plain", "application/x-pdf", "", None, "application/pdf; charset=binary"])
async def test_rejects_non_pdf_content_type_without_writing(storage, content_type):
    with pytest.raises(ValidationError, match="Only PDFs are allowed"):
        await upload_pdf(storage, "notes.pdf", content_type, PDF_BYTES)
    assert storage.writes == []


async def test_rejects_oversize_without_writing(storage):
    data = b"0" * (MAX_FILE_SIZE + 1)
    with pytest.raises(ValidationError, match="exceeds 10MB"):
        await upload_pdf(storage, "big.pdf", "application/pdf", data)
    assert storage.writes == []


async def test_accepts_exactly_max_size(storage):
    data = b"0" * MAX_FILE_SIZE
    result = await upload_pdf(storage, "big.pdf", "application/pdf", data)
    assert result.file_size == MAX_FILE_SIZE
    assert len(storage.writes) == 1


@pytest.mark.parametrize("filename", ["notes.txt", "notes", "notes.pdf.exe", None])
async def test_rejects_bad_extension_without_writing(storage, filename):
    with pytest.raises(ValidationError, match="Invalid file extension"):
        await upload_pdf(storage, filename, "application/pdf", PDF_BYTES)
    assert storage.writes == []


def test_extension_check_is_case_insensitive():
    assert validate_pdf("Lecture.PDF", "application/pdf", 10) == "pdf"


async def test_missing_file(storage):
    with pytest.raises(ValidationError, match="No file provided"):
        await upload_pdf(storage, None, None, None)


async def test_configuration_checked_before_validation(storage):
    def fail():
        raise ConfigurationError("Server configuration error")
    storage.ensure_configured = fail

    # Even an invalid file reports the configuration problem first
    with pytest.raises(ConfigurationError):
        await upload_pdf(storage, "notes.txt", "text/plain", b"x")
    assert storage.writes == []


async def test_successful_upload_result(storage):
    result = await upload_pdf(storage, "../../etc/passwd.pdf", "application/pdf", PDF_BYTES)

    assert result.file_size == len(PDF_BYTES)
    assert result.content_type == "application/pdf"
    assert result.file_name.endswith(".pdf")
    assert "passwd" not in result.file_name
    assert result.file_url == f"https://test-bucket.s3.us-east-1.amazonaws.com/pdfs/{result.file_name}"

    key, data, content_type = storage.writes[0]
    assert key == f"pdfs/{result.file_name}"
    assert data == PDF_BYTES
    assert content_type == "application/pdf"


async def test_same_file_twice_gets_distinct_keys(storage):
    first = await upload_pdf(storage, "notes.pdf", "application/pdf", PDF_BYTES)
    second = await upload_pdf(storage, "notes.pdf", "application/pdf", PDF_BYTES)

    assert first.file_name != second.file_name
    assert first.file_url != second.file_url
    assert storage.writes[0][0] != storage.writes[1][0]
