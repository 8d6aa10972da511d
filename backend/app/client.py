"""Async client for the PDF library API.

Mirrors what the upload form and the list view do: upload the file, then
create the catalog record from the returned URL; list with filters and a
sort that toggles like a table header; delay search-text queries.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import aiohttp

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.3
FILTER_KEYS = ("type", "subject", "course", "semester", "university", "search")


class LibraryAPIError(Exception):
    """Error response from the library API. Carries status, message and URL."""

    def __init__(self, status: int, message: str, url: str):
        self.status = status
        self.message = message
        self.url = url
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"HTTP {self.status} from {self.url}: {self.message}"


@dataclass
class SortState:
    """Sort field and direction, toggled the way a clickable column header is."""
    field: str = "uploadDate"
    direction: str = "desc"

    def select(self, field: str) -> "SortState":
        if field == self.field:
            self.direction = "asc" if self.direction == "desc" else "desc"
        else:
            self.field = field
            self.direction = "asc"
        return self


def build_list_params(filters: Optional[Dict[str, Any]] = None, sort: Optional[SortState] = None) -> Dict[str, str]:
    """Query string for GET /api/pdfs. Empty filters and type=all are dropped."""
    params: Dict[str, str] = {}
    for key in FILTER_KEYS:
        value = (filters or {}).get(key)
        if value is None or value == "":
            continue
        if key == "type" and value == "all":
            continue
        params[key] = str(value)
    if sort is not None:
        params["sortField"] = sort.field
        params["sortDirection"] = sort.direction
    return params


class SearchDebouncer:
    """Runs `callback` with the latest search text once input settles.

    Each `submit` cancels the pending call, so only the last value within
    `delay` seconds is issued.
    """

    def __init__(self, callback: Callable[[str], Awaitable[Any]], delay: float = SEARCH_DEBOUNCE_SECONDS):
        self._callback = callback
        self._delay = delay
        self._task: Optional[asyncio.Task] = None
        self._pending: Optional[str] = None

    def submit(self, text: str) -> None:
        self.cancel()
        self._pending = text
        self._task = asyncio.get_running_loop().create_task(self._fire_later(text))

    async def _fire_later(self, text: str) -> None:
        await asyncio.sleep(self._delay)
        self._pending = None
        # the task is never awaited
        try:
            await self._callback(text)
        except Exception:
            logger.exception("Debounced search for %r failed", text)

    async def flush(self) -> None:
        """Issue the pending search now instead of waiting."""
        if self._pending is None:
            return
        text = self._pending
        self.cancel()
        await self._callback(text)

    def cancel(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None
        self._pending = None


class LibraryClient:
    """Async HTTP client for the upload and catalog endpoints.

    Use as an async context manager to share one connection pool across calls.
    """

    def __init__(self, base_url: str, timeout: float = 60):
        self.base_url = base_url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def open(self) -> None:
        if not self._session:
            self._session = aiohttp.ClientSession(timeout=self._timeout)

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "LibraryClient":
        await self.open()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        await self.open()
        url = f"{self.base_url}{path}"
        async with self._session.request(method, url, **kwargs) as resp:
            try:
                body = await resp.json(content_type=None)
            except ValueError:
                body = None
            if resp.status >= 400:
                message = body.get("error") if isinstance(body, dict) else None
                raise LibraryAPIError(resp.status, message or resp.reason or "Request failed", url)
            return body

    async def upload(self, filename: str, data: bytes, content_type: str = "application/pdf") -> Dict[str, Any]:
        form = aiohttp.FormData()
        form.add_field("file", data, filename=filename, content_type=content_type)
        return await self._request("POST", "/api/upload", data=form)

    async def create(self, metadata: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/pdfs", json=metadata)

    async def upload_and_create(self, filename: str, data: bytes, metadata: Dict[str, Any]) -> Dict[str, Any]:
        """Upload the file, then create its record. A failed upload creates nothing."""
        uploaded = await self.upload(filename, data)
        record = {
            **metadata,
            "name": filename,
            "fileUrl": uploaded["fileUrl"],
            "fileSize": uploaded["fileSize"],
        }
        created = await self.create(record)
        logger.info("Uploaded %s as %s", filename, created.get("id"))
        return created

    async def list(self, filters: Optional[Dict[str, Any]] = None, sort: Optional[SortState] = None) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/pdfs", params=build_list_params(filters, sort))
