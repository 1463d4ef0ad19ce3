"""
Upload controller: the client side of the vault.

Drives drag/drop or manual file selection, submits the file to
``POST /api/upload`` and refreshes the catalog from ``GET /api/files``.
Everything runs on one asyncio loop; every request is bounded by a timeout
and can be cancelled.
"""

import asyncio
import logging
import mimetypes
import os
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Set, Union

import httpx

from vault_api.schemas import CatalogEntry, GetFilesResponse, UploadResponse

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

LOAD_FAILED_MESSAGE = "Failed to load files. Is the backend running?"
UPLOAD_FAILED_MESSAGE = "Upload failed. Please try again."


class UploadState(str, Enum):
    """States of the upload controller"""
    IDLE = "idle"
    DRAGGING = "dragging"        # something is being dragged over the drop area
    UPLOADING = "uploading"      # a file is in flight; new drops are ignored


class UploadController:
    """
    State machine behind the upload UI.

    Transitions:
        IDLE      -> DRAGGING   drag_enter() / drag_over()
        DRAGGING  -> IDLE       drag_leave()
        IDLE|DRAGGING -> UPLOADING   drop() / select()
        UPLOADING -> IDLE       upload finished, failed or cancelled

    After a successful upload a catalog refresh is started and not awaited.
    Refreshes are not deduplicated: whichever response arrives last decides
    what ``files`` holds.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout)
        self._client = http_client
        self._owns_client = http_client is None

        self.state = UploadState.IDLE
        self.message = ""
        self.files: List[CatalogEntry] = []
        self.last_upload: Optional[UploadResponse] = None

        self._started = False
        self._upload_task: Optional[asyncio.Task] = None
        self._refresh_tasks: Set[asyncio.Task] = set()
        self._cancel_requested = False

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def __aenter__(self) -> "UploadController":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def start(self) -> None:
        """Initial catalog load; only the first call does anything."""
        if self._started:
            return
        self._started = True
        await self.refresh()

    async def aclose(self) -> None:
        self.cancel()
        pending = list(self._refresh_tasks)
        if self._upload_task is not None:
            pending.append(self._upload_task)
        await asyncio.gather(*pending, return_exceptions=True)
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    # --- drag & drop signals ---

    def drag_enter(self) -> None:
        self._start_dragging()

    def drag_over(self) -> None:
        self._start_dragging()

    def drag_leave(self) -> None:
        if self.state == UploadState.DRAGGING:
            self.state = UploadState.IDLE

    def _start_dragging(self) -> None:
        if self.state == UploadState.IDLE:
            self.state = UploadState.DRAGGING

    async def drop(self, files: Sequence[PathLike]) -> Optional[UploadResponse]:
        """Upload the first dropped file; the rest are ignored."""
        if self.state == UploadState.DRAGGING:
            self.state = UploadState.IDLE
        return await self._handle_files(files)

    async def select(self, files: Sequence[PathLike]) -> Optional[UploadResponse]:
        """Upload the first manually selected file; the rest are ignored."""
        return await self._handle_files(files)

    async def _handle_files(self, files: Sequence[PathLike]) -> Optional[UploadResponse]:
        if not files:
            return None
        if self.state == UploadState.UPLOADING:
            logger.warning(f"Upload already in progress, ignoring {os.fspath(files[0])}")
            return None
        if len(files) > 1:
            logger.info(f"Only the first of {len(files)} files is uploaded")

        path = Path(files[0])
        self.state = UploadState.UPLOADING
        self.message = f"Uploading {path.name}..."
        self._cancel_requested = False
        self._upload_task = asyncio.create_task(self._upload(path))

        try:
            result = await self._upload_task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            self.message = f"Upload of {path.name} cancelled."
            return None
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.error(f"Error uploading {path}: {str(e)}")
            self.message = UPLOAD_FAILED_MESSAGE
            return None
        finally:
            self.state = UploadState.IDLE
            self._upload_task = None

        self.last_upload = result
        self.message = f"Successfully uploaded {path.name}!"
        self._schedule_refresh()
        return result

    async def _upload(self, path: Path) -> UploadResponse:
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        # keep disk reads off the event loop
        content = await asyncio.to_thread(path.read_bytes)
        response = await self.client.post(
            f"{self.base_url}/api/upload",
            files={"file": (path.name, content, content_type)},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return UploadResponse.model_validate(response.json())

    # --- catalog ---

    async def refresh(self) -> List[CatalogEntry]:
        """Fetch the catalog and replace ``files`` with it."""
        try:
            response = await self.client.get(f"{self.base_url}/api/files", timeout=self.timeout)
            response.raise_for_status()
            catalog = GetFilesResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching files: {str(e)}")
            self.message = LOAD_FAILED_MESSAGE
            return self.files

        self.files = catalog.files
        return self.files

    def _schedule_refresh(self) -> asyncio.Task:
        task = asyncio.create_task(self.refresh())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for any refreshes that are still in flight."""
        while self._refresh_tasks:
            await asyncio.gather(*list(self._refresh_tasks), return_exceptions=True)

    def cancel(self) -> None:
        """Abort the in-flight upload and any pending refreshes."""
        if self._upload_task is not None and not self._upload_task.done():
            self._cancel_requested = True
            self._upload_task.cancel()
        for task in list(self._refresh_tasks):
            task.cancel()
