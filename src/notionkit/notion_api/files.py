"""File upload API wrappers for the Notion API.

Provides :class:`FileAPI` (sync) and :class:`AsyncFileAPI` (async) wrappers
for the Notion file-upload lifecycle:

1. **Create upload** -- reserve an upload object (single-part, multi-part
   or import from an external URL).
2. **Send part(s)** -- ``multipart/form-data`` POST of the raw bytes;
   multi-part uploads number their parts from 1.
3. **Complete upload** -- finalise a multi-part upload.
4. **Retrieve / list** -- poll status.

:meth:`FileAPI.upload_bytes` drives the whole protocol and picks single-
or multi-part mode from the payload size.  The returned upload id can be
used in media blocks, files properties, icons, covers and comment
attachments.
"""

from __future__ import annotations

import mimetypes
from typing import Any

from notionkit.dsl.requests import CreateFileUploadRequest
from notionkit.models.objects import FileUpload, PaginatedList
from notionkit.observability import get_logger
from notionkit.validation import MAX_UPLOAD_PARTS, validate_upload_size

from .pagination import acollect_all, collect_all
from .transport import AsyncNotionTransport, NotionTransport

log = get_logger("notionkit.files")

SINGLE_PART_MAX_BYTES = 20 * 1024 * 1024
DEFAULT_PART_BYTES = 5 * 1024 * 1024


def guess_content_type(filename: str) -> str:
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or "application/octet-stream"


def plan_parts(size: int, part_size: int = DEFAULT_PART_BYTES) -> tuple[int, int]:
    """Return ``(number_of_parts, part_size)`` for a multi-part upload.

    The part size grows when *part_size* would need more than 1000 parts.
    """
    if part_size < 1:
        raise ValueError(f"part_size must be >= 1, got {part_size}")
    parts = max(1, -(-size // part_size))
    if parts > MAX_UPLOAD_PARTS:
        part_size = -(-size // MAX_UPLOAD_PARTS)
        parts = -(-size // part_size)
    return parts, part_size


def _send_kwargs(
    data: bytes,
    filename: str,
    content_type: str,
    part_number: int | None,
) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"files": {"file": (filename, data, content_type)}}
    if part_number is not None:
        kwargs["data"] = {"part_number": str(part_number)}
    return kwargs


def _list_params(status: str | None, cursor: str | None, size: int | None) -> dict[str, Any] | None:
    params: dict[str, Any] = {}
    if status is not None:
        params["status"] = status
    if cursor is not None:
        params["start_cursor"] = cursor
    if size is not None:
        params["page_size"] = size
    return params or None


class FileAPI:
    """Synchronous wrapper for the Notion File Uploads API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def create(self, request: CreateFileUploadRequest) -> FileUpload:
        """Create a new file upload object."""
        data = self._transport.request("POST", "/file_uploads", json=request.to_dict())
        return FileUpload.from_dict(data)

    def send_part(
        self,
        file_upload_id: str,
        data: bytes,
        filename: str,
        content_type: str | None = None,
        part_number: int | None = None,
    ) -> FileUpload:
        """Send file contents, or one part of them.

        Parameters
        ----------
        file_upload_id:
            The upload returned by :meth:`create`.
        data:
            Raw bytes.  Every part except the last must be at least 5 MB.
        filename:
            Name attached to the multipart form field.
        content_type:
            MIME type; guessed from *filename* when omitted.
        part_number:
            1-based part index; required for multi-part uploads only.

        Returns
        -------
        FileUpload
            The upload state after this part.  Single-part uploads are
            ``uploaded`` at this point.
        """
        response = self._transport.request(
            "POST",
            f"/file_uploads/{file_upload_id}/send",
            **_send_kwargs(data, filename, content_type or guess_content_type(filename), part_number),
        )
        return FileUpload.from_dict(response)

    def complete(self, file_upload_id: str) -> FileUpload:
        """Finalise a multi-part upload once every part has been sent."""
        data = self._transport.request("POST", f"/file_uploads/{file_upload_id}/complete")
        return FileUpload.from_dict(data)

    def retrieve(self, file_upload_id: str) -> FileUpload:
        """Retrieve the current status of a file upload."""
        return FileUpload.from_dict(self._transport.request("GET", f"/file_uploads/{file_upload_id}"))

    def list(
        self,
        status: str | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[FileUpload]:
        """Fetch one page of uploads created by this integration."""
        data = self._transport.request(
            "GET", "/file_uploads", params=_list_params(status, start_cursor, page_size)
        )
        return PaginatedList.from_dict(data, FileUpload.from_dict)

    def list_all(self, status: str | None = None) -> list[FileUpload]:
        return collect_all(lambda cursor, size: self.list(status, cursor, size))

    def import_external(self, url: str, filename: str, content_type: str | None = None) -> FileUpload:
        """Ask Notion to fetch a publicly reachable file.  Completes asynchronously."""
        request = CreateFileUploadRequest(
            mode="external_url",
            filename=filename,
            content_type=content_type,
            external_url=url,
        )
        return self.create(request)

    def upload_bytes(
        self,
        data: bytes,
        filename: str,
        content_type: str | None = None,
        part_size: int = DEFAULT_PART_BYTES,
    ) -> FileUpload:
        """Upload *data* in full and return the finished upload.

        Payloads up to 20 MB are sent in one request; larger ones use the
        multi-part protocol with *part_size* chunks, sent in order, followed
        by :meth:`complete`.

        Raises
        ------
        NotionkitValidationError
            If *data* exceeds the 500 MB upload limit.  Nothing is sent.
        """
        validate_upload_size(len(data))
        content_type = content_type or guess_content_type(filename)

        if len(data) <= SINGLE_PART_MAX_BYTES:
            upload = self.create(CreateFileUploadRequest("single_part", filename, content_type))
            return self.send_part(upload.id, data, filename, content_type)

        parts, part_size = plan_parts(len(data), part_size)
        upload = self.create(
            CreateFileUploadRequest("multi_part", filename, content_type, number_of_parts=parts)
        )
        log.debug(
            "Starting multi-part upload",
            extra={"extra_fields": {"upload_id": upload.id, "parts": parts, "bytes": len(data)}},
        )
        for index in range(parts):
            chunk = data[index * part_size : (index + 1) * part_size]
            self.send_part(upload.id, chunk, filename, content_type, part_number=index + 1)
        return self.complete(upload.id)


class AsyncFileAPI:
    """Asynchronous wrapper for the Notion File Uploads API.

    Mirrors :class:`FileAPI` but all methods are coroutines.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def create(self, request: CreateFileUploadRequest) -> FileUpload:
        data = await self._transport.request("POST", "/file_uploads", json=request.to_dict())
        return FileUpload.from_dict(data)

    async def send_part(
        self,
        file_upload_id: str,
        data: bytes,
        filename: str,
        content_type: str | None = None,
        part_number: int | None = None,
    ) -> FileUpload:
        """Send file contents, or one part of them (async).

        See :meth:`FileAPI.send_part` for parameter documentation.
        """
        response = await self._transport.request(
            "POST",
            f"/file_uploads/{file_upload_id}/send",
            **_send_kwargs(data, filename, content_type or guess_content_type(filename), part_number),
        )
        return FileUpload.from_dict(response)

    async def complete(self, file_upload_id: str) -> FileUpload:
        data = await self._transport.request("POST", f"/file_uploads/{file_upload_id}/complete")
        return FileUpload.from_dict(data)

    async def retrieve(self, file_upload_id: str) -> FileUpload:
        data = await self._transport.request("GET", f"/file_uploads/{file_upload_id}")
        return FileUpload.from_dict(data)

    async def list(
        self,
        status: str | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> PaginatedList[FileUpload]:
        data = await self._transport.request(
            "GET", "/file_uploads", params=_list_params(status, start_cursor, page_size)
        )
        return PaginatedList.from_dict(data, FileUpload.from_dict)

    async def list_all(self, status: str | None = None) -> list[FileUpload]:
        async def fetch(cursor: str | None, size: int | None) -> PaginatedList[FileUpload]:
            return await self.list(status, cursor, size)

        return await acollect_all(fetch)

    async def import_external(
        self,
        url: str,
        filename: str,
        content_type: str | None = None,
    ) -> FileUpload:
        request = CreateFileUploadRequest(
            mode="external_url",
            filename=filename,
            content_type=content_type,
            external_url=url,
        )
        return await self.create(request)

    async def upload_bytes(
        self,
        data: bytes,
        filename: str,
        content_type: str | None = None,
        part_size: int = DEFAULT_PART_BYTES,
    ) -> FileUpload:
        """Upload *data* in full (async).

        See :meth:`FileAPI.upload_bytes`.  Parts are sent sequentially.
        """
        validate_upload_size(len(data))
        content_type = content_type or guess_content_type(filename)

        if len(data) <= SINGLE_PART_MAX_BYTES:
            upload = await self.create(
                CreateFileUploadRequest("single_part", filename, content_type)
            )
            return await self.send_part(upload.id, data, filename, content_type)

        parts, part_size = plan_parts(len(data), part_size)
        upload = await self.create(
            CreateFileUploadRequest("multi_part", filename, content_type, number_of_parts=parts)
        )
        log.debug(
            "Starting multi-part upload",
            extra={"extra_fields": {"upload_id": upload.id, "parts": parts, "bytes": len(data)}},
        )
        for index in range(parts):
            chunk = data[index * part_size : (index + 1) * part_size]
            await self.send_part(upload.id, chunk, filename, content_type, part_number=index + 1)
        return await self.complete(upload.id)
