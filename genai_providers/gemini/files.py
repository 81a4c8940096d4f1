"""Files API operations.

Uploads use the two-step resumable protocol:

1. ``POST {base}/upload/{version}/files`` with ``X-Goog-Upload-Protocol:
   resumable`` and ``X-Goog-Upload-Command: start``; the session URL comes
   back in the ``X-Goog-Upload-URL`` response header.
2. ``PUT`` the file bytes to that URL with ``X-Goog-Upload-Command: upload,
   finalize`` and offset ``0``.

The uploaded file's metadata (``uri``, ``mimeType``) can be passed directly
as a content item to ``generate_content``.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

from ..base.errors import ErrorCode, TransportError
from ..base.logging import LogContext, normalized_log_event
from ..config.defaults import GEMINI_DEFAULT_FILES_PAGE_SIZE
from .helpers import PROVIDER_NAME
from .mime import get_mime_type
from .transport import TransportClient

FILES_ENDPOINT = "files"
UPLOAD_URL_HEADER = "X-Goog-Upload-URL"


def upload_file(
    transport: TransportClient,
    path: str,
    *,
    display_name: str = "",
    mime_type: str = "",
    logger: logging.Logger | None = None,
) -> Dict[str, Any]:
    """Upload ``path`` and return the created file resource.

    Raises:
        ConfigurationError: ``mime_type`` not given and not derivable from the extension.
        TransportError: either request failed, or the start response had no upload URL.
        OSError: the file cannot be read.
    """
    mime_type = mime_type or get_mime_type(path)
    display_name = display_name or os.path.basename(path)
    size = os.path.getsize(path)
    ctx = LogContext(provider=PROVIDER_NAME, operation="upload")
    log = logger or transport.logger

    normalized_log_event(
        log,
        "upload.start",
        ctx,
        phase="start",
        attempt=None,
        emitted=None,
        tokens=None,
        display_name=display_name,
        mime_type=mime_type,
        size=size,
    )
    start = transport.request(
        "POST",
        FILES_ENDPOINT,
        {"file": {"displayName": display_name}},
        headers={
            "X-Goog-Upload-Protocol": "resumable",
            "X-Goog-Upload-Command": "start",
            "X-Goog-Upload-Header-Content-Length": str(size),
            "X-Goog-Upload-Header-Content-Type": mime_type,
        },
        url=transport.settings.upload_url(FILES_ENDPOINT),
        upload=True,
    )
    upload_url = start.headers.get(UPLOAD_URL_HEADER)
    if not upload_url:
        raise TransportError(
            code=ErrorCode.SERVER_ERROR,
            message="Failed to obtain upload URL",
            provider=PROVIDER_NAME,
            status_code=start.status_code,
        )

    with open(path, "rb") as fh:
        data = fh.read()
    response = transport.request(
        "PUT",
        FILES_ENDPOINT,
        headers={
            "Content-Length": str(size),
            "X-Goog-Upload-Offset": "0",
            "X-Goog-Upload-Command": "upload, finalize",
        },
        url=upload_url,
        content=data,
        upload=True,
        max_attempts=1,
    )
    resource = response.json().get("file", {})
    normalized_log_event(
        log,
        "upload.end",
        ctx,
        phase="finalize",
        attempt=None,
        emitted=True,
        tokens=None,
        name=resource.get("name"),
    )
    return resource


def get_file(transport: TransportClient, name: str) -> Dict[str, Any]:
    """Metadata of the file named like ``files/abc-123``."""
    return transport.request("GET", name).json()


def list_files(
    transport: TransportClient,
    *,
    page_size: int = GEMINI_DEFAULT_FILES_PAGE_SIZE,
    page_token: str = "",
) -> List[Dict[str, Any]]:
    """One page of file metadata owned by the project."""
    params: Dict[str, Any] = {"pageSize": page_size}
    if page_token:
        params["pageToken"] = page_token
    return transport.request("GET", FILES_ENDPOINT, params=params).json().get("files", [])


def delete_file(transport: TransportClient, name: str) -> int:
    return transport.request("DELETE", name).status_code


__all__ = [
    "FILES_ENDPOINT",
    "UPLOAD_URL_HEADER",
    "upload_file",
    "get_file",
    "list_files",
    "delete_file",
]
