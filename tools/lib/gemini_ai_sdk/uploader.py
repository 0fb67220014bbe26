"""Out-of-band media uploads through the Gemini Files API.

Video, and any payload too large to inline, is uploaded with a single
multipart/related request and then polled until the service has processed
it. The returned URI is what file_data parts reference.

Typical usage example:

    with FileUploader(api_key) as uploader:
        uri = uploader.upload(video_bytes, "video/mp4")
"""

import json
import logging
import threading
import time
import uuid
from typing import Any, Callable, Optional, Union

import httpx

from .constants import DEFAULT_API_VERSION, FILE_STATE_ACTIVE, GEMINI_API_BASE_URL
from .exceptions import UploadFailedError
from .polling import wait_until_active
from .upload_cache import UploadCache

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

# Uploads of large media can take a while to transfer
_DEFAULT_HTTP_TIMEOUT = httpx.Timeout(300.0, connect=30.0)


def generate_boundary() -> str:
    """Return a random multipart boundary token."""
    return uuid.uuid4().hex


def build_multipart_body(
    boundary: str,
    data: BytesLike,
    mime_type: str,
    display_name: Optional[str] = None,
) -> bytes:
    """Build a multipart/related body: JSON metadata, then the raw bytes.

    Args:
        boundary: Boundary token, also sent in the Content-Type header.
        data: Raw payload.
        mime_type: MIME type declared for the payload.
        display_name: Optional human-readable file name.

    Returns:
        The encoded request body.
    """
    file_meta: dict[str, str] = {"mimeType": mime_type}
    if display_name:
        file_meta["displayName"] = display_name
    metadata = json.dumps({"file": file_meta}, ensure_ascii=False).encode("utf-8")

    delimiter = f"--{boundary}\r\n".encode()
    return b"".join(
        [
            delimiter,
            b"Content-Type: application/json; charset=utf-8\r\n\r\n",
            metadata,
            b"\r\n",
            delimiter,
            f"Content-Type: {mime_type}\r\n\r\n".encode(),
            bytes(data),
            f"\r\n--{boundary}--".encode(),
        ]
    )


class FileUploader:
    """Uploads payloads to the Files API and waits until they are usable.

    Attributes:
        api_version: API version segment used in endpoint URLs.
        base_url: Root URL of the Generative Language API.
        cache: Optional UploadCache consulted before uploading.
        poll_timeout: Optional limit in seconds for status polling.
    """

    def __init__(
        self,
        api_key: str,
        api_version: str = DEFAULT_API_VERSION,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
        base_url: str = GEMINI_API_BASE_URL,
        cache: Optional[UploadCache] = None,
        poll_timeout: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the uploader.

        Args:
            api_key: Gemini API key, sent as the ``key`` query parameter.
            api_version: API version, e.g. "v1beta".
            http_client: Optional httpx.Client to use. The uploader does not
                close a client it did not create.
            transport: Optional httpx transport for a client created here.
            base_url: Root URL of the API.
            cache: Optional upload cache.
            poll_timeout: Optional limit in seconds for status polling.
            sleep: Sleep function used between status checks.
        """
        self._api_key = api_key
        self.api_version = api_version
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.poll_timeout = poll_timeout
        self._sleep = sleep
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(
            transport=transport, timeout=_DEFAULT_HTTP_TIMEOUT
        )

    def close(self) -> None:
        """Close the underlying HTTP client if the uploader created it."""
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "FileUploader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def upload_url(self) -> str:
        return f"{self.base_url}/upload/{self.api_version}/files"

    def file_url(self, name: str) -> str:
        return f"{self.base_url}/{self.api_version}/{name}"

    def start_upload(
        self,
        data: BytesLike,
        mime_type: str,
        display_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """Send the multipart upload request.

        Returns:
            The ``file`` resource from the response (name, uri, state, ...).

        Raises:
            UploadFailedError: On transport errors, non-2xx responses or a
                response without a file name and URI.
        """
        boundary = generate_boundary()
        headers = {
            "Content-Type": f"multipart/related; boundary={boundary}",
            "X-Goog-Upload-Protocol": "multipart",
        }
        body = build_multipart_body(boundary, data, mime_type, display_name)

        logger.debug(f"Uploading {len(data)} bytes ({mime_type}) to the Files API")
        try:
            response = self._http.post(
                self.upload_url,
                params={"key": self._api_key},
                headers=headers,
                content=body,
            )
            response.raise_for_status()
            file_info = response.json()["file"]
        except httpx.HTTPStatusError as e:
            raise UploadFailedError(
                f"Files API upload failed with HTTP {e.response.status_code}: "
                f"{e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise UploadFailedError(f"Files API upload request failed: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            raise UploadFailedError(
                f"Unexpected Files API upload response: {e!r}"
            ) from e

        if (
            not isinstance(file_info, dict)
            or not file_info.get("name")
            or not file_info.get("uri")
        ):
            raise UploadFailedError(
                f"Files API upload response is missing name or uri: {file_info!r}"
            )
        return file_info

    def get_file_status(self, name: str) -> dict[str, Any]:
        """Fetch the Files API resource for an uploaded file.

        Error responses that carry a JSON ``error`` object are returned as-is
        so the poller can report the service's message.

        Raises:
            UploadFailedError: On transport errors or undecodable responses.
        """
        try:
            response = self._http.get(
                self.file_url(name), params={"key": self._api_key}
            )
        except httpx.HTTPError as e:
            raise UploadFailedError(f"Files API status request failed: {e}") from e

        try:
            status = response.json()
        except ValueError as e:
            raise UploadFailedError(
                f"Files API status response for {name} is not JSON "
                f"(HTTP {response.status_code})"
            ) from e

        if not isinstance(status, dict):
            raise UploadFailedError(f"Unexpected Files API status response: {status!r}")
        if response.is_error and "error" not in status:
            raise UploadFailedError(
                f"Files API status request failed with HTTP {response.status_code}"
            )
        return status

    def upload(
        self,
        data: BytesLike,
        mime_type: str,
        display_name: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """Upload a payload and wait until the Files API marks it ACTIVE.

        Args:
            data: Raw payload.
            mime_type: MIME type of the payload.
            display_name: Optional human-readable file name.
            cancel_event: Optional event that aborts status polling.

        Returns:
            The file URI to reference in a file_data part.

        Raises:
            UploadFailedError: If the upload or a status request fails.
            ProcessingFailedError: If the service reports a processing error.
            ProcessingTimeoutError: If poll_timeout elapses first.
            UploadCancelledError: If cancel_event is set while polling.
        """
        if self.cache is not None:
            entry = self.cache.get_entry(data)
            if entry and entry.get("mime_type") == mime_type:
                logger.debug(f"Using cached upload: {entry['uri']}")
                return entry["uri"]
            if entry:
                logger.debug(
                    f"Cached upload has MIME type {entry.get('mime_type')}, "
                    f"not {mime_type}; uploading again"
                )

        file_info = self.start_upload(data, mime_type, display_name)
        name = file_info["name"]

        if file_info.get("state") != FILE_STATE_ACTIVE:
            wait_until_active(
                self.get_file_status,
                name,
                timeout=self.poll_timeout,
                cancel_event=cancel_event,
                sleep=self._sleep,
            )

        uri = file_info["uri"]
        logger.info(f"Uploaded {name} ({mime_type}, {len(data)} bytes)")

        if self.cache is not None:
            self.cache.put(data, name=name, uri=uri, mime_type=mime_type)
        return uri
