"""Conversion of caller input into Gemini content parts.

Text becomes a text part. Binary payloads are classified and either inlined
or uploaded through the Files API: video is always uploaded, and when the
inline payloads of one message add up to more than 20 MiB they are all
promoted to uploaded files.

Typical usage example:

    assembled = messages_to_parts(
        ["Describe this image", FileUpload(png_bytes, "photo.png")],
        upload=uploader.upload,
    )
    response = client.ask(assembled.parts)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, NamedTuple, Sequence, Union

from google.genai import types

from .constants import INLINE_SIZE_LIMIT
from .mime import get_file_type

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class FileUpload:
    """A binary payload together with the path it was read from.

    The path only serves as a hint for MIME detection when the content
    signature is not recognized.
    """

    buffer: BytesLike
    file_path: str


Message = Union[str, BytesLike, FileUpload]

# (data, mime_type) -> file URI
Uploader = Callable[[bytes, str], str]


class AssembledParts(NamedTuple):
    """Parts built from one list of messages.

    Attributes:
        parts: Parts in input order.
        inline_bytes: Total size of the payloads left inline.
    """

    parts: List[types.Part]
    inline_bytes: int


def is_file_upload(data: Any) -> bool:
    """Check whether a message is a FileUpload."""
    return isinstance(data, FileUpload)


def _is_bytes_like(data: Any) -> bool:
    return isinstance(data, (bytes, bytearray, memoryview))


def _upload_part(upload: Uploader, data: bytes, mime_type: str) -> types.Part:
    file_uri = upload(data, mime_type)
    return types.Part.from_uri(file_uri=file_uri, mime_type=mime_type)


def messages_to_parts(
    messages: Sequence[Message],
    upload: Uploader,
    inline_limit: int = INLINE_SIZE_LIMIT,
    strict: bool = False,
) -> AssembledParts:
    """Convert a list of messages into Gemini parts.

    Args:
        messages: Strings, raw bytes or FileUpload objects, in order.
        upload: Callable that uploads (data, mime_type) to the Files API and
            returns the file URI.
        inline_limit: Maximum total size of inline payloads in bytes.
        strict: Raise UnsupportedFormatError for unrecognized binary payloads
            instead of sending them as text/plain.

    Returns:
        AssembledParts with one part per message, in input order.

    Raises:
        TypeError: If a message is not a str, bytes-like or FileUpload.
        UnsupportedFormatError: In strict mode, for unsupported payloads.
    """
    parts: List[types.Part] = []
    inline_bytes = 0

    for message in messages:
        if isinstance(message, str):
            parts.append(types.Part.from_text(text=message))
            continue

        if is_file_upload(message):
            data, file_path = bytes(message.buffer), message.file_path
        elif _is_bytes_like(message):
            data, file_path = bytes(message), None
        else:
            raise TypeError(
                f"Unsupported message type {type(message).__name__}; expected "
                "str, bytes or FileUpload"
            )

        mime_type = get_file_type(data, file_path, strict=strict)
        if mime_type.startswith("video/"):
            parts.append(_upload_part(upload, data, mime_type))
        else:
            parts.append(types.Part.from_bytes(data=data, mime_type=mime_type))
            inline_bytes += len(data)

    if inline_bytes > inline_limit:
        logger.info(
            f"Inline payload of {inline_bytes} bytes exceeds {inline_limit} bytes, "
            "uploading inline parts through the Files API"
        )
        parts = [
            _upload_part(upload, part.inline_data.data, part.inline_data.mime_type)
            if part.inline_data is not None
            else part
            for part in parts
        ]
        inline_bytes = 0

    return AssembledParts(parts=parts, inline_bytes=inline_bytes)
