"""MIME type detection for binary payloads sent to Gemini.

Content signatures are checked first; the file extension is only consulted
when sniffing yields nothing Gemini accepts.

Typical usage example:

    mime_type = get_file_type(Path("clip.mov").read_bytes(), "clip.mov")
    # "video/mov"
"""

import logging
import mimetypes
from typing import Optional, Union

import filetype

from .constants import DEFAULT_MIME_TYPE, FORMAT_MAP, SUPPORTED_FILE_FORMATS
from .exceptions import UnsupportedFormatError

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

# filetype never looks past this many header bytes
_SNIFF_BYTES: int = 8192

_FORMATS_URL: str = (
    "https://ai.google.dev/gemini-api/docs/prompting_with_media"
    "#supported_file_formats"
)


def normalize_mime_type(mime_type: Optional[str]) -> Optional[str]:
    """Map a detected MIME type onto the name Gemini expects.

    Args:
        mime_type: Detected MIME type, or None.

    Returns:
        The canonical equivalent from FORMAT_MAP, the input unchanged if it
        has no mapping, or None if the input was None.

    Example:
        >>> normalize_mime_type("video/quicktime")
        'video/mov'
    """
    if mime_type is None:
        return None
    return FORMAT_MAP.get(mime_type, mime_type)


def is_supported(mime_type: Optional[str]) -> bool:
    """Check whether Gemini accepts a (normalized) MIME type."""
    return mime_type in SUPPORTED_FILE_FORMATS


def sniff_mime_type(buffer: BytesLike) -> Optional[str]:
    """Detect a MIME type from the buffer's content signature.

    Args:
        buffer: Raw payload bytes.

    Returns:
        The MIME type reported by the signature match, or None if the
        content is not recognized.
    """
    kind = filetype.guess(bytes(buffer[:_SNIFF_BYTES]))
    if kind is None:
        return None
    return kind.mime


def guess_mime_type_from_path(file_path: str) -> Optional[str]:
    """Guess a MIME type from a file name's extension."""
    mime_type, _ = mimetypes.guess_type(str(file_path))
    return mime_type


def get_file_type(
    buffer: BytesLike,
    file_path: Optional[str] = None,
    strict: bool = False,
) -> str:
    """Determine the Gemini MIME type of a binary payload.

    Checks the content signature first. If that gives no supported type and a
    path is available, falls back to the file extension. Both results are
    normalized through FORMAT_MAP before the supported-format check.

    Args:
        buffer: Raw payload bytes.
        file_path: Optional original file path used for the extension fallback.
        strict: If True, raise instead of defaulting to text/plain.

    Returns:
        A MIME type from SUPPORTED_FILE_FORMATS.

    Raises:
        UnsupportedFormatError: If strict is True and no supported type was
            found.

    Example:
        >>> get_file_type(b"\\x89PNG\\r\\n\\x1a\\n" + bytes(16))
        'image/png'
        >>> get_file_type(b"a,b\\n1,2\\n", "table.csv")
        'text/csv'
    """
    sniffed = sniff_mime_type(buffer)
    mime_type = normalize_mime_type(sniffed)
    if is_supported(mime_type):
        return mime_type

    if file_path:
        mime_type = normalize_mime_type(guess_mime_type_from_path(file_path))
        if is_supported(mime_type):
            return mime_type

    source = file_path or f"<{len(buffer)} byte buffer>"
    detected = mime_type or sniffed or "unknown"
    if strict:
        raise UnsupportedFormatError(
            f"Unsupported file format {detected!r} for {source}. "
            f"Please provide a file format accepted by Gemini: {_FORMATS_URL}"
        )

    logger.debug(
        f"No supported MIME type for {source} (detected {detected!r}), "
        f"defaulting to {DEFAULT_MIME_TYPE}"
    )
    return DEFAULT_MIME_TYPE
