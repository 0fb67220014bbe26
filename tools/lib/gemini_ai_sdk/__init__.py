"""A simpler Gemini SDK.

Wraps google-genai with helpers that turn strings, raw bytes and files into
request parts, upload video and oversized media through the Files API, wait
until uploads are processed, and keep chat history under the caller's
control.

Typical usage example:

    from gemini_ai_sdk import FileUpload, GeminiClient

    with GeminiClient() as gemini:
        parts = gemini.message_to_parts(
            ["What is in this video?", FileUpload(video_bytes, "clip.mp4")]
        )
        print(gemini.ask(parts, model="gemini-2.5-flash").text)
"""

from gemini_ai_sdk.chat import Chat
from gemini_ai_sdk.client import GeminiClient
from gemini_ai_sdk.constants import (
    DEFAULT_TOOLS,
    INLINE_SIZE_LIMIT,
    SAFETY_DISABLED_SETTINGS,
    SUPPORTED_FILE_FORMATS,
)
from gemini_ai_sdk.exceptions import (
    GeminiSDKError,
    ProcessingFailedError,
    ProcessingTimeoutError,
    UnsupportedFormatError,
    UploadCancelledError,
    UploadFailedError,
)
from gemini_ai_sdk.mime import get_file_type
from gemini_ai_sdk.options import AskOptions, ClientOptions, merge_options
from gemini_ai_sdk.parts import (
    AssembledParts,
    FileUpload,
    is_file_upload,
    messages_to_parts,
)
from gemini_ai_sdk.polling import backoff_delays, wait_until_active
from gemini_ai_sdk.upload_cache import UploadCache
from gemini_ai_sdk.uploader import FileUploader

__all__ = [
    # Client
    "GeminiClient",
    "Chat",
    "ClientOptions",
    "AskOptions",
    "merge_options",
    # Parts and media
    "FileUpload",
    "is_file_upload",
    "AssembledParts",
    "messages_to_parts",
    "get_file_type",
    # Files API
    "FileUploader",
    "UploadCache",
    "wait_until_active",
    "backoff_delays",
    # Presets
    "SAFETY_DISABLED_SETTINGS",
    "DEFAULT_TOOLS",
    "SUPPORTED_FILE_FORMATS",
    "INLINE_SIZE_LIMIT",
    # Exceptions
    "GeminiSDKError",
    "UnsupportedFormatError",
    "UploadFailedError",
    "ProcessingFailedError",
    "ProcessingTimeoutError",
    "UploadCancelledError",
]

__version__ = "1.0.2"
