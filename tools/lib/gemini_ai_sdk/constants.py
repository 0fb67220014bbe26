"""Shared constants: accepted formats, size limits, backoff and presets."""

from google.genai.types import (
    GoogleSearch,
    HarmBlockThreshold,
    HarmCategory,
    SafetySetting,
    Tool,
    ToolCodeExecution,
)

DEFAULT_API_VERSION: str = "v1beta"
DEFAULT_MODEL: str = "gemini-2.5-flash"
GEMINI_API_BASE_URL: str = "https://generativelanguage.googleapis.com"

# Formats Gemini accepts as inline or uploaded media.
# https://ai.google.dev/gemini-api/docs/prompting_with_media#supported_file_formats
SUPPORTED_FILE_FORMATS: frozenset = frozenset(
    {
        "image/png",
        "image/jpeg",
        "image/webp",
        "image/heic",
        "image/heif",
        "audio/wav",
        "audio/mp3",
        "audio/mpeg",
        "audio/aiff",
        "audio/aac",
        "audio/ogg",
        "audio/flac",
        "video/mp4",
        "video/mpeg",
        "video/mov",
        "video/avi",
        "video/x-flv",
        "video/mpg",
        "video/webm",
        "video/wmv",
        "video/3gpp",
        "text/plain",
        "text/html",
        "text/css",
        "text/javascript",
        "application/x-javascript",
        "text/x-typescript",
        "application/x-typescript",
        "text/csv",
        "text/markdown",
        "text/x-python",
        "application/x-python-code",
        "application/json",
        "text/xml",
        "application/rtf",
        "text/rtf",
        "application/pdf",
    }
)

# Sniffed or guessed types that Gemini knows under another name.
FORMAT_MAP: dict[str, str] = {
    "audio/mpeg": "audio/mp3",
    "video/quicktime": "video/mov",
    "audio/x-wav": "audio/wav",
    "audio/x-flac": "audio/flac",
    "audio/x-aiff": "audio/aiff",
    "video/x-msvideo": "video/avi",
    "video/x-ms-wmv": "video/wmv",
    "application/javascript": "text/javascript",
}

DEFAULT_MIME_TYPE: str = "text/plain"

# Requests carrying more inline bytes than this are rejected by the API.
INLINE_SIZE_LIMIT: int = 20 * 1024 * 1024

# Files API status polling (seconds)
POLL_INITIAL_DELAY: float = 0.25
POLL_BACKOFF_FACTOR: float = 1.5
POLL_MAX_DELAY: float = 5.0

FILE_STATE_ACTIVE: str = "ACTIVE"
FILE_STATE_FAILED: str = "FAILED"

SAFETY_DISABLED_SETTINGS: list[SafetySetting] = [
    SafetySetting(
        category=HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        threshold=HarmBlockThreshold.BLOCK_NONE,
    ),
    SafetySetting(
        category=HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        threshold=HarmBlockThreshold.BLOCK_NONE,
    ),
    SafetySetting(
        category=HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
        threshold=HarmBlockThreshold.BLOCK_NONE,
    ),
    SafetySetting(
        category=HarmCategory.HARM_CATEGORY_HARASSMENT,
        threshold=HarmBlockThreshold.BLOCK_NONE,
    ),
]

DEFAULT_TOOLS: dict[str, Tool] = {
    "web_search": Tool(google_search=GoogleSearch()),
    "code_execution": Tool(code_execution=ToolCodeExecution()),
}
