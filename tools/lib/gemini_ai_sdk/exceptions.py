"""Custom exceptions for the gemini_ai_sdk library.

Errors raised by ``google-genai`` itself (authentication, rate limiting,
blocked prompts) are not wrapped and reach the caller unchanged.
"""


class GeminiSDKError(Exception):
    """Base exception for all gemini_ai_sdk errors."""


class UnsupportedFormatError(GeminiSDKError):
    """Raised in strict mode when a payload's MIME type is not accepted by Gemini."""


class UploadFailedError(GeminiSDKError):
    """Raised when the Files API upload or status request fails."""


class ProcessingFailedError(GeminiSDKError):
    """Raised when the Files API reports that processing an upload failed."""

    def __init__(self, message: str, file_name: str = ""):
        super().__init__(message)
        self.file_name = file_name


class ProcessingTimeoutError(GeminiSDKError):
    """Raised when an upload does not become ACTIVE before the poll timeout."""


class UploadCancelledError(GeminiSDKError):
    """Raised when polling is aborted through a cancellation event."""
