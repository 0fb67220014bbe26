# Standard library imports
import functools
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

# Third-party imports
from google import genai
from google.genai import types

# Local imports
from .chat import Chat
from .mime import get_file_type
from .options import (
    ClientOptions,
    OptionsLayer,
    build_generate_config,
    merge_options,
    resolve_model,
)
from .parts import Message, messages_to_parts
from .upload_cache import UploadCache
from .uploader import FileUploader

logger = logging.getLogger(__name__)

Prompt = Union[str, Sequence[types.PartUnion]]


def _resolve_api_key(api_key: Optional[str]) -> str:
    if api_key is None:
        api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
    if not api_key:
        raise ValueError(
            "No API key given and neither GEMINI_API_KEY nor "
            "GOOGLE_API_KEY is set."
        )
    return api_key


def _to_parts(message: Prompt) -> List[types.PartUnion]:
    if isinstance(message, str):
        return [types.Part.from_text(text=message)]
    return list(message)


class GeminiClient:
    """A client for asking Gemini with text and media.

    Attributes:
        options: ClientOptions the client was created with.
        defaults: AskOptions applied to every request unless overridden.
        client: The underlying google.genai.Client.
        uploader: FileUploader used for media that is not inlined.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        options: Optional[ClientOptions] = None,
        defaults: OptionsLayer = None,
    ):
        """Initialize the client.

        Args:
            api_key: Gemini API key. Defaults to GEMINI_API_KEY, then
                GOOGLE_API_KEY from the environment.
            options: Client-level options (API version, transport, upload
                cache, poll timeout).
            defaults: AskOptions or mapping used as the lowest-precedence
                layer for every request.

        Raises:
            ValueError: If no API key is available.
        """
        api_key = _resolve_api_key(api_key)
        self.options = options or ClientOptions()
        self.defaults = merge_options(defaults)

        http_options: Dict[str, Any] = {"api_version": self.options.api_version}
        if self.options.transport is not None:
            http_options["client_args"] = {"transport": self.options.transport}
        self.client = genai.Client(
            api_key=api_key, http_options=types.HttpOptions(**http_options)
        )

        cache = (
            UploadCache(Path(self.options.upload_cache_file))
            if self.options.upload_cache_file
            else None
        )
        self.uploader = FileUploader(
            api_key,
            api_version=self.options.api_version,
            transport=self.options.transport,
            cache=cache,
            poll_timeout=self.options.poll_timeout,
        )

    def close(self) -> None:
        """Release the HTTP resources held by the uploader."""
        self.uploader.close()

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def upload_file(
        self,
        data: bytes,
        mime_type: Optional[str] = None,
        file_path: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """Upload a payload to the Files API and wait until it is ACTIVE.

        Args:
            data: Raw payload.
            mime_type: MIME type; detected from the content (and file_path)
                when omitted.
            file_path: Optional path used for MIME detection and as the
                display name.
            cancel_event: Optional event that aborts waiting for processing.

        Returns:
            The file URI.
        """
        if mime_type is None:
            mime_type = get_file_type(data, file_path)
        display_name = Path(file_path).name if file_path else None
        return self.uploader.upload(
            data, mime_type, display_name=display_name, cancel_event=cancel_event
        )

    def message_to_parts(
        self,
        messages: Sequence[Message],
        strict: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[types.Part]:
        """Convert strings, bytes and FileUploads into Gemini parts.

        Video and oversized payloads are uploaded through the Files API.

        Args:
            messages: Messages in order.
            strict: Raise UnsupportedFormatError for unrecognized payloads.
            cancel_event: Optional event that aborts waiting for uploads.

        Returns:
            One part per message, in input order.
        """
        upload = functools.partial(self.uploader.upload, cancel_event=cancel_event)
        assembled = messages_to_parts(messages, upload, strict=strict)
        logger.debug(
            f"Assembled {len(assembled.parts)} part(s), "
            f"{assembled.inline_bytes} inline bytes"
        )
        return assembled.parts

    def _start_chat(self, options: OptionsLayer, overrides: dict) -> Any:
        merged = merge_options(self.defaults, options, overrides)
        return self.client.chats.create(
            model=resolve_model(merged),
            config=build_generate_config(merged),
            history=list(merged.history or []),
        )

    def ask(
        self,
        message: Prompt,
        options: OptionsLayer = None,
        **overrides: Any,
    ) -> types.GenerateContentResponse:
        """Send a message to Gemini and return the response.

        Args:
            message: Text, or a list of parts (e.g. from message_to_parts).
            options: AskOptions or mapping for this request.
            **overrides: Individual AskOptions fields; they take precedence
                over ``options``.

        Returns:
            The GenerateContentResponse from google-genai.
        """
        chat = self._start_chat(options, overrides)
        return chat.send_message(_to_parts(message))

    def ask_stream(
        self,
        message: Prompt,
        options: OptionsLayer = None,
        **overrides: Any,
    ) -> Iterator[types.GenerateContentResponse]:
        """Send a message to Gemini and stream the response chunks.

        Takes the same arguments as ask().
        """
        chat = self._start_chat(options, overrides)
        return chat.send_message_stream(_to_parts(message))

    def create_chat(self, options: OptionsLayer = None, **overrides: Any) -> Chat:
        """Create a chat session.

        Args:
            options: Session options; ``history`` seeds the session history.
            **overrides: Individual AskOptions fields.

        Returns:
            A new Chat bound to this client.
        """
        return Chat(self, merge_options(options, overrides))
