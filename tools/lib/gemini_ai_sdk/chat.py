"""Chat sessions with an explicitly managed history."""

import threading
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Iterator, Tuple

from google.genai import types

from .options import AskOptions, OptionsLayer, merge_options

if TYPE_CHECKING:
    from .client import GeminiClient, Prompt


class Chat:
    """A conversation whose history the caller appends to.

    The chat never records turns on its own: after each exchange the caller
    appends the user message and the model reply with append_message(). Turns
    are kept in append order and never edited or removed. Appends and history
    snapshots are serialized with a lock.
    """

    def __init__(self, client: "GeminiClient", options: OptionsLayer = None):
        """Initialize the chat.

        Args:
            client: The GeminiClient that sends requests.
            options: Session options; ``history`` seeds the session history.
        """
        options = merge_options(options)
        self._client = client
        self._lock = threading.Lock()
        self._history = list(options.history or [])
        self.options: AskOptions = replace(options, history=None)

    @property
    def history(self) -> Tuple[types.Content, ...]:
        """Snapshot of the session history."""
        with self._lock:
            return tuple(self._history)

    def append_message(self, message: types.Content) -> None:
        """Append a turn to the session history."""
        with self._lock:
            self._history.append(message)

    def _request_options(self, options: OptionsLayer, overrides: dict) -> AskOptions:
        return merge_options(
            self.options, {"history": list(self.history)}, options, overrides
        )

    def ask(
        self, message: "Prompt", options: OptionsLayer = None, **overrides: Any
    ) -> types.GenerateContentResponse:
        """Send a message with the session history and options.

        Call options take precedence over session options, which take
        precedence over the client defaults.
        """
        return self._client.ask(message, self._request_options(options, overrides))

    def ask_stream(
        self, message: "Prompt", options: OptionsLayer = None, **overrides: Any
    ) -> Iterator[types.GenerateContentResponse]:
        """Streaming variant of ask()."""
        return self._client.ask_stream(
            message, self._request_options(options, overrides)
        )
