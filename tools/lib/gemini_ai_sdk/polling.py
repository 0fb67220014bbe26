"""Files API status polling with capped exponential backoff.

Uploaded media is not usable until the Files API moves it from PROCESSING
to ACTIVE. The poller queries the status until it reaches a terminal state.
There is no attempt limit; callers bound the loop with a timeout or a
cancellation event when they need to.

Typical usage example:

    status = wait_until_active(uploader.get_file_status, "files/abc123",
                               timeout=300)
"""

import logging
import threading
import time
from typing import Any, Callable, Iterator, Optional

from .constants import (
    FILE_STATE_ACTIVE,
    FILE_STATE_FAILED,
    POLL_BACKOFF_FACTOR,
    POLL_INITIAL_DELAY,
    POLL_MAX_DELAY,
)
from .exceptions import (
    ProcessingFailedError,
    ProcessingTimeoutError,
    UploadCancelledError,
)

logger = logging.getLogger(__name__)

StatusFetcher = Callable[[str], dict[str, Any]]


def backoff_delays(
    initial: float = POLL_INITIAL_DELAY,
    factor: float = POLL_BACKOFF_FACTOR,
    maximum: float = POLL_MAX_DELAY,
) -> Iterator[float]:
    """Yield an endless sequence of wait times in seconds.

    The Nth value is ``min(initial * factor ** (N - 1), maximum)``.

    Example:
        >>> delays = backoff_delays()
        >>> [next(delays) for _ in range(3)]
        [0.25, 0.375, 0.5625]
    """
    delay = initial
    while True:
        yield min(delay, maximum)
        delay = min(delay * factor, maximum)


def _error_message(status: dict[str, Any]) -> Optional[str]:
    """Extract the service-reported processing error, if any."""
    error = status.get("error")
    if error:
        if isinstance(error, dict):
            return error.get("message") or str(error)
        return str(error)
    if status.get("state") == FILE_STATE_FAILED:
        return "file processing failed"
    return None


def wait_until_active(
    fetch_status: StatusFetcher,
    name: str,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> dict[str, Any]:
    """Block until the Files API reports the file as ACTIVE.

    Args:
        fetch_status: Callable returning the decoded status body for a file
            name, e.g. FileUploader.get_file_status.
        name: Files API resource name ("files/abc123").
        timeout: Optional limit in seconds on the total wait.
        cancel_event: Optional event; once set, polling stops. Waits use
            ``cancel_event.wait`` so setting it interrupts a pending sleep.
        sleep: Sleep function used when no cancel_event is given.

    Returns:
        The status body that reported the ACTIVE state.

    Raises:
        ProcessingFailedError: The service reported an error or FAILED state.
        ProcessingTimeoutError: The timeout would be exceeded by the next wait.
        UploadCancelledError: cancel_event was set.
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    delays = backoff_delays()
    attempt = 0

    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise UploadCancelledError(f"Polling cancelled for {name}")

        attempt += 1
        status = fetch_status(name)

        message = _error_message(status)
        if message is not None:
            raise ProcessingFailedError(
                f"Google's File API responded with an error for {name}: {message}",
                file_name=name,
            )

        state = status.get("state")
        if state == FILE_STATE_ACTIVE:
            logger.debug(f"{name} is ACTIVE after {attempt} status check(s)")
            return status

        delay = next(delays)
        if deadline is not None and time.monotonic() + delay > deadline:
            raise ProcessingTimeoutError(
                f"{name} still {state or 'PROCESSING'} after {timeout}s"
            )

        logger.debug(f"{name} is {state}, checking again in {delay:.3f}s")
        if cancel_event is not None:
            if cancel_event.wait(delay):
                raise UploadCancelledError(f"Polling cancelled for {name}")
        else:
            sleep(delay)
