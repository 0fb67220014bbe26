"""Content-addressed cache of Files API uploads.

Re-sending the same video or oversized payload would otherwise upload and
process it again. The cache maps the SHA256 of the uploaded bytes to the
resulting file URI. Gemini deletes uploaded files after 48 hours, so entries
are only trusted while they are younger than 46 hours.

Typical usage example:

    cache = UploadCache(Path(".gemini_upload_cache.json"))
    uri = cache.get(data)
    if uri is None:
        ...  # upload, then
        cache.put(data, name="files/abc123", uri=uri, mime_type="video/mp4")
"""

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

# Entries younger than this are reused without asking the API
_CACHE_FRESH_THRESHOLD_HOURS: int = 46


def get_content_hash(data: BytesLike) -> str:
    """Calculate the SHA256 hex digest of a payload.

    Example:
        >>> len(get_content_hash(b"abc"))
        64
    """
    return hashlib.sha256(data).hexdigest()


def _get_age_hours(uploaded_at: str) -> Optional[float]:
    """Return hours elapsed since an ISO timestamp, or None if unparseable."""
    try:
        upload_time = datetime.fromisoformat(uploaded_at)
    except (TypeError, ValueError):
        return None
    if upload_time.tzinfo is None:
        upload_time = upload_time.replace(tzinfo=timezone.utc)
    age = datetime.now(timezone.utc) - upload_time
    return age.total_seconds() / 3600.0


def _is_fresh(uploaded_at: str) -> bool:
    age_hours = _get_age_hours(uploaded_at)
    return age_hours is not None and 0 <= age_hours < _CACHE_FRESH_THRESHOLD_HOURS


class UploadCache:
    """JSON-file cache of uploaded payloads keyed by content hash.

    Cache I/O problems are logged and treated as a miss; they never fail the
    request that consulted the cache.

    Attributes:
        cache_file: Path to the JSON cache file.

    Example cache structure:
        {
            "9f86d08...": {
                "name": "files/xyz789",
                "uri": "https://generativelanguage.googleapis.com/v1beta/files/xyz789",
                "mime_type": "video/mp4",
                "size_bytes": 1048576,
                "uploaded_at": "2026-10-18T08:30:00+00:00"
            }
        }
    """

    def __init__(self, cache_file: Union[str, Path]) -> None:
        self.cache_file: Path = Path(cache_file)

    def _load_cache(self) -> dict[str, dict[str, Any]]:
        """Load the cache from disk, returning {} if missing or corrupted."""
        if not self.cache_file.exists():
            return {}

        try:
            with open(self.cache_file, "r", encoding="utf-8") as f:
                cache_data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(
                f"Could not load upload cache from {self.cache_file}: {e}. "
                "Starting with empty cache."
            )
            return {}

        if not isinstance(cache_data, dict):
            logger.warning(
                f"Upload cache {self.cache_file} has invalid format, starting fresh"
            )
            return {}
        return cache_data

    def _save_cache(self, cache: dict[str, dict[str, Any]]) -> None:
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_file, "w", encoding="utf-8") as f:
                json.dump(cache, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.warning(f"Could not save upload cache to {self.cache_file}: {e}")

    def get_entry(self, data: BytesLike) -> Optional[dict[str, Any]]:
        """Return the cached metadata for a payload if it is still fresh.

        Args:
            data: The payload bytes.

        Returns:
            The cache entry dict, or None on a miss, an incomplete entry or an
            entry older than 46 hours.
        """
        content_hash = get_content_hash(data)
        entry = self._load_cache().get(content_hash)
        if not entry:
            return None

        if not isinstance(entry, dict):
            logger.warning(
                f"Upload cache entry {content_hash[:12]} has invalid format, "
                "will re-upload"
            )
            return None

        if not entry.get("uri") or not entry.get("uploaded_at"):
            logger.warning(
                f"Upload cache entry {content_hash[:12]} is missing required "
                "fields, will re-upload"
            )
            return None

        if not _is_fresh(entry["uploaded_at"]):
            logger.debug(
                f"Upload cache entry {content_hash[:12]} is stale "
                f"(uploaded at {entry['uploaded_at']})"
            )
            return None

        return entry

    def get(self, data: BytesLike) -> Optional[str]:
        """Return the cached file URI for a payload, or None."""
        entry = self.get_entry(data)
        return entry["uri"] if entry else None

    def put(self, data: BytesLike, name: str, uri: str, mime_type: str) -> None:
        """Record a completed upload.

        Args:
            data: The payload bytes that were uploaded.
            name: Files API resource name.
            uri: File URI usable in file_data parts.
            mime_type: MIME type the payload was uploaded with.
        """
        cache = self._load_cache()
        cache[get_content_hash(data)] = {
            "name": name,
            "uri": uri,
            "mime_type": mime_type,
            "size_bytes": len(data),
            "uploaded_at": datetime.now(timezone.utc).isoformat(),
        }
        self._save_cache(cache)

    def cleanup_expired(self) -> int:
        """Remove entries that are no longer fresh.

        Returns:
            Number of entries removed.
        """
        cache = self._load_cache()
        fresh_cache = {
            content_hash: entry
            for content_hash, entry in cache.items()
            if isinstance(entry, dict) and _is_fresh(entry.get("uploaded_at", ""))
        }

        removed_count = len(cache) - len(fresh_cache)
        if removed_count > 0:
            self._save_cache(fresh_cache)
            logger.info(f"Cleaned up {removed_count} expired upload cache entries")

        return removed_count

    def clear(self) -> bool:
        """Delete the cache file.

        Returns:
            True if the cache was deleted or did not exist, False on failure.
        """
        if not self.cache_file.exists():
            return True

        try:
            self.cache_file.unlink()
        except OSError as e:
            logger.error(f"Failed to clear upload cache {self.cache_file}: {e}")
            return False

        logger.info(f"Cleared upload cache: {self.cache_file}")
        return True
