"""Request Tracker - observes duplicate outbound requests within a time window."""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class RequestInfo:
    """What the tracker knows about one outbound request."""

    request_id: str
    is_duplicate: bool
    duplicate_count: int
    time_since_first: Optional[float] = None
    original_request_id: Optional[str] = None


@dataclass
class RequestStats:
    total_unique_requests: int
    total_requests: int
    duplicate_requests: int
    duplicate_percentage: float


@dataclass
class _RequestRecord:
    request_id: str
    timestamp: float


def hash_request_body(body: Any) -> str:
    """Stable hex digest of a JSON-serializable request body."""
    canonical = json.dumps(body, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


class RequestTracker:
    """
    Records request keys in a sliding window and reports duplicates.

    Tracking is observability only: duplicates are logged, never blocked.
    """

    def __init__(self, window: float = 300.0, clock: Optional[Callable[[], float]] = None):
        self.window = window
        self._clock = clock or time.monotonic
        self._requests: Dict[str, List[_RequestRecord]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def request_key(method: str, url: str, body_hash: Optional[str] = None) -> str:
        if body_hash:
            return f"{method}:{url}:{body_hash}"
        return f"{method}:{url}"

    def track_request(self, method: str, url: str, body_hash: Optional[str] = None) -> RequestInfo:
        """
        Record a request and report whether it repeats a recent one.

        Args:
            method: HTTP method, upper case.
            url: Full request URL.
            body_hash: Optional digest of the request body.

        Returns:
            RequestInfo describing this occurrence.
        """
        key = self.request_key(method, url, body_hash)
        request_id = str(uuid.uuid4())

        with self._lock:
            now = self._clock()
            self._purge_expired(now)

            records = self._requests.setdefault(key, [])
            records.append(_RequestRecord(request_id=request_id, timestamp=now))
            count = len(records)

            if count > 1:
                first = records[0]
                info = RequestInfo(
                    request_id=request_id,
                    is_duplicate=True,
                    duplicate_count=count,
                    time_since_first=now - first.timestamp,
                    original_request_id=first.request_id,
                )
            else:
                info = RequestInfo(request_id=request_id, is_duplicate=False, duplicate_count=1)

        if info.is_duplicate:
            logger.warning(
                f"Duplicate request detected: {method} {url} (seen {info.duplicate_count} times)",
                extra={
                    "event": "duplicate_request",
                    "request_id": request_id,
                    "original_request_id": info.original_request_id,
                    "duplicate_count": info.duplicate_count,
                },
            )
        else:
            logger.debug(f"Tracking request {method} {url}", extra={"request_id": request_id})

        return info

    def _purge_expired(self, now: float) -> None:
        cutoff = now - self.window
        for key in list(self._requests):
            kept = [r for r in self._requests[key] if r.timestamp > cutoff]
            if kept:
                self._requests[key] = kept
            else:
                del self._requests[key]

    def get_stats(self) -> RequestStats:
        with self._lock:
            self._purge_expired(self._clock())
            total_unique = len(self._requests)
            total = sum(len(records) for records in self._requests.values())

        duplicates = total - total_unique
        percentage = (duplicates / total * 100.0) if total else 0.0
        return RequestStats(
            total_unique_requests=total_unique,
            total_requests=total,
            duplicate_requests=duplicates,
            duplicate_percentage=percentage,
        )

    def clear(self) -> None:
        with self._lock:
            self._requests.clear()
