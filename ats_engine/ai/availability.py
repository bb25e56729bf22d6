from __future__ import annotations

import enum
import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Probe = Callable[[], bool]


class AvailabilityStatus(str, enum.Enum):
    UNKNOWN = "unknown"
    CHECK_IN_PROGRESS = "check_in_progress"
    CACHED_AVAILABLE = "cached_available"
    CACHED_UNAVAILABLE = "cached_unavailable"


class AvailabilityCache:
    """Caches the outcome of an availability probe so callers never hammer the upstream.

    Every read or write of the cached value, its expiry and the in-progress flag
    happens under ``_lock``. The probe itself runs outside the lock; callers that
    arrive while it runs get the last known value (or ``False``) immediately.
    """

    def __init__(
        self,
        *,
        success_ttl_s: float = 300.0,
        failure_ttl_s: float = 60.0,
        clock: Clock = time.monotonic,
    ) -> None:
        self._success_ttl_s = success_ttl_s
        self._failure_ttl_s = failure_ttl_s
        self._clock = clock
        self._lock = threading.Lock()
        self._cached_value: bool | None = None
        self._expires_at = 0.0
        self._in_progress = False

    @property
    def status(self) -> AvailabilityStatus:
        with self._lock:
            if self._in_progress:
                return AvailabilityStatus.CHECK_IN_PROGRESS
            if self._cached_value is None or self._clock() >= self._expires_at:
                return AvailabilityStatus.UNKNOWN
            if self._cached_value:
                return AvailabilityStatus.CACHED_AVAILABLE
            return AvailabilityStatus.CACHED_UNAVAILABLE

    def check(self, probe: Probe) -> bool:
        with self._lock:
            if self._cached_value is not None and self._clock() < self._expires_at:
                return self._cached_value
            if self._in_progress:
                return bool(self._cached_value)
            self._in_progress = True

        try:
            available = bool(probe())
        except Exception as exc:  # noqa: BLE001 - a crashing probe means "unavailable"
            logger.warning("availability_probe_failed: %s", exc)
            available = False

        ttl = self._success_ttl_s if available else self._failure_ttl_s
        with self._lock:
            self._cached_value = available
            self._expires_at = self._clock() + ttl
            self._in_progress = False
        logger.info("availability_probe_done available=%s ttl_s=%s", available, ttl)
        return available

    def invalidate(self) -> None:
        with self._lock:
            self._cached_value = None
            self._expires_at = 0.0
