"""Per-client minimum request spacing.

Protects the free geocoding tier from bursts: a client must wait
``min_interval_seconds`` between two allowed requests. Client identity
is best-effort (forwarded-for header or socket address) and is not
authenticated.

The last-seen map only ever grows. Under sustained traffic from many
distinct addresses it is unbounded for the lifetime of the process.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from ...domain.errors import RateLimitExceededError

UNKNOWN_CLIENT = "unknown"


def client_id_from_headers(
    forwarded_for: Optional[str], remote_addr: Optional[str]
) -> str:
    """Derive a client identity for rate limiting.

    Args:
        forwarded_for: Value of the X-Forwarded-For header, if any.
        remote_addr: Socket peer address, if known.

    Returns:
        The first forwarded address, else the peer address, else
        ``"unknown"``.
    """
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return remote_addr or UNKNOWN_CLIENT


@dataclass
class ClientRateLimiter:
    """Rejects requests that follow the previous one too closely.

    Attributes:
        min_interval_seconds: Minimum spacing between allowed requests
        message: Error message of rejected requests
        clock: Returns the current epoch time in seconds
    """

    min_interval_seconds: float = 1.1
    message: str = "Too many requests. Please wait a moment."
    clock: Callable[[], float] = field(default=time.time, repr=False)

    _last_seen: Dict[str, float] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def check(self, client_id: str) -> None:
        """Allow and record a request, or reject it.

        A rejected request does not reset the client's window.

        Args:
            client_id: Identity returned by ``client_id_from_headers``.

        Raises:
            RateLimitExceededError: The previous allowed request from this
                client is more recent than the minimum interval.
        """
        with self._lock:
            now = self.clock()
            last = self._last_seen.get(client_id)
            if last is not None and now - last < self.min_interval_seconds:
                retry_after = self.min_interval_seconds - (now - last)
                self._logger.info(
                    "Rate limit exceeded",
                    extra={"client_id": client_id, "retry_after": retry_after},
                )
                raise RateLimitExceededError(
                    message=self.message,
                    client_id=client_id,
                    retry_after_seconds=retry_after,
                )
            self._last_seen[client_id] = now

    def tracked_clients(self) -> int:
        """Return the number of client identities seen so far."""
        with self._lock:
            return len(self._last_seen)
