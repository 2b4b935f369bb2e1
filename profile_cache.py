"""
profile_cache.py
----------------
Owns the most recent external profile statistics.

Four independent slots (github, leetcode, medium, linkedin) plus the time of
the last refresh.  Each slot holds either a complete record or None, never a
half-filled dict.  A refresh replaces the whole state in one assignment.

Refresh
-------
All fetchers run concurrently in a thread pool and the refresh waits at
most ``fetch_timeout`` seconds for them to settle.  A fetcher that raises,
times out, or returns an incomplete record leaves its slot empty.  By
default a failed slot overwrites earlier data with None; pass
``preserve_on_failure=True`` to keep the previous record instead.

ensure_fresh() refreshes only when the data is older than ``ttl_seconds``.
A lock plus a second staleness check after acquiring it means a burst of
requests on stale data triggers exactly one refresh.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

logger = logging.getLogger(__name__)

SLOTS = ("github", "leetcode", "medium", "linkedin")

DEFAULT_TTL_SECONDS   = 3600
DEFAULT_FETCH_TIMEOUT = 10

# Fields a record must carry to be accepted into its slot
REQUIRED_FIELDS = {
    "github":   ("username", "repos", "stars", "followers", "languages", "top_repos"),
    "leetcode": ("username", "total", "easy", "medium", "hard"),
    "medium":   ("posts",),
    "linkedin": ("profile_url",),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_complete(slot: str, record) -> bool:
    if not isinstance(record, dict) or not record:
        return False
    return all(field in record for field in REQUIRED_FIELDS.get(slot, ()))


class ProfileCache:
    """
    Injectable holder of external profile data.

    Parameters
    ----------
    fetchers            : dict[str, callable] – slot name -> zero-arg fetch function
    ttl_seconds         : int   – staleness window
    fetch_timeout       : float – overall wait for one refresh
    preserve_on_failure : bool  – keep the previous record when a fetch fails
    clock               : callable returning an aware datetime (tests)
    """

    def __init__(
        self,
        fetchers: Optional[dict] = None,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT,
        preserve_on_failure: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ):
        unknown = set(fetchers or {}) - set(SLOTS)
        if unknown:
            raise ValueError(f"Unknown cache slots: {sorted(unknown)}")

        self.fetchers            = dict(fetchers or {})
        self.ttl                 = timedelta(seconds=ttl_seconds)
        self.fetch_timeout       = fetch_timeout
        self.preserve_on_failure = preserve_on_failure
        self._clock              = clock
        self._lock               = threading.Lock()
        self._state: dict        = {slot: None for slot in SLOTS}
        self._state["last_fetch"] = None
        self.refresh_count       = 0

    # ── Read side ────────────────────────────────────────────────────────────

    def snapshot(self) -> dict:
        """Shallow copy of the current state; safe to hand to a request."""
        return dict(self._state)

    @property
    def last_fetch(self) -> Optional[datetime]:
        return self._state["last_fetch"]

    def is_stale(self) -> bool:
        last = self._state["last_fetch"]
        return last is None or self._clock() - last > self.ttl

    def status(self) -> dict:
        """{slot: bool} presence map for health checks."""
        return {slot: self._state[slot] is not None for slot in SLOTS}

    # ── Write side ───────────────────────────────────────────────────────────

    def ensure_fresh(self) -> dict:
        """Refresh if stale (at most one refresh per window), then return a snapshot."""
        if self.is_stale():
            with self._lock:
                if self.is_stale():
                    self._refresh_locked()
        return self.snapshot()

    def refresh(self) -> dict:
        """Unconditionally refresh all slots and return the new snapshot."""
        with self._lock:
            self._refresh_locked()
        return self.snapshot()

    def _refresh_locked(self) -> None:
        logger.info("Refreshing profile data (%d sources)", len(self.fetchers))
        results: dict = {slot: None for slot in SLOTS}

        if self.fetchers:
            pool = ThreadPoolExecutor(max_workers=len(self.fetchers), thread_name_prefix="profile-fetch")
            futures = {pool.submit(fn): slot for slot, fn in self.fetchers.items()}
            done, not_done = wait(futures, timeout=self.fetch_timeout)
            # hung fetchers are abandoned, not joined
            pool.shutdown(wait=False, cancel_futures=True)

            for future in not_done:
                logger.warning("Fetch for '%s' timed out after %ss", futures[future], self.fetch_timeout)

            for future in done:
                slot = futures[future]
                try:
                    record = future.result()
                except Exception as exc:
                    logger.warning("Fetch for '%s' failed: %s", slot, exc)
                    continue
                if record is None:
                    continue
                if not _is_complete(slot, record):
                    logger.warning("Discarding incomplete '%s' record", slot)
                    continue
                results[slot] = record

        if self.preserve_on_failure:
            for slot in SLOTS:
                if results[slot] is None and self._state[slot] is not None:
                    results[slot] = self._state[slot]

        results["last_fetch"] = self._clock()
        self._state = results
        self.refresh_count += 1

        logger.info(
            "Profile data: %s",
            ", ".join(f"{slot}={'ok' if results[slot] else 'none'}" for slot in SLOTS),
        )
