"""Periodic whitelist synchronization.

This module provides the WhitelistSync service: a single background
thread that fetches the remote whitelist, compares it with the stored
one, and replaces the store and notifies subscribers when it changed.
"""

import logging
import threading
from enum import Enum
from types import TracebackType

from storegate.core.events import EventBus, WhitelistChanged
from storegate.core.fetcher import FetchError, RemoteFetcher
from storegate.core.store import StoreError, WhitelistStore

logger = logging.getLogger(__name__)

# Seconds between two sync cycles
DEFAULT_SYNC_INTERVAL = 15.0


class SyncOutcome(Enum):
    """Result of one sync cycle."""

    CHANGED = "changed"
    UNCHANGED = "unchanged"
    FAILED = "failed"
    SKIPPED = "skipped"


class WhitelistSync:
    """Keeps a WhitelistStore in line with the remote whitelist.

    At most one fetch is in flight at a time. A failed fetch leaves the
    store untouched and is retried on the next tick; there is no backoff.
    Only this service writes to the store, and a cycle holds the cycle lock
    from comparison to replace, so the pair is atomic with respect to other
    cycles. Readers of the store are never blocked by the fetch.

    Example:
        >>> with WhitelistSync(fetcher, store, bus) as sync:
        ...     ...  # syncs immediately, then every 15 seconds

    Attributes:
        interval: Seconds between two cycles.
        last_outcome: Outcome of the most recent cycle, None before the first.
    """

    def __init__(
        self,
        fetcher: RemoteFetcher,
        store: WhitelistStore,
        bus: EventBus,
        interval: float = DEFAULT_SYNC_INTERVAL,
    ) -> None:
        if interval <= 0:
            msg = f"Sync interval must be positive, got {interval}"
            raise ValueError(msg)
        self._fetcher = fetcher
        self._store = store
        self._bus = bus
        self.interval = interval
        self.last_outcome: SyncOutcome | None = None
        self._cycle_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def sync_once(self) -> SyncOutcome:
        """Run one fetch/compare/replace cycle.

        Returns:
            SKIPPED if another cycle is in flight or the service was stopped
            while fetching, FAILED on fetch errors, otherwise CHANGED or
            UNCHANGED.
        """
        return self._sync(discard_on_stop=False)

    def _sync(self, *, discard_on_stop: bool) -> SyncOutcome:
        if not self._cycle_lock.acquire(blocking=False):
            logger.debug("Sync already in flight, skipping tick")
            return SyncOutcome.SKIPPED

        try:
            outcome = self._run_cycle(discard_on_stop)
        finally:
            self._cycle_lock.release()

        self.last_outcome = outcome
        return outcome

    def _run_cycle(self, discard_on_stop: bool) -> SyncOutcome:
        try:
            fetched = frozenset(self._fetcher.fetch())
        except FetchError as e:
            logger.warning("Whitelist fetch failed (%s): %s", e.kind.value, e)
            return SyncOutcome.FAILED

        if discard_on_stop and self._stop_event.is_set():
            logger.debug("Sync stopped during fetch, discarding result")
            return SyncOutcome.SKIPPED

        current = frozenset(self._store.get())
        if fetched == current:
            logger.debug("Remote whitelist unchanged (%d entries)", len(current))
            return SyncOutcome.UNCHANGED

        try:
            self._store.replace(fetched)
        except StoreError as e:
            # The in-memory set was still replaced, so subscribers must hear about it
            logger.warning("Whitelist changed but could not be persisted: %s", e)

        event = WhitelistChanged(entries=fetched, previous=current)
        logger.info(
            "Whitelist changed: %d added, %d removed",
            len(event.added),
            len(event.removed),
        )
        self._bus.publish(event)
        return SyncOutcome.CHANGED

    # =========================================================================
    # Background loop
    # =========================================================================

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background loop.

        The first cycle runs immediately rather than after one interval.

        Raises:
            RuntimeError: If the loop is already running.
        """
        if self.is_running:
            msg = "Whitelist sync is already running"
            raise RuntimeError(msg)
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="storegate-sync", daemon=True)
        self._thread.start()

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self._sync(discard_on_stop=True)
            except Exception:
                logger.exception("Unexpected error during whitelist sync")
                self.last_outcome = SyncOutcome.FAILED
            if self._stop_event.wait(self.interval):
                break

    def stop(self, timeout: float | None = None) -> None:
        """Stop the background loop.

        An in-flight fetch is not interrupted; it finishes or times out and
        its result is discarded.

        Args:
            timeout: Maximum seconds to wait for the loop to exit.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def __enter__(self) -> "WhitelistSync":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
