"""
Point-in-time snapshots of every declared flag, and the listeners that are
told about each new one.
"""

import threading
from collections import deque
from collections.abc import Callable, Mapping
from types import MappingProxyType

from loguru import logger as log

# Reasons attached to a rebuild
FETCHED = "fetched"
INITIALIZED = "initialized"
ERROR = "error"

Snapshot = Mapping[str, bool]
Listener = Callable[[str, Snapshot], None]

EMPTY_SNAPSHOT: Snapshot = MappingProxyType({})


class SubscriptionRegistry:
    def __init__(self):
        self._listeners: set[Listener] = set()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.add(callback)

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.discard(callback)

        return unsubscribe

    def notify(self, reason: str, snapshot: Snapshot) -> None:
        """Call every listener once; a failing listener never stops the others."""
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(reason, snapshot)
            except Exception:
                log.exception("Feature flag listener {!r} failed", listener)


class SnapshotStore:
    def __init__(
        self,
        read_flags: Callable[[], dict[str, bool]],
        registry: SubscriptionRegistry | None = None,
    ):
        self._read_flags = read_flags
        self.registry = registry or SubscriptionRegistry()
        self._snapshot = EMPTY_SNAPSHOT
        self._generation = 0
        # Re-entrant so a listener may trigger another rebuild
        self._lock = threading.RLock()
        self._pending: deque[str] = deque()
        self._notifying = False

    @property
    def generation(self) -> int:
        return self._generation

    def current(self) -> Snapshot:
        return self._snapshot

    def rebuild(self, reason: str) -> Snapshot:
        """
        Swap in a fresh snapshot and notify listeners.

        A rebuild requested by a listener is queued and runs after the current
        notification round, so every listener sees snapshots in build order.
        The nested call returns the snapshot current at the time it was made.
        """
        with self._lock:
            self._pending.append(reason)
            if self._notifying:
                return self._snapshot
            self._notifying = True
            try:
                while self._pending:
                    reason = self._pending.popleft()
                    snapshot = MappingProxyType(dict(self._read_flags()))
                    self._snapshot = snapshot
                    self._generation += 1
                    log.debug("Feature flag snapshot updated ({}): {}", reason, dict(snapshot))
                    self.registry.notify(reason, snapshot)
            finally:
                self._pending.clear()
                self._notifying = False
            return self._snapshot
