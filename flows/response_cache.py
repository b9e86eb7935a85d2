"""Single-flight response cache for flow generations.

Keyed by ``(flow name, canonical validated input, today)``; the date part
is present only for flows that pre-compute facts, since their prompt
depends on the clock.  At most one generation is in flight per key:
identical concurrent requests await the same result.  Only successful
(validated) outputs are stored; every caller receives its own deep copy.

The cache is the only shared mutable state between invocations.  It is
safe to share between threads, each running its own event loop (e.g.
concurrent ``run_sync`` calls from a threaded HTTP server): the in-flight
slot is a ``concurrent.futures.Future`` that callers on any loop can await.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import copy
import hashlib
import json
import logging
import threading
from collections import OrderedDict
from datetime import date
from typing import Any, Awaitable, Callable, Mapping, Optional

logger = logging.getLogger(__name__)


class ResponseCache:
    def __init__(self, max_entries: int = 256) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, Any] = OrderedDict()
        self._inflight: dict[str, concurrent.futures.Future] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @staticmethod
    def make_key(
        flow_name: str,
        validated_input: Mapping[str, Any],
        today: Optional[date] = None,
    ) -> str:
        """Canonical key: key order and whitespace in the input do not matter."""
        payload = json.dumps(
            validated_input, sort_keys=True, separators=(",", ":"),
            ensure_ascii=False, default=str,
        )
        parts = [flow_name, payload]
        if today is not None:
            parts.append(today.isoformat())
        return hashlib.sha256("\x1f".join(parts).encode("utf-8")).hexdigest()

    async def get_or_compute(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return the cached value for ``key`` or run ``factory`` once for it.

        Exceptions from ``factory`` reach every waiter and nothing is stored.
        """
        with self._lock:
            if key in self._entries:
                self.hits += 1
                self._entries.move_to_end(key)
                logger.debug("[ResponseCache] hit %s", key[:12])
                return copy.deepcopy(self._entries[key])

            pending = self._inflight.get(key)
            owner = pending is None
            if owner:
                self.misses += 1
                pending = concurrent.futures.Future()
                self._inflight[key] = pending
            else:
                self.hits += 1
                logger.debug("[ResponseCache] joined in-flight %s", key[:12])

        # A cancelled waiter must not cancel the shared generation.
        if owner:
            task = asyncio.ensure_future(factory())
            task.add_done_callback(lambda done, k=key, p=pending: self._settle(k, p, done))
            value = await asyncio.shield(task)
        else:
            value = await asyncio.shield(asyncio.wrap_future(pending))
        return copy.deepcopy(value)

    def _settle(self, key: str, pending: concurrent.futures.Future, task: asyncio.Future) -> None:
        with self._lock:
            self._inflight.pop(key, None)
            if not task.cancelled() and task.exception() is None:
                self._entries[key] = task.result()
                self._entries.move_to_end(key)
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)

        # Waiters on other loops are woken through their own loop's callbacks.
        if task.cancelled():
            pending.cancel()
        elif task.exception() is not None:
            pending.set_exception(task.exception())
        else:
            pending.set_result(task.result())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
