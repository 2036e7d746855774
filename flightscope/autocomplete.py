from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

DEBOUNCE_S = 0.3
MIN_KEYWORD = 2

Lookup = Callable[[str], List[dict]]


class DebouncedLookup:
    """Debounced location lookups where only the newest keyword wins.

    Each ``submit`` gets a sequence number; a pending lookup is cancelled
    when a newer keyword arrives, and a result whose number is no longer
    the latest is discarded instead of overwriting ``results``.
    """

    def __init__(self, lookup: Lookup, delay: float = DEBOUNCE_S) -> None:
        self.lookup = lookup
        self.delay = delay
        self.results: List[dict] = []
        self._seq = 0
        self._pending: Optional[asyncio.Task] = None

    @property
    def sequence(self) -> int:
        return self._seq

    async def submit(self, keyword: str) -> Optional[List[dict]]:
        """Schedule a lookup for *keyword*.

        Returns the applied results, or ``None`` if a newer keyword
        superseded this one.
        """
        self._seq += 1
        seq = self._seq
        self.cancel()

        keyword = (keyword or "").strip()
        if len(keyword) < MIN_KEYWORD:
            self.results = []
            return self.results

        task = asyncio.ensure_future(self._run(keyword, seq))
        self._pending = task
        try:
            return await task
        except asyncio.CancelledError:
            if seq != self._seq:
                return None
            raise
        finally:
            if self._pending is task:
                self._pending = None

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def _run(self, keyword: str, seq: int) -> Optional[List[dict]]:
        await asyncio.sleep(self.delay)
        found = await asyncio.to_thread(self.lookup, keyword)
        if seq != self._seq:
            logger.debug("Discarding stale lookup %d for %r", seq, keyword)
            return None
        self.results = found
        return found


__all__ = ["DebouncedLookup", "DEBOUNCE_S"]
