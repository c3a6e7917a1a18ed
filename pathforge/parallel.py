"""
Fork-join parallel loop over a half-open index range.

Workers claim indices one at a time from a shared counter, so the
index-to-worker assignment is load balanced and not deterministic.
"""

from __future__ import annotations
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence

from .sampling import RandomStream


class RowCounter:
    """Thread-safe counter that hands out consecutive indices."""

    def __init__(self, begin: int, end: int):
        self._next = begin
        self._end = end
        self._lock = threading.Lock()

    def claim(self) -> Optional[int]:
        """Return the next unclaimed index, or None when the range is used up."""
        with self._lock:
            if self._next >= self._end:
                return None
            index = self._next
            self._next += 1
            return index


def parallel_for(
    begin: int,
    end: int,
    action: Callable[[int, RandomStream], None],
    streams: Sequence[RandomStream]
) -> None:
    """Run `action(index, stream)` for every index in [begin, end).

    One worker thread is started per stream, capped at the number of
    indices. Worker i passes streams[i] to every action it runs. Blocks
    until all indices are processed; the first exception raised by an
    action is re-raised after every worker has stopped.

    Args:
        begin: First index (inclusive)
        end: One past the last index (swapped with begin if smaller)
        action: Work to do for one index
        streams: Per-worker random streams; at least one
    """
    if end == begin:
        return
    if end < begin:
        begin, end = end, begin
    if not streams:
        raise ValueError("parallel_for needs at least one random stream")

    workers = min(max(len(streams), 1), end - begin)
    counter = RowCounter(begin, end)

    def worker(stream: RandomStream) -> None:
        while True:
            index = counter.claim()
            if index is None:
                break
            action(index, stream)

    if workers == 1:
        worker(streams[0])
        return

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(worker, streams[i]) for i in range(workers)]

    for future in futures:
        future.result()
