from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional


@dataclass(order=True)
class _Task:
    deadline: float
    seq: int
    key: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class Scheduler:
    """One-shot timers driven by the caller's clock.

    Nothing runs on its own: `advance(now_ms)` fires every task whose deadline
    has passed. Scheduling with a key that is still pending replaces it.
    """

    def __init__(self) -> None:
        self._heap: List[_Task] = []
        self._by_key: Dict[str, _Task] = {}
        self._seq = itertools.count()
        self.now: float = 0.0

    def call_later(self, delay_ms: float, callback: Callable[[], None], key: Optional[str] = None) -> str:
        seq = next(self._seq)
        key = key or f"task-{seq}"
        self.cancel(key)
        task = _Task(self.now + delay_ms, seq, key, callback)
        heapq.heappush(self._heap, task)
        self._by_key[key] = task
        return key

    def cancel(self, key: str) -> bool:
        task = self._by_key.pop(key, None)
        if task is None:
            return False
        task.cancelled = True
        return True

    def pending(self, key: str) -> bool:
        return key in self._by_key

    def advance(self, now_ms: float) -> int:
        self.now = now_ms
        fired = 0
        while self._heap and self._heap[0].deadline <= now_ms:
            task = heapq.heappop(self._heap)
            if task.cancelled:
                continue
            del self._by_key[task.key]
            task.callback()
            fired += 1
        return fired

    def clear(self) -> None:
        for task in self._heap:
            task.cancelled = True
        self._heap.clear()
        self._by_key.clear()
