from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Iterator, List, Optional


@dataclass(frozen=True, order=True)
class CompletionEvent:
    # field order is the release order: failures before successes at equal time
    ready_time: int
    passed: bool
    submission_id: int
    test_id: int

    @property
    def verdict_token(self) -> str:
        return "OK" if self.passed else "RJ"


class CompletionQueue:
    """Min-heap of pending test completions."""

    def __init__(self) -> None:
        self._heap: List[CompletionEvent] = []

    def __len__(self) -> int:
        return len(self._heap)

    def schedule(self, ready_time: int, passed: bool, submission_id: int, test_id: int) -> CompletionEvent:
        event = CompletionEvent(int(ready_time), bool(passed), int(submission_id), int(test_id))
        heapq.heappush(self._heap, event)
        return event

    def peek(self) -> Optional[CompletionEvent]:
        return self._heap[0] if self._heap else None

    def pop(self) -> CompletionEvent:
        return heapq.heappop(self._heap)

    def is_due(self, now: int) -> bool:
        return bool(self._heap) and self._heap[0].ready_time <= now

    def drain_due(self, now: int) -> Iterator[CompletionEvent]:
        """
        Yield due events one at a time in queue order. The next event is only
        popped when the consumer asks for it, so per-event side effects land
        before it is looked at.
        """
        while self.is_due(now):
            yield self.pop()
