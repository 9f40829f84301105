from __future__ import annotations

import heapq
from typing import Dict, List, Tuple

from .base import Request, Tick, TrackedSubmission, TrackingPolicy, strategy_logger

PROGRESS_BUCKET = 34


def progress_bucket(sub: TrackedSubmission) -> int:
    """Share of tests with a known result, in thirds: 0, 1 or 2 (2 also at 100%)."""
    return sub.tests_run * 100 // sub.problem.test_count // PROGRESS_BUCKET


class ProgressPolicy(TrackingPolicy):
    """
    Favour submissions that are further along: the highest progress bucket
    goes first, ties go to whoever has waited longest since arrival or its
    last dispatch. A dispatched submission takes a fresh stamp, which rotates
    it behind its peers in the same bucket.
    """

    def start(self, invoker_count, problems) -> None:
        super().start(invoker_count, problems)
        self.stamps: Dict[int, int] = {}
        self.next_stamp = 1

    def _stamp(self, sub: TrackedSubmission) -> None:
        self.stamps[sub.id] = self.next_stamp
        self.next_stamp += 1

    def observe(self, tick: Tick) -> None:
        known = len(self.subs)
        super().observe(tick)
        for sub in self.subs[known:]:
            self._stamp(sub)

    def priority(self, sub: TrackedSubmission) -> Tuple[int, int]:
        return -progress_bucket(sub), self.stamps[sub.id]

    def schedule(self, out: List[Request]) -> None:
        heap: List[Tuple[int, int, int]] = [(*self.priority(s), s.id) for s in self.subs if s.has_next()]
        heapq.heapify(heap)
        while heap and self.free > 0:
            neg_progress, _, sid = heapq.heappop(heap)
            sub = self.subs[sid]
            self.request(sub, out)
            self._stamp(sub)
            strategy_logger.debug(f"scheduling test {sub.next_test - 1} for submission {sid}, progress {-neg_progress}")
            if sub.has_next():
                heapq.heappush(heap, (*self.priority(sub), sid))

