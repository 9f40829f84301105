from __future__ import annotations

import heapq
from typing import List, Tuple

from .base import Request, TrackedSubmission, TrackingPolicy, strategy_logger


def expected_cost(sub: TrackedSubmission) -> float:
    """
    Estimated total judging time of a submission: time limit times test count
    until a result is known, then the observed mean test time times test count.
    """
    p = sub.problem
    if sub.tests_run == 0:
        return float(p.test_count * p.time_limit)
    return float(sub.running_time * p.test_count) / sub.tests_run


class ExpectedCostPolicy(TrackingPolicy):
    """Shortest expected job first: free invokers go to the cheapest pending submission, one test per pick."""

    def schedule(self, out: List[Request]) -> None:
        # priorities only move on results, so they are fixed within a tick
        heap: List[Tuple[float, int]] = [(expected_cost(s), s.id) for s in self.subs if s.has_next()]
        heapq.heapify(heap)
        while heap and self.free > 0:
            cost, sid = heapq.heappop(heap)
            sub = self.subs[sid]
            self.request(sub, out)
            strategy_logger.debug(f"scheduling test {sub.next_test - 1} for submission {sid}, priority {cost:.1f}")
            if sub.has_next():
                heapq.heappush(heap, (cost, sid))
