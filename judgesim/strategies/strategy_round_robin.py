from __future__ import annotations

from typing import List

from .base import Request, TrackingPolicy


class RoundRobinPolicy(TrackingPolicy):
    """
    Round Robin: one test per active submission per pass, passes repeat while
    invokers are free. The pass starts after the submission served last.
    """

    def start(self, invoker_count, problems) -> None:
        super().start(invoker_count, problems)
        self.cursor = 0

    def schedule(self, out: List[Request]) -> None:
        while self.free > 0:
            n = len(self.subs)
            progressed = False
            first = self.cursor
            for offset in range(n):
                if self.free == 0:
                    break
                idx = (first + offset) % n
                sub = self.subs[idx]
                if sub.has_next():
                    self.request(sub, out)
                    self.cursor = (idx + 1) % n
                    progressed = True
            if not progressed:
                break
