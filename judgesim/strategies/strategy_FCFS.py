from __future__ import annotations

from typing import List

from .base import Request, TrackingPolicy


class FCFSPolicy(TrackingPolicy):
    """FCFS: give free invokers to the oldest submission that still has tests to run."""

    def schedule(self, out: List[Request]) -> None:
        for sub in self.subs:
            while self.free > 0 and sub.has_next():
                self.request(sub, out)
            if self.free == 0:
                break
