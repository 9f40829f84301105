from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from .submission import Verdict


class DispatchStatus(Enum):
    SCHEDULED = "scheduled"
    DROPPED = "dropped"


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    invoker: Optional[int] = None
    completion_time: Optional[int] = None

    @property
    def scheduled(self) -> bool:
        return self.status is DispatchStatus.SCHEDULED


DROPPED = DispatchResult(DispatchStatus.DROPPED)


class InvokerPool:
    """
    Fixed set of invokers, each described only by the time it becomes free.
    Allocation is first-free-by-index; a request with no free invoker is dropped
    and the pool is left untouched.
    """

    def __init__(self, n_invokers: int):
        if n_invokers < 0:
            raise ValueError("n_invokers cannot be negative")
        self.free_time = np.zeros(int(n_invokers), dtype=np.int64)

    def __len__(self) -> int:
        return int(self.free_time.size)

    def free_mask(self, now: int) -> np.ndarray:
        return self.free_time <= now

    def busy_count(self, now: int) -> int:
        return int((~self.free_mask(now)).sum())

    def dispatch(self, now: int, verdict: Verdict) -> DispatchResult:
        free = np.flatnonzero(self.free_mask(now))
        if free.size == 0:
            return DROPPED
        idx = int(free[0])
        self.free_time[idx] = now + verdict.time_consumed
        return DispatchResult(DispatchStatus.SCHEDULED, invoker=idx, completion_time=int(self.free_time[idx]))
