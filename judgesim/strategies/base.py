from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..catalog import Problem
from ..config import TIME_STEP

Request = Tuple[int, int]

strategy_logger = logging.getLogger("strategy")


@dataclass
class Tick:
    """What the policy learns in one tick: new problem ids, then finished tests."""

    problems: List[int] = field(default_factory=list)
    results: List[Tuple[int, int, bool]] = field(default_factory=list)


class Policy(ABC):
    """
    Scheduling policy under evaluation. It sees exactly what the protocol
    carries: the preamble, then per tick the released problem ids (submission
    ids follow arrival order) and the results of finished tests.
    """

    def start(self, invoker_count: int, problems: Sequence[Problem]) -> None:
        self.invoker_count = int(invoker_count)
        self.problems = list(problems)

    @abstractmethod
    def on_tick(self, tick: Tick) -> Optional[List[Request]]:
        """Return the invocation requests for this tick, or None to close the stream."""


class TrackedSubmission:
    """Policy-side view of one submission, built only from protocol messages."""

    def __init__(self, submission_id: int, problem: Problem):
        self.id = submission_id
        self.problem = problem
        self.next_test = 0
        self.tests_run = 0
        self.running_time = 0
        self.failed = False
        self.dispatch_tick: Dict[int, int] = {}

    def has_next(self) -> bool:
        return not self.failed and self.next_test < self.problem.test_count

    def take_next(self, tick: int) -> Request:
        request = (self.id, self.next_test)
        self.dispatch_tick[self.next_test] = tick
        self.next_test += 1
        return request

    def record(self, test_id: int, passed: bool, elapsed: int) -> None:
        self.tests_run += 1
        self.running_time += elapsed
        if not passed:
            self.failed = True


class TrackingPolicy(Policy):
    """
    Keeps the bookkeeping every reference policy needs: submission ids in
    arrival order, a free invoker count (decremented per request, incremented
    per result) and elapsed time per finished test.
    """

    def __init__(self, time_step: int = TIME_STEP):
        self.time_step = int(time_step)

    def start(self, invoker_count: int, problems: Sequence[Problem]) -> None:
        super().start(invoker_count, problems)
        self.free = self.invoker_count
        self.tick_idx = -1
        self.subs: List[TrackedSubmission] = []

    def observe(self, tick: Tick) -> None:
        self.tick_idx += 1
        for problem_id in tick.problems:
            sub = TrackedSubmission(len(self.subs), self.problems[problem_id])
            self.subs.append(sub)
            strategy_logger.debug(f"new submission {sub.id} for problem {problem_id}")
        for submission_id, test_id, passed in tick.results:
            self.free += 1
            sub = self.subs[submission_id]
            elapsed = (self.tick_idx - sub.dispatch_tick.get(test_id, self.tick_idx)) * self.time_step
            sub.record(test_id, passed, elapsed)

    def request(self, sub: TrackedSubmission, out: List[Request]) -> None:
        out.append(sub.take_next(self.tick_idx))
        self.free -= 1

    def on_tick(self, tick: Tick) -> Optional[List[Request]]:
        self.observe(tick)
        requests: List[Request] = []
        if self.free > 0:
            self.schedule(requests)
        return requests

    @abstractmethod
    def schedule(self, out: List[Request]) -> None:
        """Append requests to out while self.free > 0."""
