from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence

import numpy as np

from .catalog import Catalog, Problem
from .errors import SubmissionOrderError

logger = logging.getLogger("judge")


@dataclass(frozen=True)
class Verdict:
    time_consumed: int
    passed: bool


FAILED_EMPTY = Verdict(time_consumed=0, passed=False)


def normalize_verdicts(raw: Sequence[Verdict], test_count: int) -> List[Verdict]:
    """
    Fit the supplied verdicts to the problem's test count:
    an empty list becomes one zero-time failure, a short list repeats its last
    verdict, a long list is cut from the end.
    """
    verdicts = list(raw) if raw else [FAILED_EMPTY]
    if len(verdicts) < test_count:
        verdicts.extend([verdicts[-1]] * (test_count - len(verdicts)))
    return verdicts[:test_count]


@dataclass
class Submission:
    submit_time: int
    problem_id: int
    verdicts: List[Verdict]
    judged: np.ndarray = field(repr=False)
    finished: bool = False
    start_time: Optional[int] = None
    time_consumed: Optional[int] = None

    @classmethod
    def create(cls, submit_time: int, problem_id: int, problem: Problem, raw_verdicts: Sequence[Verdict]) -> "Submission":
        verdicts = normalize_verdicts(raw_verdicts, problem.test_count)
        return cls(
            submit_time=int(submit_time),
            problem_id=int(problem_id),
            verdicts=verdicts,
            judged=np.zeros(problem.test_count, dtype=bool),
        )

    @property
    def test_count(self) -> int:
        return len(self.verdicts)

    @property
    def passed_mask(self) -> np.ndarray:
        return np.fromiter((v.passed for v in self.verdicts), dtype=bool, count=len(self.verdicts))

    def is_resolved(self) -> bool:
        """
        Tests are scanned in index order: an unjudged test keeps the submission open,
        a failing test closes it regardless of what follows.
        """
        unjudged = np.flatnonzero(~self.judged)
        if unjudged.size == 0:
            return True
        # any failure before the first unjudged test stops the scan there
        return bool((~self.passed_mask[: unjudged[0]]).any())


class SubmissionRegistry:
    """Submissions in arrival order plus the global finished counter."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self.submissions: List[Submission] = []
        self.finished_count = 0

    def add(self, submit_time: int, problem_id: int, raw_verdicts: Sequence[Verdict]) -> Submission:
        problem = self.catalog[problem_id]
        if self.submissions and submit_time < self.submissions[-1].submit_time:
            raise SubmissionOrderError(len(self.submissions), submit_time, self.submissions[-1].submit_time)
        submission = Submission.create(submit_time, problem_id, problem, raw_verdicts)
        self.submissions.append(submission)
        return submission

    def check_finished(self, submission_id: int, current_time: int) -> bool:
        """Resolve the submission if possible. Returns True only on the call that finishes it."""
        submission = self.submissions[submission_id]
        if submission.finished or not submission.is_resolved():
            return False
        submission.time_consumed = current_time - submission.start_time
        submission.finished = True
        self.finished_count += 1
        logger.debug(f"submission {submission_id} finished in {submission.time_consumed} ms")
        return True

    @property
    def all_finished(self) -> bool:
        return self.finished_count == len(self.submissions)

    def times_consumed(self) -> List[int]:
        return [s.time_consumed for s in self.submissions if s.time_consumed is not None]

    def __getitem__(self, submission_id: int) -> Submission:
        return self.submissions[submission_id]

    def __len__(self) -> int:
        return len(self.submissions)

    def __iter__(self) -> Iterator[Submission]:
        return iter(self.submissions)

    @classmethod
    def from_specs(cls, catalog: Catalog, specs: Iterable) -> "SubmissionRegistry":
        registry = cls(catalog)
        for spec in specs:
            registry.add(spec.submit_time, spec.problem_id, spec.verdicts)
        return registry
