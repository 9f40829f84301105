from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .catalog import Catalog
from .loader import JudgeInput, SubmissionSpec
from .submission import Verdict


def generate_judge_input(
    n_submissions: int,
    n_problems: int = 5,
    n_invokers: int = 8,
    arrival_rate: float = 0.02,
    time_limits: Sequence[int] = (1000, 2000, 3000),
    test_range: tuple = (5, 60),
    accept_prob: float = 0.5,
    mean_fraction: float = 0.3,
    rng: Optional[np.random.Generator] = None,
) -> JudgeInput:
    """
    Draw a random test description.

    - problems: time limit from time_limits, test count uniform in test_range
    - arrivals: Poisson process with arrival_rate submissions per ms, integer times
    - each submission is accepted with accept_prob, otherwise fails on a uniformly
      drawn test; a failure is a time limit hit with probability 1/2
    - per-test time ~ exponential with mean mean_fraction * time limit, capped at the limit
    """
    if rng is None:
        rng = np.random.default_rng()
    if n_problems < 1 or n_submissions < 0 or n_invokers < 0:
        raise ValueError("need at least one problem and non-negative submission/invoker counts")
    if not 0.0 <= accept_prob <= 1.0:
        raise ValueError("accept_prob must be in [0, 1]")

    lo, hi = int(test_range[0]), int(test_range[1])
    tl_arr = rng.choice(np.asarray(time_limits, dtype=np.int64), size=n_problems)
    tc_arr = rng.integers(max(1, lo), max(1, hi) + 1, size=n_problems)
    catalog = Catalog.from_pairs(zip(tl_arr.tolist(), tc_arr.tolist()))

    gaps = rng.exponential(1.0 / arrival_rate, size=n_submissions)
    submit_arr = np.floor(np.cumsum(gaps)).astype(np.int64)
    problem_arr = rng.integers(0, n_problems, size=n_submissions)
    accepted_arr = rng.random(n_submissions) < accept_prob

    submissions: List[SubmissionSpec] = []
    for i in range(n_submissions):
        pid = int(problem_arr[i])
        problem = catalog[pid]
        times = rng.exponential(mean_fraction * problem.time_limit, size=problem.test_count)
        times = np.minimum(np.round(times), problem.time_limit).astype(np.int64)
        passed = np.ones(problem.test_count, dtype=bool)
        if not accepted_arr[i]:
            fail_at = int(rng.integers(0, problem.test_count))
            passed[fail_at] = False
            if rng.random() < 0.5:
                times[fail_at] = problem.time_limit
            # tests after the failure still have verdicts, as a full run would
            passed[fail_at + 1:] = rng.random(problem.test_count - fail_at - 1) < 0.5
        verdicts = tuple(Verdict(int(t), bool(ok)) for t, ok in zip(times, passed))
        submissions.append(SubmissionSpec(int(submit_arr[i]), pid, verdicts))

    return JudgeInput(catalog, int(n_invokers), submissions)
