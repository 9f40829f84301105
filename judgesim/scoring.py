from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .config import SCORE_POWER


def power_mean_score(times: Sequence[int], k: float = SCORE_POWER) -> int:
    """
    floor((sum(t ** k) / N) ** (1 / k)).

    Slow submissions weigh super-linearly, so starving any one of them costs
    more than a slightly worse average. With integral k and times the floor is
    exact: the float root is only a starting point for an integer correction.
    """
    n = len(times)
    if n == 0:
        return 0
    arr = np.asarray(times, dtype=np.float64)
    estimate = math.floor(float(np.mean(arr ** k)) ** (1.0 / k))
    if not (float(k).is_integer() and all(float(t).is_integer() for t in times)):
        return int(estimate)

    power = int(k)
    total = sum(int(t) ** power for t in times)
    root = max(0, estimate)
    # largest r with r ** k <= total / n
    while (root + 1) ** power * n <= total:
        root += 1
    while root > 0 and root ** power * n > total:
        root -= 1
    return root
