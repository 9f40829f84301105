from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

TIME_STEP = 10
SCORE_POWER = 3.0
TEST_ID_BOUNDS = ("exclusive", "inclusive")


@dataclass
class JudgeConfig:
    """
    Referee settings.

    test_id_bound:
        "exclusive" accepts 0 <= test_id < test_count.
        "inclusive" keeps the reference judge's check, 0 <= test_id <= test_count;
        the one-past-the-end id runs the last test's verdict but judges nothing.
    max_ticks:
        hard cap on simulated ticks, None for no cap.
    """

    time_step: int = TIME_STEP
    score_power: float = SCORE_POWER
    test_id_bound: str = "exclusive"
    send_preamble: bool = True
    max_ticks: Optional[int] = None
    record_history: bool = True

    def __post_init__(self) -> None:
        if self.time_step <= 0:
            raise ValueError("time_step must be strictly positive")
        if self.score_power <= 0:
            raise ValueError("score_power must be strictly positive")
        if self.test_id_bound not in TEST_ID_BOUNDS:
            raise ValueError(f"test_id_bound must be one of {TEST_ID_BOUNDS}, got {self.test_id_bound!r}")
        if self.max_ticks is not None and self.max_ticks <= 0:
            raise ValueError("max_ticks must be positive or None")

    def max_test_id(self, test_count: int) -> int:
        """Largest test id a request may name for a problem with test_count tests."""
        if self.test_id_bound == "inclusive":
            return test_count
        return test_count - 1
