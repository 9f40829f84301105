from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List

from .errors import InputFormatError


@dataclass(frozen=True)
class Problem:
    time_limit: int
    test_count: int


class Catalog:
    """Static problem table, indexed by problem id (insertion order)."""

    def __init__(self) -> None:
        self._problems: List[Problem] = []

    def add_problem(self, time_limit: int, test_count: int) -> int:
        """Append a problem and return its id; a test count below 1 becomes 1."""
        problem_id = len(self._problems)
        self._problems.append(Problem(int(time_limit), max(1, int(test_count))))
        return problem_id

    def __getitem__(self, problem_id: int) -> Problem:
        if not 0 <= problem_id < len(self._problems):
            raise InputFormatError(f"Problem {problem_id} does not exist ({len(self._problems)} problems)")
        return self._problems[problem_id]

    def __len__(self) -> int:
        return len(self._problems)

    def __iter__(self) -> Iterator[Problem]:
        return iter(self._problems)

    @classmethod
    def from_pairs(cls, pairs) -> "Catalog":
        catalog = cls()
        for time_limit, test_count in pairs:
            catalog.add_problem(time_limit, test_count)
        return catalog
