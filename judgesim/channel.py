from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, List, Optional, Sequence, TextIO, Tuple

from .catalog import Problem
from .errors import InputFormatError, MalformedRequest
from .strategies.base import Policy, Request, Tick
from .tokens import TokenStream

SENTINEL: Request = (-1, -1)

logger = logging.getLogger("judge")


class Channel(ABC):
    """Referee side of the exchange with the policy under test."""

    def write_preamble(self, invoker_count: int, problems: Sequence[Problem]) -> None:
        """Announce the invoker count and problem table once, before the first tick."""

    def open(self, invoker_count: int, problems: Sequence[Problem], announce: bool = True) -> None:
        """Called once before the first tick; announce=False keeps the preamble off the wire."""
        if announce:
            self.write_preamble(invoker_count, problems)

    @abstractmethod
    def write_problem(self, problem_id: int) -> None: ...

    @abstractmethod
    def end_problems(self) -> None: ...

    @abstractmethod
    def write_result(self, submission_id: int, test_id: int, passed: bool) -> None: ...

    @abstractmethod
    def end_results(self) -> None: ...

    @abstractmethod
    def flush(self) -> None: ...

    @abstractmethod
    def read_request(self) -> Optional[Request]:
        """Next (submission_id, test_id) pair, the (-1, -1) sentinel, or None at end of stream."""


# ================== line protocol ================== #
class TextChannel(Channel):
    """Line-based protocol over text streams (pipes to a policy process, or StringIO in tests)."""

    def __init__(self, reader: TextIO, writer: TextIO):
        self.writer = writer
        self.tokens = TokenStream(reader)

    def write_preamble(self, invoker_count: int, problems: Sequence[Problem]) -> None:
        self.writer.write(f"{invoker_count} {len(problems)}\n")
        for p in problems:
            self.writer.write(f"{p.time_limit} {p.test_count}\n")

    def write_problem(self, problem_id: int) -> None:
        self.writer.write(f"{problem_id}\n")

    def end_problems(self) -> None:
        self.writer.write("-1\n")

    def write_result(self, submission_id: int, test_id: int, passed: bool) -> None:
        self.writer.write(f"{submission_id} {test_id} {'OK' if passed else 'RJ'}\n")

    def end_results(self) -> None:
        self.writer.write("-1 -1\n")

    def flush(self) -> None:
        self.writer.flush()

    def read_request(self) -> Optional[Request]:
        pair = []
        for _ in range(2):
            token = self.tokens.next_token()
            if token is None:
                return None
            try:
                pair.append(int(token))
            except ValueError:
                raise MalformedRequest(token) from None
        return pair[0], pair[1]


# ================== in-process policy ================== #
class PolicyChannel(Channel):
    """Drives a Python Policy directly: one on_tick call per flush."""

    def __init__(self, policy: Policy):
        self.policy = policy
        self._problems: List[int] = []
        self._results: List[Tuple[int, int, bool]] = []
        self._pending: Deque[Request] = deque()
        self.closed = False

    def write_preamble(self, invoker_count: int, problems: Sequence[Problem]) -> None:
        self.policy.start(invoker_count, problems)

    def open(self, invoker_count: int, problems: Sequence[Problem], announce: bool = True) -> None:
        # an in-process policy has no wire to keep quiet, it always needs the table
        self.policy.start(invoker_count, problems)

    def write_problem(self, problem_id: int) -> None:
        self._problems.append(problem_id)

    def end_problems(self) -> None:
        pass

    def write_result(self, submission_id: int, test_id: int, passed: bool) -> None:
        self._results.append((submission_id, test_id, passed))

    def end_results(self) -> None:
        pass

    def flush(self) -> None:
        tick = Tick(problems=self._problems, results=self._results)
        self._problems, self._results = [], []
        if self.closed:
            return
        requests = self.policy.on_tick(tick)
        if requests is None:
            self.closed = True
            self._pending.clear()
            return
        self._pending.extend((int(sid), int(tid)) for sid, tid in requests)
        self._pending.append(SENTINEL)

    def read_request(self) -> Optional[Request]:
        if not self._pending:
            return None
        return self._pending.popleft()


# ================== policy process side ================== #
def _expect_int(tokens: TokenStream, what: str) -> int:
    try:
        value = tokens.next_int()
    except ValueError as e:
        raise InputFormatError(f"Expected integer {what}: {e}") from None
    if value is None:
        raise InputFormatError(f"Unexpected end of stream while reading {what}")
    return value


def serve_policy(policy: Policy, reader: TextIO, writer: TextIO, read_preamble: bool = True) -> int:
    """
    Run a Policy as the other end of TextChannel until the referee closes the
    stream. Returns the number of ticks served.
    """
    tokens = TokenStream(reader)
    problems: List[Problem] = []
    invoker_count = 0
    if read_preamble:
        invoker_count = _expect_int(tokens, "invoker count")
        problem_count = _expect_int(tokens, "problem count")
        for _ in range(problem_count):
            time_limit = _expect_int(tokens, "time limit")
            test_count = _expect_int(tokens, "test count")
            problems.append(Problem(time_limit, test_count))
    policy.start(invoker_count, problems)

    ticks = 0
    while tokens.has_more():
        tick = Tick()
        while True:
            problem_id = _expect_int(tokens, "problem id")
            if problem_id == -1:
                break
            tick.problems.append(problem_id)
        while True:
            submission_id = _expect_int(tokens, "submission id")
            test_id = _expect_int(tokens, "test id")
            if submission_id == -1 and test_id == -1:
                break
            verdict = tokens.next_token()
            if verdict is None:
                raise InputFormatError("Unexpected end of stream while reading verdict")
            tick.results.append((submission_id, test_id, verdict == "OK"))
        requests = policy.on_tick(tick)
        if requests is None:
            break
        for submission_id, test_id in requests:
            writer.write(f"{submission_id} {test_id}\n")
        writer.write("-1 -1\n")
        writer.flush()
        ticks += 1
    logger.debug(f"policy served {ticks} ticks")
    return ticks
