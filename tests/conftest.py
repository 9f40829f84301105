from __future__ import annotations

import io
from typing import Dict, List, Optional

import pytest

from judgesim import Catalog, JudgeConfig, Verdict
from judgesim.loader import JudgeInput, SubmissionSpec
from judgesim.strategies import Policy, Tick


def ok(t: int) -> Verdict:
    return Verdict(t, True)


def rj(t: int) -> Verdict:
    return Verdict(t, False)


class ScriptedPolicy(Policy):
    """Returns fixed requests per tick index; closes the stream after close_after ticks."""

    def __init__(self, script: Dict[int, List], close_after: Optional[int] = None):
        self.script = script
        self.close_after = close_after
        self.ticks: List[Tick] = []

    def on_tick(self, tick: Tick):
        idx = len(self.ticks)
        self.ticks.append(tick)
        if self.close_after is not None and idx >= self.close_after:
            return None
        return list(self.script.get(idx, []))


def text_requests(per_tick: List[List[tuple]]) -> io.StringIO:
    """Policy side of a transcript: each tick's requests followed by the sentinel."""
    lines = []
    for requests in per_tick:
        lines += [f"{s} {t}" for s, t in requests]
        lines.append("-1 -1")
    return io.StringIO("\n".join(lines) + "\n")


def make_input(problems, invokers, submissions) -> JudgeInput:
    return JudgeInput(
        Catalog.from_pairs(problems),
        invokers,
        [SubmissionSpec(t, p, tuple(v)) for t, p, v in submissions],
    )


@pytest.fixture
def single_submission_input() -> JudgeInput:
    """One problem (TL 1000, 3 tests), one invoker, one submission OK OK RJ at 100 ms each."""
    return make_input([(1000, 3)], 1, [(0, 0, [ok(100), ok(100), rj(100)])])


@pytest.fixture
def plain_config() -> JudgeConfig:
    return JudgeConfig(send_preamble=False)
