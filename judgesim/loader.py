from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, TextIO, Tuple, Union

import pandas as pd

from .catalog import Catalog
from .errors import InputFormatError
from .submission import SubmissionRegistry, Verdict
from .tokens import TokenStream

PROFILE_COLUMNS = ["SubmitTime", "Problem", "InvokerTime", "Invocations", "TestCount", "TL"]


@dataclass(frozen=True)
class SubmissionSpec:
    submit_time: int
    problem_id: int
    verdicts: Tuple[Verdict, ...] = ()


@dataclass
class JudgeInput:
    """Parsed test description. build_registry() gives a fresh registry per run."""

    catalog: Catalog
    invoker_count: int
    submissions: List[SubmissionSpec] = field(default_factory=list)

    def build_registry(self) -> SubmissionRegistry:
        return SubmissionRegistry.from_specs(self.catalog, self.submissions)


# ================== reading ================== #
class _Reader:
    def __init__(self, stream: TextIO):
        self.tokens = TokenStream(stream)

    def read_int(self, what: str) -> int:
        token = self.read_token(what)
        try:
            return int(token)
        except ValueError:
            raise InputFormatError(f"Expected integer {what}, got {token!r}") from None

    def read_token(self, what: str) -> str:
        token = self.tokens.next_token()
        if token is None:
            raise InputFormatError(f"Unexpected end of input while reading {what}")
        return token


def read_judge_input(stream: TextIO) -> JudgeInput:
    r = _Reader(stream)
    problem_count = r.read_int("problem count")
    invoker_count = r.read_int("invoker count")
    if problem_count < 0 or invoker_count < 0:
        raise InputFormatError(f"Negative problem ({problem_count}) or invoker ({invoker_count}) count")

    catalog = Catalog()
    for _ in range(problem_count):
        time_limit = r.read_int("time limit")
        test_count = r.read_int("test count")
        catalog.add_problem(time_limit, test_count)

    submissions: List[SubmissionSpec] = []
    while True:
        submit_time = r.read_int("submit time")
        if submit_time == -1:
            break
        problem_id = r.read_int("problem id")
        verdicts: List[Verdict] = []
        while True:
            time_consumed = r.read_int("time consumed")
            if time_consumed == -1:
                break
            if time_consumed < 0:
                raise InputFormatError(f"negative time consumed {time_consumed} for submission {len(submissions)}")
            verdicts.append(Verdict(time_consumed, r.read_token("verdict") == "OK"))
        submissions.append(SubmissionSpec(submit_time, problem_id, tuple(verdicts)))

    judge_input = JudgeInput(catalog, invoker_count, submissions)
    judge_input.build_registry()  # order and problem ids are checked at load time
    return judge_input


def parse_judge_input(text: str) -> JudgeInput:
    return read_judge_input(io.StringIO(text))


def load_judge_input(path: Union[str, Path]) -> JudgeInput:
    with open(path, "r", encoding="utf-8") as f:
        return read_judge_input(f)


# ================== writing ================== #
def format_judge_input(judge_input: JudgeInput) -> str:
    lines = [f"{len(judge_input.catalog)} {judge_input.invoker_count}"]
    lines += [f"{p.time_limit} {p.test_count}" for p in judge_input.catalog]
    for spec in judge_input.submissions:
        lines.append(f"{spec.submit_time} {spec.problem_id}")
        pairs = [f"{v.time_consumed} {'OK' if v.passed else 'RJ'}" for v in spec.verdicts]
        lines.append(" ".join(pairs + ["-1"]))
    lines.append("-1")
    return "\n".join(lines) + "\n"


def save_judge_input(judge_input: JudgeInput, path: Union[str, Path]) -> None:
    Path(path).write_text(format_judge_input(judge_input), encoding="utf-8")


# ================== diagnostics ================== #
def profile_submissions(judge_input: JudgeInput) -> pd.DataFrame:
    """
    One row per submission, from the raw verdicts: invoker time and invocation
    count up to and including the first failure, i.e. the cost of judging it
    with early stopping.
    """
    rows = []
    for spec in judge_input.submissions:
        invoker_time = 0
        invocations = 0
        for v in spec.verdicts:
            invoker_time += v.time_consumed
            invocations += 1
            if not v.passed:
                break
        rows.append(
            dict(
                SubmitTime=spec.submit_time,
                Problem=spec.problem_id,
                InvokerTime=invoker_time,
                Invocations=invocations,
                TestCount=len(spec.verdicts),
                TL=judge_input.catalog[spec.problem_id].time_limit,
            )
        )
    return pd.DataFrame(rows, columns=PROFILE_COLUMNS)


def write_profile(judge_input: JudgeInput, out: Optional[Union[str, Path, TextIO]] = None) -> pd.DataFrame:
    df = profile_submissions(judge_input)
    if out is not None:
        df.to_csv(out, index=False)
    return df
