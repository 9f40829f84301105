from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from .catalog import Catalog
from .channel import SENTINEL, Channel
from .config import JudgeConfig
from .errors import (
    InvalidTestId,
    ProtocolViolation,
    SimulationTimeout,
    UnexpectedEndOfStream,
    UnknownSubmission,
)
from .events import CompletionQueue
from .invokers import DispatchResult, InvokerPool
from .loader import JudgeInput
from .scoring import power_mean_score
from .submission import Submission, SubmissionRegistry

logger = logging.getLogger("judge")


@dataclass
class SimContext:
    """All mutable state of one run; every phase function receives it explicitly."""

    config: JudgeConfig
    registry: SubmissionRegistry
    pool: InvokerPool
    queue: CompletionQueue = field(default_factory=CompletionQueue)
    clock: int = 0
    released: int = 0  # submissions [0, released) have been announced
    ticks: int = 0
    dispatched: int = 0
    dropped: int = 0


# ================== phases ================== #
def release_phase(ctx: SimContext, channel: Channel) -> int:
    """Announce every submission whose submit time has come. Returns how many were released."""
    submissions = ctx.registry.submissions
    start = ctx.released
    while ctx.released < len(submissions) and submissions[ctx.released].submit_time <= ctx.clock:
        submission = submissions[ctx.released]
        submission.start_time = ctx.clock
        channel.write_problem(submission.problem_id)
        ctx.released += 1
    channel.end_problems()
    return ctx.released - start


def completion_phase(ctx: SimContext, channel: Channel) -> int:
    """Release due completions in queue order, judging and announcing each before the next."""
    count = 0
    for event in ctx.queue.drain_due(ctx.clock):
        submission = ctx.registry[event.submission_id]
        if event.test_id < submission.test_count:
            submission.judged[event.test_id] = True
        ctx.registry.check_finished(event.submission_id, ctx.clock)
        channel.write_result(event.submission_id, event.test_id, event.passed)
        count += 1
    channel.end_results()
    channel.flush()
    return count


def handle_request(ctx: SimContext, submission_id: int, test_id: int) -> DispatchResult:
    """Validate one invocation request and hand it to the invoker pool."""
    if not 0 <= submission_id < ctx.released:
        raise UnknownSubmission(submission_id, ctx.clock)
    submission = ctx.registry[submission_id]
    if not 0 <= test_id <= ctx.config.max_test_id(submission.test_count):
        raise InvalidTestId(test_id, submission.problem_id, submission_id)

    # the inclusive bound lets test_id == test_count through; it runs the last test
    verdict = submission.verdicts[min(test_id, submission.test_count - 1)]
    result = ctx.pool.dispatch(ctx.clock, verdict)
    if result.scheduled:
        ctx.queue.schedule(result.completion_time, verdict.passed, submission_id, test_id)
        ctx.dispatched += 1
    else:
        ctx.dropped += 1
        logger.debug(f"t={ctx.clock}: no free invoker for submission {submission_id} test {test_id}")
    return result


def request_phase(ctx: SimContext, channel: Channel) -> bool:
    """Read requests until the sentinel (returns True) or end of stream (returns False)."""
    while True:
        request = channel.read_request()
        if request is None:
            return False
        if request == SENTINEL:
            return True
        handle_request(ctx, *request)


# ================== results ================== #
@dataclass
class JudgeResult:
    score: int
    elapsed: int
    ticks: int
    dispatched: int
    dropped: int
    submissions: List[Submission]
    history: pd.DataFrame

    def to_frame(self) -> pd.DataFrame:
        """Per-submission timings."""
        return pd.DataFrame(
            dict(
                submit_time=[s.submit_time for s in self.submissions],
                problem=[s.problem_id for s in self.submissions],
                start_time=[s.start_time for s in self.submissions],
                time_consumed=[s.time_consumed for s in self.submissions],
            )
        )

    def metrics(self) -> Dict[str, float]:
        times = np.array([s.time_consumed for s in self.submissions], dtype=np.float64)
        return dict(
            score=float(self.score),
            elapsed=float(self.elapsed),
            mean_time=float(times.mean()) if times.size else 0.0,
            max_time=float(times.max()) if times.size else 0.0,
            dispatched=float(self.dispatched),
            dropped=float(self.dropped),
        )


@dataclass
class JudgeOutcome:
    accepted: bool
    message: str
    score: Optional[int] = None
    elapsed: Optional[int] = None
    result: Optional[JudgeResult] = None


# ================== main loop ================== #
class JudgeSim:
    """
    Referee for one test:
    - a discrete clock advancing by config.time_step
    - each tick: release arrivals, announce due completions, read and dispatch requests
    - stops once every submission is finished, then scores the run
    """

    def __init__(
        self,
        catalog: Catalog,
        registry: SubmissionRegistry,
        n_invokers: int,
        channel: Channel,
        config: Optional[JudgeConfig] = None,
    ):
        self.catalog = catalog
        self.channel = channel
        self.config = config or JudgeConfig()
        self.ctx = SimContext(config=self.config, registry=registry, pool=InvokerPool(n_invokers))

        self.hist_time: List[int] = []
        self.hist_busy: List[int] = []
        self.hist_pending: List[int] = []
        self.hist_finished: List[int] = []

    @classmethod
    def from_input(cls, judge_input: JudgeInput, channel: Channel, config: Optional[JudgeConfig] = None) -> "JudgeSim":
        return cls(judge_input.catalog, judge_input.build_registry(), judge_input.invoker_count, channel, config)

    def step(self) -> bool:
        """Run one tick at the current clock. Returns whether the policy ended its requests with the sentinel."""
        ctx = self.ctx
        released = release_phase(ctx, self.channel)
        completed = completion_phase(ctx, self.channel)
        saw_sentinel = request_phase(ctx, self.channel)
        ctx.ticks += 1
        if self.config.record_history:
            self.hist_time.append(ctx.clock)
            self.hist_busy.append(ctx.pool.busy_count(ctx.clock))
            self.hist_pending.append(len(ctx.queue))
            self.hist_finished.append(ctx.registry.finished_count)
        if released or completed:
            logger.debug(f"t={ctx.clock}: released {released}, completed {completed}, pending {len(ctx.queue)}")
        return saw_sentinel

    def run(self, verbose: bool = False) -> JudgeResult:
        ctx = self.ctx
        registry = ctx.registry
        self.channel.open(len(ctx.pool), list(self.catalog), announce=self.config.send_preamble)

        while not registry.all_finished:
            if self.config.max_ticks is not None and ctx.ticks >= self.config.max_ticks:
                raise SimulationTimeout(self.config.max_ticks, registry.finished_count, len(registry))
            saw_sentinel = self.step()
            if registry.all_finished:
                break
            if not saw_sentinel:
                raise UnexpectedEndOfStream(registry.finished_count, len(registry), ctx.clock)
            ctx.clock += self.config.time_step

            if verbose and ctx.ticks % 100 == 0:
                logger.info(f"tick {ctx.ticks:>6d}, t={ctx.clock}, finished={registry.finished_count}/{len(registry)}")

        score = power_mean_score(registry.times_consumed(), self.config.score_power)
        logger.info(f"Finished in {ctx.clock} ms, score {score}, dropped requests {ctx.dropped}")
        return JudgeResult(
            score=score,
            elapsed=ctx.clock,
            ticks=ctx.ticks,
            dispatched=ctx.dispatched,
            dropped=ctx.dropped,
            submissions=list(registry),
            history=self.history_frame(),
        )

    def history_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            dict(
                time=self.hist_time,
                busy_invokers=self.hist_busy,
                pending_events=self.hist_pending,
                finished=self.hist_finished,
            )
        )


def run_judge(judge_input: JudgeInput, channel: Channel, config: Optional[JudgeConfig] = None) -> JudgeOutcome:
    """Run one test to an outcome; protocol violations and timeouts reject the policy."""
    sim = JudgeSim.from_input(judge_input, channel, config)
    try:
        result = sim.run()
    except (ProtocolViolation, SimulationTimeout) as e:
        logger.warning(f"rejected at t={sim.ctx.clock}: {e}")
        return JudgeOutcome(accepted=False, message=str(e), elapsed=sim.ctx.clock)
    return JudgeOutcome(
        accepted=True,
        message=f"Finished in {result.elapsed} ms",
        score=result.score,
        elapsed=result.elapsed,
        result=result,
    )
