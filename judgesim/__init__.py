"""
Referee simulator for judge scheduling policies: submissions, invokers,
completion events and power-mean scoring.
"""

from .config import JudgeConfig
from .catalog import Catalog, Problem
from .submission import Submission, SubmissionRegistry, Verdict
from .invokers import DispatchResult, DispatchStatus, InvokerPool
from .events import CompletionEvent, CompletionQueue
from .channel import PolicyChannel, TextChannel, serve_policy
from .loader import JudgeInput, load_judge_input, parse_judge_input, profile_submissions
from .simulator import JudgeOutcome, JudgeResult, JudgeSim, run_judge
from .scoring import power_mean_score
from .workload import generate_judge_input
from . import strategies

__all__ = [
    "JudgeConfig",
    "Catalog",
    "Problem",
    "Submission",
    "SubmissionRegistry",
    "Verdict",
    "DispatchResult",
    "DispatchStatus",
    "InvokerPool",
    "CompletionEvent",
    "CompletionQueue",
    "PolicyChannel",
    "TextChannel",
    "serve_policy",
    "JudgeInput",
    "load_judge_input",
    "parse_judge_input",
    "profile_submissions",
    "JudgeOutcome",
    "JudgeResult",
    "JudgeSim",
    "run_judge",
    "power_mean_score",
    "generate_judge_input",
    "strategies",
]
