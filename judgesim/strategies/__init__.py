"""
Reference scheduling policies.
"""

from .base import Policy, Tick, TrackingPolicy
from .strategy_FCFS import FCFSPolicy
from .strategy_round_robin import RoundRobinPolicy
from .strategy_expected_cost import ExpectedCostPolicy
from .strategy_progress import ProgressPolicy

STRATEGIES = {
    "FCFS": FCFSPolicy,
    "RR": RoundRobinPolicy,
    "expected_cost": ExpectedCostPolicy,
    "progress": ProgressPolicy,
}

__all__ = [
    "Policy",
    "Tick",
    "TrackingPolicy",
    "FCFSPolicy",
    "RoundRobinPolicy",
    "ExpectedCostPolicy",
    "ProgressPolicy",
    "STRATEGIES",
]
