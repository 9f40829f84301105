from __future__ import annotations

from typing import Any, Dict


class JudgeError(Exception):
    """Base class for every fatal condition raised by the referee."""


class InputFormatError(JudgeError):
    """The load-time test description is malformed or inconsistent."""


class SubmissionOrderError(InputFormatError):
    def __init__(self, index: int, submit_time: int, previous_time: int):
        self.index = index
        self.submit_time = submit_time
        self.previous_time = previous_time
        super().__init__(
            f"Submission {index} is submitted at {submit_time}, before the previous one ({previous_time})"
        )


class ProtocolViolation(JudgeError):
    """The policy under test broke the exchange protocol; the run is rejected."""

    def __init__(self, reason: str, **values: Any):
        self.reason = reason
        self.values: Dict[str, Any] = values
        super().__init__(reason)


class UnknownSubmission(ProtocolViolation):
    def __init__(self, submission_id: int, current_time: int):
        super().__init__(
            f"Submission {submission_id} does not exist or is submitted after {current_time}",
            submission_id=submission_id,
            current_time=current_time,
        )


class InvalidTestId(ProtocolViolation):
    def __init__(self, test_id: int, problem_id: int, submission_id: int):
        super().__init__(
            f"Test {test_id} does not exist for problem {problem_id}",
            test_id=test_id,
            problem_id=problem_id,
            submission_id=submission_id,
        )


class UnexpectedEndOfStream(ProtocolViolation):
    def __init__(self, finished: int, total: int, current_time: int):
        super().__init__(
            f"Unexpected eof, not all submissions were judged ({finished}/{total} at {current_time})",
            finished=finished,
            total=total,
            current_time=current_time,
        )


class MalformedRequest(ProtocolViolation):
    def __init__(self, token: str):
        super().__init__(f"Expected an integer in invocation request, got {token!r}", token=token)


class SimulationTimeout(JudgeError):
    def __init__(self, max_ticks: int, finished: int, total: int):
        self.max_ticks = max_ticks
        super().__init__(f"Simulation exceeded {max_ticks} ticks with {finished}/{total} submissions finished")
