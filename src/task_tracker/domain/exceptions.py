from typing import Any


class RecordNormalizationError(Exception):
    """Raised when a single ledger record cannot be turned into a task view."""


class DecodeError(RecordNormalizationError):
    """Raised when a ledger status code does not map to a known status."""

    def __init__(self, status_code: Any) -> None:
        super().__init__(f"Unknown task status code {status_code!r}.")
        self.status_code = status_code


class EndDateOutOfRangeError(RecordNormalizationError):
    """Raised when a ledger deadline falls outside the representable calendar."""

    def __init__(self, end_date: Any) -> None:
        super().__init__(f"Task end date {end_date!r} is out of range.")
        self.end_date = end_date


class LedgerTransportError(Exception):
    """Raised when the ledger is unreachable or a call is reverted."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Ledger call '{operation}' failed: {reason}")
        self.operation = operation
        self.reason = reason


class ActionNotPermittedError(Exception):
    """Raised when a caller requests an action the task status or their roles do not allow."""

    def __init__(self, task_id: int, action: str, reason: str) -> None:
        super().__init__(f"Action '{action}' is not permitted on task {task_id}: {reason}")
        self.task_id = task_id
        self.action = action
        self.reason = reason


class InvalidValueError(ValueError):
    """Raised when an identifier, amount or range bound fails validation."""

    def __init__(self, kind: str, value: Any, reason: str) -> None:
        super().__init__(f"Invalid {kind} {value!r}: {reason}")
        self.kind = kind
        self.value = value
        self.reason = reason
