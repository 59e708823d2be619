"""Error taxonomy for the progression engine.

Only three conditions are ever raised:
- InvalidSessionState: a workout session operation from a disallowed state
- PersistenceError: the user store failed to load or save
- HealthSyncError: the health-data gateway rejected a read or commit

NegativeExperienceError guards the leveling math against XP it cannot
represent. Dangling companion references are never errors.
"""

from __future__ import annotations


class CompanionFitError(Exception):
    """Base class for all engine errors."""


class InvalidSessionState(CompanionFitError):
    def __init__(self, *, operation: str, state: str) -> None:
        super().__init__(f"Cannot {operation} a workout session in state {state!r}")
        self.operation = operation
        self.state = state


class PersistenceError(CompanionFitError):
    def __init__(self, *, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class HealthSyncError(CompanionFitError):
    def __init__(self, *, operation: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.status_code = status_code


class NegativeExperienceError(CompanionFitError, ValueError):
    def __init__(self, amount: int) -> None:
        super().__init__(f"Experience grants must be non-negative, got {amount}")
        self.amount = amount
