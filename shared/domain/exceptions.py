"""
Domain errors.

Every failure raised by the booking core is one of these. They describe a
business-rule violation, never an infrastructure fault, so nothing retries
them: the HTTP layer turns them into user-facing responses.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable


class DomainError(Exception):
    """Base class for business-rule violations"""

    default_message = "Operation not allowed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError, ValueError):
    """Invalid input (missing field, reversed date range, bad guest count...)"""

    default_message = "Invalid input"

    def __init__(self, message: str | None = None, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class ConflictError(DomainError):
    """The requested dates overlap days that are already unavailable"""

    default_message = "Selected dates are unavailable"

    def __init__(self, message: str | None = None, *, dates: Iterable[date] = ()):
        self.dates = sorted(set(dates))
        if message is None and self.dates:
            listed = ", ".join(d.isoformat() for d in self.dates)
            message = f"Selected dates are unavailable: {listed}"
        super().__init__(message)


class InvalidStateTransition(DomainError):
    """A lifecycle transition was requested from a state that does not allow it"""

    def __init__(self, current: str, transition: str, allowed: Iterable[str]):
        self.current = current
        self.transition = transition
        self.allowed = tuple(allowed)
        allowed_text = ", ".join(self.allowed) or "none"
        super().__init__(
            f"Cannot {transition} a booking that is {current} "
            f"(allowed from: {allowed_text})"
        )


class NotAuthorized(DomainError):
    default_message = "Not authorized to perform this action"


class NotFound(DomainError):
    default_message = "Not found"
