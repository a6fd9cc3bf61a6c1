"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """One or more business rules were violated.

    Every violation is kept in ``violations`` so callers can report them
    all at once; the message is the violations joined with ", ".
    """

    def __init__(self, violations: str | list[str]) -> None:
        if isinstance(violations, str):
            violations = [violations]
        self.violations = list(violations)
        super().__init__(", ".join(self.violations))


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidStatusError(DomainException):
    """A status value is not part of the order status set."""


class InvalidTransitionError(DomainException):
    """A status is valid but not reachable from the current one."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Invalid status transition from {current} to {target}")


class DependencyUnavailableError(DomainException):
    """A backing store failed to respond.

    The message stays generic; the store that raised it logs the
    underlying cause.
    """

    def __init__(self, message: str = "Order store is unavailable") -> None:
        super().__init__(message)


class DuplicateOrderCodeError(ValidationError):
    """The store already holds an order with this order code."""

    def __init__(self, order_code: str) -> None:
        self.order_code = order_code
        super().__init__(f"Order code {order_code} already exists")
