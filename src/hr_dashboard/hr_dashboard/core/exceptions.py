class DomainError(Exception):
    """Base exception for business rule violations."""


class ForbiddenView(DomainError):
    """Raised when the session's role cannot reach the requested view."""


class NoActiveModal(DomainError):
    """Raised when closing a modal while no modal view is current."""


class SessionTerminated(DomainError):
    """Raised when a logged-out or disposed session is asked to do work."""


class DuplicateTask(DomainError):
    """Raised when a refresh task kind is registered twice."""


class SchedulerStopped(DomainError):
    """Raised when a stopped scheduler is started or registered against again."""


class CalculationError(DomainError):
    """Raised by a payroll calculator. Recorded on the payroll record, never rethrown."""


class DataFetchError(DomainError):
    """Raised when the directory or the attendance source cannot deliver data."""


class NotFound(DomainError):
    """Raised when an employee id is not present in the directory."""

