class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class OverrideFailed(DomainError):
    """Raised when a manager override could not be written to the event store.

    The caller may retry; nothing is retried automatically.
    """


class MalformedEventSkipped(DomainError):
    """Raised internally for an event that cannot be folded.

    Never leaves a reconciliation pass: the event is logged and skipped.
    """

    def __init__(self, message: str, raw=None):
        super().__init__(message)
        self.raw = raw
