"""Domain errors raised by services and state machines."""


class ReachError(Exception):
    """Base class for recoverable domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReachError):
    """A guard or precondition failed. State is left unchanged."""


class ForbiddenError(ValidationError):
    """The actor may not perform this operation on this record."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFoundError(ReachError):
    """A referenced record does not exist."""

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource
