"""
Domain errors raised by the service layer and mapped to HTTP responses by the API.
"""


class NotFoundError(LookupError):
    """Requested record does not exist or is not owned by the caller."""


class EventValidationError(ValueError):
    """Submitted event or task data failed validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("\n".join(errors))
