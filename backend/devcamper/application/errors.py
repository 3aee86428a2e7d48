class ApplicationError(Exception):
    """Base error raised by services; main.py maps each subclass to an HTTP status."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ApplicationError):
    """A bootcamp, course, review or user id did not resolve."""


class ConflictError(ApplicationError):
    """Duplicate bootcamp name, user email or review."""


class ForbiddenError(ApplicationError):
    """The caller is neither the resource owner nor an admin."""


class UnauthorizedError(ApplicationError):
    """Credentials were rejected."""


class ValidationError(ApplicationError):
    """Input was rejected by a business rule."""


class QueryParameterError(ValidationError):
    """A listing query string could not be decoded or applied."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid query parameters: {reason}")
        self.reason = reason
