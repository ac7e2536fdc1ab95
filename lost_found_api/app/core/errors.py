"""
Domain errors raised by the service layer.

Services signal failures with ``ValueError`` subclasses; endpoint
handlers translate them into HTTP responses.  Anything that is not one
of these is treated as an unhandled failure and rendered as a generic
server error by the application.
"""


class NotFoundError(ValueError):
    """A referenced item, user or pickup does not exist."""


class DuplicateEntityError(ValueError):
    """A record with the same unique key already exists."""


class InvalidCredentialsError(ValueError):
    """Login with an unknown email or a wrong password."""


class InvalidTransitionError(ValueError):
    """A pickup status change that the state machine does not allow."""
