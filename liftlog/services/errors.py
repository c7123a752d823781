# liftlog/services/errors.py
from typing import Optional


class LiftLogError(Exception):
    """Base for failures a caller can act on: not found, not allowed, bad input."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(LiftLogError):
    pass


class Forbidden(LiftLogError):
    """
    The row exists but belongs to somebody else.

    `message` is for the log; `public_message` is what the client sees and
    reads exactly like a NotFound.
    """

    def __init__(self, message: str, public_message: str = "not found"):
        super().__init__(message)
        self.public_message = public_message


class ValidationFailure(LiftLogError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
