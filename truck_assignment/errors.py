# errors.py
# Every failure the assignment workflow can show to the user.


class PlannerError(Exception):
    """Base error; `message` is what the user sees."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(PlannerError):
    """Detected locally; never reaches the network."""


class InvalidStateError(PlannerError):
    """A change was attempted while a submission is in flight or done."""


class AuthorizationError(PlannerError):
    """Missing, expired or refused bearer credential. Not retried."""


class TransportError(PlannerError):
    """The request failed before a usable response came back."""


class AssignmentRejected(PlannerError):
    """The backend answered but refused the assignment."""

    def __init__(self, message, response=None):
        super().__init__(message)
        self.response = response
