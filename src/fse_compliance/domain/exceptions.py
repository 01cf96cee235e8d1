"""Domain exceptions for the assessment workflow."""


class AssessmentValidationError(ValueError):
    """Raised when a mutation receives a value outside its domain.

    This signals a contract violation by the caller, not a user-facing error.
    """


class PreconditionNotMet(Exception):
    """Raised when a workflow operation is not allowed in the current situation."""

    default_message = "Operation is not allowed in the current state"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class SignaturesRequiredError(PreconditionNotMet):
    """Raised when finalizing without both signatures."""

    default_message = (
        "Both inspector and facility owner signatures are required "
        "to complete the assessment."
    )


class InvalidTransitionError(PreconditionNotMet):
    """Raised when a transition is invoked from a state that does not allow it."""

    def __init__(self, operation: str, state: str):
        super().__init__(f"Cannot {operation} while assessment is {state}")
        self.operation = operation
        self.state = state


class GeocodingError(Exception):
    """Raised when an address or coordinate lookup fails."""


class LocationUnavailableError(Exception):
    """Raised when the current device location cannot be determined."""


class NotificationError(Exception):
    """Raised when a summary notification cannot be delivered."""
