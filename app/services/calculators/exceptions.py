"""
Exceptions raised by the emissions calculator.
"""


class EmissionCalculationError(Exception):
    """
    Base class for calculation failures.

    Carries the offending input field, when there is one, so API handlers can
    report it back to the caller.
    """

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class ValidationError(EmissionCalculationError):
    """Missing, malformed, negative or out-of-range input."""


class UnknownFactorError(ValidationError):
    """No emission factor exists for the requested category and type."""

    def __init__(
        self,
        category: str,
        type_: str,
        region: str | None = None,
        field: str | None = None,
        suggestion: str | None = None,
    ):
        self.category = category
        self.type = type_
        self.region = region
        self.suggestion = suggestion

        message = f"Unknown {category} type: '{type_}'"
        if region:
            message += f" for region '{region}'"
        if suggestion:
            message += f". Did you mean '{suggestion}'?"
        super().__init__(message, field=field)
