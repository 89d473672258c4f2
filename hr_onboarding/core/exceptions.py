"""
Engine-wide exception hierarchy.

Unknown ids are not exceptional in this engine (see core.results.NotFound).
Exceptions are reserved for business-rule violations: a status transition the
lifecycle tables do not allow, a patch touching a field that cannot be
patched, an inactive template. Blueprints register handlers against these
types once.

Usage:
    from hr_onboarding.core.exceptions import InvalidTransitionError, ValidationError

    raise ValidationError("Unknown field", details={"colour": "not patchable"})
    raise InvalidTransitionError("TrainingModule", "failed", "in-progress")
"""


class ValidationError(Exception):
    """Raised when input is well-formed but violates a business rule.

    Maps to HTTP 422 in blueprint error handlers.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class InvalidTransitionError(ValidationError):
    """Raised when a status change is not allowed by the entity's lifecycle table.

    Maps to HTTP 409.

    Args:
        entity: Model name (e.g. "TrainingModule").
        old_status: Current status.
        new_status: Requested status.
    """

    def __init__(self, entity: str, old_status: str, new_status: str) -> None:
        self.entity = entity
        self.old_status = old_status
        self.new_status = new_status
        super().__init__(
            f"Invalid {entity} transition: {old_status} → {new_status}",
            details={"from": old_status, "to": new_status},
        )
