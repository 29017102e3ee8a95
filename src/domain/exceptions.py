"""
Domain exceptions - Semantic error types for the trust registry.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Every failure is an expected outcome the caller must branch on;
the API layer maps each kind to an HTTP status code.
"""


class RegistryError(Exception):
    """Base class for registry domain errors."""

    kind = "RegistryError"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind)
        self.message = message or self.kind


class NotFound(RegistryError):
    """Lookup miss for a domain, review or report."""

    kind = "NotFound"


class Unauthorized(RegistryError):
    """Caller is not the owner of the domain."""

    kind = "Unauthorized"


class NoPermission(RegistryError):
    """Caller lacks the role required by the operation."""

    kind = "NoPermission"


class AlreadyRegistered(RegistryError):
    """Name already has a domain record."""

    kind = "AlreadyRegistered"


class AlreadyReviewed(RegistryError):
    """Reviewer already submitted a review for this name."""

    kind = "AlreadyReviewed"


class AlreadyReported(RegistryError):
    """Reporter already filed a report for this name."""

    kind = "AlreadyReported"


class NotInDispute(RegistryError):
    """Report cannot be resolved in its current state."""

    kind = "NotInDispute"


class AlreadyResolved(NotInDispute):
    """Report was already resolved (resolution is one-way)."""

    kind = "AlreadyResolved"


class InvalidData(RegistryError):
    """Empty, oversized or malformed input."""

    kind = "InvalidData"


class InvalidUser(RegistryError):
    """Role assignment target failed validation."""

    kind = "InvalidUser"


class VerificationFailed(RegistryError):
    """Ownership proof does not match the challenge."""

    kind = "VerificationFailed"


class RatingOutOfBounds(RegistryError):
    """Review rating outside [-5, 5]."""

    kind = "RatingOutOfBounds"
