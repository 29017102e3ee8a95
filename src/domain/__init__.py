"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic of the trust registry:
domain records, ownership proofs, reviews and reputation, reports and
disputes, and role-gated administration. It defines its own port
interfaces for infrastructure abstraction, ensuring true hexagonal
architecture decoupling.
"""

from .exceptions import (
    AlreadyRegistered,
    AlreadyReported,
    AlreadyResolved,
    AlreadyReviewed,
    InvalidData,
    InvalidUser,
    NoPermission,
    NotFound,
    NotInDispute,
    RatingOutOfBounds,
    RegistryError,
    Unauthorized,
    VerificationFailed,
)
from .ports import (
    DomainRecord,
    Event,
    EventPublisher,
    OwnershipVerifier,
    RegistryRepository,
    RegistryStore,
    Report,
    ReputationMode,
    Review,
    Role,
    has_at_least,
)
from .service import TrustRegistry
from .verification import HashChallengeVerifier, issue_challenge, verify_ownership

__all__ = [
    "AlreadyRegistered",
    "AlreadyReported",
    "AlreadyResolved",
    "AlreadyReviewed",
    "DomainRecord",
    "Event",
    "EventPublisher",
    "HashChallengeVerifier",
    "InvalidData",
    "InvalidUser",
    "NoPermission",
    "NotFound",
    "NotInDispute",
    "OwnershipVerifier",
    "RatingOutOfBounds",
    "RegistryError",
    "RegistryRepository",
    "RegistryStore",
    "Report",
    "ReputationMode",
    "Review",
    "Role",
    "TrustRegistry",
    "Unauthorized",
    "VerificationFailed",
    "has_at_least",
    "issue_challenge",
    "verify_ownership",
]
