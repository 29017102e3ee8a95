"""
Port interfaces - Records, enums and Protocol definitions.

This module defines the records the registry persists and the interfaces
(ports) that the domain requires from infrastructure. Adapters implement
these protocols via structural subtyping.
"""

from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


class Role(str, Enum):
    """
    Closed capability set for registry callers.

    Roles are ordered: ADMIN is a superset of MODERATOR, which is a
    superset of NONE. Use has_at_least() instead of comparing strings.
    """

    NONE = "none"
    MODERATOR = "moderator"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def has_at_least(self, required: "Role") -> bool:
        return self.rank >= required.rank


_ROLE_RANK = {Role.NONE: 0, Role.MODERATOR: 1, Role.ADMIN: 2}


def has_at_least(role: Role, required: Role) -> bool:
    """Capability predicate: does `role` grant everything `required` grants?"""
    return role.has_at_least(required)


class ReputationMode(str, Enum):
    """Reputation fold variant, fixed per deployment."""

    WEIGHTED = "weighted"
    UNWEIGHTED = "unweighted"


@dataclass(frozen=True)
class DomainRecord:
    """
    Canonical record for a registered name.

    State machine: Unverified <-> Verified. Registration, metadata updates
    and ownership transfers land in Unverified (identity_verified=False);
    only verify_identity moves a record to Verified.
    """

    name: str
    owner: str
    identity_metadata: str
    identity_verified: bool
    reputation_score: int
    registered_at: int
    updated_at: int


@dataclass(frozen=True)
class Review:
    """One review per (name, reviewer); never overwritten."""

    name: str
    reviewer: str
    rating: int
    comment: str
    reviewed_at: int
    weight: int = 1


@dataclass(frozen=True)
class Report:
    """
    One abuse report per (name, reporter).

    resolved moves false -> true exactly once; upheld records the
    moderator's adjudication and stays None until then.
    """

    name: str
    reporter: str
    reason_code: int
    details: str
    reported_at: int
    resolved: bool = False
    upheld: bool | None = None
    resolved_at: int | None = None


@dataclass(frozen=True)
class Event:
    """Notification record appended once per successful mutation."""

    height: int
    name: str
    caller: str
    payload: dict[str, Any] = field(default_factory=dict)


class RegistryStore(Protocol):
    """
    Keyed containers for one unit of work.

    Every read and write made through a store obtained from
    RegistryRepository.unit_of_work() commits together or not at all.
    """

    def next_height(self) -> int:
        """Advance the height counter and return the new value."""
        ...

    def get_domain(self, name: str) -> DomainRecord | None: ...

    def list_domains(self, owner: str | None = None) -> list[DomainRecord]: ...

    def insert_domain(self, record: DomainRecord) -> None: ...

    def update_domain(self, record: DomainRecord) -> None: ...

    def get_role(self, identity: str) -> Role:
        """Return the assigned role, Role.NONE when absent."""
        ...

    def set_role(self, identity: str, role: Role) -> None:
        """Overwrite the role; Role.NONE removes the assignment."""
        ...

    def has_admin(self) -> bool: ...

    def get_review(self, name: str, reviewer: str) -> Review | None: ...

    def insert_review(self, review: Review) -> None: ...

    def list_reviews(self, name: str) -> list[Review]:
        """Reviews for a name ordered by (reviewed_at, reviewer)."""
        ...

    def get_report(self, name: str, reporter: str) -> Report | None: ...

    def insert_report(self, report: Report) -> None: ...

    def update_report(self, report: Report) -> None: ...

    def list_reports(self, name: str) -> list[Report]: ...

    def append_event(self, event: Event) -> None: ...

    def list_events(self, after_height: int = 0, limit: int = 100) -> list[Event]: ...


class RegistryRepository(Protocol):
    """Port interface for registry persistence."""

    def unit_of_work(self) -> AbstractContextManager[RegistryStore]:
        """
        Open one atomic, serialized unit of work.

        The store yielded is valid only inside the context. Leaving the
        context normally commits; leaving it with an exception rolls back.
        """
        ...


class OwnershipVerifier(Protocol):
    """Port interface for ownership proof checks."""

    def verify(self, name: str, proof_token: str, claimed_owner: str) -> bool:
        """
        Decide whether proof_token proves claimed_owner controls name.

        Must be a pure predicate: no side effects, no mutable state.
        """
        ...


class EventPublisher(Protocol):
    """Port interface for delivering committed events to indexers."""

    def publish(self, event: Event) -> None:
        """Deliver one committed event."""
        ...
