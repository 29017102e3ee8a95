"""
Trust registry service - The single entry point for registry operations.

TrustRegistry owns the repository and wires the four components together.
Each public method is one atomic call:

1. validate input shape
2. existence / duplicate / authorization checks against the store
3. apply one state transition
4. append one notification event

Steps 2-4 run inside one unit of work, so a failing call commits nothing,
not even its height. Events are handed to the publisher only after the
unit of work commits.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from .context import CallContext
from .exceptions import InvalidData, RegistryError
from .ports import (
    DomainRecord,
    Event,
    EventPublisher,
    OwnershipVerifier,
    RegistryRepository,
    Report,
    ReputationMode,
    Review,
    Role,
)
from .registry import DomainRegistry
from .reports import ReportEngine
from .reviews import ReviewEngine
from .roles import RoleStore
from .validation import is_valid_identity

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class TrustRegistry:
    """
    Domain service for the trust registry.

    The reputation mode and role-target strictness are fixed for the
    lifetime of the instance.
    """

    repository: RegistryRepository
    verifier: OwnershipVerifier
    publisher: EventPublisher
    reputation_mode: ReputationMode = ReputationMode.WEIGHTED
    strict_role_targets: bool = False

    roles: RoleStore = field(init=False)
    domains: DomainRegistry = field(init=False)
    reviews: ReviewEngine = field(init=False)
    reports: ReportEngine = field(init=False)

    def __post_init__(self) -> None:
        self.roles = RoleStore(strict_targets=self.strict_role_targets)
        self.domains = DomainRegistry(verifier=self.verifier, roles=self.roles)
        self.reviews = ReviewEngine(domains=self.domains, mode=ReputationMode(self.reputation_mode))
        self.reports = ReportEngine(domains=self.domains, roles=self.roles)

    # Identity & roles

    def assign_role(self, caller: str, target_identity: str, role: Role | str) -> None:
        self._mutate(caller, "assign_role", lambda ctx: self.roles.assign_role(ctx, target_identity, role))

    def get_user_role(self, identity: str) -> Role:
        return self._read(lambda store: self.roles.get_role(store, identity))

    def bootstrap_admin(self, identity: str) -> None:
        self._mutate(identity, "bootstrap_admin", lambda ctx: self.roles.bootstrap_admin(ctx, identity))

    # Domain registry

    def register_domain(
        self, caller: str, name: str, identity_metadata: str, proof_token: str
    ) -> DomainRecord:
        return self._mutate(
            caller,
            "register_domain",
            lambda ctx: self.domains.register_domain(ctx, name, identity_metadata, proof_token),
        )

    def update_domain_info(self, caller: str, name: str, new_metadata: str) -> DomainRecord:
        return self._mutate(
            caller,
            "update_domain_info",
            lambda ctx: self.domains.update_domain_info(ctx, name, new_metadata),
        )

    def transfer_ownership(self, caller: str, name: str, new_owner: str) -> DomainRecord:
        return self._mutate(
            caller,
            "transfer_ownership",
            lambda ctx: self.domains.transfer_ownership(ctx, name, new_owner),
        )

    def get_domain_info(self, name: str) -> DomainRecord:
        return self._read(lambda store: self.domains.get_domain_info(store, name))

    def list_domains(self, owner: str | None = None) -> list[DomainRecord]:
        return self._read(lambda store: self.domains.list_domains(store, owner))

    def verify_identity(self, caller: str, name: str) -> DomainRecord:
        return self._mutate(caller, "verify_identity", lambda ctx: self.domains.verify_identity(ctx, name))

    # Reviews & reputation

    def submit_review(self, caller: str, name: str, rating: int, comment: str = "") -> Review:
        return self._mutate(
            caller,
            "submit_review",
            lambda ctx: self.reviews.submit_review(ctx, name, rating, comment),
        )

    def list_reviews(self, name: str) -> list[Review]:
        return self._read(lambda store: self.reviews.list_reviews(store, name))

    def recompute_reputation(self, name: str) -> int:
        """Fold the stored reviews for name; equals the stored score."""
        return self._read(lambda store: self.reviews.compute_reputation(store, name))

    # Reports & disputes

    def report_domain(self, caller: str, name: str, reason_code: int, details: str) -> Report:
        return self._mutate(
            caller,
            "report_domain",
            lambda ctx: self.reports.report_domain(ctx, name, reason_code, details),
        )

    def get_report_status(self, name: str, reporter: str) -> bool:
        return self._read(lambda store: self.reports.get_report_status(store, name, reporter))

    def resolve_dispute(self, caller: str, name: str, reporter: str, status: bool) -> Report:
        return self._mutate(
            caller,
            "resolve_dispute",
            lambda ctx: self.reports.resolve_dispute(ctx, name, reporter, status),
        )

    def list_reports(self, caller: str, name: str, unresolved_only: bool = False) -> list[Report]:
        return self._read(lambda store: self.reports.list_reports(store, caller, name, unresolved_only))

    # Event log

    def list_events(self, after_height: int = 0, limit: int = 100) -> list[Event]:
        return self._read(lambda store: store.list_events(after_height, limit))

    def _mutate(self, caller: str, operation: str, apply: Callable[[CallContext], T]) -> T:
        if not is_valid_identity(caller):
            raise InvalidData("caller identity required")
        try:
            with self.repository.unit_of_work() as store:
                ctx = CallContext(store=store, caller=caller, height=store.next_height())
                result = apply(ctx)
        except RegistryError as e:
            logger.debug("%s rejected for %s: %s", operation, caller, e.kind)
            raise

        for event in ctx.events:
            self.publisher.publish(event)
        return result

    def _read(self, query: Callable[..., T]) -> T:
        with self.repository.unit_of_work() as store:
            return query(store)
