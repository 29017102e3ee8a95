"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory repository and a registry service wired to it
- A mock event publisher for asserting emitted events
- Helpers to register domains and grant roles
"""

from collections.abc import Callable
from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryRegistryRepository
from src.domain.ports import DomainRecord, ReputationMode, Role
from src.domain.service import TrustRegistry
from src.domain.verification import HashChallengeVerifier, issue_challenge

ADMIN = "admin-1"
MODERATOR = "moderator-1"
OWNER = "owner-1"


@pytest.fixture
def repository() -> InMemoryRegistryRepository:
    """Create an empty in-memory repository for each test."""
    return InMemoryRegistryRepository()


@pytest.fixture
def publisher() -> Mock:
    """Create a mock event publisher."""
    return Mock()


@pytest.fixture
def registry(repository: InMemoryRegistryRepository, publisher: Mock) -> TrustRegistry:
    """Create a weighted-mode registry with an admin and a moderator."""
    service = TrustRegistry(
        repository=repository,
        verifier=HashChallengeVerifier(),
        publisher=publisher,
        reputation_mode=ReputationMode.WEIGHTED,
    )
    service.bootstrap_admin(ADMIN)
    service.assign_role(ADMIN, MODERATOR, Role.MODERATOR)
    publisher.reset_mock()
    return service


@pytest.fixture
def unweighted_registry(repository: InMemoryRegistryRepository, publisher: Mock) -> TrustRegistry:
    """Create an unweighted-mode registry with an admin."""
    service = TrustRegistry(
        repository=repository,
        verifier=HashChallengeVerifier(),
        publisher=publisher,
        reputation_mode=ReputationMode.UNWEIGHTED,
    )
    service.bootstrap_admin(ADMIN)
    publisher.reset_mock()
    return service


@pytest.fixture
def register() -> Callable[..., DomainRecord]:
    """Return a helper registering a name for an owner with a valid proof token."""

    def _register(
        registry: TrustRegistry, owner: str, name: str, metadata: str = "meta"
    ) -> DomainRecord:
        proof = issue_challenge(name.strip().lower(), owner)
        return registry.register_domain(owner, name, metadata, proof)

    return _register
