"""
Shared fixtures for adversarial tests.

Provides a registry with one registered domain, a moderator and an admin,
for race condition, privilege escalation and proof forgery tests.
"""

from unittest.mock import Mock

import pytest

from src.adapters.repository.memory import InMemoryRegistryRepository
from src.domain.ports import Role
from src.domain.service import TrustRegistry
from src.domain.verification import HashChallengeVerifier, issue_challenge

TARGET = "target.btc"


@pytest.fixture
def target_registry() -> TrustRegistry:
    """Create a registry where owner-1 owns target.btc."""
    registry = TrustRegistry(
        repository=InMemoryRegistryRepository(),
        verifier=HashChallengeVerifier(),
        publisher=Mock(),
    )
    registry.bootstrap_admin("admin-1")
    registry.assign_role("admin-1", "moderator-1", Role.MODERATOR)
    registry.register_domain("owner-1", TARGET, "m", issue_challenge(TARGET, "owner-1"))
    return registry
