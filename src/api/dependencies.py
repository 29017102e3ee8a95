"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting the registry
service and the caller identity into routes.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from src.adapters.events.console import ConsoleEventPublisher
from src.domain.ports import RegistryRepository, ReputationMode
from src.domain.service import TrustRegistry
from src.domain.verification import HashChallengeVerifier

# Module-level singletons - both are stateless
_event_publisher = ConsoleEventPublisher()
_verifier = HashChallengeVerifier()


def get_event_publisher() -> ConsoleEventPublisher:
    """Get console event publisher (singleton)."""
    return _event_publisher


def get_verifier() -> HashChallengeVerifier:
    """Get hash challenge verifier (singleton)."""
    return _verifier


def build_registry(
    repository: RegistryRepository,
    reputation_mode: ReputationMode = ReputationMode.WEIGHTED,
    strict_role_targets: bool = False,
) -> TrustRegistry:
    """
    Create the registry service with injected dependencies.

    Wires together the repository, verifier and event publisher.
    """
    return TrustRegistry(
        repository=repository,
        verifier=get_verifier(),
        publisher=get_event_publisher(),
        reputation_mode=reputation_mode,
        strict_role_targets=strict_role_targets,
    )


def get_registry(request: Request) -> TrustRegistry:
    """
    Get the registry service from app state.

    The registry is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.registry


# Caller identity header for OpenAPI documentation. The gateway in front of
# the service authenticates the caller and sets this header.
identity_header = APIKeyHeader(name="X-Identity", auto_error=False)


def get_caller_identity(identity: str | None = Depends(identity_header)) -> str:
    """
    Extract the authenticated caller identity.

    Returns:
        The caller identity, stripped of surrounding whitespace

    Raises:
        HTTPException: 401 when the header is missing or blank
    """
    if identity is None or not identity.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Caller identity required",
        )
    return identity.strip()
