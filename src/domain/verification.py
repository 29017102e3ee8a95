"""
Verification engine - Challenge/response ownership proofs.

The expected proof for (name, owner) is the hex SHA-256 digest of the
UTF-8 name followed by the SHA-256 digest of the owner identity. The
owner obtains it from the challenge endpoint (standing in for a DNS TXT
record or oracle attestation) and submits it when registering.

This is a placeholder for an external attestation service. Anything
implementing the OwnershipVerifier port can replace HashChallengeVerifier
without touching the registry.
"""

import hashlib
import secrets


def issue_challenge(name: str, claimed_owner: str) -> str:
    """Compute the proof token a legitimate owner of `name` would submit."""
    owner_digest = hashlib.sha256(claimed_owner.encode()).digest()
    return hashlib.sha256(name.encode() + owner_digest).hexdigest()


def verify_ownership(name: str, proof_token: str, claimed_owner: str) -> bool:
    """
    Check a proof token against the deterministic challenge.

    Both sides are hashed before a constant-time comparison, so the
    comparison time does not depend on the length of the submitted token.

    Args:
        name: Normalized domain name
        proof_token: Token submitted by the registrant
        claimed_owner: Identity claiming the name

    Returns:
        True if the token matches the challenge for (name, claimed_owner)
    """
    expected = issue_challenge(name, claimed_owner)
    return secrets.compare_digest(
        hashlib.sha256(expected.encode()).digest(),
        hashlib.sha256(proof_token.encode()).digest(),
    )


class HashChallengeVerifier:
    """
    Implements OwnershipVerifier protocol via the hash challenge.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Stateless, so one instance can be shared.
    """

    def verify(self, name: str, proof_token: str, claimed_owner: str) -> bool:
        return verify_ownership(name, proof_token, claimed_owner)

    def issue(self, name: str, claimed_owner: str) -> str:
        return issue_challenge(name, claimed_owner)
