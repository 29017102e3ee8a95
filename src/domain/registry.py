"""
Domain registry - Lifecycle of domain records.

Identity Verification State Machine
===================================

States:
- Unverified: identity_verified = False
- Verified:   identity_verified = True

Transitions:
    (none)     -> Unverified  register_domain (ownership proof required)
    any        -> Unverified  update_domain_info (new metadata voids the proof)
    any        -> Unverified  transfer_ownership (verification is owner-specific)
    any        -> Verified    verify_identity (moderator or admin only)

Records are never deleted; there is no terminal state.
"""

from dataclasses import dataclass, replace

from .context import CallContext
from .exceptions import AlreadyRegistered, InvalidData, NotFound, Unauthorized, VerificationFailed
from .ports import DomainRecord, OwnershipVerifier, RegistryStore, Role
from .roles import RoleStore
from .validation import (
    MAX_METADATA_BYTES,
    MAX_TOKEN_BYTES,
    is_valid_identity,
    require_name,
    require_text,
)


@dataclass
class DomainRegistry:
    """
    Domain component owning DomainRecord transitions.

    Depends on the verifier for registration and on the role store for
    privileged transitions.
    """

    verifier: OwnershipVerifier
    roles: RoleStore

    def register_domain(
        self, ctx: CallContext, name: str, identity_metadata: str, proof_token: str
    ) -> DomainRecord:
        """
        Register name to the caller after checking the ownership proof.

        Raises:
            InvalidData: Empty or oversized name, metadata or token
            AlreadyRegistered: A record for name exists
            VerificationFailed: Proof does not match the challenge
        """
        name = require_name(name)
        require_text(identity_metadata, "identity_metadata", MAX_METADATA_BYTES)
        require_text(proof_token, "proof_token", MAX_TOKEN_BYTES)

        if ctx.store.get_domain(name) is not None:
            raise AlreadyRegistered(name)
        if not self.verifier.verify(name, proof_token, ctx.caller):
            raise VerificationFailed(name)

        record = DomainRecord(
            name=name,
            owner=ctx.caller,
            identity_metadata=identity_metadata,
            identity_verified=False,
            reputation_score=0,
            registered_at=ctx.height,
            updated_at=ctx.height,
        )
        ctx.store.insert_domain(record)
        ctx.emit("DomainRegistered", domain=name, owner=ctx.caller)
        return record

    def update_domain_info(self, ctx: CallContext, name: str, new_metadata: str) -> DomainRecord:
        """Replace metadata (owner only). Resets identity verification."""
        require_text(new_metadata, "identity_metadata", MAX_METADATA_BYTES)
        record = self._owned(ctx, name)

        record = replace(
            record,
            identity_metadata=new_metadata,
            identity_verified=False,
            updated_at=ctx.height,
        )
        ctx.store.update_domain(record)
        ctx.emit("DomainUpdated", domain=record.name)
        return record

    def transfer_ownership(self, ctx: CallContext, name: str, new_owner: str) -> DomainRecord:
        """Hand the record to new_owner (owner only). Resets identity verification."""
        if not is_valid_identity(new_owner):
            raise InvalidData("new_owner must be a valid identity")
        record = self._owned(ctx, name)

        previous_owner = record.owner
        record = replace(
            record,
            owner=new_owner,
            identity_verified=False,
            updated_at=ctx.height,
        )
        ctx.store.update_domain(record)
        ctx.emit(
            "DomainTransferred",
            domain=record.name,
            previous_owner=previous_owner,
            new_owner=new_owner,
        )
        return record

    def get_domain_info(self, store: RegistryStore, name: str) -> DomainRecord:
        return self.require_domain(store, name)

    def list_domains(self, store: RegistryStore, owner: str | None = None) -> list[DomainRecord]:
        return store.list_domains(owner)

    def verify_identity(self, ctx: CallContext, name: str) -> DomainRecord:
        """Mark the record's identity as verified (moderator or admin only)."""
        self.roles.require(ctx.store, ctx.caller, Role.MODERATOR)
        record = self.require_domain(ctx.store, name)

        record = replace(record, identity_verified=True, updated_at=ctx.height)
        ctx.store.update_domain(record)
        ctx.emit("IdentityVerified", domain=record.name)
        return record

    def require_domain(self, store: RegistryStore, name: str) -> DomainRecord:
        """Return the record for name or raise NotFound."""
        name = require_name(name)
        record = store.get_domain(name)
        if record is None:
            raise NotFound(name)
        return record

    def _owned(self, ctx: CallContext, name: str) -> DomainRecord:
        record = self.require_domain(ctx.store, name)
        if record.owner != ctx.caller:
            raise Unauthorized(record.name)
        return record
