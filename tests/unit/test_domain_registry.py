"""
Unit tests for the domain registry lifecycle.

Tests cover registration with ownership proofs, owner-only mutations,
the identity verification state machine and emitted events.
"""

from collections.abc import Callable
from unittest.mock import Mock

import pytest

from src.domain.exceptions import (
    AlreadyRegistered,
    InvalidData,
    NoPermission,
    NotFound,
    Unauthorized,
    VerificationFailed,
)
from src.domain.service import TrustRegistry
from src.domain.verification import issue_challenge


class TestRegisterDomain:
    """Tests for register_domain."""

    def test_register_creates_unverified_record(self, registry: TrustRegistry) -> None:
        """A new record is owned by the caller, unverified, with zero reputation."""
        token = issue_challenge("example.btc", "owner-1")
        record = registry.register_domain("owner-1", "example.btc", "m", token)

        assert record.name == "example.btc"
        assert record.owner == "owner-1"
        assert record.identity_metadata == "m"
        assert record.identity_verified is False
        assert record.reputation_score == 0
        assert registry.get_domain_info("example.btc") == record

    def test_registered_at_is_call_height(self, registry: TrustRegistry) -> None:
        """registered_at is the height assigned to the registering call."""
        events_before = registry.list_events()
        token = issue_challenge("example.btc", "owner-1")
        record = registry.register_domain("owner-1", "example.btc", "m", token)

        assert record.registered_at == events_before[-1].height + 1
        assert record.updated_at == record.registered_at

    def test_heights_increase(self, registry: TrustRegistry, register: Callable) -> None:
        """Later registrations get strictly greater heights."""
        first = register(registry, "owner-1", "a.btc")
        second = register(registry, "owner-1", "b.btc")
        assert second.registered_at > first.registered_at

    def test_name_is_normalized(self, registry: TrustRegistry) -> None:
        """Names are stripped and lowercased before proof check and storage."""
        token = issue_challenge("example.btc", "owner-1")
        record = registry.register_domain("owner-1", "  Example.BTC ", "m", token)

        assert record.name == "example.btc"
        assert registry.get_domain_info("EXAMPLE.btc").name == "example.btc"

    def test_proof_over_unnormalized_name_rejected(self, registry: TrustRegistry) -> None:
        """Proofs bind the normalized name, not the submitted spelling."""
        token = issue_challenge("Example.btc", "owner-1")

        with pytest.raises(VerificationFailed):
            registry.register_domain("owner-1", "Example.btc", "m", token)

    def test_register_twice_rejected(self, registry: TrustRegistry, register: Callable) -> None:
        """A second registration fails and leaves the first record unchanged."""
        first = register(registry, "owner-1", "example.btc", "m")

        with pytest.raises(AlreadyRegistered):
            register(registry, "owner-1", "example.btc", "other")
        with pytest.raises(AlreadyRegistered):
            register(registry, "owner-2", "example.btc", "other")

        assert registry.get_domain_info("example.btc") == first

    def test_wrong_proof_rejected(self, registry: TrustRegistry) -> None:
        """A proof issued for another owner fails verification."""
        token = issue_challenge("example.btc", "owner-2")

        with pytest.raises(VerificationFailed):
            registry.register_domain("owner-1", "example.btc", "m", token)
        with pytest.raises(NotFound):
            registry.get_domain_info("example.btc")

    @pytest.mark.parametrize(
        ("name", "metadata", "token"),
        [
            ("", "m", "token"),
            ("   ", "m", "token"),
            ("example.btc", "", "token"),
            ("example.btc", "m", ""),
            ("a" * 254, "m", "token"),
            ("example.btc", "m" * 513, "token"),
        ],
    )
    def test_invalid_data_rejected(
        self, registry: TrustRegistry, name: str, metadata: str, token: str
    ) -> None:
        """Empty or oversized inputs are rejected before any lookup."""
        with pytest.raises(InvalidData):
            registry.register_domain("owner-1", name, metadata, token)

    def test_name_limit_counts_bytes(self, registry: TrustRegistry) -> None:
        """253 bytes is the limit, measured in UTF-8."""
        name = "é" * 127  # 254 bytes
        with pytest.raises(InvalidData):
            registry.register_domain("owner-1", name, "m", issue_challenge(name, "owner-1"))

    def test_boundary_lengths_accepted(self, registry: TrustRegistry) -> None:
        """Inputs exactly at their limits are accepted."""
        name = "a" * 253
        record = registry.register_domain(
            "owner-1", name, "m" * 512, issue_challenge(name, "owner-1")
        )
        assert record.name == name

    def test_duplicate_checked_before_proof(
        self, registry: TrustRegistry, register: Callable
    ) -> None:
        """An existing name yields AlreadyRegistered even with a bad proof."""
        register(registry, "owner-1", "example.btc")
        with pytest.raises(AlreadyRegistered):
            registry.register_domain("owner-2", "example.btc", "m", "bogus")

    def test_emits_domain_registered(self, registry: TrustRegistry, publisher: Mock) -> None:
        """Registration publishes DomainRegistered with name and owner."""
        registry.register_domain(
            "owner-1", "example.btc", "m", issue_challenge("example.btc", "owner-1")
        )

        event = publisher.publish.call_args[0][0]
        assert event.name == "DomainRegistered"
        assert event.payload == {"domain": "example.btc", "owner": "owner-1"}

    def test_failed_registration_consumes_no_height(
        self, registry: TrustRegistry, register: Callable
    ) -> None:
        """A rejected call commits nothing, not even a height increment."""
        first = register(registry, "owner-1", "a.btc")
        with pytest.raises(VerificationFailed):
            registry.register_domain("owner-1", "b.btc", "m", "bogus")
        second = register(registry, "owner-1", "c.btc")

        assert second.registered_at == first.registered_at + 1


class TestUpdateDomainInfo:
    """Tests for update_domain_info."""

    def test_owner_updates_metadata(self, registry: TrustRegistry, register: Callable) -> None:
        """Metadata is replaced; reputation and registration height survive."""
        original = register(registry, "owner-1", "example.btc", "old")
        registry.submit_review("reviewer-x", "example.btc", 2, "")

        updated = registry.update_domain_info("owner-1", "example.btc", "new")

        assert updated.identity_metadata == "new"
        assert updated.reputation_score == 2
        assert updated.registered_at == original.registered_at
        assert updated.owner == "owner-1"

    def test_update_resets_identity_verification(
        self, registry: TrustRegistry, register: Callable
    ) -> None:
        """New metadata invalidates a previous identity verification."""
        register(registry, "owner-1", "example.btc")
        registry.verify_identity("moderator-1", "example.btc")

        updated = registry.update_domain_info("owner-1", "example.btc", "new")
        assert updated.identity_verified is False

    def test_non_owner_rejected(self, registry: TrustRegistry, register: Callable) -> None:
        """Only the owner may update; admins are not owners."""
        register(registry, "owner-1", "example.btc", "old")

        with pytest.raises(Unauthorized):
            registry.update_domain_info("owner-2", "example.btc", "new")
        with pytest.raises(Unauthorized):
            registry.update_domain_info("admin-1", "example.btc", "new")
        assert registry.get_domain_info("example.btc").identity_metadata == "old"

    def test_unknown_domain(self, registry: TrustRegistry) -> None:
        """Updating an unregistered name is NotFound."""
        with pytest.raises(NotFound):
            registry.update_domain_info("owner-1", "missing.btc", "new")

    def test_empty_metadata_checked_first(self, registry: TrustRegistry) -> None:
        """Empty metadata is InvalidData even for unknown names."""
        with pytest.raises(InvalidData):
            registry.update_domain_info("owner-1", "missing.btc", "")

    def test_emits_domain_updated(
        self, registry: TrustRegistry, register: Callable, publisher: Mock
    ) -> None:
        """Update publishes DomainUpdated."""
        register(registry, "owner-1", "example.btc")
        registry.update_domain_info("owner-1", "example.btc", "new")

        event = publisher.publish.call_args[0][0]
        assert event.name == "DomainUpdated"
        assert event.payload == {"domain": "example.btc"}


class TestTransferOwnership:
    """Tests for transfer_ownership."""

    def test_transfer_moves_ownership(self, registry: TrustRegistry, register: Callable) -> None:
        """New owner takes over; metadata, reputation and height survive."""
        original = register(registry, "owner-1", "example.btc", "m")
        registry.submit_review("reviewer-x", "example.btc", 4, "")

        record = registry.transfer_ownership("owner-1", "example.btc", "owner-2")

        assert record.owner == "owner-2"
        assert record.identity_metadata == "m"
        assert record.reputation_score == 4
        assert record.registered_at == original.registered_at

    def test_transfer_resets_identity_verification(
        self, registry: TrustRegistry, register: Callable
    ) -> None:
        """Verification is owner-specific and does not survive a transfer."""
        register(registry, "owner-1", "example.btc")
        assert registry.verify_identity("moderator-1", "example.btc").identity_verified is True

        record = registry.transfer_ownership("owner-1", "example.btc", "owner-2")
        assert record.identity_verified is False

    def test_previous_owner_loses_control(
        self, registry: TrustRegistry, register: Callable
    ) -> None:
        """After transfer the old owner is Unauthorized, the new one is not."""
        register(registry, "owner-1", "example.btc")
        registry.transfer_ownership("owner-1", "example.btc", "owner-2")

        with pytest.raises(Unauthorized):
            registry.update_domain_info("owner-1", "example.btc", "x")
        registry.update_domain_info("owner-2", "example.btc", "y")

    def test_non_owner_rejected(self, registry: TrustRegistry, register: Callable) -> None:
        """Only the owner may transfer."""
        register(registry, "owner-1", "example.btc")
        with pytest.raises(Unauthorized):
            registry.transfer_ownership("owner-2", "example.btc", "owner-2")
        assert registry.get_domain_info("example.btc").owner == "owner-1"

    def test_unknown_domain(self, registry: TrustRegistry) -> None:
        """Transferring an unregistered name is NotFound."""
        with pytest.raises(NotFound):
            registry.transfer_ownership("owner-1", "missing.btc", "owner-2")

    def test_empty_new_owner_rejected(self, registry: TrustRegistry, register: Callable) -> None:
        """The new owner must be a valid identity."""
        register(registry, "owner-1", "example.btc")
        with pytest.raises(InvalidData):
            registry.transfer_ownership("owner-1", "example.btc", "")

    def test_emits_domain_transferred(
        self, registry: TrustRegistry, register: Callable, publisher: Mock
    ) -> None:
        """Transfer publishes DomainTransferred with both owners."""
        register(registry, "owner-1", "example.btc")
        registry.transfer_ownership("owner-1", "example.btc", "owner-2")

        event = publisher.publish.call_args[0][0]
        assert event.name == "DomainTransferred"
        assert event.payload == {
            "domain": "example.btc",
            "previous_owner": "owner-1",
            "new_owner": "owner-2",
        }


class TestVerifyIdentity:
    """Tests for verify_identity."""

    def test_moderator_verifies(self, registry: TrustRegistry, register: Callable) -> None:
        """A moderator moves the record to Verified and nothing else changes."""
        original = register(registry, "owner-1", "example.btc")

        record = registry.verify_identity("moderator-1", "example.btc")

        assert record.identity_verified is True
        assert record.owner == original.owner
        assert record.identity_metadata == original.identity_metadata
        assert record.reputation_score == original.reputation_score

    def test_admin_verifies(self, registry: TrustRegistry, register: Callable) -> None:
        """Admin is a superset of moderator."""
        register(registry, "owner-1", "example.btc")
        assert registry.verify_identity("admin-1", "example.btc").identity_verified is True

    def test_owner_cannot_self_verify(self, registry: TrustRegistry, register: Callable) -> None:
        """Owners without a role get NoPermission."""
        register(registry, "owner-1", "example.btc")
        with pytest.raises(NoPermission):
            registry.verify_identity("owner-1", "example.btc")
        assert registry.get_domain_info("example.btc").identity_verified is False

    def test_permission_checked_before_existence(self, registry: TrustRegistry) -> None:
        """Non-moderators get NoPermission even for unknown names."""
        with pytest.raises(NoPermission):
            registry.verify_identity("owner-1", "missing.btc")

    def test_unknown_domain(self, registry: TrustRegistry) -> None:
        """Moderators get NotFound for unknown names."""
        with pytest.raises(NotFound):
            registry.verify_identity("moderator-1", "missing.btc")

    def test_emits_identity_verified(
        self, registry: TrustRegistry, register: Callable, publisher: Mock
    ) -> None:
        """Verification publishes IdentityVerified."""
        register(registry, "owner-1", "example.btc")
        registry.verify_identity("moderator-1", "example.btc")

        event = publisher.publish.call_args[0][0]
        assert event.name == "IdentityVerified"
        assert event.caller == "moderator-1"


class TestQueries:
    """Tests for read-only domain queries."""

    def test_get_unknown_domain(self, registry: TrustRegistry) -> None:
        """Lookup miss raises NotFound."""
        with pytest.raises(NotFound):
            registry.get_domain_info("missing.btc")

    def test_list_domains_sorted_and_filtered(
        self, registry: TrustRegistry, register: Callable
    ) -> None:
        """Listing is sorted by name and filterable by owner."""
        register(registry, "owner-1", "b.btc")
        register(registry, "owner-2", "a.btc")
        register(registry, "owner-1", "c.btc")

        assert [r.name for r in registry.list_domains()] == ["a.btc", "b.btc", "c.btc"]
        assert [r.name for r in registry.list_domains("owner-1")] == ["b.btc", "c.btc"]
        assert registry.list_domains("nobody") == []

    def test_reads_emit_nothing(
        self, registry: TrustRegistry, register: Callable, publisher: Mock
    ) -> None:
        """Queries publish no events."""
        register(registry, "owner-1", "example.btc")
        publisher.reset_mock()

        registry.get_domain_info("example.btc")
        registry.list_domains()
        publisher.publish.assert_not_called()


class TestCallerValidation:
    """Tests for the caller identity supplied by the host."""

    @pytest.mark.parametrize("caller", ["", "  "])
    def test_blank_caller_rejected(self, registry: TrustRegistry, caller: str) -> None:
        """Mutations require a caller identity."""
        with pytest.raises(InvalidData):
            registry.register_domain(caller, "example.btc", "m", "t")
