"""
Identity & role store - Role assignment and capability checks.

Roles form a closed, ordered capability set (see ports.Role). Only admins
assign roles. Because a fresh registry has no admin, the first admin is
installed through bootstrap_admin(), which only succeeds while no admin
exists.
"""

from dataclasses import dataclass

from .context import CallContext
from .exceptions import InvalidData, InvalidUser, NoPermission
from .ports import RegistryStore, Role
from .validation import is_valid_identity


@dataclass
class RoleStore:
    """
    Domain component for role assignment.

    When strict_targets is set, roles can only be assigned to identities
    that already hold one; admins then grow the role set through
    bootstrap_admin() and existing holders only.
    """

    strict_targets: bool = False

    def get_role(self, store: RegistryStore, identity: str) -> Role:
        """Return the role held by identity, Role.NONE if absent. Never raises."""
        if not isinstance(identity, str):
            return Role.NONE
        return store.get_role(identity)

    def require(self, store: RegistryStore, identity: str, required: Role) -> Role:
        """
        Raise NoPermission unless identity holds at least the required role.

        Returns:
            The role held by identity
        """
        role = self.get_role(store, identity)
        if not role.has_at_least(required):
            raise NoPermission(f"{required.value} role required")
        return role

    def assign_role(self, ctx: CallContext, target_identity: str, role: Role) -> None:
        """
        Assign role to target_identity, overwriting any prior role.

        Raises:
            NoPermission: Caller is not an admin
            InvalidUser: Target is malformed, is the caller, or (strict mode)
                holds no role yet
        """
        self.require(ctx.store, ctx.caller, Role.ADMIN)
        self._validate_target(ctx, target_identity)
        try:
            role = Role(role)
        except ValueError:
            raise InvalidData(f"unknown role: {role}") from None

        ctx.store.set_role(target_identity, role)
        ctx.emit("RoleAssigned", identity=target_identity, role=role.value)

    def bootstrap_admin(self, ctx: CallContext, identity: str) -> None:
        """Install the first admin. Rejected once any admin exists."""
        if ctx.store.has_admin():
            raise NoPermission("registry already has an admin")
        if not is_valid_identity(identity):
            raise InvalidUser("invalid identity")

        ctx.store.set_role(identity, Role.ADMIN)
        ctx.emit("AdminBootstrapped", identity=identity)

    def _validate_target(self, ctx: CallContext, target_identity: str) -> None:
        if not is_valid_identity(target_identity):
            raise InvalidUser("invalid identity")
        if target_identity == ctx.caller:
            raise InvalidUser("cannot assign a role to yourself")
        if self.strict_targets and ctx.store.get_role(target_identity) == Role.NONE:
            raise InvalidUser("target holds no role")
