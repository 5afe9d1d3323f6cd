"""
Authorization module interface.

Every route that touches a protected resource goes through IAuthorizationService,
whatever credential resolved the caller.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser, UserRole

from .models import AccessDecision, Operation, ResourceDescriptor


@runtime_checkable
class IDelegationRepository(Protocol):
    """Lookup of delegation relationships."""

    def is_event_delegate(self, user_id: str, event_id: str) -> bool:
        ...


@runtime_checkable
class IAuthorizationService(Protocol):
    """
    Interface for authorization decisions.

    Decisions are derived per call and never cached.
    """

    async def check(
        self,
        identity: Optional[AuthenticatedUser],
        resource: ResourceDescriptor,
        operation: Operation,
    ) -> AccessDecision:
        """
        Decide whether identity may perform operation on resource.

        Precedence: admin, owner, delegate, public read, deny.
        """
        ...

    async def require(
        self,
        identity: Optional[AuthenticatedUser],
        resource: ResourceDescriptor,
        operation: Operation,
    ) -> AccessDecision:
        """
        Like check(), but raise when access is denied.

        Raises:
            UnauthenticatedError: If there is no identity
            AccessDeniedError: If the identity is not allowed
        """
        ...

    def require_admin(self, identity: AuthenticatedUser) -> None:
        """
        Raises:
            InsufficientPermissionsError: If identity is not an admin
        """
        ...

    def require_role(self, identity: AuthenticatedUser, role: UserRole) -> None:
        """
        Raises:
            InsufficientPermissionsError: If identity neither has role nor is an admin
        """
        ...
