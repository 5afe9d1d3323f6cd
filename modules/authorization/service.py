"""
Authorization service implementation.

Wraps the access policy with the database-backed delegation lookup and
turns denials into exceptions the API layer understands.
"""

import logging
from typing import Optional

from shared.models import AuthenticatedUser, UserRole
from modules.auth.exceptions import UnauthenticatedError

from .interfaces import IAuthorizationService, IDelegationRepository
from .models import (
    AccessDecision,
    DelegationRule,
    DenyReason,
    Operation,
    ResourceDescriptor,
)
from .policy import evaluate_access
from .exceptions import AccessDeniedError, InsufficientPermissionsError

logger = logging.getLogger(__name__)


class AuthorizationService(IAuthorizationService):
    """Single enforcement point for resource access."""

    def __init__(self, delegations: IDelegationRepository):
        self._delegations = delegations

    async def check(
        self,
        identity: Optional[AuthenticatedUser],
        resource: ResourceDescriptor,
        operation: Operation,
    ) -> AccessDecision:
        decision = await evaluate_access(identity, resource, operation, self._is_delegate)
        if not decision.allowed:
            logger.info(
                f"Denied {operation.value} on {resource.resource_type.value} "
                f"{resource.resource_id} for {identity.id if identity else 'anonymous'} "
                f"({decision.reason.value})"
            )
        return decision

    async def require(
        self,
        identity: Optional[AuthenticatedUser],
        resource: ResourceDescriptor,
        operation: Operation,
    ) -> AccessDecision:
        decision = await self.check(identity, resource, operation)
        if decision.allowed:
            return decision
        if decision.reason == DenyReason.UNAUTHENTICATED:
            raise UnauthenticatedError()
        raise AccessDeniedError(resource.resource_type, resource.resource_id, operation)

    def require_admin(self, identity: AuthenticatedUser) -> None:
        if not identity.is_admin:
            raise InsufficientPermissionsError(UserRole.ADMIN.value, identity.role)

    def require_role(self, identity: AuthenticatedUser, role: UserRole) -> None:
        """Admins hold every role."""
        if identity.is_admin or identity.role == role.value:
            return
        raise InsufficientPermissionsError(role.value, identity.role)

    async def _is_delegate(self, user_id: str, resource: ResourceDescriptor) -> bool:
        if resource.delegation_rule == DelegationRule.EVENT_TEAM and resource.event_id:
            return self._delegations.is_event_delegate(user_id, resource.event_id)
        return False

