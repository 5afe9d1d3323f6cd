"""
Access policy.

First match wins: admin, owner, delegate, public read, deny. The delegation
lookup is the only step that touches the database, so it is passed in as a
callable and awaited only when the cheaper rules did not already decide.

An anonymous caller denied a read on a visibility-scoped resource gets
"forbidden" rather than "unauthenticated": the resource exists and is private.
"""

from typing import Awaitable, Callable, Optional

from shared.models import AuthenticatedUser

from .models import (
    AccessDecision,
    DelegationRule,
    DenyReason,
    Grant,
    Operation,
    ResourceDescriptor,
)

DelegationCheck = Callable[[str, ResourceDescriptor], Awaitable[bool]]


async def evaluate_access(
    identity: Optional[AuthenticatedUser],
    resource: ResourceDescriptor,
    operation: Operation,
    is_delegate: Optional[DelegationCheck] = None,
) -> AccessDecision:
    """Decide whether identity may perform operation on resource."""
    if identity is not None:
        if identity.is_admin:
            return AccessDecision.allow(Grant.ADMIN)

        if resource.owner_id and identity.id == resource.owner_id:
            return AccessDecision.allow(Grant.OWNER)

        delegable = resource.delegation_rule != DelegationRule.NONE and (
            operation == Operation.READ or resource.delegated_write
        )
        if delegable and is_delegate is not None:
            if await is_delegate(identity.id, resource):
                return AccessDecision.allow(Grant.DELEGATED)

    if resource.is_public and operation == Operation.READ:
        return AccessDecision.allow(Grant.PUBLIC)

    if identity is None and not (resource.visibility_scoped and operation == Operation.READ):
        return AccessDecision.deny(DenyReason.UNAUTHENTICATED)
    return AccessDecision.deny(DenyReason.FORBIDDEN)
