"""
Authorization module.

One policy for every protected resource: admin, owner, event-team delegate,
public read, deny.

Public API:
- IAuthorizationService: Interface for access checks
- ResourceDescriptor: Ownership/visibility facts about a resource
- AccessDecision: Result of a check
- AccessDeniedError, InsufficientPermissionsError
"""

from .interfaces import IAuthorizationService, IDelegationRepository
from .models import (
    AccessDecision,
    DelegationRule,
    DenyReason,
    Grant,
    Operation,
    ResourceDescriptor,
    ResourceType,
)
from .policy import evaluate_access
from .exceptions import AccessDeniedError, InsufficientPermissionsError

__all__ = [
    # Interfaces
    "IAuthorizationService",
    "IDelegationRepository",
    # Models
    "AccessDecision",
    "DelegationRule",
    "DenyReason",
    "Grant",
    "Operation",
    "ResourceDescriptor",
    "ResourceType",
    # Policy
    "evaluate_access",
    # Exceptions
    "AccessDeniedError",
    "InsufficientPermissionsError",
]
