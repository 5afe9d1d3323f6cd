"""
Authorization module exceptions.
"""

from shared.exceptions import AuthorizationError

from .models import Operation, ResourceType


class AccessDeniedError(AuthorizationError):
    """Raised when an authenticated user may not touch a resource."""

    def __init__(self, resource_type: ResourceType, resource_id: str, operation: Operation):
        label = resource_type.value.replace("_", " ")
        super().__init__(
            f"You do not have permission to {operation.value} this {label}",
            code="ACCESS_DENIED",
            details={
                "resource_type": resource_type.value,
                "resource_id": resource_id,
                "operation": operation.value,
            },
        )


class InsufficientPermissionsError(AuthorizationError):
    """Raised when user lacks the role an action requires."""

    def __init__(self, required_role: str, user_role: str):
        super().__init__(
            f"Insufficient permissions. Required: {required_role}, have: {user_role}",
            code="INSUFFICIENT_PERMISSIONS",
            details={"required_role": required_role, "user_role": user_role},
        )
