"""
Authorization module data models.

A ResourceDescriptor is everything the policy needs to know about a row;
services build one from the row they loaded and ask for a decision.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class Operation(str, Enum):
    """What the caller wants to do with a resource."""

    READ = "read"
    WRITE = "write"


class DelegationRule(str, Enum):
    """How non-owners can be granted access to a resource."""

    NONE = "none"
    EVENT_TEAM = "event_team"


class ResourceType(str, Enum):
    """Resource families guarded by the policy."""

    EVENT = "event"
    EVENT_TASK = "event_task"
    EVENT_TEAM = "event_team"
    EVENT_DOCUMENT = "event_document"
    FEATURE_REQUEST = "feature_request"


class Grant(str, Enum):
    """Which policy rule allowed the access."""

    ADMIN = "admin"
    OWNER = "owner"
    DELEGATED = "delegated"
    PUBLIC = "public"


class DenyReason(str, Enum):
    """Why access was denied."""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


class ResourceDescriptor(BaseModel):
    """Ownership and visibility facts about a single resource."""

    resource_type: ResourceType
    resource_id: str
    owner_id: Optional[str] = Field(None, description="User who owns the resource")
    is_public: bool = Field(default=False, description="Readable by anyone, including anonymous")
    delegation_rule: DelegationRule = DelegationRule.NONE
    delegated_write: bool = Field(
        default=False, description="Whether delegates may also write, not just read"
    )
    event_id: Optional[str] = Field(None, description="Event the resource belongs to")
    visibility_scoped: bool = Field(
        default=False,
        description="Resource family has a public/private flag, so anonymous reads are a normal request",
    )

    model_config = {"frozen": True}


class AccessDecision(BaseModel):
    """Outcome of an authorization check."""

    allowed: bool
    grant: Optional[Grant] = None
    reason: Optional[DenyReason] = None

    model_config = {"frozen": True}

    @classmethod
    def allow(cls, grant: Grant) -> "AccessDecision":
        return cls(allowed=True, grant=grant)

    @classmethod
    def deny(cls, reason: DenyReason) -> "AccessDecision":
        return cls(allowed=False, reason=reason)
