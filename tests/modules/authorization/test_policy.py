"""Tests for the access policy."""

import pytest
from unittest.mock import AsyncMock

from modules.authorization.models import (
    DelegationRule,
    DenyReason,
    Grant,
    Operation,
    ResourceDescriptor,
    ResourceType,
)
from modules.authorization.policy import evaluate_access

from tests.conftest import DELEGATE_ID, OWNER_ID

EVENT_ID = "event-1"


def event_resource(**overrides) -> ResourceDescriptor:
    fields = {
        "resource_type": ResourceType.EVENT,
        "resource_id": EVENT_ID,
        "owner_id": OWNER_ID,
        "delegation_rule": DelegationRule.EVENT_TEAM,
        "event_id": EVENT_ID,
    }
    fields.update(overrides)
    return ResourceDescriptor(**fields)


def delegates(*user_ids: str) -> AsyncMock:
    return AsyncMock(side_effect=lambda user_id, resource: user_id in user_ids)


class TestGrants:
    @pytest.mark.asyncio
    async def test_admin(self, admin):
        decision = await evaluate_access(admin, event_resource(), Operation.WRITE)
        assert decision.allowed
        assert decision.grant == Grant.ADMIN

    @pytest.mark.asyncio
    async def test_owner(self, owner):
        decision = await evaluate_access(owner, event_resource(), Operation.WRITE, delegates())
        assert decision.grant == Grant.OWNER

    @pytest.mark.asyncio
    async def test_owner_does_not_hit_delegation_lookup(self, owner):
        lookup = delegates()
        await evaluate_access(owner, event_resource(), Operation.READ, lookup)
        lookup.assert_not_called()

    @pytest.mark.asyncio
    async def test_delegate_reads(self, delegate):
        decision = await evaluate_access(delegate, event_resource(), Operation.READ, delegates(DELEGATE_ID))
        assert decision.grant == Grant.DELEGATED

    @pytest.mark.asyncio
    async def test_delegate_cannot_write_by_default(self, delegate):
        lookup = delegates(DELEGATE_ID)
        decision = await evaluate_access(delegate, event_resource(), Operation.WRITE, lookup)
        assert not decision.allowed
        assert decision.reason == DenyReason.FORBIDDEN
        lookup.assert_not_called()

    @pytest.mark.asyncio
    async def test_delegate_writes_when_allowed(self, delegate):
        decision = await evaluate_access(
            delegate, event_resource(delegated_write=True), Operation.WRITE, delegates(DELEGATE_ID)
        )
        assert decision.grant == Grant.DELEGATED

    @pytest.mark.asyncio
    async def test_no_delegation_rule(self, delegate):
        decision = await evaluate_access(
            delegate, event_resource(delegation_rule=DelegationRule.NONE), Operation.READ, delegates(DELEGATE_ID)
        )
        assert not decision.allowed

    @pytest.mark.asyncio
    async def test_public_read(self):
        decision = await evaluate_access(None, event_resource(is_public=True), Operation.READ)
        assert decision.grant == Grant.PUBLIC

    @pytest.mark.asyncio
    async def test_public_resource_is_not_publicly_writable(self, stranger):
        decision = await evaluate_access(stranger, event_resource(is_public=True), Operation.WRITE, delegates())
        assert decision.reason == DenyReason.FORBIDDEN


class TestDenials:
    @pytest.mark.asyncio
    async def test_stranger_forbidden(self, stranger):
        decision = await evaluate_access(stranger, event_resource(), Operation.READ, delegates(DELEGATE_ID))
        assert not decision.allowed
        assert decision.reason == DenyReason.FORBIDDEN

    @pytest.mark.asyncio
    async def test_anonymous_unauthenticated(self):
        decision = await evaluate_access(None, event_resource(), Operation.READ)
        assert decision.reason == DenyReason.UNAUTHENTICATED

    @pytest.mark.asyncio
    async def test_anonymous_read_of_private_visibility_scoped(self):
        """Anonymous reads are normal for these resources; a private one is forbidden."""
        resource = event_resource(
            resource_type=ResourceType.FEATURE_REQUEST,
            delegation_rule=DelegationRule.NONE,
            visibility_scoped=True,
        )
        decision = await evaluate_access(None, resource, Operation.READ)
        assert decision.reason == DenyReason.FORBIDDEN

    @pytest.mark.asyncio
    async def test_anonymous_write_of_visibility_scoped(self):
        resource = event_resource(visibility_scoped=True, is_public=True)
        decision = await evaluate_access(None, resource, Operation.WRITE)
        assert decision.reason == DenyReason.UNAUTHENTICATED


class TestOwnershipSurvivesDelegationChanges:
    @pytest.mark.asyncio
    async def test_owner_keeps_access_after_team_removal(self, owner, delegate):
        """An owner who was also on the team keeps access once removed from it."""
        lookup = delegates(OWNER_ID, DELEGATE_ID)
        assert (await evaluate_access(owner, event_resource(), Operation.WRITE, lookup)).allowed

        lookup = delegates(DELEGATE_ID)
        decision = await evaluate_access(owner, event_resource(), Operation.WRITE, lookup)
        assert decision.allowed
        assert decision.grant == Grant.OWNER

        lookup = delegates()
        assert not (await evaluate_access(delegate, event_resource(), Operation.READ, lookup)).allowed
        assert (await evaluate_access(owner, event_resource(), Operation.READ, lookup)).allowed
