"""Tests for the events service with the real authorization policy."""

import pytest

from modules.auth.exceptions import UnauthenticatedError
from modules.authorization.exceptions import AccessDeniedError, InsufficientPermissionsError
from modules.authorization.service import AuthorizationService
from modules.events.exceptions import (
    DocumentNotFoundError,
    EmptyTeamMemberListError,
    EventNotDeletableError,
    EventNotFoundError,
    ForeignTeamMembersError,
    TeamMembersNotFoundError,
)
from modules.events.models import (
    CreateEventRequest,
    CreateTaskRequest,
    EventFilters,
    UpdateEventRequest,
)
from modules.events.service import EventService
from shared.exceptions import ExternalServiceError
from shared.models import UserRole

from tests.conftest import ADMIN_ID, DELEGATE_ID, OWNER_ID, STRANGER_ID, make_user
from tests.fakes import (
    FakeDelegationRepository,
    FakeEventRepository,
    FakeStorage,
)

EVENT_ID = "event-1"


@pytest.fixture
def repo():
    repo = FakeEventRepository()
    repo.add_event(EVENT_ID, OWNER_ID)
    repo.add_team_member("tm-delegate", owner_id=OWNER_ID, user_id=DELEGATE_ID)
    repo.add_team_member("tm-spare", owner_id=OWNER_ID, user_id="spare-user")
    repo.add_team_member("tm-foreign", owner_id=STRANGER_ID, user_id="foreign-user")
    repo.attach(EVENT_ID, "tm-delegate")
    return repo


@pytest.fixture
def delegations():
    return FakeDelegationRepository({(DELEGATE_ID, EVENT_ID)})


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def service(repo, delegations, storage):
    return EventService(
        repository=repo,
        authorization=AuthorizationService(delegations),
        storage=storage,
        signed_url_expires_in=600,
    )


class TestGetEvent:
    @pytest.mark.asyncio
    async def test_owner(self, service, owner):
        event = await service.get_event(owner, EVENT_ID)
        assert event.id == EVENT_ID

    @pytest.mark.asyncio
    async def test_delegate(self, service, delegate):
        assert (await service.get_event(delegate, EVENT_ID)).id == EVENT_ID

    @pytest.mark.asyncio
    async def test_admin(self, service, admin):
        assert (await service.get_event(admin, EVENT_ID)).id == EVENT_ID

    @pytest.mark.asyncio
    async def test_stranger(self, service, stranger):
        with pytest.raises(AccessDeniedError):
            await service.get_event(stranger, EVENT_ID)

    @pytest.mark.asyncio
    async def test_anonymous(self, service):
        with pytest.raises(UnauthenticatedError):
            await service.get_event(None, EVENT_ID)

    @pytest.mark.asyncio
    async def test_missing_event_is_404_for_anyone(self, service, stranger):
        with pytest.raises(EventNotFoundError):
            await service.get_event(stranger, "no-such-event")


def event_request(**overrides) -> CreateEventRequest:
    payload = {
        "eventType": "wedding",
        "title": "Summer wedding",
        "eventDate": "2026-07-04T15:00:00Z",
        "durationHours": 6,
        "attendeeCount": 120,
        "location": {
            "address": "1 Harbour Rd, Sydney",
            "coordinates": {"lat": -33.86, "lng": 151.21},
            "placeId": 4242,
        },
        "budgetPlan": {"totalBudget": 25000},
    }
    payload.update(overrides)
    return CreateEventRequest.model_validate(payload)


class TestListEvents:
    @pytest.mark.asyncio
    async def test_own_events_by_default(self, service, repo, owner):
        repo.add_event("event-other", STRANGER_ID)

        page = await service.list_events(owner, EventFilters())

        assert [event.id for event in page.events] == [EVENT_ID]
        assert (page.total, page.page, page.limit) == (1, 1, 20)

    @pytest.mark.asyncio
    async def test_status_filter(self, service, repo, owner):
        repo.add_event("event-draft", OWNER_ID, status="draft")

        page = await service.list_events(owner, EventFilters(status="draft"))

        assert [event.id for event in page.events] == ["event-draft"]

    @pytest.mark.asyncio
    async def test_admin_lists_another_managers_events(self, service, admin):
        page = await service.list_events(admin, EventFilters(user_id=OWNER_ID))
        assert page.total == 1

    @pytest.mark.asyncio
    async def test_manager_cannot_list_another_managers_events(self, service, stranger):
        with pytest.raises(InsufficientPermissionsError):
            await service.list_events(stranger, EventFilters(user_id=OWNER_ID))

    @pytest.mark.asyncio
    async def test_naming_yourself_is_allowed(self, service, owner):
        page = await service.list_events(owner, EventFilters(user_id=OWNER_ID))
        assert page.total == 1


class TestCreateEvent:
    @pytest.mark.asyncio
    async def test_event_manager_creates(self, service, repo, owner):
        event = await service.create_event(owner, event_request())

        assert event.user_id == OWNER_ID
        assert event.status == "planning"
        assert event.location == "1 Harbour Rd, Sydney"
        assert event.budget == 25000
        assert repo.events[event.id] == event

    @pytest.mark.asyncio
    async def test_draft(self, service, owner):
        event = await service.create_event(owner, event_request(isDraft=True))
        assert event.status == "draft"

    @pytest.mark.asyncio
    async def test_first_version_recorded(self, service, repo, owner):
        event = await service.create_event(owner, event_request())

        [version] = repo.versions
        assert version["event_id"] == event.id
        assert version["version_number"] == 1
        assert version["created_by"] == OWNER_ID
        assert version["changes"]["action"] == "created"
        assert version["changes"]["data"]["location"]["place_id"] == "4242"

    @pytest.mark.asyncio
    async def test_service_requirements_stored(self, service, repo, owner):
        event = await service.create_event(owner, event_request(serviceRequirements=[
            {"category": "catering", "type": "buffet", "estimatedBudget": 4000},
        ]))

        [row] = repo.service_requirements[event.id]
        assert row["service_category"] == "catering"
        assert row["service_type"] == "buffet"
        assert row["priority"] == "medium"
        assert row["is_required"] is True

    @pytest.mark.asyncio
    async def test_admin_creates(self, service, admin):
        event = await service.create_event(admin, event_request())
        assert event.user_id == ADMIN_ID

    @pytest.mark.asyncio
    async def test_contractor_refused(self, service, repo):
        contractor = make_user(STRANGER_ID, role=UserRole.CONTRACTOR)
        with pytest.raises(InsufficientPermissionsError):
            await service.create_event(contractor, event_request())
        assert list(repo.events) == [EVENT_ID]


class TestUpdateEvent:
    @pytest.mark.asyncio
    async def test_owner_updates_sent_fields_only(self, service, repo, owner):
        event = await service.update_event(owner, EVENT_ID, UpdateEventRequest(title="  Renamed  "))

        assert event.title == "Renamed"
        assert event.status == "planning"
        assert repo.events[EVENT_ID].title == "Renamed"

    @pytest.mark.asyncio
    async def test_admin_updates(self, service, admin):
        event = await service.update_event(admin, EVENT_ID, UpdateEventRequest(status="confirmed"))
        assert event.status == "confirmed"

    @pytest.mark.asyncio
    async def test_delegate_cannot_update(self, service, repo, delegate):
        with pytest.raises(AccessDeniedError):
            await service.update_event(delegate, EVENT_ID, UpdateEventRequest(title="Hijacked"))
        assert repo.events[EVENT_ID].title == f"Event {EVENT_ID}"

    @pytest.mark.asyncio
    async def test_stranger_cannot_update(self, service, stranger):
        with pytest.raises(AccessDeniedError):
            await service.update_event(stranger, EVENT_ID, UpdateEventRequest(title="Hijacked"))

    @pytest.mark.asyncio
    async def test_missing_event(self, service, owner):
        with pytest.raises(EventNotFoundError):
            await service.update_event(owner, "no-such-event", UpdateEventRequest(title="x"))

    @pytest.mark.asyncio
    async def test_budget_range(self, service, owner):
        event = await service.update_event(
            owner, EVENT_ID, UpdateEventRequest.model_validate({"budgetPlan": {"totalBudget": 1000}})
        )
        assert event.budget_total == 1000
        assert event.budget_min == pytest.approx(800)
        assert event.budget_max == pytest.approx(1200)

    @pytest.mark.asyncio
    async def test_location_keeps_details(self, service, owner):
        event = await service.update_event(owner, EVENT_ID, UpdateEventRequest.model_validate({
            "location": {"address": "Town hall", "coordinates": {"lat": 51.5, "lng": -0.12}},
        }))
        assert event.location == "Town hall"
        assert event.location_data["coordinates"] == {"lat": 51.5, "lng": -0.12}

    @pytest.mark.asyncio
    async def test_service_requirements_replaced(self, service, repo, owner):
        repo.service_requirements[EVENT_ID] = [{"service_category": "music"}]

        await service.update_event(owner, EVENT_ID, UpdateEventRequest.model_validate({
            "serviceRequirements": [{"category": "photography", "type": "portraits"}],
        }))

        assert [row["service_category"] for row in repo.service_requirements[EVENT_ID]] == [
            "photography"
        ]

    @pytest.mark.asyncio
    async def test_requirements_untouched_when_not_sent(self, service, repo, owner):
        repo.service_requirements[EVENT_ID] = [{"service_category": "music"}]
        await service.update_event(owner, EVENT_ID, UpdateEventRequest(title="Renamed"))
        assert repo.service_requirements[EVENT_ID] == [{"service_category": "music"}]


class TestDeleteEvent:
    @pytest.mark.asyncio
    async def test_owner_deletes(self, service, repo, owner):
        await service.delete_event(owner, EVENT_ID)
        assert repo.deleted == [EVENT_ID]

    @pytest.mark.asyncio
    async def test_delegate_cannot_delete(self, service, repo, delegate):
        with pytest.raises(AccessDeniedError):
            await service.delete_event(delegate, EVENT_ID)
        assert repo.deleted == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["in_progress", "completed"])
    async def test_started_events_are_kept(self, service, repo, owner, status):
        repo.add_event("event-live", OWNER_ID, status=status)
        with pytest.raises(EventNotDeletableError) as exc_info:
            await service.delete_event(owner, "event-live")
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Cannot delete event in current status"
        assert repo.deleted == []

    @pytest.mark.asyncio
    async def test_permission_checked_before_status(self, service, repo, stranger):
        repo.add_event("event-live", OWNER_ID, status="in_progress")
        with pytest.raises(AccessDeniedError):
            await service.delete_event(stranger, "event-live")


class TestTasks:
    @pytest.mark.asyncio
    async def test_create_with_defaults(self, service, owner):
        task = await service.create_task(owner, EVENT_ID, CreateTaskRequest(title="  Book venue  "))
        assert task.title == "Book venue"
        assert task.status == "todo"
        assert task.priority == "medium"
        assert task.created_by == OWNER_ID
        assert task.event_id == EVENT_ID

    @pytest.mark.asyncio
    async def test_delegate_may_create(self, service, delegate):
        task = await service.create_task(delegate, EVENT_ID, CreateTaskRequest(title="Order flowers"))
        assert task.created_by == DELEGATE_ID

    @pytest.mark.asyncio
    async def test_stranger_may_not_create(self, service, stranger):
        with pytest.raises(AccessDeniedError):
            await service.create_task(stranger, EVENT_ID, CreateTaskRequest(title="Sneaky"))

    @pytest.mark.asyncio
    async def test_assignments(self, service, owner):
        task = await service.create_task(owner, EVENT_ID, CreateTaskRequest(
            title="Catering",
            team_member_ids=["tm-delegate", "tm-foreign"],
            contractor_ids=["contractor-1"],
        ))
        assert [member.id for member in task.team_members] == ["tm-delegate"]
        assert [contractor.id for contractor in task.contractors] == ["contractor-1"]

    @pytest.mark.asyncio
    async def test_list_newest_first(self, service, owner, delegate):
        await service.create_task(owner, EVENT_ID, CreateTaskRequest(title="First"))
        await service.create_task(owner, EVENT_ID, CreateTaskRequest(title="Second"))

        tasks = await service.list_tasks(delegate, EVENT_ID)
        assert [task.title for task in tasks] == ["Second", "First"]


class TestTeam:
    @pytest.mark.asyncio
    async def test_list_puts_creator_first(self, service, delegate):
        team = await service.list_team(delegate, EVENT_ID)
        assert team[0].is_creator
        assert team[0].role == "Event Creator"
        assert [member.team_member_id for member in team[1:]] == ["tm-delegate"]

    @pytest.mark.asyncio
    async def test_add_members(self, service, repo, owner):
        result = await service.add_team_members(owner, EVENT_ID, ["tm-spare", "tm-spare"])
        assert result.added == 1
        assert result.skipped == 0
        assert repo.event_team[EVENT_ID] == ["tm-delegate", "tm-spare"]

    @pytest.mark.asyncio
    async def test_existing_members_skipped(self, service, owner):
        result = await service.add_team_members(owner, EVENT_ID, ["tm-delegate", "tm-spare"])
        assert (result.added, result.skipped) == (1, 1)

    @pytest.mark.asyncio
    async def test_all_existing(self, service, owner):
        result = await service.add_team_members(owner, EVENT_ID, ["tm-delegate"])
        assert (result.added, result.skipped) == (0, 1)
        assert "already assigned" in result.message

    @pytest.mark.asyncio
    async def test_empty_list(self, service, owner):
        with pytest.raises(EmptyTeamMemberListError) as exc_info:
            await service.add_team_members(owner, "no-such-event", [])
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_members(self, service, owner):
        with pytest.raises(TeamMembersNotFoundError) as exc_info:
            await service.add_team_members(owner, EVENT_ID, ["tm-spare", "tm-ghost"])
        assert exc_info.value.details["missing_ids"] == ["tm-ghost"]

    @pytest.mark.asyncio
    async def test_foreign_members(self, service, owner):
        with pytest.raises(ForeignTeamMembersError) as exc_info:
            await service.add_team_members(owner, EVENT_ID, ["tm-foreign"])
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_attaches_owners_member(self, service, repo, admin):
        result = await service.add_team_members(admin, EVENT_ID, ["tm-spare"])
        assert (result.added, result.skipped) == (1, 0)
        assert "tm-spare" in repo.event_team[EVENT_ID]

    @pytest.mark.asyncio
    async def test_admin_attaches_any_managers_member(self, service, repo, admin):
        result = await service.add_team_members(admin, EVENT_ID, ["tm-foreign"])
        assert result.added == 1

    @pytest.mark.asyncio
    async def test_delegate_cannot_manage_team(self, service, delegate):
        with pytest.raises(AccessDeniedError):
            await service.add_team_members(delegate, EVENT_ID, ["tm-spare"])


class TestDocuments:
    @pytest.mark.asyncio
    async def test_list(self, service, repo, delegate):
        repo.add_document(EVENT_ID, "doc-1", "event-documents/plan.pdf")
        repo.add_document("other-event", "doc-2", "event-documents/other.pdf")

        documents = await service.list_documents(delegate, EVENT_ID)
        assert [doc.id for doc in documents] == ["doc-1"]

    @pytest.mark.asyncio
    async def test_signed_url(self, service, repo, storage, owner):
        repo.add_document(EVENT_ID, "doc-1", "event-documents/plan.pdf")

        signed = await service.get_document_url(owner, EVENT_ID, "doc-1")

        assert signed.document_id == "doc-1"
        assert signed.expires_in == 600
        assert storage.requested == [("event-documents/plan.pdf", 600)]

    @pytest.mark.asyncio
    async def test_document_of_another_event(self, service, repo, owner):
        repo.add_event("event-2", OWNER_ID)
        repo.add_document("event-2", "doc-2", "event-documents/other.pdf")
        with pytest.raises(DocumentNotFoundError):
            await service.get_document_url(owner, EVENT_ID, "doc-2")

    @pytest.mark.asyncio
    async def test_stranger_gets_no_url(self, service, repo, storage, stranger):
        repo.add_document(EVENT_ID, "doc-1", "event-documents/plan.pdf")
        with pytest.raises(AccessDeniedError):
            await service.get_document_url(stranger, EVENT_ID, "doc-1")
        assert storage.requested == []

    @pytest.mark.asyncio
    async def test_storage_failure(self, repo, delegations, owner):
        service = EventService(repo, AuthorizationService(delegations), FakeStorage(fail=True))
        repo.add_document(EVENT_ID, "doc-1", "event-documents/plan.pdf")
        with pytest.raises(ExternalServiceError):
            await service.get_document_url(owner, EVENT_ID, "doc-1")
