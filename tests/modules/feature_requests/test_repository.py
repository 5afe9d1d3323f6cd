"""Tests for feature request queries."""

from unittest.mock import MagicMock

from modules.feature_requests.models import FeatureRequestFilters, FeatureRequestStatus, SortOrder
from modules.feature_requests.repository import (
    FeatureRequestRepository,
    sanitize_search,
    visibility_filter,
)

from tests.conftest import OWNER_ID


class TestSanitizeSearch:
    def test_strips_filter_syntax(self):
        assert sanitize_search("dark,mode)") == "dark mode"
        assert sanitize_search("  plain  ") == "plain"
        assert sanitize_search("a*b%c") == "a b c"


class TestVisibilityFilter:
    def test_anonymous(self):
        assert visibility_filter(None, None) == "and(is_public.eq.true,status.neq.rejected)"

    def test_signed_in_user_sees_own(self, owner):
        assert visibility_filter(owner, None) == (
            "and(is_public.eq.true,status.neq.rejected),"
            f"and(user_id.eq.{OWNER_ID})"
        )

    def test_admin_unfiltered(self, admin):
        assert visibility_filter(admin, None) is None

    def test_admin_search(self, admin):
        assert visibility_filter(admin, "export") == (
            "title.ilike.*export*,description.ilike.*export*"
        )

    def test_search_folded_into_each_branch(self, owner):
        search = "or(title.ilike.*export*,description.ilike.*export*)"
        assert visibility_filter(owner, "export") == (
            f"and(is_public.eq.true,status.neq.rejected,{search}),"
            f"and(user_id.eq.{OWNER_ID},{search})"
        )


class TestListFeatureRequests:
    def test_query_shape(self, owner):
        db = MagicMock()
        query = db.table.return_value.select.return_value
        query.eq.return_value = query
        query.or_.return_value = query
        query.order.return_value = query
        query.range.return_value.execute.return_value = MagicMock(
            data=[{"id": "fr-1", "user_id": OWNER_ID, "title": "Dark mode", "description": None}],
            count=31,
        )

        filters = FeatureRequestFilters(
            page=3, limit=10, status=FeatureRequestStatus.PLANNED, sort=SortOrder.MOST_VOTED
        )
        items, total = FeatureRequestRepository(db).list_feature_requests(filters, owner)

        assert total == 31
        assert items[0].description == ""
        db.table.return_value.select.assert_called_once_with("*", count="exact")
        query.eq.assert_called_once_with("status", "planned")
        query.order.assert_called_once_with("vote_count", desc=True)
        query.range.assert_called_once_with(20, 29)
        query.or_.assert_called_once()


class TestBestEffortWrites:
    def test_view_count_failure_does_not_raise(self):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.side_effect = RuntimeError("down")
        repo = FeatureRequestRepository(db)
        feature_request = repo._map_to_feature_request({"id": "fr-1", "user_id": OWNER_ID, "title": "x"})

        assert repo.increment_view_count(feature_request) is False
