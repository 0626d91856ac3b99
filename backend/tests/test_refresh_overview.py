"""Tests for the refresh statistics and calendar endpoints."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from bookmyenv.core.database import get_db
from bookmyenv.main import app
from bookmyenv.models.refresh_intent import IntentStatus
from bookmyenv.repositories.refresh_history_repository import RefreshHistoryRepository
from bookmyenv.repositories.refresh_overview_repository import RefreshOverviewRepository
from tests.conftest import auth_headers, create_intent, create_user


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def db_session():
    """Create a database session for testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def viewer(db_session):
    return create_user(db_session, "viewer", role="Viewer")


@pytest.fixture
def now():
    return datetime.now(UTC)


def _history(db, refresh_date, status="SUCCESS", entity_type="Environment", **fields):
    values = {
        "entity_type": entity_type,
        "entity_id": uuid.uuid4(),
        "entity_name": "SIT1",
        "refresh_date": refresh_date,
        "refresh_type": "FULL_COPY",
        "execution_status": status,
    }
    values.update(fields)
    return RefreshHistoryRepository(db).create(**values)


class TestStatistics:
    def test_requires_authentication(self, client):
        response = client.get("/v1/refresh/statistics")
        assert response.status_code == 401

    def test_empty(self, client, viewer):
        response = client.get("/v1/refresh/statistics", headers=auth_headers(viewer))
        assert response.status_code == 200
        assert response.json() == {
            "summary": {"pending_approvals": 0, "upcoming_refreshes": 0},
            "history_stats": {
                "success_count": 0,
                "failed_count": 0,
                "total_count": 0,
                "avg_duration_minutes": 0,
            },
            "by_entity_type": [],
            "by_refresh_type": [],
            "period": 30,
        }

    def test_summary_counts(self, client, db_session, viewer, now):
        create_intent(db_session, viewer, IntentStatus.REQUESTED)
        create_intent(db_session, viewer, IntentStatus.REQUESTED)
        create_intent(db_session, viewer, IntentStatus.SCHEDULED, now + timedelta(days=3))
        create_intent(db_session, viewer, IntentStatus.APPROVED, now + timedelta(days=2))
        create_intent(db_session, viewer, IntentStatus.SCHEDULED, now + timedelta(days=10))
        create_intent(db_session, viewer, IntentStatus.COMPLETED, now + timedelta(days=1))

        response = client.get("/v1/refresh/statistics", headers=auth_headers(viewer))
        assert response.json()["summary"] == {"pending_approvals": 2, "upcoming_refreshes": 2}

    def test_history_stats(self, client, db_session, viewer, now):
        _history(db_session, now - timedelta(days=1), duration_minutes=30)
        _history(
            db_session, now - timedelta(days=2), duration_minutes=50, refresh_type="DATA_ONLY"
        )
        _history(db_session, now - timedelta(days=3), status="FAILED", entity_type="Application")
        _history(db_session, now - timedelta(days=40), duration_minutes=500)

        body = client.get("/v1/refresh/statistics", headers=auth_headers(viewer)).json()
        assert body["history_stats"] == {
            "success_count": 2,
            "failed_count": 1,
            "total_count": 3,
            "avg_duration_minutes": 40,
        }
        assert body["by_entity_type"] == [
            {"entity_type": "Environment", "count": 2},
            {"entity_type": "Application", "count": 1},
        ]
        assert body["by_refresh_type"] == [
            {"refresh_type": "FULL_COPY", "count": 2},
            {"refresh_type": "DATA_ONLY", "count": 1},
        ]

    def test_period_widens_window(self, client, db_session, viewer, now):
        _history(db_session, now - timedelta(days=1))
        _history(db_session, now - timedelta(days=40))

        body = client.get(
            "/v1/refresh/statistics", params={"period": 60}, headers=auth_headers(viewer)
        ).json()
        assert body["period"] == 60
        assert body["history_stats"]["total_count"] == 2

    @pytest.mark.parametrize("period", [0, 366])
    def test_period_out_of_range(self, client, viewer, period):
        response = client.get(
            "/v1/refresh/statistics", params={"period": period}, headers=auth_headers(viewer)
        )
        assert response.status_code == 422


class TestCalendar:
    def _get(self, client, user, start, end, **params):
        return client.get(
            "/v1/refresh/calendar",
            params={"start_date": start.isoformat(), "end_date": end.isoformat(), **params},
            headers=auth_headers(user),
        )

    def test_dates_required(self, client, viewer):
        response = client.get("/v1/refresh/calendar", headers=auth_headers(viewer))
        assert response.status_code == 422

    def test_start_after_end(self, client, viewer, now):
        response = self._get(client, viewer, now + timedelta(days=2), now)
        assert response.status_code == 400
        assert response.json()["detail"] == "start_date must not be after end_date"

    def test_overlapping_open_intents(self, client, db_session, viewer, now):
        start, end = now + timedelta(days=1), now + timedelta(days=5)
        inside = create_intent(
            db_session, viewer, IntentStatus.SCHEDULED, now + timedelta(days=2)
        )
        ends_inside = create_intent(
            db_session,
            viewer,
            IntentStatus.REQUESTED,
            now,
            planned_end_date=now + timedelta(days=3),
        )
        spans = create_intent(
            db_session,
            viewer,
            IntentStatus.APPROVED,
            now - timedelta(days=1),
            planned_end_date=now + timedelta(days=10),
        )
        create_intent(db_session, viewer, IntentStatus.CANCELLED, now + timedelta(days=2))
        create_intent(db_session, viewer, IntentStatus.SCHEDULED, now + timedelta(days=7))

        response = self._get(client, viewer, start, end)
        assert response.status_code == 200
        intents = response.json()["intents"]
        assert [item["id"] for item in intents] == [
            str(spans.id),
            str(ends_inside.id),
            str(inside.id),
        ]
        assert intents[2]["requested_by_username"] == "viewer"
        assert intents[2]["intent_status"] == "SCHEDULED"

    def test_entity_type_filter(self, client, db_session, viewer, now):
        create_intent(db_session, viewer, IntentStatus.SCHEDULED, now + timedelta(days=2))
        app_intent = create_intent(
            db_session,
            viewer,
            IntentStatus.SCHEDULED,
            now + timedelta(days=2),
            entity_type="Application",
        )

        response = self._get(
            client, viewer, now, now + timedelta(days=5), entity_type="Application"
        )
        assert [item["id"] for item in response.json()["intents"]] == [str(app_intent.id)]

    def test_unknown_entity_type(self, client, viewer, now):
        response = self._get(client, viewer, now, now + timedelta(days=5), entity_type="Planet")
        assert response.status_code == 422

    def test_history_in_range(self, client, db_session, viewer, now):
        recent = _history(db_session, now - timedelta(days=1), status="FAILED")
        _history(db_session, now - timedelta(days=20))

        response = self._get(client, viewer, now - timedelta(days=7), now)
        history = response.json()["history"]
        assert [item["id"] for item in history] == [str(recent.id)]
        assert history[0]["execution_status"] == "FAILED"


class TestRefreshOverviewRepository:
    def test_upcoming_includes_overdue_open_intents(self, db_session, viewer, now):
        create_intent(db_session, viewer, IntentStatus.SCHEDULED, now - timedelta(hours=2))
        assert RefreshOverviewRepository(db_session).count_upcoming(now) == 1

    def test_history_average_ignores_missing_durations(self, db_session, now):
        _history(db_session, now - timedelta(hours=1), duration_minutes=25)
        _history(db_session, now - timedelta(hours=2))

        totals = RefreshOverviewRepository(db_session).history_totals(now - timedelta(days=1))
        assert totals.total_count == 2
        assert totals.avg_duration_minutes == 25
