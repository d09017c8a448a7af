"""Tests for dashboard counts and degradation."""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from mortgage_crm.extensions import db
from mortgage_crm.models.lead import Lead
from mortgage_crm.services import dashboard_service, task_service


class TestDashboardStats:

    def test_empty_database(self, db_session):
        stats = dashboard_service.get_dashboard_stats()
        assert stats["total_leads"] == 0
        assert set(stats["status_counts"]) == set(Lead.APPLICATION_STATUSES)
        assert set(stats["stage_counts"]) == set(Lead.STAGES)

    def test_buckets_sum_to_total(self, seed_data, make_lead):
        make_lead(first_name="A")
        make_lead(first_name="B", application_status="IN_PROGRESS", stage="PREQUAL")
        make_lead(first_name="C", application_status="APPROVED", stage="FUNDED")
        lead = make_lead(first_name="D", application_status="IN_PROGRESS")
        task_service.create_task(lead.id, "Call")
        done = task_service.create_task(lead.id, "Email")
        task_service.set_task_status(done.id, "DONE")
        db.session.commit()

        stats = dashboard_service.get_dashboard_stats()

        assert stats["total_leads"] == 4
        assert sum(stats["status_counts"].values()) == stats["total_leads"]
        assert stats["status_counts"]["IN_PROGRESS"] == 2
        assert stats["stage_counts"]["NEW"] == 2
        assert stats["open_tasks"] == 1
        assert stats["incomplete_checklists"] == 0

    def test_query_failure_returns_zeros(self, make_lead):
        make_lead()
        with patch(
            "mortgage_crm.services.dashboard_service._gather_counts",
            side_effect=OperationalError("SELECT", {}, Exception("db down")),
        ):
            stats = dashboard_service.get_dashboard_stats()

        assert stats["total_leads"] == 0
        assert stats["open_tasks"] == 0
        assert all(v == 0 for v in stats["status_counts"].values())

    def test_recent_activity_failure_returns_empty(self, make_lead):
        make_lead()
        with patch(
            "mortgage_crm.services.dashboard_service.audit_service.recent_events",
            side_effect=OperationalError("SELECT", {}, Exception("db down")),
        ):
            assert dashboard_service.get_recent_activity() == []


class TestDashboardAPI:

    def test_dashboard_with_activity(self, client, api_headers):
        client.post(
            "/api/leads", json={"first_name": "Jane", "last_name": "Doe"}, headers=api_headers
        )
        resp = client.get("/api/dashboard", headers=api_headers)
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["total_leads"] == 1
        assert body["status_counts"]["NOT_CONTACTED"] == 1
        assert [e["action"] for e in body["recent_activity"]] == ["lead.created"]

    def test_calculator(self, client, api_headers):
        resp = client.post(
            "/api/calculator",
            json={
                "property_value": 500000,
                "down_payment": 100000,
                "interest_rate": 0,
                "term_years": 25,
                "monthly_income": 8000,
                "monthly_debts": 400,
            },
            headers=api_headers,
        )
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["loan_amount"] == 400000
        assert body["monthly_payment"] == 1333.33
        assert body["gds_ratio"] == 16.67
        assert body["tds_ratio"] == 21.67
        assert body["down_payment_percent"] == 20.0

    def test_calculator_rejects_negative(self, client, api_headers):
        resp = client.post(
            "/api/calculator", json={"loan_amount": -1}, headers=api_headers
        )
        assert resp.status_code == 400

    def test_calculator_rejects_non_object_body(self, client, api_headers):
        resp = client.post("/api/calculator", json=[500000], headers=api_headers)
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Request body must be an object."}

    def test_dashboard_with_missing_tables_returns_zeros(self, client, api_headers):
        db.drop_all()

        resp = client.get("/api/dashboard", headers=api_headers)
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["total_leads"] == 0
        assert body["open_tasks"] == 0
        assert all(v == 0 for v in body["status_counts"].values())
        assert body["recent_activity"] == []
