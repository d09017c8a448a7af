"""Tests for notes and tasks on a lead.

Covers:
- Note create/update/delete, HTML stripping, pinned-first ordering
- Task create with due dates, status changes, display ordering
"""

from datetime import datetime, timedelta, timezone

import pytest

from mortgage_crm.errors import NotFoundError, ValidationError
from mortgage_crm.extensions import db
from mortgage_crm.models.note import Note
from mortgage_crm.models.task import Task
from mortgage_crm.services import note_service, task_service


class TestNotes:

    def test_create_strips_html(self, make_lead):
        lead = make_lead()
        note = note_service.create_note(lead.id, "<b>Called</b> <script>x</script>client")
        assert "<" not in note.body
        assert note.body.startswith("Called")

    def test_empty_body_rejected(self, make_lead):
        lead = make_lead()
        with pytest.raises(ValidationError):
            note_service.create_note(lead.id, "   ")

    def test_missing_lead(self, db_session):
        with pytest.raises(NotFoundError):
            note_service.create_note("missing-id", "hello")

    def test_pinned_first_then_newest(self, make_lead):
        lead = make_lead()
        base = datetime(2026, 5, 1, tzinfo=timezone.utc)
        for i, pinned in enumerate([True, False, False]):
            note = note_service.create_note(lead.id, f"Note {i}", pinned=pinned)
            note.created_at = base + timedelta(hours=i)
        db.session.commit()

        bodies = [n.body for n in note_service.list_notes(lead.id)]
        assert bodies == ["Note 0", "Note 2", "Note 1"]

    def test_api_create_update_delete(self, client, api_headers, make_lead):
        lead_id = make_lead().id

        resp = client.post(
            f"/api/leads/{lead_id}/notes", json={"body": "First call"}, headers=api_headers
        )
        assert resp.status_code == 201
        note = resp.get_json()
        assert note["pinned"] is False

        resp = client.patch(
            f"/api/notes/{note['id']}", json={"pinned": True}, headers=api_headers
        )
        assert resp.status_code == 200
        assert resp.get_json()["pinned"] is True
        assert resp.get_json()["body"] == "First call"

        resp = client.delete(f"/api/notes/{note['id']}", headers=api_headers)
        assert resp.status_code == 200
        assert Note.query.count() == 0

    def test_api_list_missing_lead(self, client, api_headers):
        resp = client.get("/api/leads/missing-id/notes", headers=api_headers)
        assert resp.status_code == 404

    def test_back_to_back_notes_newest_first(self, make_lead):
        lead_id = make_lead().id
        note_service.create_note(lead_id, "older")
        db.session.commit()
        note_service.create_note(lead_id, "newer")
        db.session.commit()

        assert [n.body for n in note_service.list_notes(lead_id)] == ["newer", "older"]

    def test_api_patch_rejects_non_object_body(self, client, api_headers, make_lead):
        note = note_service.create_note(make_lead().id, "First call")
        db.session.commit()

        resp = client.patch(f"/api/notes/{note.id}", json=[True], headers=api_headers)
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Request body must be an object."}


class TestTasks:

    def test_create_defaults(self, make_lead):
        lead = make_lead()
        task = task_service.create_task(lead.id, "Chase pay stubs")
        assert task.status == "OPEN"
        assert task.type == "OTHER"
        assert task.due_at is None

    def test_bad_type(self, make_lead):
        lead = make_lead()
        with pytest.raises(ValidationError) as exc:
            task_service.create_task(lead.id, "Call", type="FAX")
        assert exc.value.details == {"type": "invalid_choice"}

    def test_bad_due_at(self, make_lead):
        lead = make_lead()
        with pytest.raises(ValidationError) as exc:
            task_service.create_task(lead.id, "Call", due_at="next tuesday")
        assert exc.value.details == {"due_at": "invalid_datetime"}

    def test_status_any_direction_and_idempotent(self, make_lead):
        lead = make_lead()
        task = task_service.create_task(lead.id, "Call")
        task_service.set_task_status(task.id, "DONE")
        task_service.set_task_status(task.id, "DONE")
        assert task.status == "DONE"
        task_service.set_task_status(task.id, "OPEN")
        assert task.status == "OPEN"

    def test_display_order(self, make_lead):
        lead = make_lead()
        now = datetime(2026, 6, 1, tzinfo=timezone.utc)
        task_service.create_task(lead.id, "Later", due_at=now + timedelta(days=5))
        task_service.create_task(lead.id, "No due date")
        task_service.create_task(lead.id, "Soon", due_at=now + timedelta(days=1))
        done = task_service.create_task(lead.id, "Done", due_at=now)
        canceled = task_service.create_task(lead.id, "Canceled", due_at=now)
        task_service.set_task_status(done.id, "DONE")
        task_service.set_task_status(canceled.id, "CANCELED")
        db.session.commit()

        titles = [t.title for t in task_service.list_tasks(lead.id)]
        assert titles == ["Soon", "Later", "No due date", "Done", "Canceled"]

    def test_api_create_and_set_status(self, client, api_headers, make_lead):
        lead_id = make_lead().id

        resp = client.post(
            f"/api/leads/{lead_id}/tasks",
            json={"title": "Call back", "type": "CALL", "due_at": "2026-06-01T15:00:00Z"},
            headers=api_headers,
        )
        assert resp.status_code == 201
        task = resp.get_json()
        assert task["type"] == "CALL"
        assert task["due_at"].startswith("2026-06-01T15:00:00")

        resp = client.patch(
            f"/api/tasks/{task['id']}", json={"status": "DONE"}, headers=api_headers
        )
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "DONE"

        resp = client.patch(
            f"/api/tasks/{task['id']}", json={"status": "FINISHED"}, headers=api_headers
        )
        assert resp.status_code == 400

    def test_api_delete(self, client, api_headers, make_lead):
        lead = make_lead()
        task_id = task_service.create_task(lead.id, "Call").id
        db.session.commit()

        resp = client.delete(f"/api/tasks/{task_id}", headers=api_headers)
        assert resp.status_code == 200
        assert Task.query.count() == 0

        resp = client.delete(f"/api/tasks/{task_id}", headers=api_headers)
        assert resp.status_code == 404
