"""Tests for checklist templates and per-lead checklists.

Covers:
- Seeded template catalog
- Template create/update/delete validation
- Atomic item replacement (failure keeps the previous items)
- Instantiation as a deep copy, isolated from later template edits
- Item status idempotence; checklist status never auto-derived
"""

from unittest.mock import patch

import pytest

from mortgage_crm.errors import NotFoundError, TransactionFailure, ValidationError
from mortgage_crm.extensions import db
from mortgage_crm.models.checklist import (
    Checklist,
    ChecklistItem,
    ChecklistItemTemplate,
    ChecklistTemplate,
)
from mortgage_crm.services import checklist_service, template_service


class TestTemplateCatalog:

    def test_seed_creates_five_templates(self, db_session):
        assert template_service.seed_default_templates() == 5
        db.session.commit()

        by_type = {t.lead_type: t for t in ChecklistTemplate.query.all()}
        assert set(by_type) == {"PURCHASE", "REFINANCE", "RENEWAL", "EQUITY_LINE", "OTHER"}
        purchase = by_type["PURCHASE"]
        assert purchase.name == "Purchase Application Documents"
        assert len(purchase.items) == 12

    def test_seed_is_noop_when_catalog_exists(self, seed_data):
        assert template_service.seed_default_templates() == 0
        assert ChecklistTemplate.query.count() == 5

    def test_create_requires_items(self, db_session):
        with pytest.raises(ValidationError) as exc:
            template_service.create_template("Empty", "PURCHASE", [])
        assert exc.value.details == {"items": "min_length:1"}

    def test_create_rejects_blank_label(self, db_session):
        with pytest.raises(ValidationError) as exc:
            template_service.create_template(
                "Bad", "PURCHASE", [{"label": "ID"}, {"label": "  "}]
            )
        assert exc.value.details == {"items[1].label": "required"}

    def test_list_sorted_by_name(self, seed_data):
        names = [t.name for t in template_service.list_templates()]
        assert names == sorted(names)

    def test_update_replaces_items(self, seed_data):
        template_id = seed_data["templates"]["OTHER"]
        template_service.update_template(
            template_id, name="Misc", items=[{"label": "Photo ID"}, {"label": "Void cheque"}]
        )

        template = db.session.get(ChecklistTemplate, template_id)
        assert template.name == "Misc"
        assert [i.label for i in template.items] == ["Photo ID", "Void cheque"]
        assert ChecklistItemTemplate.query.filter_by(template_id=template_id).count() == 2

    def test_update_with_empty_items_rejected(self, seed_data):
        template_id = seed_data["templates"]["OTHER"]
        with pytest.raises(ValidationError):
            template_service.update_template(template_id, items=[])
        assert len(db.session.get(ChecklistTemplate, template_id).items) == 9

    def test_failed_replacement_keeps_original_items(self, seed_data):
        template_id = seed_data["templates"]["PURCHASE"]
        before = [
            (i.label, i.required)
            for i in db.session.get(ChecklistTemplate, template_id).items
        ]

        with patch(
            "mortgage_crm.services.template_service._insert_item_templates",
            side_effect=RuntimeError("disk full"),
        ):
            with pytest.raises(TransactionFailure):
                template_service.update_template(
                    template_id, items=[{"label": "Only item"}]
                )

        template = db.session.get(ChecklistTemplate, template_id)
        after = [(i.label, i.required) for i in template.items]
        assert after == before
        assert len(after) == 12

    def test_delete_template_keeps_checklists(self, seed_data, make_lead):
        lead = make_lead()
        template_id = seed_data["templates"]["PURCHASE"]
        checklist = checklist_service.instantiate_checklist(lead.id, template_id)

        template_service.delete_template(template_id)
        db.session.commit()

        assert db.session.get(ChecklistTemplate, template_id) is None
        checklist = db.session.get(Checklist, checklist.id)
        assert len(checklist.items) == 12
        assert checklist.source_template_id == template_id


class TestInstantiate:

    def test_deep_copy(self, seed_data, make_lead):
        lead = make_lead()
        template_id = seed_data["templates"]["PURCHASE"]
        template = db.session.get(ChecklistTemplate, template_id)

        checklist = checklist_service.instantiate_checklist(lead.id, template_id)

        assert checklist.status == "OPEN"
        assert checklist.title == template.name
        assert len(checklist.items) == len(template.items)
        for copied, original in zip(checklist.items, template.items):
            assert copied.label == original.label
            assert copied.required == original.required
            assert copied.status == "PENDING"

    def test_custom_title(self, seed_data, make_lead):
        lead = make_lead()
        checklist = checklist_service.instantiate_checklist(
            lead.id, seed_data["templates"]["RENEWAL"], title="2026 renewal"
        )
        assert checklist.title == "2026 renewal"

    def test_template_edit_does_not_touch_existing_checklist(self, seed_data, make_lead):
        lead = make_lead()
        template_id = seed_data["templates"]["PURCHASE"]
        checklist_id = checklist_service.instantiate_checklist(lead.id, template_id).id

        template_service.update_template(template_id, items=[{"label": "New only"}])

        checklist = db.session.get(Checklist, checklist_id)
        assert len(checklist.items) == 12
        assert "New only" not in [i.label for i in checklist.items]

    def test_missing_template_writes_nothing(self, make_lead):
        lead = make_lead()
        with pytest.raises(NotFoundError):
            checklist_service.instantiate_checklist(lead.id, "missing-id")
        assert Checklist.query.count() == 0

    def test_missing_lead(self, seed_data):
        with pytest.raises(NotFoundError):
            checklist_service.instantiate_checklist("missing-id", seed_data["templates"]["OTHER"])

    def test_failed_copy_writes_nothing(self, seed_data, make_lead):
        lead_id = make_lead().id
        with patch(
            "mortgage_crm.services.checklist_service.audit_service.record",
            side_effect=RuntimeError("audit table locked"),
        ):
            with pytest.raises(TransactionFailure):
                checklist_service.instantiate_checklist(
                    lead_id, seed_data["templates"]["PURCHASE"]
                )

        assert Checklist.query.count() == 0
        assert ChecklistItem.query.count() == 0

    def test_back_to_back_checklists_newest_first(self, seed_data, make_lead):
        lead_id = make_lead().id
        checklist_service.instantiate_checklist(
            lead_id, seed_data["templates"]["PURCHASE"], title="first"
        )
        checklist_service.instantiate_checklist(
            lead_id, seed_data["templates"]["OTHER"], title="second"
        )

        titles = [c.title for c in checklist_service.list_checklists_for_lead(lead_id)]
        assert titles == ["second", "first"]


class TestChecklistStatus:

    def test_set_item_status_is_idempotent(self, seed_data, make_lead):
        lead = make_lead()
        checklist = checklist_service.instantiate_checklist(
            lead.id, seed_data["templates"]["OTHER"]
        )
        item = checklist.items[0]

        checklist_service.set_item_status(item.id, "RECEIVED")
        db.session.commit()
        again = checklist_service.set_item_status(item.id, "RECEIVED")
        db.session.commit()

        assert again.status == "RECEIVED"
        assert checklist_service.checklist_progress(checklist)["received"] == 1

    def test_item_status_any_direction(self, seed_data, make_lead):
        lead = make_lead()
        checklist = checklist_service.instantiate_checklist(
            lead.id, seed_data["templates"]["OTHER"]
        )
        item_id = checklist.items[0].id
        for status in ["WAIVED", "RECEIVED", "PENDING"]:
            assert checklist_service.set_item_status(item_id, status).status == status

    def test_all_received_does_not_complete_checklist(self, seed_data, make_lead):
        lead = make_lead()
        checklist = checklist_service.instantiate_checklist(
            lead.id, seed_data["templates"]["PURCHASE"]
        )
        for item in checklist.items:
            checklist_service.set_item_status(item.id, "RECEIVED")
        db.session.commit()

        checklist = db.session.get(Checklist, checklist.id)
        assert checklist.status == "OPEN"
        progress = checklist_service.checklist_progress(checklist)
        assert progress["received"] == progress["total"] == 12

    def test_manual_checklist_status(self, seed_data, make_lead):
        lead = make_lead()
        checklist = checklist_service.instantiate_checklist(
            lead.id, seed_data["templates"]["OTHER"]
        )
        checklist_service.set_checklist_status(checklist.id, "COMPLETE")
        assert checklist.status == "COMPLETE"

        with pytest.raises(ValidationError):
            checklist_service.set_checklist_status(checklist.id, "DONE")

    def test_bad_item_status(self, seed_data, make_lead):
        lead = make_lead()
        checklist = checklist_service.instantiate_checklist(
            lead.id, seed_data["templates"]["OTHER"]
        )
        with pytest.raises(ValidationError):
            checklist_service.set_item_status(checklist.items[0].id, "LOST")


class TestChecklistAPI:

    def test_template_crud(self, client, api_headers):
        resp = client.post(
            "/api/checklist-templates",
            json={
                "name": "Self-employed extras",
                "lead_type": "PURCHASE",
                "items": [
                    {"label": "T1 Generals - 2 years"},
                    {"label": "Articles of incorporation", "required": False},
                ],
            },
            headers=api_headers,
        )
        assert resp.status_code == 201
        template = resp.get_json()
        assert [i["label"] for i in template["items"]] == [
            "T1 Generals - 2 years", "Articles of incorporation",
        ]
        assert template["items"][1]["required"] is False

        resp = client.patch(
            f"/api/checklist-templates/{template['id']}",
            json={"items": [{"label": "Business bank statements"}]},
            headers=api_headers,
        )
        assert resp.status_code == 200
        assert [i["label"] for i in resp.get_json()["items"]] == ["Business bank statements"]

        resp = client.delete(f"/api/checklist-templates/{template['id']}", headers=api_headers)
        assert resp.status_code == 200
        resp = client.get(f"/api/checklist-templates/{template['id']}", headers=api_headers)
        assert resp.status_code == 404

    def test_failed_replacement_returns_500(self, client, api_headers, seed_data):
        template_id = seed_data["templates"]["PURCHASE"]
        with patch(
            "mortgage_crm.services.template_service._insert_item_templates",
            side_effect=RuntimeError("boom"),
        ):
            resp = client.patch(
                f"/api/checklist-templates/{template_id}",
                json={"items": [{"label": "Only item"}]},
                headers=api_headers,
            )
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to update checklist template."}

        resp = client.get(f"/api/checklist-templates/{template_id}", headers=api_headers)
        assert len(resp.get_json()["items"]) == 12

    def test_instantiate_requires_template_id(self, client, api_headers, make_lead):
        lead_id = make_lead().id
        resp = client.post(f"/api/leads/{lead_id}/checklists", json={}, headers=api_headers)
        assert resp.status_code == 400
        assert resp.get_json()["details"] == {"template_id": "required"}

    def test_checklist_status_and_delete(self, client, api_headers, seed_data, make_lead):
        lead_id = make_lead().id
        resp = client.post(
            f"/api/leads/{lead_id}/checklists",
            json={"template_id": seed_data["templates"]["OTHER"]},
            headers=api_headers,
        )
        checklist_id = resp.get_json()["id"]

        resp = client.patch(
            f"/api/checklists/{checklist_id}", json={"status": "IN_PROGRESS"}, headers=api_headers
        )
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "IN_PROGRESS"

        resp = client.get(f"/api/leads/{lead_id}/checklists", headers=api_headers)
        assert [c["id"] for c in resp.get_json()] == [checklist_id]

        resp = client.delete(f"/api/checklists/{checklist_id}", headers=api_headers)
        assert resp.status_code == 200
        assert Checklist.query.count() == 0
