"""
Tests for audit log API endpoints.
"""

from datetime import timedelta

from garment_pool.config import get_settings
from garment_pool.models.base import utcnow
from garment_pool.models.enums import Category, ItemStatus
from garment_pool.models.item import InventoryItem


class TestListLogs:

    def test_empty_log(self, client):
        response = client.get("/logs")
        assert response.status_code == 200
        assert response.json() == {"logs": [], "page": 1, "pages": 1, "total": 0}

    def test_operations_show_up_newest_first(self, client):
        client.post("/items/bulk", json={
            "items": [{"barcode": "A1", "category": "HOSE", "size": "L"}],
        })
        client.post("/items/issue-out", json={
            "barcodes": ["A1"],
            "issued_by": "Lager",
            "issued_to": "Station 3",
        })

        data = client.get("/logs").json()

        assert data["total"] == 2
        assert [e["type"] for e in data["logs"]] == [
            "ISSUE_OUT_SUMMARY", "CREATION_SUMMARY",
        ]
        assert data["logs"][0]["severity"] == "RED"
        assert data["logs"][1]["severity"] == "GREEN"

    def test_page_zero_is_rejected(self, client):
        assert client.get("/logs?page=0").status_code == 422

    def test_stale_item_is_warned_and_mailed_once(
        self, client, db_session, notifier, monkeypatch
    ):
        monkeypatch.setattr(get_settings(), "NOTIFY_RECIPIENTS", ["ops@example.com"])
        db_session.add(InventoryItem(
            system_id=1000,
            barcode="A1",
            category=Category.HOSE,
            size="L",
            status=ItemStatus.CIRCULATING,
            issued_to="Station 3",
            issued_at=utcnow() - timedelta(weeks=7),
        ))
        db_session.commit()

        client.get("/logs")
        data = client.get("/logs").json()

        assert [e["type"] for e in data["logs"]] == ["STALENESS_WARNING"]
        assert data["logs"][0]["severity"] == "YELLOW"
        assert data["logs"][0]["related_item_id"] == 1000
        assert len(notifier.sent) == 1


class TestDeleteLogs:

    def test_mark_as_read(self, client):
        client.post("/items/bulk", json={
            "items": [{"barcode": "A1", "category": "HOSE", "size": "L"}],
        })
        entry_id = client.get("/logs").json()["logs"][0]["id"]

        response = client.post("/logs/delete", json={"ids": [entry_id, 999]})

        assert response.status_code == 200
        assert response.json() == {"deleted_count": 1}
        assert client.get("/logs").json()["total"] == 0

    def test_empty_ids(self, client):
        response = client.post("/logs/delete", json={"ids": []})
        assert response.json() == {"deleted_count": 0}
