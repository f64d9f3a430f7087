"""
Tests for item API endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Business rules are tested in test_item_service.py.
"""

from garment_pool.config import get_settings


def create_items(client, *rows):
    """Helper to create garments from (barcode, category, size) tuples."""
    response = client.post("/items/bulk", json={
        "items": [
            {"barcode": b, "category": c, "size": s} for b, c, s in rows
        ],
    })
    assert response.status_code == 201
    return response.json()["created"]


class TestBulkCreate:

    def test_returns_201_with_system_ids(self, client):
        response = client.post("/items/bulk", json={
            "items": [
                {"barcode": "A1", "category": "HOSE", "size": "L"},
                {"barcode": "A2", "category": "POLO", "size": "M"},
            ],
        })
        assert response.status_code == 201
        data = response.json()
        assert [c["system_id"] for c in data["created"]] == [1000, 1001]
        assert data["skipped_existing"] == 0

    def test_existing_barcodes_are_skipped(self, client):
        create_items(client, ("A1", "HOSE", "L"))
        response = client.post("/items/bulk", json={
            "items": [{"barcode": "A1", "category": "HOSE", "size": "L"}],
        })
        assert response.status_code == 201
        assert response.json() == {"created": [], "skipped_existing": 1}

    def test_empty_list_returns_400(self, client):
        response = client.post("/items/bulk", json={"items": []})
        assert response.status_code == 400

    def test_unknown_category_returns_422(self, client):
        response = client.post("/items/bulk", json={
            "items": [{"barcode": "A1", "category": "HUT", "size": "L"}],
        })
        assert response.status_code == 422


class TestImport:

    def test_import_reports_bad_rows(self, client):
        response = client.post("/items/import", json={
            "rows": [
                {"Barcode": "A1", "Kategorie": "Hose", "Größe": "52"},
                {"Barcode": "", "Kategorie": "Hose", "Größe": "52"},
            ],
        })
        assert response.status_code == 201
        data = response.json()
        assert [c["barcode"] for c in data["created"]] == ["A1"]
        assert data["errors"][0].startswith("Row 2:")


class TestStoreIn:

    def test_store_in_reports_missing(self, client):
        create_items(client, ("A1", "HOSE", "L"))
        response = client.post("/items/store-in", json={
            "barcodes": ["0A1", "a1", "A3"],
        })
        assert response.status_code == 200
        assert response.json() == {"updated_count": 1, "missing": ["0A1", "A3"]}

    def test_empty_batch_returns_400(self, client):
        response = client.post("/items/store-in", json={"barcodes": ["  "]})
        assert response.status_code == 400


class TestIssueOut:

    def test_issue_out_sets_circulating(self, client):
        create_items(client, ("A1", "HOSE", "L"))
        response = client.post("/items/issue-out", json={
            "barcodes": ["A1"],
            "issued_by": "Lager",
            "issued_to": "Station 3",
        })
        assert response.status_code == 200
        assert response.json()["updated_count"] == 1

        item = client.get("/items/1000").json()
        assert item["status"] == "CIRCULATING"
        assert item["issued_to"] == "Station 3"
        assert item["stored_at"] is None

    def test_missing_recipient_returns_400(self, client):
        create_items(client, ("A1", "HOSE", "L"))
        response = client.post("/items/issue-out", json={
            "barcodes": ["A1"],
            "issued_by": "Lager",
            "issued_to": "",
        })
        assert response.status_code == 400
        assert client.get("/items/1000").json()["status"] == "STORED"


class TestEditAndDelete:

    def test_get_unknown_item_returns_404(self, client):
        assert client.get("/items/4242").status_code == 404

    def test_edit_item(self, client):
        create_items(client, ("A1", "HOSE", "L"))
        response = client.patch("/items/1000", json={
            "size": "XL",
            "remark": "Knopf fehlt",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["size"] == "XL"
        assert data["remark"] == "Knopf fehlt"

    def test_edit_unknown_item_returns_404(self, client):
        response = client.patch("/items/4242", json={"size": "XL"})
        assert response.status_code == 404

    def test_edit_to_taken_barcode_returns_409(self, client):
        create_items(client, ("A1", "HOSE", "L"), ("A2", "HOSE", "L"))
        response = client.patch("/items/1001", json={"barcode": "A1"})
        assert response.status_code == 409

    def test_delete_item(self, client):
        create_items(client, ("A1", "HOSE", "L"))
        response = client.delete("/items/1000")
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert client.get("/items/1000").status_code == 404

    def test_delete_unknown_item_returns_404(self, client):
        assert client.delete("/items/4242").status_code == 404

    def test_list_items(self, client):
        create_items(client, ("A1", "HOSE", "L"), ("A2", "POLO", "M"))
        response = client.get("/items")
        assert response.status_code == 200
        assert {i["barcode"] for i in response.json()} == {"A1", "A2"}


class TestApiKey:

    def test_rejects_missing_key(self, client, monkeypatch):
        monkeypatch.setattr(get_settings(), "API_KEY", "secret")
        assert client.get("/items").status_code == 401

    def test_rejects_wrong_key(self, client, monkeypatch):
        monkeypatch.setattr(get_settings(), "API_KEY", "secret")
        response = client.get("/items", headers={"X-API-Key": "guess"})
        assert response.status_code == 401

    def test_accepts_configured_key(self, client, monkeypatch):
        monkeypatch.setattr(get_settings(), "API_KEY", "secret")
        response = client.get("/items", headers={"X-API-Key": "secret"})
        assert response.status_code == 200

    def test_health_needs_no_key(self, client, monkeypatch):
        monkeypatch.setattr(get_settings(), "API_KEY", "secret")
        assert client.get("/health").status_code == 200
