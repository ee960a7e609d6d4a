"""Integration tests for the matching API

Tests the full request path against an in-memory database:
- Text and barcode matching
- Request validation and tenant header handling
- Confirm (learning loop) followed by exact alias matching
- Batch matching, alias listing and tenant isolation
- Health endpoint
"""

from uuid import uuid4

import pytest

pytestmark = pytest.mark.integration

MATCH_URL = "/api/v1/matching/match"
BATCH_URL = "/api/v1/matching/match-batch"
CONFIRM_URL = "/api/v1/matching/confirm"
ALIASES_URL = "/api/v1/matching/aliases"


@pytest.fixture
def catalog(org_id, seed_items):
    ketchup, mayo, cola = seed_items(
        org_id,
        ["Heinz Ketchup 32oz", "Heinz Mayo 32oz", "Coca Cola 2L"],
        barcodes={"Coca Cola 2L": ["012345678905"]},
    )
    return {"ketchup": ketchup, "mayo": mayo, "cola": cola}


class TestMatchEndpoint:
    """Test POST /match"""

    def test_fuzzy_text_match(self, client, org_headers, catalog):
        """Test OCR-damaged text resolves to the right item"""
        response = client.post(MATCH_URL, json={"text": "HEINZ KETCHP 32 OZ"}, headers=org_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "fuzzy"
        assert data["item_id"] == str(catalog["ketchup"].id)
        assert data["item_name"] == "Heinz Ketchup 32oz"
        assert data["confidence"] == "high"
        assert data["status"] == "matched"
        assert data["normalized_query"] == "heinz ketchp 32 oz"
        assert data["match_source"] == "fuzzy_name"
        assert data["candidates"][0]["item_id"] == str(catalog["ketchup"].id)

    def test_barcode_match(self, client, org_headers, catalog):
        """Test barcode lookup returns exact_barcode"""
        response = client.post(MATCH_URL, json={"barcode": "0 12345 67890 5"}, headers=org_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "exact_barcode"
        assert data["item_id"] == str(catalog["cola"].id)
        assert data["score"] == 1.0
        assert data["confidence"] == "exact"
        assert data["barcode_check_digit_valid"] is True
        assert data["barcode_supported_length"] is True

    def test_no_match_is_not_an_error(self, client, org_headers, catalog):
        """Test unusable text returns outcome none with 200"""
        response = client.post(MATCH_URL, json={"text": "!!!"}, headers=org_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "none"
        assert data["item_id"] is None
        assert data["score"] == 0.0
        assert data["status"] == "unresolved"

    def test_empty_catalog(self, client, org_headers):
        """Test tenant without items gets outcome none"""
        response = client.post(MATCH_URL, json={"text": "milk"}, headers=org_headers)

        assert response.status_code == 200
        assert response.json()["outcome"] == "none"

    def test_inactive_items_ignored(self, client, org_id, org_headers, seed_items):
        """Test inactive catalog items are not candidates"""
        seed_items(org_id, ["Whole Milk 1 gal"], active=False)

        response = client.post(MATCH_URL, json={"text": "whole milk 1 gal"}, headers=org_headers)

        assert response.json()["outcome"] == "none"

    def test_low_confidence_unresolved_in_any_profile(self, client, org_headers, catalog):
        """Test profile decides how a low-tier fuzzy match is reported"""
        for profile in ("receipt", "shopping"):
            response = client.post(
                MATCH_URL,
                json={"text": "heinz", "profile": profile},
                headers=org_headers,
            )

            data = response.json()
            assert data["outcome"] == "fuzzy"
            assert data["confidence"] == "low"
            assert data["status"] == "unresolved"

    def test_both_text_and_barcode_rejected(self, client, org_headers):
        """Test exactly one query field is required"""
        response = client.post(
            MATCH_URL,
            json={"text": "milk", "barcode": "012345678905"},
            headers=org_headers,
        )

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_missing_query_rejected(self, client, org_headers):
        """Test empty request body is rejected"""
        response = client.post(MATCH_URL, json={}, headers=org_headers)
        assert response.status_code == 422

    def test_missing_org_header(self, client, catalog):
        """Test X-Org-ID is required"""
        response = client.post(MATCH_URL, json={"text": "milk"})

        assert response.status_code == 400
        assert response.json()["detail"] == "X-Org-ID header is required"

    def test_tenant_isolation(self, client, other_org_id, catalog):
        """Test another tenant never sees this tenant's catalog"""
        response = client.post(
            MATCH_URL,
            json={"text": "Heinz Ketchup 32oz"},
            headers={"X-Org-ID": str(other_org_id)},
        )

        assert response.json()["outcome"] == "none"


class TestConfirmEndpoint:
    """Test POST /confirm and the learning loop"""

    def test_confirm_then_exact_alias(self, client, org_headers, catalog):
        """Test confirmed text matches exactly on the next request"""
        ketchup_id = str(catalog["ketchup"].id)

        response = client.post(
            CONFIRM_URL,
            json={"query": "HZ KTCHP", "item_id": ketchup_id},
            headers=org_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Alias created"
        assert data["alias"]["alias_text"] == "hz ktchp"
        assert data["alias"]["catalog_item_id"] == ketchup_id
        assert data["alias"]["source"] == "receipt"
        assert data["alias"]["support_count"] == 1

        response = client.post(MATCH_URL, json={"text": "hz. ktchp"}, headers=org_headers)
        data = response.json()
        assert data["outcome"] == "exact_alias"
        assert data["item_id"] == ketchup_id
        assert data["match_source"] == "alias"

    def test_reconfirm_overwrites(self, client, org_headers, catalog):
        """Test newest confirmation wins and support count grows"""
        client.post(
            CONFIRM_URL,
            json={"query": "heinz 32oz", "item_id": str(catalog["ketchup"].id)},
            headers=org_headers,
        )
        response = client.post(
            CONFIRM_URL,
            json={"query": "heinz 32oz", "item_id": str(catalog["mayo"].id)},
            headers=org_headers,
        )

        data = response.json()
        assert data["message"] == "Alias updated"
        assert data["alias"]["catalog_item_id"] == str(catalog["mayo"].id)
        assert data["alias"]["support_count"] == 2

        response = client.post(MATCH_URL, json={"text": "heinz 32 oz"}, headers=org_headers)
        assert response.json()["item_id"] == str(catalog["mayo"].id)

    def test_confirmed_line_code_survives_price_change(self, client, org_id, org_headers, seed_items, catalog):
        """Test a confirmed receipt line resolves by its line code at a new price"""
        dates, = seed_items(org_id, ["Terra Medjool Dates"])

        response = client.post(
            CONFIRM_URL,
            json={"query": "5523795 TERRA DATES $9.49", "item_id": str(dates.id)},
            headers=org_headers,
        )
        assert response.status_code == 200
        assert response.json()["alias"]["alias_text"] == "5523795 terra dates 9.49"

        response = client.post(MATCH_URL, json={"text": "5523795 TERRA DATES $8.99"}, headers=org_headers)
        data = response.json()
        assert data["outcome"] == "exact_alias"
        assert data["match_source"] == "line_code_alias"
        assert data["item_id"] == str(dates.id)

        aliases = client.get(ALIASES_URL, headers=org_headers).json()
        assert {a["alias_text"] for a in aliases["items"]} == {"5523795 terra dates 9.49", "5523795"}

    def test_confirm_barcode_supplier_code(self, client, org_headers, catalog):
        """Test non-GTIN codes are learned as barcode aliases"""
        response = client.post(
            CONFIRM_URL,
            json={"query": "SUP-00042", "query_type": "barcode", "item_id": str(catalog["mayo"].id)},
            headers=org_headers,
        )
        assert response.status_code == 200
        assert response.json()["alias"]["source"] == "barcode"

        response = client.post(MATCH_URL, json={"barcode": "SUP00042"}, headers=org_headers)
        data = response.json()
        assert data["outcome"] == "exact_alias"
        assert data["item_id"] == str(catalog["mayo"].id)
        assert data["barcode_check_digit_valid"] is None

    def test_confirm_unknown_item(self, client, org_headers, catalog):
        """Test unknown item id returns 404"""
        response = client.post(
            CONFIRM_URL,
            json={"query": "milk", "item_id": str(uuid4())},
            headers=org_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_confirm_other_tenant_item(self, client, other_org_id, catalog):
        """Test items of another tenant look like missing items"""
        response = client.post(
            CONFIRM_URL,
            json={"query": "ketchup", "item_id": str(catalog["ketchup"].id)},
            headers={"X-Org-ID": str(other_org_id)},
        )

        assert response.status_code == 404

    def test_confirm_unmatchable_query(self, client, org_headers, catalog):
        """Test punctuation-only query is rejected"""
        response = client.post(
            CONFIRM_URL,
            json={"query": "!!!", "item_id": str(catalog["ketchup"].id)},
            headers=org_headers,
        )

        assert response.status_code == 422

    def test_confirm_blank_query(self, client, org_headers, catalog):
        """Test blank query fails validation"""
        response = client.post(
            CONFIRM_URL,
            json={"query": "   ", "item_id": str(catalog["ketchup"].id)},
            headers=org_headers,
        )

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"


class TestBatchAndAliases:
    """Test POST /match-batch and GET /aliases"""

    def test_batch_preserves_order(self, client, org_headers, catalog):
        """Test results follow submitted line order"""
        response = client.post(
            BATCH_URL,
            json={"lines": [
                {"raw_text": "HEINZ MAYO 32OZ"},
                {"raw_text": "SUBTOTAL ***"},
                {"raw_text": "COCA COLA 2 LTR", "confidence_labels": ["high"]},
            ]},
            headers=org_headers,
        )

        assert response.status_code == 200
        results = response.json()["results"]
        assert len(results) == 3
        assert results[0]["item_id"] == str(catalog["mayo"].id)
        assert results[2]["item_id"] == str(catalog["cola"].id)

    def test_batch_requires_lines(self, client, org_headers):
        """Test empty batch is rejected"""
        response = client.post(BATCH_URL, json={"lines": []}, headers=org_headers)
        assert response.status_code == 422

    def test_list_aliases(self, client, org_headers, other_org_id, catalog):
        """Test aliases are listed per tenant"""
        client.post(
            CONFIRM_URL,
            json={"query": "coke 2l", "item_id": str(catalog["cola"].id)},
            headers=org_headers,
        )

        response = client.get(ALIASES_URL, headers=org_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["alias_text"] == "coke 2 l"

        response = client.get(ALIASES_URL, headers={"X-Org-ID": str(other_org_id)})
        assert response.json()["total"] == 0


class TestObservabilityEndpoints:
    """Test /health and /metrics"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["components"]["database"]["status"] == "healthy"
        assert response.json()["components"]["schema"]["status"] == "healthy"

    def test_metrics(self, client, org_headers, catalog):
        client.post(MATCH_URL, json={"text": "heinz ketchup"}, headers=org_headers)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "shelfmatch_match_requests_total" in response.text

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"
