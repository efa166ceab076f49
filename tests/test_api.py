"""API tests — every endpoint through the FastAPI test client.

Covers: health probes, the question catalog, stateless scoring, the
internal assessment workflow, vendor self-service links, the vendor
registry and the JSON error bodies.
"""

from __future__ import annotations

from helpers import ASSESSOR, LONG_NOTE, REVIEWER, answers_json, build_answers

CONDITIONAL_ANSWERS = {"comp-1": "na", "sec-2": "na", "ops-1": "na", "trust-2": "na"}
REVIEWER_HEADERS = {"X-Actor-Id": REVIEWER}
ASSESSOR_HEADERS = {"X-Actor-Id": ASSESSOR}
NEW_VENDOR = {
    "name": "Quill Labs",
    "website": "https://quill.example.com",
    "description": "AI writing assistant",
    "products": [{"name": "Quill", "description": "Drafting tool", "category": "writing"}],
}


def _create(client, **overrides) -> dict:
    body = {
        "vendor_id": "vendor-1",
        "assessment_type": "new_vendor",
        "requested_by": "Dana Field",
        "request_reason": "Marketing wants an AI writing assistant",
        "completion_method": "internal",
    }
    body.update(overrides)
    resp = client.post("/api/assessments", json=body, headers=ASSESSOR_HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _submit(client, assessment_id: str, answers) -> dict:
    resp = client.put(f"/api/assessments/{assessment_id}/answers", json=answers_json(answers))
    assert resp.status_code == 200, resp.text
    resp = client.post(f"/api/assessments/{assessment_id}/submit", headers=ASSESSOR_HEADERS)
    assert resp.status_code == 200, resp.text
    return resp.json()


# ─── Health endpoints ────────────────────────────────────────────────────────

class TestHealthEndpoints:
    """Tests for the health probes."""

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["storage_backend"] == "memory"

    def test_ready_checks_storage(self, client):
        data = client.get("/health/ready").json()
        assert data["status"] == "healthy"
        assert {s["service"] for s in data["services"]} == {"app", "storage"}

    def test_live(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}


# ─── Catalog and scoring endpoints ───────────────────────────────────────────

class TestScoringEndpoints:
    """Tests for the catalog and stateless scoring."""

    def test_question_catalog(self, client):
        data = client.get("/api/questions").json()
        assert data["max_total_score"] == 11
        assert [c["category"] for c in data["categories"]] == [
            "compliance", "security", "operational", "trust",
        ]
        assert data["categories"][1]["questions"][0]["id"] == "sec-1"

    def test_score_all_yes(self, client):
        data = client.post("/api/scoring/score", json=answers_json(build_answers())).json()
        assert data["total_score"] == 11
        assert data["verdict"] == "approved"
        assert data["conditions"] == []
        assert data["max_total_score"] == 11
        assert data["risk_level"] == {"level": "low", "label": "Low Risk"}

    def test_score_conditional(self, client):
        data = client.post(
            "/api/scoring/score", json=answers_json(build_answers(CONDITIONAL_ANSWERS))
        ).json()
        assert data["total_score"] == 7
        assert data["verdict"] == "conditional"
        assert len(data["conditions"]) == 4
        assert data["risk_level"]["level"] == "medium"

    def test_score_empty_body(self, client):
        data = client.post("/api/scoring/score", json={}).json()
        assert data["total_score"] == 0
        assert data["verdict"] == "rejected"

    def test_score_folds_unknown_answer_value(self, client):
        resp = client.post("/api/scoring/score", json={"compliance": {"comp-1": {"answer": "maybe"}}})
        assert resp.status_code == 200
        assert resp.json()["total_score"] == 0
        assert resp.json()["compliance_score"] == 0

    def test_empty_answer_is_incomplete(self, client):
        body = answers_json(build_answers())
        body["trust"]["trust-1"]["answer"] = ""
        resp = client.post("/api/scoring/validate/complete", json=body)
        assert resp.status_code == 200
        assert resp.json() == {"complete": False}

    def test_malformed_answer_saved_as_unanswered(self, client, sample_vendor):
        created = _create(client)
        resp = client.put(
            f"/api/assessments/{created['id']}/answers",
            json={"security": {"sec-1": {"answer": "YES", "evidence": "https://example.com"}}},
        )
        assert resp.status_code == 200
        assert resp.json()["answers"]["security"]["sec-1"]["answer"] is None
        assert resp.json()["security_score"] == 0

    def test_validate_complete(self, client):
        complete = client.post("/api/scoring/validate/complete", json=answers_json(build_answers()))
        partial = client.post(
            "/api/scoring/validate/complete", json=answers_json(build_answers(skip={"trust-2"}))
        )
        assert complete.json() == {"complete": True}
        assert partial.json() == {"complete": False}

    def test_validate_evidence(self, client):
        answers = build_answers(default="na")
        body = answers_json(answers)
        body["security"]["sec-1"] = {"answer": "yes", "evidence": " "}
        data = client.post("/api/scoring/validate/evidence", json=body).json()
        assert data == {"valid": False, "missing_evidence": ["sec-1"]}


# ─── Vendor registry endpoints ───────────────────────────────────────────────

class TestVendorEndpoints:
    """Tests for the vendor registry."""

    def test_list_vendors(self, client, sample_vendor):
        data = client.get("/api/vendors").json()
        assert [v["name"] for v in data] == ["Acme AI"]
        assert len(data[0]["products"]) == 2

    def test_get_vendor(self, client, sample_vendor):
        assert client.get("/api/vendors/vendor-1").json()["id"] == "vendor-1"

    def test_get_unknown_vendor(self, client):
        resp = client.get("/api/vendors/vendor-404")
        assert resp.status_code == 404
        assert resp.json()["error"] == "NotFound"

    def test_register_vendor_then_assess(self, client):
        resp = client.post("/api/vendors", json=NEW_VENDOR, headers=ASSESSOR_HEADERS)
        assert resp.status_code == 201, resp.text
        vendor = resp.json()
        assert vendor["name"] == "Quill Labs"
        assert vendor["created_by_id"] == ASSESSOR
        assert vendor["products"][0]["category"] == "writing"

        resp = client.post(
            f"/api/vendors/{vendor['id']}/products",
            json={"name": "Quill API", "description": "Drafting API", "category": "automation",
                  "pricing_model": "pay_per_use"},
        )
        assert resp.status_code == 201, resp.text
        product = resp.json()
        assert product["vendor_id"] == vendor["id"]

        created = _create(client, vendor_id=vendor["id"], product_id=product["id"])
        assert created["vendor_name"] == "Quill Labs"
        assert created["product_name"] == "Quill API"
        assert len(client.get(f"/api/vendors/{vendor['id']}").json()["products"]) == 2

    def test_duplicate_vendor_name(self, client, sample_vendor):
        resp = client.post("/api/vendors", json={**NEW_VENDOR, "name": "ACME ai"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "ValidationError"
        assert resp.json()["field"] == "name"

    def test_vendor_website_must_be_url(self, client):
        resp = client.post("/api/vendors", json={**NEW_VENDOR, "website": "quill-labs"})
        assert resp.status_code == 400
        assert resp.json()["field"] == "website"

    def test_product_for_unknown_vendor(self, client):
        resp = client.post(
            "/api/vendors/vendor-404/products", json={"name": "Ghost", "description": "Nothing"}
        )
        assert resp.status_code == 404

    def test_product_category_must_be_known(self, client, sample_vendor):
        resp = client.post(
            "/api/vendors/vendor-1/products",
            json={"name": "Widget", "description": "A widget", "category": "robotics"},
        )
        assert resp.status_code == 422

    def test_stats(self, client, sample_vendor):
        created = _create(client)
        _submit(client, created["id"], build_answers())
        client.post(f"/api/assessments/{created['id']}/approve", headers=REVIEWER_HEADERS)
        _create(client)

        data = client.get("/api/vendors/stats").json()
        assert data == {
            "total_vendors": 1,
            "approved_vendors": 1,
            "conditional_vendors": 0,
            "pending_assessments": 1,
        }


# ─── Assessment workflow endpoints ───────────────────────────────────────────

class TestAssessmentEndpoints:
    """Tests for the internal workflow."""

    def test_create_internal(self, client, sample_vendor):
        data = _create(client, product_id="product-2")
        assert data["status"] == "draft"
        assert data["vendor_name"] == "Acme AI"
        assert data["product_name"] == "Acme API"
        assert data["created_by_id"] == ASSESSOR
        assert data["vendor_assessment_url"] is None

    def test_create_vendor_link(self, client, sample_vendor):
        data = _create(client, completion_method="vendor")
        assert data["status"] == "awaiting_vendor"
        assert data["vendor_assessment_url"].endswith(data["vendor_token"])

    def test_create_unknown_vendor(self, client, sample_vendor):
        resp = client.post("/api/assessments", json={
            "vendor_id": "vendor-404",
            "assessment_type": "renewal",
            "requested_by": "Dana Field",
            "request_reason": "Renewal",
        })
        assert resp.status_code == 404

    def test_create_blank_reason(self, client, sample_vendor):
        resp = client.post("/api/assessments", json={
            "vendor_id": "vendor-1",
            "assessment_type": "new_vendor",
            "requested_by": "Dana Field",
            "request_reason": "   ",
        })
        assert resp.status_code == 400
        assert resp.json() == {
            "error": "ValidationError",
            "detail": "Request reason is required",
            "field": "request_reason",
        }

    def test_get_and_list(self, client, sample_vendor):
        created = _create(client)
        assert client.get(f"/api/assessments/{created['id']}").json()["id"] == created["id"]
        listed = client.get("/api/assessments", params={"status": "draft"}).json()
        assert [a["id"] for a in listed] == [created["id"]]
        assert client.get("/api/assessments", params={"verdict": "approved"}).json() == []

    def test_get_unknown(self, client):
        resp = client.get("/api/assessments/missing")
        assert resp.status_code == 404
        assert resp.json()["error"] == "NotFound"

    def test_save_answers_rescores(self, client, sample_vendor):
        created = _create(client)
        resp = client.put(
            f"/api/assessments/{created['id']}/answers",
            json={"compliance": answers_json(build_answers())["compliance"]},
        )
        data = resp.json()
        assert data["compliance_score"] == 3
        assert data["total_score"] == 3
        assert data["version"] == 2

    def test_submit_incomplete(self, client, sample_vendor):
        created = _create(client)
        resp = client.post(f"/api/assessments/{created['id']}/submit", headers=ASSESSOR_HEADERS)
        assert resp.status_code == 422
        body = resp.json()
        assert body["error"] == "IncompleteAnswers"
        assert len(body["unanswered"]) == 11

    def test_submit_missing_evidence(self, client, sample_vendor):
        created = _create(client)
        client.put(
            f"/api/assessments/{created['id']}/answers",
            json=answers_json(build_answers(with_evidence=False, default="na", overrides={"ops-2": "yes"})),
        )
        resp = client.post(f"/api/assessments/{created['id']}/submit", headers=ASSESSOR_HEADERS)
        assert resp.status_code == 422
        assert resp.json()["error"] == "MissingEvidence"
        assert resp.json()["missing_evidence"] == ["ops-2"]

    def test_submit_requires_actor(self, client, sample_vendor):
        created = _create(client)
        resp = client.post(f"/api/assessments/{created['id']}/submit")
        assert resp.status_code == 422

    def test_approve(self, client, sample_vendor):
        created = _create(client)
        submitted = _submit(client, created["id"], build_answers())
        assert submitted["status"] == "awaiting_approval"

        resp = client.post(f"/api/assessments/{created['id']}/approve", headers=REVIEWER_HEADERS)
        data = resp.json()
        assert resp.status_code == 200
        assert data["status"] == "complete"
        assert data["verdict"] == "approved"
        assert data["reviewed_by_id"] == REVIEWER
        assert data["expires_at"] is not None
        assert data["days_until_expiry"] >= 364

    def test_override_needs_justification(self, client, sample_vendor):
        created = _create(client)
        _submit(client, created["id"], build_answers(CONDITIONAL_ANSWERS))
        resp = client.post(
            f"/api/assessments/{created['id']}/approve",
            json={"override_verdict": "approved", "verdict_notes": "fine"},
            headers=REVIEWER_HEADERS,
        )
        assert resp.status_code == 422
        assert resp.json()["error"] == "JustificationTooShort"
        assert resp.json()["min_length"] == 20

        resp = client.post(
            f"/api/assessments/{created['id']}/approve",
            json={"override_verdict": "approved", "verdict_notes": LONG_NOTE},
            headers=REVIEWER_HEADERS,
        )
        assert resp.status_code == 200
        assert resp.json()["verdict"] == "approved"
        assert resp.json()["conditions"] == []

    def test_conditional_without_conditions(self, client, sample_vendor):
        created = _create(client)
        _submit(client, created["id"], build_answers(CONDITIONAL_ANSWERS))
        resp = client.post(
            f"/api/assessments/{created['id']}/approve",
            json={"conditions": []},
            headers=REVIEWER_HEADERS,
        )
        assert resp.status_code == 422
        assert resp.json()["error"] == "MissingConditions"

    def test_approve_draft_is_invalid_state(self, client, sample_vendor):
        created = _create(client)
        resp = client.post(f"/api/assessments/{created['id']}/approve", headers=REVIEWER_HEADERS)
        assert resp.status_code == 409
        assert resp.json()["error"] == "InvalidState"
        assert resp.json()["status"] == "draft"

    def test_reject(self, client, sample_vendor):
        created = _create(client)
        _submit(client, created["id"], build_answers())
        short = client.post(
            f"/api/assessments/{created['id']}/reject",
            json={"verdict_notes": "no"},
            headers=REVIEWER_HEADERS,
        )
        assert short.status_code == 422

        resp = client.post(
            f"/api/assessments/{created['id']}/reject",
            json={"verdict_notes": LONG_NOTE},
            headers=REVIEWER_HEADERS,
        )
        data = resp.json()
        assert data["verdict"] == "rejected"
        assert data["status"] == "complete"
        assert data["expires_at"] is None

    def test_completed_assessment_is_frozen(self, client, sample_vendor):
        created = _create(client)
        _submit(client, created["id"], build_answers())
        client.post(f"/api/assessments/{created['id']}/approve", headers=REVIEWER_HEADERS)
        resp = client.put(f"/api/assessments/{created['id']}/answers", json={"trust": {}})
        assert resp.status_code == 409
        assert resp.json()["detail"] == "Cannot update completed assessment"

    def test_compare(self, client, sample_vendor):
        first = _create(client)
        second = _create(client)
        data = client.post(
            "/api/assessments/compare", json={"assessment_ids": [first["id"], second["id"]]}
        ).json()
        assert [a["id"] for a in data["assessments"]] == [first["id"], second["id"]]
        assert data["comparison_generated"]

    def test_compare_too_few(self, client, sample_vendor):
        first = _create(client)
        resp = client.post("/api/assessments/compare", json={"assessment_ids": [first["id"]]})
        assert resp.status_code == 400

    def test_compare_missing(self, client, sample_vendor):
        first = _create(client)
        resp = client.post("/api/assessments/compare", json={"assessment_ids": [first["id"], "nope"]})
        assert resp.status_code == 404
        assert resp.json()["missing_ids"] == ["nope"]


# ─── Vendor self-service endpoints ───────────────────────────────────────────

class TestPublicEndpoints:
    """Tests for the token link flow."""

    def test_view(self, client, sample_vendor):
        created = _create(client, completion_method="vendor", product_id="product-1")
        data = client.get(f"/api/public/assessments/{created['vendor_token']}").json()
        assert data["vendor_name"] == "Acme AI"
        assert data["product_name"] == "Acme Assistant"
        assert "total_score" not in data
        assert "vendor_token" not in data

    def test_save_and_submit(self, client, sample_vendor):
        created = _create(client, completion_method="vendor")
        token = created["vendor_token"]

        saved = client.put(f"/api/public/assessments/{token}/answers", json=answers_json(build_answers()))
        assert saved.status_code == 200
        assert saved.json()["answers"]["trust"]["trust-2"]["answer"] == "yes"

        resp = client.post(f"/api/public/assessments/{token}/submit")
        assert resp.status_code == 200
        assert resp.json()["status"] == "in_review"

        detail = client.get(f"/api/assessments/{created['id']}").json()
        assert detail["status"] == "in_review"
        assert detail["vendor_submitted_at"] is not None

    def test_resubmit_refused(self, client, sample_vendor):
        created = _create(client, completion_method="vendor")
        token = created["vendor_token"]
        client.put(f"/api/public/assessments/{token}/answers", json=answers_json(build_answers()))
        client.post(f"/api/public/assessments/{token}/submit")

        resp = client.post(f"/api/public/assessments/{token}/submit")
        assert resp.status_code == 409
        assert resp.json() == {
            "error": "AlreadySubmitted",
            "detail": "This assessment has already been submitted",
        }

    def test_unknown_token(self, client):
        resp = client.get("/api/public/assessments/not-a-token")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Assessment not found"

    def test_submit_incomplete(self, client, sample_vendor):
        created = _create(client, completion_method="hybrid")
        resp = client.post(f"/api/public/assessments/{created['vendor_token']}/submit")
        assert resp.status_code == 422
        assert resp.json()["error"] == "IncompleteAnswers"
