"""Tests for the case endpoints and the auth boundary."""

from datetime import datetime, timedelta

import jwt

from teisesdraugas.core.config import settings
from teisesdraugas.db.models import CaseStatus

CASE_PAYLOAD = {
    "title": "Neatlyginta žala automobiliui",
    "description": "Kaimynas apgadino automobilį ir atsisako atlyginti žalą.",
    "case_type": "PROPERTY_DAMAGE",
    "category": "OTHER",
    "claim_amount": 5000,
    "opponent_email": "",
}


def test_requires_bearer_token(client):
    response = client.get("/api/v1/cases")
    assert response.status_code in (401, 403)


def test_rejects_token_signed_with_other_secret(client, user):
    token = jwt.encode({"sub": str(user.id)}, "wrong-secret", algorithm="HS256")
    response = client.get("/api/v1/cases", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_rejects_expired_token(client, user):
    token = jwt.encode(
        {"sub": str(user.id), "exp": datetime.utcnow() - timedelta(minutes=5)},
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )
    response = client.get("/api/v1/cases", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_inactive_user_is_forbidden(client, db_session, user, auth_headers):
    user.is_active = False
    db_session.commit()
    response = client.get("/api/v1/cases", headers=auth_headers)
    assert response.status_code == 403


def test_create_case_at_claim_limit(client, auth_headers):
    response = client.post("/api/v1/cases", json=CASE_PAYLOAD, headers=auth_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["claim_amount"] == 5000.0
    assert body["status"] == "INTAKE"
    assert body["current_step"] == "ANALYSIS"
    assert body["opponent_email"] is None


def test_claim_over_limit_is_rejected(client, auth_headers):
    payload = dict(CASE_PAYLOAD, claim_amount=5000.01)
    response = client.post("/api/v1/cases", json=payload, headers=auth_headers)
    assert response.status_code == 422


def test_non_positive_claim_is_rejected(client, auth_headers):
    payload = dict(CASE_PAYLOAD, claim_amount=0)
    response = client.post("/api/v1/cases", json=payload, headers=auth_headers)
    assert response.status_code == 422


def test_list_cases_paginates_newest_first(client, auth_headers):
    for i in range(3):
        client.post("/api/v1/cases", json=dict(CASE_PAYLOAD, title=f"Byla numeris {i}"), headers=auth_headers)

    response = client.get("/api/v1/cases?page=1&limit=2", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert len(body["cases"]) == 2


def test_list_cases_filters_by_status(client, db_session, case, auth_headers):
    case.status = CaseStatus.ANALYSIS
    db_session.commit()

    response = client.get("/api/v1/cases?status=INTAKE", headers=auth_headers)
    assert response.json()["pagination"]["total"] == 0

    response = client.get("/api/v1/cases?status=ANALYSIS", headers=auth_headers)
    assert response.json()["pagination"]["total"] == 1


def test_case_detail_includes_timeline(client, case, auth_headers):
    response = client.get(f"/api/v1/cases/{case.id}", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["case_number"] == case.case_number
    assert [e["event_type"] for e in body["timeline_events"]] == ["CASE_CREATED"]
    assert body["demand_letters"] == []


def test_other_users_case_is_forbidden(client, case, other_headers):
    response = client.get(f"/api/v1/cases/{case.id}", headers=other_headers)
    assert response.status_code == 403


def test_unknown_case_is_not_found(client, auth_headers):
    response = client.get("/api/v1/cases/00000000-0000-0000-0000-000000000000", headers=auth_headers)
    assert response.status_code == 404


def test_backward_status_change_conflicts(client, db_session, case, auth_headers):
    case.status = CaseStatus.FILED
    db_session.commit()

    response = client.patch(f"/api/v1/cases/{case.id}", json={"status": "ANALYSIS"}, headers=auth_headers)
    assert response.status_code == 409


def test_resolving_a_case_adds_timeline_event(client, case, auth_headers):
    response = client.patch(f"/api/v1/cases/{case.id}", json={"status": "RESOLVED"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "RESOLVED"

    timeline = client.get(f"/api/v1/cases/{case.id}/timeline", headers=auth_headers).json()
    assert timeline[0]["event_type"] == "CASE_RESOLVED"


def test_delete_in_progress_case_is_rejected(client, db_session, case, auth_headers):
    case.status = CaseStatus.AWAITING_RESPONSE
    db_session.commit()

    response = client.delete(f"/api/v1/cases/{case.id}", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete case in progress. Close the case first."


def test_delete_intake_case(client, case, auth_headers):
    response = client.delete(f"/api/v1/cases/{case.id}", headers=auth_headers)
    assert response.status_code == 200

    response = client.get(f"/api/v1/cases/{case.id}", headers=auth_headers)
    assert response.status_code == 404


def test_notifications_list_newest_first(client, case, auth_headers):
    response = client.get("/api/v1/notifications", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()[0]["title"] == "Nauja byla sukurta"


def test_correlation_id_is_echoed(client):
    response = client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert response.json()["database"] == "ok"
