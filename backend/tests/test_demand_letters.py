"""Tests for demand letter generation, printing, and delivery."""

from datetime import datetime, timedelta

import pytest

from teisesdraugas.core.config import settings
from teisesdraugas.db.models import (
    CaseStatus,
    CaseStep,
    Communication,
    DemandLetter,
    DemandLetterStatus,
    LetterTone,
)
from teisesdraugas.services.demand_letter_service import DemandLetterService
from teisesdraugas.services.gateways import EPristatymasGateway, SimulatedDeliveryGateway


@pytest.fixture
def letter(client, case, auth_headers, model_client, letter_json):
    model_client.reply_with(letter_json)
    response = client.post(
        f"/api/v1/cases/{case.id}/demand-letters",
        json={"tone": "final_warning", "response_deadline_days": 7},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


def test_generated_letter_is_saved_as_draft(letter, db_session, case):
    expected_deadline = (datetime.utcnow() + timedelta(days=7)).date()
    assert letter["status"] == "DRAFT"
    assert letter["ai_tone"] == "final_warning"
    assert letter["response_deadline"] == expected_deadline.isoformat()
    assert letter["legal_basis"] == ["CK 6.477", "CK 6.493"]

    db_session.refresh(case)
    assert case.status == CaseStatus.DEMAND_LETTER
    assert case.current_step == CaseStep.DEMAND_LETTER


def test_tone_instruction_reaches_prompt(letter, model_client):
    assert "paskutinis įspėjimas" in model_client.prompts[0]
    assert "7 dienų" in model_client.prompts[0]


def test_regenerating_keeps_earlier_letters(letter, client, case, auth_headers, model_client, letter_json):
    model_client.reply_with(letter_json)
    client.post(f"/api/v1/cases/{case.id}/demand-letters", json={}, headers=auth_headers)

    letters = client.get(f"/api/v1/cases/{case.id}/demand-letters", headers=auth_headers).json()
    assert len(letters) == 2
    assert {l["ai_tone"] for l in letters} == {"final_warning", "formal"}

    first = next(l for l in letters if l["id"] == letter["id"])
    for field in ("content", "ai_tone", "response_deadline", "legal_basis", "status", "sent_at", "created_at"):
        assert first[field] == letter[field]


def test_deadline_outside_range_is_rejected(client, case, auth_headers):
    response = client.post(
        f"/api/v1/cases/{case.id}/demand-letters",
        json={"response_deadline_days": 3},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_generation_failure_is_bad_gateway(client, db_session, case, auth_headers, model_client):
    model_client.reply_with('{"summary": "be turinio"}')

    response = client.post(f"/api/v1/cases/{case.id}/demand-letters", json={}, headers=auth_headers)

    assert response.status_code == 502
    assert db_session.query(DemandLetter).count() == 0


def test_print_envelope(letter, client, auth_headers):
    response = client.get(f"/api/v1/demand-letters/{letter['id']}/print", headers=auth_headers)

    assert response.status_code == 200
    text = response.json()["text"]
    assert "PRETENZIJA" in text
    assert "(Ikiteisminis reikalavimas)" in text
    assert "Nuo:     Jonas Jonaitis" in text
    assert "Kam:     UAB Nuomos Namai" in text
    assert "Suma: 800.00 EUR" in text
    assert "Reikalaujame grąžinti 800 EUR užstatą." in text
    assert "Atsakymo terminas:" in text
    assert "Dokumentas sugeneruotas Teisės Draugas platforma" in text


def test_print_of_someone_elses_letter_is_not_found(letter, client, other_headers):
    response = client.get(f"/api/v1/demand-letters/{letter['id']}/print", headers=other_headers)
    assert response.status_code == 404


def test_simulated_delivery(letter, client, db_session, case, auth_headers):
    response = client.post(f"/api/v1/demand-letters/{letter['id']}/send", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["delivery_ref"].startswith("EP-")

    db_session.refresh(case)
    assert case.status == CaseStatus.AWAITING_RESPONSE
    assert case.current_step == CaseStep.RESPONSE
    assert case.response_deadline.isoformat() == letter["response_deadline"]

    communication = db_session.query(Communication).one()
    assert communication.delivery_ref == body["delivery_ref"]


def test_sent_letter_is_not_sent_again(letter, client, db_session, auth_headers):
    client.post(f"/api/v1/demand-letters/{letter['id']}/send", headers=auth_headers)
    response = client.post(f"/api/v1/demand-letters/{letter['id']}/send", headers=auth_headers)

    assert response.json()["success"] is False
    assert db_session.query(Communication).count() == 1


def test_live_delivery_without_configuration_changes_nothing(db_session, case, model_client):
    service = DemandLetterService(settings, model_client, EPristatymasGateway(settings))
    draft = DemandLetter(
        case_id=case.id,
        content="Turinys",
        ai_tone=LetterTone.formal,
        response_deadline=datetime.utcnow().date(),
        status=DemandLetterStatus.DRAFT,
    )
    db_session.add(draft)
    db_session.commit()

    result = service.send(db_session, draft, case)

    assert result.success is False
    assert result.error == "E. pristatymas configuration missing"
    assert draft.status == DemandLetterStatus.DRAFT
    assert case.status == CaseStatus.INTAKE


def test_simulated_gateway_reference_format(case):
    result = SimulatedDeliveryGateway().deliver(DemandLetter(), case)
    prefix, millis, suffix = result.reference.split("-")
    assert prefix == "EP"
    assert millis.isdigit()
    assert len(suffix) == 9
