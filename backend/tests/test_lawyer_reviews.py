"""Tests for paid lawyer reviews."""

from teisesdraugas.db.models import DemandLetter, LetterTone, Notification, NotificationType
from teisesdraugas.utils.helpers import calculate_deadline


def _add_letter(db_session, case, content):
    letter = DemandLetter(
        case_id=case.id,
        content=content,
        ai_tone=LetterTone.formal,
        response_deadline=calculate_deadline(case.created_at, 14),
    )
    db_session.add(letter)
    db_session.commit()
    return letter


def test_review_snapshots_latest_letter(client, db_session, case, auth_headers):
    letter = _add_letter(db_session, case, "Pirmoji pretenzijos versija")

    response = client.post(
        f"/api/v1/cases/{case.id}/lawyer-reviews",
        json={"review_type": "DEMAND_LETTER"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    review = response.json()
    assert review["status"] == "PENDING"
    assert review["fee"] == 20.0
    assert review["document_content"] == "Pirmoji pretenzijos versija"

    # Later edits do not reach the reviewer
    letter.content = "Pakeista versija"
    db_session.commit()
    reviews = client.get(f"/api/v1/cases/{case.id}/lawyer-reviews", headers=auth_headers).json()
    assert reviews[0]["document_content"] == "Pirmoji pretenzijos versija"


def test_explicit_content_is_used(client, case, auth_headers):
    response = client.post(
        f"/api/v1/cases/{case.id}/lawyer-reviews",
        json={"review_type": "GENERAL_ADVICE", "document_content": "Ar verta kreiptis į teismą?"},
        headers=auth_headers,
    )
    assert response.json()["document_content"] == "Ar verta kreiptis į teismą?"


def test_review_without_content_is_rejected(client, case, auth_headers):
    response = client.post(
        f"/api/v1/cases/{case.id}/lawyer-reviews",
        json={"review_type": "COURT_FILING"},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_only_lawyers_see_the_queue(client, case, auth_headers, lawyer_headers):
    client.post(
        f"/api/v1/cases/{case.id}/lawyer-reviews",
        json={"review_type": "GENERAL_ADVICE", "document_content": "Klausimas advokatui"},
        headers=auth_headers,
    )

    assert client.get("/api/v1/lawyer-reviews/pending", headers=auth_headers).status_code == 403

    pending = client.get("/api/v1/lawyer-reviews/pending", headers=lawyer_headers).json()
    assert len(pending) == 1


def test_lawyer_completes_review(client, db_session, case, user, lawyer, auth_headers, lawyer_headers):
    review = client.post(
        f"/api/v1/cases/{case.id}/lawyer-reviews",
        json={"review_type": "GENERAL_ADVICE", "document_content": "Klausimas advokatui"},
        headers=auth_headers,
    ).json()

    claimed = client.post(f"/api/v1/lawyer-reviews/{review['id']}/claim", headers=lawyer_headers).json()
    assert claimed["lawyer_id"] == str(lawyer.id)

    response = client.post(
        f"/api/v1/lawyer-reviews/{review['id']}/complete",
        json={"approved": False, "corrections": "Patikslinkite sumą"},
        headers=lawyer_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "COMPLETED"
    assert body["approved"] is False
    assert body["completed_at"] is not None

    notification = (
        db_session.query(Notification)
        .filter(Notification.user_id == user.id, Notification.type == NotificationType.REVIEW_COMPLETE)
        .one()
    )
    assert notification.message == "Advokatas pateikė siūlomų pataisymų."

    timeline = client.get(f"/api/v1/cases/{case.id}/timeline", headers=auth_headers).json()
    assert timeline[0]["title"] == "Advokatas siūlo pataisymus"


def test_user_cannot_complete_review(client, case, auth_headers):
    review = client.post(
        f"/api/v1/cases/{case.id}/lawyer-reviews",
        json={"review_type": "GENERAL_ADVICE", "document_content": "Klausimas advokatui"},
        headers=auth_headers,
    ).json()

    response = client.post(
        f"/api/v1/lawyer-reviews/{review['id']}/complete",
        json={"approved": True},
        headers=auth_headers,
    )
    assert response.status_code == 403


def test_completed_review_cannot_be_completed_again(client, case, auth_headers, lawyer_headers):
    review = client.post(
        f"/api/v1/cases/{case.id}/lawyer-reviews",
        json={"review_type": "GENERAL_ADVICE", "document_content": "Klausimas advokatui"},
        headers=auth_headers,
    ).json()
    url = f"/api/v1/lawyer-reviews/{review['id']}/complete"

    assert client.post(url, json={"approved": True}, headers=lawyer_headers).status_code == 200
    assert client.post(url, json={"approved": True}, headers=lawyer_headers).status_code == 409
