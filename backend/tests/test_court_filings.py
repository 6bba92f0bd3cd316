"""Tests for court filing generation, export, and submission."""

import io
import xml.etree.ElementTree as ET
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from pypdf import PdfReader
from reportlab.pdfbase import pdfmetrics

from teisesdraugas.core.config import settings
from teisesdraugas.db.models import (
    CaseStatus,
    CaseStep,
    CourtFiling,
    FilingStatus,
    FilingType,
    SignatureMethod,
)
from teisesdraugas.services.court_filing_service import FILING_XML_NAMESPACE
from teisesdraugas.services.filing_pdf import BODY_SIZE, FilingPdfRenderer, _PageWriter
from teisesdraugas.services.gateways import ETeismasGateway

NS = {"f": FILING_XML_NAMESPACE}


@pytest.fixture
def filing(client, case, auth_headers):
    response = client.post(f"/api/v1/cases/{case.id}/court-filings", headers=auth_headers)
    assert response.status_code == 201
    return response.json()


def test_filing_is_prepared_as_draft(filing, db_session, case):
    assert filing["status"] == "DRAFT"
    assert filing["filing_type"] == "PAYMENT_ORDER"
    assert filing["court_code"] == "VRT"
    assert filing["court_name"] == "Vilniaus miesto apylinkės teismas"
    assert filing["court_fee"] == 43

    db_session.refresh(case)
    assert case.status == CaseStatus.PREPARING_FILING
    assert case.current_step == CaseStep.COURT_FILING


def test_filing_text_sections(filing):
    content = filing["content"]
    for heading in (
        "PRAŠYMAS IŠDUOTI TEISMO ĮSAKYMĄ",
        "KREDITORIUS (Pareiškėjas):",
        "SKOLININKAS:",
        "REIKALAVIMAS",
        "REIKALAVIMO PAGRINDAS",
        "TEISINIS PAGRINDAS:",
        "PRIDEDAMI DOKUMENTAI",
    ):
        assert heading in content

    assert "Vardas, pavardė: Jonas Jonaitis" in content
    assert "Įmonės kodas: [Kodas]" in content
    assert "1. Pagrindinė skola: 800,00 €" in content
    assert "Žyminis mokestis: 43,00 €" in content
    assert "1. [Dokumentų sąrašas]" in content
    # Case type groups are cited, limitations are not
    assert "6.477, 6.478, 6.492, 6.493 str. (nuomos sutartis)" in content
    assert "1.125" not in content


def test_filing_xml(filing, client, auth_headers):
    response = client.get(f"/api/v1/court-filings/{filing['id']}/xml", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert response.text.startswith('<?xml version="1.0" encoding="UTF-8"?>')

    root = ET.fromstring(response.content)
    assert root.tag == f"{{{FILING_XML_NAMESPACE}}}CourtFiling"
    assert root.find("f:Header/f:FilingType", NS).text == "PAYMENT_ORDER"
    assert root.find("f:Header/f:Court/f:Code", NS).text == "VRT"
    assert root.find("f:Applicant/f:PersonalCode", NS).text == "38703181745"
    assert root.find("f:Respondent/f:Type", NS).text == "COMPANY"
    amount = root.find("f:Claim/f:Amount", NS)
    assert amount.get("currency") == "EUR"
    assert Decimal(amount.text) == Decimal("800")
    assert root.find("f:Fees/f:CourtFee", NS).text == "43"


def test_xml_escapes_markup_in_description(client, db_session, case, auth_headers):
    case.description = "Skola <b>800</b> & palūkanos"
    db_session.commit()

    filing = client.post(f"/api/v1/cases/{case.id}/court-filings", headers=auth_headers).json()
    root = ET.fromstring(filing["xml_content"].encode("utf-8"))

    assert root.find("f:Claim/f:Description", NS).text == "Skola <b>800</b> & palūkanos"


def test_draft_filing_is_not_submitted(filing, client, db_session, case, auth_headers):
    response = client.post(
        f"/api/v1/court-filings/{filing['id']}/submit",
        json={"signature_method": "smart-id"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"success": False, "court_ref": None, "error": "Filing must be ready to sign"}
    db_session.refresh(case)
    assert case.status == CaseStatus.PREPARING_FILING


def test_ready_filing_is_submitted(filing, client, db_session, case, auth_headers):
    response = client.post(f"/api/v1/court-filings/{filing['id']}/ready-to-sign", headers=auth_headers)
    assert response.json()["status"] == "READY_TO_SIGN"

    response = client.post(
        f"/api/v1/court-filings/{filing['id']}/submit",
        json={"signature_method": "mobile-id"},
        headers=auth_headers,
    )

    body = response.json()
    assert body["success"] is True
    assert body["court_ref"].startswith("LT-")

    db_session.refresh(case)
    assert case.status == CaseStatus.FILED
    assert case.court_case_number == body["court_ref"]
    assert case.filing_date is not None

    stored = db_session.query(CourtFiling).one()
    assert stored.status == FilingStatus.SUBMITTED
    assert stored.signature_method.value == "mobile-id"


def test_submitted_filing_cannot_be_marked_ready_again(filing, client, auth_headers):
    client.post(f"/api/v1/court-filings/{filing['id']}/ready-to-sign", headers=auth_headers)
    client.post(
        f"/api/v1/court-filings/{filing['id']}/submit",
        json={"signature_method": "smart-id"},
        headers=auth_headers,
    )

    response = client.post(f"/api/v1/court-filings/{filing['id']}/ready-to-sign", headers=auth_headers)
    assert response.status_code == 409


def test_unknown_signature_method_is_rejected(filing, client, auth_headers):
    response = client.post(
        f"/api/v1/court-filings/{filing['id']}/submit",
        json={"signature_method": "paper"},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_pdf_download(filing, client, auth_headers):
    response = client.get(f"/api/v1/court-filings/{filing['id']}/pdf", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")

    reader = PdfReader(io.BytesIO(response.content))
    assert "Vilniaus miesto" in reader.pages[0].extract_text()


def test_long_filing_flows_onto_more_pages():
    body = "\n".join(f"Eilute {i} " + "zodis " * 30 for i in range(120))
    long_filing = CourtFiling(
        filing_type=FilingType.PAYMENT_ORDER,
        content=body,
        court_name="Vilniaus miesto apylinkes teismas",
    )

    pdf_bytes = FilingPdfRenderer(settings).render(long_filing)
    reader = PdfReader(io.BytesIO(pdf_bytes))

    assert len(reader.pages) >= 3
    assert "Dokumentas sugeneruotas" in reader.pages[0].extract_text()
    assert "Dokumentas sugeneruotas" not in reader.pages[-1].extract_text()
    full_text = "\n".join(page.extract_text() for page in reader.pages)
    assert "Eilute 0" in full_text
    assert "Eilute 119" in full_text


def test_live_filing_gateway_without_configuration(case):
    result = ETeismasGateway(settings).submit(CourtFiling(), case, SignatureMethod.smart_id)
    assert result.success is False
    assert result.error == "e.teismas configuration missing"


def test_overwide_token_is_broken_inside_the_margins():
    renderer = FilingPdfRenderer(settings)
    pdf = MagicMock()
    writer = _PageWriter(pdf, renderer, [])
    file_name = "irodymas_" + "nuomos_sutarties_priedas_" * 12 + ".pdf"

    writer.write(f"1. {file_name}")

    drawn = [c.args[2] for c in pdf.drawString.call_args_list]
    assert len(drawn) > 1
    assert all(pdfmetrics.stringWidth(text, renderer.font, BODY_SIZE) <= writer.max_width for text in drawn)
    assert "".join(drawn).replace(" ", "") == f"1.{file_name}"
