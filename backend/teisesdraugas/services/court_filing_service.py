# teisesdraugas/services/court_filing_service.py
"""
Court filing (payment order) generation, e-filing XML, and submission.

No model call happens here: the filing is rendered from case data.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID
import xml.etree.ElementTree as ET

from sqlalchemy.orm import Session

from teisesdraugas.core.config import Settings
from teisesdraugas.core.logger import logger
from teisesdraugas.db.models import (
    Case,
    CaseStatus,
    CaseStep,
    CourtFiling,
    Document,
    FilingStatus,
    FilingType,
    OpponentType,
    SignatureMethod,
    TimelineEventType,
    User,
)
from teisesdraugas.services import case_service
from teisesdraugas.services.court_fees import calculate_court_fee
from teisesdraugas.services.gateways import SubmissionResult
from teisesdraugas.services.legal_reference import reference_groups_for, select_court
from teisesdraugas.services.timeline_service import add_timeline_event
from teisesdraugas.utils.exceptions import FilingNotEditableError
from teisesdraugas.utils.helpers import format_currency, format_date_lt

FILING_XML_NAMESPACE = "http://www.e.teismas.lt/schema/filing"

SUBMITTABLE_STATUSES = frozenset({FilingStatus.READY_TO_SIGN, FilingStatus.SIGNED})

RULE = "=" * 80
DIVIDER = "-" * 80

FIXED_LEGAL_BASIS = [
    "Lietuvos Respublikos civilinio kodekso 6.245 str. (sutartinė atsakomybė)",
    "Lietuvos Respublikos civilinio kodekso 6.37 str. (prievolių vykdymas)",
    "Lietuvos Respublikos civilinio proceso kodekso 431-439 str. (teismo įsakymas)",
]


def _section(title: str) -> List[str]:
    return [DIVIDER, title.center(80).rstrip(), DIVIDER, ""]


class CourtFilingService:
    """
    Service layer for court filings
    """

    def __init__(self, config: Settings, filing_gateway):
        self.filing_gateway = filing_gateway
        self.platform_name = config.PLATFORM_NAME

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_payment_order(
        self,
        case: Case,
        user: User,
        documents: List[Document],
        court: dict,
        court_fee: int,
        generated_on=None,
    ) -> str:
        generated_on = generated_on or datetime.utcnow().date()
        amount = format_currency(case.claim_amount)
        code_label = "Įmonės kodas:" if case.opponent_type == OpponentType.COMPANY else "Asmens kodas:"
        incident = format_date_lt(case.incident_date) if case.incident_date else "[Data]"

        legal_basis = list(FIXED_LEGAL_BASIS)
        for group in reference_groups_for(case.case_type):
            if group["key"] == "limitations":
                continue
            legal_basis.append(
                f"Lietuvos Respublikos civilinio kodekso {', '.join(group['articles'])} str. "
                f"({group['title_lt'].lower()})"
            )

        document_lines = [
            f"{i}. {doc.file_name} ({doc.document_type.value})"
            for i, doc in enumerate(documents, start=1)
        ] or ["1. [Dokumentų sąrašas]"]

        lines = [
            RULE,
            "PRAŠYMAS IŠDUOTI TEISMO ĮSAKYMĄ".center(80).rstrip(),
            "(Civilinio proceso kodekso 431-439 straipsniai)".center(80).rstrip(),
            RULE,
            "",
            court["name"],
            "",
            "KREDITORIUS (Pareiškėjas):",
            f"Vardas, pavardė: {user.name or '[Vardas Pavardė]'}",
            f"Asmens kodas: {user.personal_code or '[Asmens kodas]'}",
            "Gyvenamoji vieta: [Adresas]",
            f"Telefonas: {user.phone or '[Telefonas]'}",
            f"El. paštas: {user.email}",
            "",
            "SKOLININKAS:",
            f"Vardas, pavardė / Pavadinimas: {case.opponent_name or '[Skolininko vardas]'}",
            f"{code_label} [Kodas]",
            f"Adresas: {case.opponent_address or '[Skolininko adresas]'}",
            "",
            *_section("REIKALAVIMAS"),
            "Prašau išduoti teismo įsakymą, kuriuo būtų priteista iš skolininko:",
            "",
            f"1. Pagrindinė skola: {amount}",
            "",
            f"2. Procesinės 5 proc. dydžio metinės palūkanos nuo {amount}",
            "   sumos nuo bylos iškėlimo teisme dienos iki teismo sprendimo visiško įvykdymo.",
            "",
            "3. Bylinėjimosi išlaidos.",
            "",
            *_section("REIKALAVIMO PAGRINDAS"),
            case.description,
            "",
            f"Įvykio data: {incident}",
            "",
            "TEISINIS PAGRINDAS:",
            *[f"- {line}" for line in legal_basis],
            "",
            *_section("PRIDEDAMI DOKUMENTAI"),
            *document_lines,
            "",
            DIVIDER,
            "",
            f"Žyminis mokestis: {format_currency(court_fee)}",
            "",
            "Patvirtinu, kad:",
            "- Reikalavimas grindžiamas rašytiniais įrodymais",
            "- Reikalavimas nėra ginčijamas",
            "- Skolininko gyvenamoji/buveinės vieta yra žinoma",
            "",
            f"Data: {format_date_lt(generated_on)}",
            "",
            "Pareiškėjas: ____________________",
            "             (parašas)",
            "",
            RULE,
            f"Dokumentas sugeneruotas {self.platform_name} platforma".center(80).rstrip(),
            RULE,
        ]
        return "\n".join(lines) + "\n"

    def build_xml(
        self,
        case: Case,
        user: User,
        documents: List[Document],
        court: dict,
        court_fee: int,
        filing_type: FilingType = FilingType.PAYMENT_ORDER,
        submission_date: Optional[datetime] = None,
    ) -> str:
        """Filing as the element tree the e-filing backend ingests"""
        submission_date = submission_date or datetime.utcnow()

        def el(parent, tag, text=None, **attrs):
            node = ET.SubElement(parent, f"{{{FILING_XML_NAMESPACE}}}{tag}", attrs)
            if text is not None:
                node.text = str(text)
            return node

        ET.register_namespace("", FILING_XML_NAMESPACE)
        root = ET.Element(f"{{{FILING_XML_NAMESPACE}}}CourtFiling")

        header = el(root, "Header")
        el(header, "FilingType", filing_type.value)
        court_node = el(header, "Court")
        el(court_node, "Code", court["code"])
        el(court_node, "Name", court["name"])
        el(header, "SubmissionDate", submission_date.isoformat(timespec="seconds") + "Z")

        applicant = el(root, "Applicant")
        el(applicant, "Name", user.name or "")
        el(applicant, "PersonalCode", user.personal_code or "")
        el(applicant, "Email", user.email)
        el(applicant, "Phone", user.phone or "")

        respondent = el(root, "Respondent")
        el(respondent, "Name", case.opponent_name or "")
        el(respondent, "Type", (case.opponent_type or OpponentType.INDIVIDUAL).value)
        el(respondent, "Address", case.opponent_address or "")

        claim = el(root, "Claim")
        el(claim, "Amount", case.claim_amount, currency="EUR")
        el(claim, "Description", case.description)
        el(claim, "IncidentDate", case.incident_date.isoformat() if case.incident_date else "")

        fees = el(root, "Fees")
        el(fees, "CourtFee", court_fee, currency="EUR")

        documents_node = el(root, "Documents")
        for doc in documents:
            node = el(documents_node, "Document")
            el(node, "Name", doc.file_name)
            el(node, "Type", doc.document_type.value)
            el(node, "Path", doc.file_path)

        ET.indent(root, space="  ")
        body = ET.tostring(root, encoding="unicode")
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def generate(self, db: Session, case: Case, user: User) -> CourtFiling:
        court = select_court(case)
        court_fee = calculate_court_fee(case.claim_amount)
        documents = sorted(case.documents, key=lambda d: d.uploaded_at or datetime.min)

        filing = CourtFiling(
            case_id=case.id,
            filing_type=FilingType.PAYMENT_ORDER,
            content=self.render_payment_order(case, user, documents, court, court_fee),
            xml_content=self.build_xml(case, user, documents, court, court_fee),
            court_code=court["code"],
            court_name=court["name"],
            court_fee=court_fee,
            status=FilingStatus.DRAFT,
        )
        db.add(filing)

        case_service.advance_status(case, CaseStatus.PREPARING_FILING)
        case.current_step = CaseStep.COURT_FILING

        add_timeline_event(
            db,
            case.id,
            TimelineEventType.COURT_FILING_PREPARED,
            title="Teismo dokumentai paruošti",
            description="Paruoštas prašymas išduoti teismo įsakymą",
            icon="gavel",
            color="purple",
        )
        db.commit()
        db.refresh(filing)

        logger.info(f"Court filing {filing.id} prepared for case {case.id} (fee {court_fee} EUR, court {court['code']})")
        return filing

    def mark_ready_to_sign(self, db: Session, filing: CourtFiling) -> CourtFiling:
        if filing.status == FilingStatus.READY_TO_SIGN:
            return filing
        if filing.status != FilingStatus.DRAFT:
            raise FilingNotEditableError(filing.status.value)
        filing.status = FilingStatus.READY_TO_SIGN
        db.commit()
        db.refresh(filing)
        return filing

    def submit(
        self,
        db: Session,
        filing: CourtFiling,
        case: Case,
        signature_method: SignatureMethod,
    ) -> SubmissionResult:
        if filing.status not in SUBMITTABLE_STATUSES:
            return SubmissionResult(success=False, error="Filing must be ready to sign")

        result = self.filing_gateway.submit(filing, case, signature_method)
        if not result.success:
            logger.warning(f"Submission of filing {filing.id} failed: {result.error}")
            return result

        now = datetime.utcnow()
        filing.status = FilingStatus.SUBMITTED
        filing.signature_method = signature_method
        filing.signed_at = filing.signed_at or now
        filing.submitted_at = now
        filing.court_ref = result.reference

        case_service.advance_status(case, CaseStatus.FILED)
        case.court_case_number = result.reference
        case.filing_date = now

        add_timeline_event(
            db,
            case.id,
            TimelineEventType.COURT_FILING_SUBMITTED,
            title="Dokumentai pateikti teismui",
            description=f"Byla pateikta teismui. Bylos numeris: {result.reference}",
            icon="check-circle",
            color="green",
        )
        db.commit()

        logger.info(f"Court filing {filing.id} submitted: {result.reference}")
        return result


def get_filing_for_user(db: Session, filing_id: UUID, user: User) -> Optional[CourtFiling]:
    return (
        db.query(CourtFiling)
        .join(Case, CourtFiling.case_id == Case.id)
        .filter(CourtFiling.id == filing_id, Case.user_id == user.id)
        .first()
    )
