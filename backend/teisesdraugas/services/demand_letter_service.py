# teisesdraugas/services/demand_letter_service.py
"""
Demand letter (pretenzija) generation, print formatting, and delivery.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from teisesdraugas.core.config import Settings
from teisesdraugas.core.logger import logger
from teisesdraugas.db.models import (
    AIInteractionType,
    Case,
    CaseStatus,
    CaseStep,
    Communication,
    CommunicationDirection,
    CommunicationType,
    DeliveryMethod,
    DemandLetter,
    DemandLetterStatus,
    LetterTone,
    TimelineEventType,
    User,
)
from teisesdraugas.db.schemas import GeneratedLetter
from teisesdraugas.services import case_service
from teisesdraugas.services.gateways import SubmissionResult
from teisesdraugas.services.generation import GenerationResult, run_generation
from teisesdraugas.services.timeline_service import add_timeline_event
from teisesdraugas.utils.helpers import calculate_deadline, format_date_lt

TONE_INSTRUCTIONS = {
    LetterTone.formal: "Rašyk formaliu, dalykišku tonu. Būk mandagus, bet aiškus.",
    LetterTone.firm: "Rašyk tvirtai ir ryžtingai. Pabrėžk teisinius padarinius nevykdymo atveju.",
    LetterTone.final_warning: (
        "Tai paskutinis įspėjimas prieš teisminį procesą. "
        "Būk griežtas ir nurodyk konkrečius terminus."
    ),
}

RULE = "=" * 80
DIVIDER = "-" * 80


def legal_basis_text(case: Case) -> str:
    """Stored analysis legal basis as citation lines"""
    lines = []
    for item in case.legal_basis or []:
        articles = ", ".join(item.get("articles") or [])
        explanation = item.get("explanation", "")
        if articles:
            lines.append(f"Civilinio kodekso {articles} str. - {explanation}")
    return "\n".join(lines)


class DemandLetterService:
    """
    Service layer for demand letters
    """

    def __init__(self, config: Settings, model_client, delivery_gateway):
        self.model_client = model_client
        self.delivery_gateway = delivery_gateway
        self.max_tokens = config.DEMAND_LETTER_MAX_TOKENS
        self.platform_name = config.PLATFORM_NAME
        self.platform_url = config.PLATFORM_URL
        self.default_deadline_days = config.DEFAULT_RESPONSE_DEADLINE_DAYS

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def build_prompt(self, case: Case, tone: LetterTone, deadline_days: int, deadline) -> str:
        incident = format_date_lt(case.incident_date) if case.incident_date else "Nenurodyta"
        opponent_type = case.opponent_type.value if case.opponent_type else "INDIVIDUAL"
        basis = legal_basis_text(case) or "Bus nustatyta pagal bylos aplinkybes"

        return f"""Tu esi Lietuvos teisininkas, rašantis pretenziją (ikiteisminį reikalavimą) klientui.

BYLOS INFORMACIJA:
- Pavadinimas: {case.title}
- Aprašymas: {case.description}
- Reikalaujama suma: {case.claim_amount} EUR
- Bylos tipas: {case.case_type.value}
- Oponentas: {case.opponent_name or 'Nenurodyta'}
- Oponento tipas: {opponent_type}
- Įvykio data: {incident}

TEISINIS PAGRINDAS:
{basis}

TONAS: {TONE_INSTRUCTIONS[tone]}

TERMINAS ATSAKYMUI: {deadline_days} dienų (iki {format_date_lt(deadline)})

Parašyk pilną pretenziją lietuvių kalba, kuri apima:
1. Faktinių aplinkybių aprašymą
2. Teisinį pagrindą (Civilinio kodekso straipsniai)
3. Konkretų reikalavimą (sumą, veiksmus)
4. Terminą atsakymui
5. Padarinius neatsakius (kreipimasis į teismą)

Atsakyk JSON formatu:
{{
  "content": "pilnas pretenzijos tekstas",
  "legalBasis": ["straipsnių sąrašas"],
  "summary": "trumpas aprašymas"
}}"""

    def generate(
        self,
        db: Session,
        case: Case,
        user_id: UUID,
        tone: LetterTone,
        deadline_days: int,
    ) -> GenerationResult[GeneratedLetter]:
        deadline = calculate_deadline(datetime.utcnow(), deadline_days)
        return run_generation(
            db,
            self.model_client,
            prompt=self.build_prompt(case, tone, deadline_days, deadline),
            max_tokens=self.max_tokens,
            schema=GeneratedLetter,
            interaction_type=AIInteractionType.demand_letter_generation,
            user_id=user_id,
            case_id=case.id,
        )

    def save_letter(
        self,
        db: Session,
        case: Case,
        generated: GeneratedLetter,
        tone: LetterTone,
        deadline_days: int,
    ) -> DemandLetter:
        """New DRAFT row; earlier letters of the case are left untouched"""
        now = datetime.utcnow()
        letter = DemandLetter(
            case_id=case.id,
            content=generated.content,
            legal_basis=generated.legal_basis,
            ai_summary=generated.summary,
            ai_tone=tone,
            response_deadline=calculate_deadline(now, deadline_days),
            status=DemandLetterStatus.DRAFT,
            created_at=now,
        )
        db.add(letter)

        case_service.advance_status(case, CaseStatus.DEMAND_LETTER)
        case.current_step = CaseStep.DEMAND_LETTER

        add_timeline_event(
            db,
            case.id,
            TimelineEventType.DEMAND_LETTER_CREATED,
            title="Pretenzija sukurta",
            description=f"Sukurta pretenzija su {deadline_days} dienų atsakymo terminu",
            icon="file-text",
            color="blue",
        )
        db.commit()
        db.refresh(letter)

        logger.info(f"Demand letter {letter.id} ({tone.value}) saved for case {case.id}")
        return letter

    # ------------------------------------------------------------------
    # Print formatting
    # ------------------------------------------------------------------

    def format_for_print(self, letter: DemandLetter, case: Case, user: User, printed_on=None) -> str:
        printed_on = printed_on or datetime.utcnow().date()
        phone_line = f"Tel.: {user.phone}" if user.phone else ""
        deadline = format_date_lt(letter.response_deadline) if letter.response_deadline else f"{self.default_deadline_days} dienų"

        lines = [
            RULE,
            "PRETENZIJA".center(80).rstrip(),
            "(Ikiteisminis reikalavimas)".center(80).rstrip(),
            RULE,
            "",
            f"Nuo:     {user.name or 'Vardas Pavardė'}",
            f"         El. paštas: {user.email}",
            f"         {phone_line}".rstrip(),
            "",
            f"Kam:     {case.opponent_name or '[Oponento vardas]'}",
            f"         {case.opponent_address or '[Oponento adresas]'}",
            "",
            f"Data:    {format_date_lt(printed_on)}",
            "",
            f"Dėl:     {case.title}",
            f"         Suma: {case.claim_amount} EUR",
            "",
            DIVIDER,
            "",
            letter.content,
            "",
            DIVIDER,
            "",
            f"Atsakymo terminas: {deadline}",
            "",
            RULE,
            f"Dokumentas sugeneruotas {self.platform_name} platforma".center(80).rstrip(),
            f"{self.platform_url} | AI teisinis pagalbininkas".center(80).rstrip(),
            RULE,
        ]
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def send(self, db: Session, letter: DemandLetter, case: Case) -> SubmissionResult:
        if letter.status == DemandLetterStatus.SENT:
            return SubmissionResult(success=False, error="Demand letter has already been sent")

        result = self.delivery_gateway.deliver(letter, case)
        if not result.success:
            logger.warning(f"Delivery of letter {letter.id} failed: {result.error}")
            return result

        sent_at = datetime.utcnow()
        letter.status = DemandLetterStatus.SENT
        letter.sent_at = sent_at
        letter.delivery_ref = result.reference

        case_service.advance_status(case, CaseStatus.AWAITING_RESPONSE)
        case.current_step = CaseStep.RESPONSE
        case.response_deadline = letter.response_deadline

        db.add(Communication(
            case_id=case.id,
            type=CommunicationType.DEMAND_LETTER,
            direction=CommunicationDirection.OUTGOING,
            subject="Pretenzija",
            content=letter.content,
            delivery_method=DeliveryMethod.E_PRISTATYMAS,
            delivery_status="SENT",
            delivery_ref=result.reference,
            sent_at=sent_at,
        ))
        add_timeline_event(
            db,
            case.id,
            TimelineEventType.DEMAND_LETTER_SENT,
            title="Pretenzija išsiųsta",
            description=f"Pretenzija išsiųsta per E. pristatymą. Ref: {result.reference}",
            icon="send",
            color="green",
        )
        db.commit()

        logger.info(f"Demand letter {letter.id} delivered: {result.reference}")
        return result


def get_letter_for_user(db: Session, letter_id: UUID, user: User) -> Optional[DemandLetter]:
    return (
        db.query(DemandLetter)
        .join(Case, DemandLetter.case_id == Case.id)
        .filter(DemandLetter.id == letter_id, Case.user_id == user.id)
        .first()
    )
