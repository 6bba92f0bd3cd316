# teisesdraugas/services/negotiation_service.py
"""
Negotiation advice on an opponent's reply to a demand letter.
"""
from uuid import UUID

from sqlalchemy.orm import Session

from teisesdraugas.core.config import Settings
from teisesdraugas.db.models import AIInteractionType, Case, CaseStatus, TimelineEventType
from teisesdraugas.db.schemas import NegotiationAdvice
from teisesdraugas.services import case_service
from teisesdraugas.services.generation import GenerationResult, run_generation
from teisesdraugas.services.timeline_service import add_timeline_event


class NegotiationService:

    def __init__(self, config: Settings, model_client):
        self.model_client = model_client
        self.max_tokens = config.NEGOTIATION_MAX_TOKENS

    def build_prompt(self, case: Case, opponent_response: str) -> str:
        win_percent = round(case.win_probability * 100) if case.win_probability is not None else 50
        return f"""Tu esi derybų ekspertas civilinėse bylose. Išanalizuok oponento atsakymą ir patark vartotoją.

BYLOS KONTEKSTAS:
- Reikalaujama suma: {case.claim_amount} EUR
- Bylos tipas: {case.case_type.value}
- Laimėjimo tikimybė: {win_percent}%

OPONENTO ATSAKYMAS:
{opponent_response}

Pateik:
1. Atsakymo analizę
2. Siūlomą atsakymą
3. Rekomenduojamą pasiūlymą eurais (jei taikoma)
4. Derybų strategiją

Atsakyk JSON formatu:
{{
  "analysis": "...",
  "suggestedResponse": "...",
  "recommendedOffer": 0,
  "strategy": "..."
}}"""

    def advise(
        self,
        db: Session,
        case: Case,
        user_id: UUID,
        opponent_response: str,
    ) -> GenerationResult[NegotiationAdvice]:
        return run_generation(
            db,
            self.model_client,
            prompt=self.build_prompt(case, opponent_response),
            max_tokens=self.max_tokens,
            schema=NegotiationAdvice,
            interaction_type=AIInteractionType.negotiation_advice,
            user_id=user_id,
            case_id=case.id,
        )

    def record_advice(self, db: Session, case: Case, advice: NegotiationAdvice) -> None:
        case_service.advance_status(case, CaseStatus.NEGOTIATION)
        offer = f" Rekomenduojamas pasiūlymas: {advice.recommended_offer:.2f} EUR." if advice.recommended_offer else ""
        add_timeline_event(
            db,
            case.id,
            TimelineEventType.NEGOTIATION_ADVICE,
            title="Gauta derybų rekomendacija",
            description=f"Išanalizuotas oponento atsakymas.{offer}",
            icon="message-circle",
            color="blue",
        )
        db.commit()
