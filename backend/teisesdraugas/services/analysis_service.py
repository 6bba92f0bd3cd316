# teisesdraugas/services/analysis_service.py
"""
AI case analysis: prompt assembly, model call, and persisting the outcome
onto the case.
"""
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from teisesdraugas.core.config import Settings
from teisesdraugas.core.logger import logger
from teisesdraugas.db.models import (
    AIInteractionType,
    Case,
    CaseStatus,
    Document,
    TimelineEventType,
)
from teisesdraugas.db.schemas import CaseAnalysis
from teisesdraugas.services import case_service
from teisesdraugas.services.generation import GenerationResult, run_generation
from teisesdraugas.services.legal_reference import reference_groups_for
from teisesdraugas.services.timeline_service import add_timeline_event, win_probability_color

SYSTEM_INSTRUCTION = """Tu esi Lietuvos teisės ekspertas, specializuojantis civilinėse bylose iki 5000 EUR.
Tavo užduotis - išanalizuoti pateiktą bylą ir pateikti profesionalią teisinę analizę pagal Lietuvos Civilinį kodeksą.

SVARBU:
1. Visada nurodyk konkrečius Civilinio kodekso straipsnius
2. Būk objektyvus vertindamas laimėjimo tikimybę
3. Identifikuok visus rizikos veiksnius
4. Rekomenduok konkrečius veiksmus
5. Atsižvelk į ieškinio senatį (paprastai 3 metai civilinėms byloms)

Atsakyk vienu JSON objektu su šiais laukais:
- winProbability: skaičius nuo 0 iki 1
- legalBasis: masyvas objektų su articles (straipsnių sąrašas), explanation, strength ("strong" | "moderate" | "weak")
- riskFactors: masyvas objektų su factor, severity ("high" | "medium" | "low"), mitigation
- recommendedAction: tekstas
- estimatedTimeline: tekstas
- nextSteps: tekstų masyvas
- summary: trumpas aprašymas lietuvių kalba"""

NOT_SPECIFIED = "Nenurodyta"


def fallback_analysis() -> CaseAnalysis:
    """Neutral analysis returned when the model output is unusable"""
    return CaseAnalysis(
        win_probability=0.5,
        legal_basis=[{
            "articles": ["6.245", "6.246"],
            "explanation": "Reikalinga detalesnė analizė. Prašome įkelti daugiau dokumentų.",
            "strength": "moderate",
        }],
        risk_factors=[{
            "factor": "Nepakanka informacijos pilnai analizei",
            "severity": "medium",
            "mitigation": "Įkelkite papildomų dokumentų ir įrodymų",
        }],
        recommended_action="Surinkite papildomus įrodymus ir pakartokite analizę",
        estimated_timeline="2-4 savaitės pradiniam etapui",
        next_steps=[
            "Įkelkite visus susijusius dokumentus",
            "Patikslinkite bylos aprašymą",
            "Pakartokite AI analizę",
        ],
        summary="Pradinė analizė atlikta. Rekomenduojama pateikti daugiau informacijos tikslesniam vertinimui.",
    )


class AnalysisService:
    """
    Service layer for AI case analysis
    """

    def __init__(self, config: Settings, model_client):
        self.model_client = model_client
        self.max_tokens = config.ANALYSIS_MAX_TOKENS

    def build_case_context(self, case: Case, documents: List[Document]) -> str:
        opponent_type = case.opponent_type.value if case.opponent_type else NOT_SPECIFIED
        incident_date = case.incident_date.isoformat() if case.incident_date else NOT_SPECIFIED

        document_lines = "\n".join(
            f"- {doc.document_type.value}: {doc.description or doc.file_name}"
            for doc in documents
        ) or "- Dokumentų nepateikta"

        reference_lines = "\n".join(
            f"- {group['title_lt']}: {', '.join(group['articles'])} str."
            for group in reference_groups_for(case.case_type)
        )

        return f"""BYLOS INFORMACIJA:
- Pavadinimas: {case.title}
- Aprašymas: {case.description}
- Bylos tipas: {case.case_type.value}
- Kategorija: {case.category.value}
- Reikalaujama suma: {case.claim_amount} EUR
- Oponento tipas: {opponent_type}
- Įvykio data: {incident_date}
- Dokumentų skaičius: {len(documents)}

DOKUMENTŲ TIPAI:
{document_lines}

AKTUALŪS CIVILINIO KODEKSO STRAIPSNIAI:
{reference_lines}"""

    def build_prompt(self, case: Case, documents: List[Document]) -> str:
        context = self.build_case_context(case, documents)
        return f"{SYSTEM_INSTRUCTION}\n\n{context}\n\nIšanalizuok šią bylą ir pateik JSON atsakymą."

    def analyze(
        self,
        db: Session,
        case: Case,
        documents: List[Document],
        user_id: UUID,
    ) -> GenerationResult[CaseAnalysis]:
        logger.info(f"Starting AI analysis for case {case.id} ({len(documents)} documents)")
        return run_generation(
            db,
            self.model_client,
            prompt=self.build_prompt(case, documents),
            max_tokens=self.max_tokens,
            schema=CaseAnalysis,
            interaction_type=AIInteractionType.case_analysis,
            user_id=user_id,
            case_id=case.id,
        )

    def apply_analysis(self, db: Session, case: Case, analysis: CaseAnalysis) -> Case:
        """Overwrite the case's derived fields with a successful analysis"""
        case.win_probability = analysis.win_probability
        case.legal_basis = [item.model_dump(mode="json") for item in analysis.legal_basis]
        case.risk_assessment = [item.model_dump(mode="json") for item in analysis.risk_factors]
        case.recommended_action = analysis.recommended_action
        case_service.advance_status(case, CaseStatus.ANALYSIS)

        add_timeline_event(
            db,
            case.id,
            TimelineEventType.AI_ANALYSIS_COMPLETE,
            title="AI analizė baigta",
            description=f"Laimėjimo tikimybė: {round(analysis.win_probability * 100)}%",
            icon="brain",
            color=win_probability_color(analysis.win_probability),
        )
        db.commit()
        db.refresh(case)

        logger.info(f"AI analysis stored for case {case.id}: win probability {analysis.win_probability:.2f}")
        return case
