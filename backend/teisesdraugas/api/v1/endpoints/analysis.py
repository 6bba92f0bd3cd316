"""
AI analysis and negotiation advice endpoints
"""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from teisesdraugas.api.deps import get_analysis_service, get_current_user, get_negotiation_service
from teisesdraugas.core.logger import logger
from teisesdraugas.db.database import get_db
from teisesdraugas.db.models import User
from teisesdraugas.db.schemas import AnalysisResponse, NegotiationAdvice, NegotiationAdviceRequest
from teisesdraugas.services import case_service
from teisesdraugas.services.analysis_service import AnalysisService, fallback_analysis
from teisesdraugas.services.negotiation_service import NegotiationService
from teisesdraugas.utils.exceptions import AIServiceError

router = APIRouter()


@router.post("/cases/{case_id}/analysis", response_model=AnalysisResponse)
def analyze_case(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    analysis_service: AnalysisService = Depends(get_analysis_service),
):
    """
    Run the AI case analysis.

    When the model fails or answers with something unusable, a neutral
    fallback analysis is returned with ``fallback: true`` and the case is
    left as it was.
    """
    case = case_service.get_owned_case(db, case_id, current_user)
    result = analysis_service.analyze(db, case, list(case.documents), current_user.id)

    if not result.ok:
        logger.warning(f"Analysis of case {case.id} fell back: {result.error.message}")
        return AnalysisResponse(**fallback_analysis().model_dump(), fallback=True)

    analysis_service.apply_analysis(db, case, result.value)
    return AnalysisResponse(**result.value.model_dump(), fallback=False)


@router.post("/cases/{case_id}/negotiation-advice", response_model=NegotiationAdvice)
def negotiation_advice(
    case_id: UUID,
    data: NegotiationAdviceRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    negotiation_service: NegotiationService = Depends(get_negotiation_service),
):
    case = case_service.get_owned_case(db, case_id, current_user)
    result = negotiation_service.advise(db, case, current_user.id, data.opponent_response)
    if not result.ok:
        raise AIServiceError(result.error.message)

    negotiation_service.record_advice(db, case, result.value)
    return result.value
