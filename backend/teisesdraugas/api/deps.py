# teisesdraugas/api/deps.py

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import jwt
from uuid import UUID

from teisesdraugas.db.database import get_db
from teisesdraugas.db.models import User
from teisesdraugas.core.config import settings
from teisesdraugas.services.ai_client import BedrockModelClient
from teisesdraugas.services.analysis_service import AnalysisService
from teisesdraugas.services.court_filing_service import CourtFilingService
from teisesdraugas.services.demand_letter_service import DemandLetterService
from teisesdraugas.services.document_service import DocumentService
from teisesdraugas.services.filing_pdf import FilingPdfRenderer
from teisesdraugas.services.gateways import create_delivery_gateway, create_filing_gateway
from teisesdraugas.services.lawyer_review_service import LawyerReviewService, is_reviewer
from teisesdraugas.services.negotiation_service import NegotiationService
from teisesdraugas.services.storage_service import create_storage
from teisesdraugas.utils.exceptions import LawyerRoleRequiredError

security = HTTPBearer()

# ============================================================================
# JWT Dependency
# ============================================================================

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Validate JWT token and return current user.
    """
    token = credentials.credentials

    try:
        # PyJWT checks "exp" itself and raises ExpiredSignatureError
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired"
        )
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    # Identity provider issues "sub"; accept either "user_id" or "sub"
    user_id = payload.get("user_id") or payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token"
        )

    try:
        user = db.query(User).filter(User.id == UUID(str(user_id))).first()
    except ValueError:
        user = None

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated"
        )

    return user


def require_lawyer(current_user: User = Depends(get_current_user)) -> User:
    if not is_reviewer(current_user):
        raise LawyerRoleRequiredError()
    return current_user


# ============================================================================
# Service Dependencies
# ============================================================================

def get_model_client():
    return BedrockModelClient(settings)


def get_storage():
    return create_storage(settings)


def get_analysis_service(model_client=Depends(get_model_client)) -> AnalysisService:
    return AnalysisService(settings, model_client)


def get_negotiation_service(model_client=Depends(get_model_client)) -> NegotiationService:
    return NegotiationService(settings, model_client)


def get_demand_letter_service(model_client=Depends(get_model_client)) -> DemandLetterService:
    return DemandLetterService(settings, model_client, create_delivery_gateway(settings))


def get_court_filing_service() -> CourtFilingService:
    return CourtFilingService(settings, create_filing_gateway(settings))


def get_document_service(storage=Depends(get_storage)) -> DocumentService:
    return DocumentService(settings, storage)


def get_lawyer_review_service() -> LawyerReviewService:
    return LawyerReviewService(settings)


def get_pdf_renderer() -> FilingPdfRenderer:
    return FilingPdfRenderer(settings)
