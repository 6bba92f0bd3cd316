"""
Pydantic validation schemas
"""
import enum
from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from teisesdraugas.db.models import (
    CaseCategory,
    CaseStatus,
    CaseStep,
    CaseType,
    CommunicationDirection,
    CommunicationType,
    DeliveryMethod,
    DemandLetterStatus,
    DocumentType,
    FilingStatus,
    FilingType,
    LetterTone,
    NotificationType,
    OpponentType,
    ReviewStatus,
    ReviewType,
    SignatureMethod,
    TimelineEventType,
    UserRole,
)

MAX_CLAIM_AMOUNT = Decimal("5000")


def _camel(snake: str, camel: str) -> AliasChoices:
    """Model output uses camelCase keys; accept both spellings"""
    return AliasChoices(camel, snake)


# ============================================================================
# User Schemas
# ============================================================================

class UserResponse(BaseModel):
    id: UUID
    email: EmailStr
    name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    is_active: bool

    class Config:
        from_attributes = True


# ============================================================================
# Case Schemas
# ============================================================================

class CaseCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=10)
    case_type: CaseType
    category: CaseCategory
    claim_amount: Decimal = Field(..., gt=0, le=MAX_CLAIM_AMOUNT, decimal_places=2)
    opponent_name: Optional[str] = Field(None, max_length=255)
    opponent_email: Optional[EmailStr] = None
    opponent_phone: Optional[str] = Field(None, max_length=50)
    opponent_address: Optional[str] = None
    opponent_type: Optional[OpponentType] = None
    incident_date: Optional[date] = None

    @field_validator("opponent_email", mode="before")
    @classmethod
    def blank_email_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CaseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, min_length=10)
    opponent_name: Optional[str] = Field(None, max_length=255)
    opponent_email: Optional[EmailStr] = None
    opponent_phone: Optional[str] = Field(None, max_length=50)
    opponent_address: Optional[str] = None
    opponent_type: Optional[OpponentType] = None
    status: Optional[CaseStatus] = None
    current_step: Optional[CaseStep] = None

    @field_validator("opponent_email", mode="before")
    @classmethod
    def blank_email_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CaseResponse(BaseModel):
    id: UUID
    case_number: str
    title: str
    description: str
    case_type: CaseType
    category: CaseCategory
    claim_amount: float
    opponent_name: Optional[str] = None
    opponent_email: Optional[str] = None
    opponent_phone: Optional[str] = None
    opponent_address: Optional[str] = None
    opponent_type: Optional[OpponentType] = None
    incident_date: Optional[date] = None
    status: CaseStatus
    current_step: CaseStep
    win_probability: Optional[float] = None
    legal_basis: Optional[List[Dict[str, Any]]] = None
    risk_assessment: Optional[List[Dict[str, Any]]] = None
    recommended_action: Optional[str] = None
    court_case_number: Optional[str] = None
    filing_date: Optional[datetime] = None
    response_deadline: Optional[date] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class CaseListResponse(BaseModel):
    cases: List[CaseResponse]
    pagination: Pagination


# ============================================================================
# Document & Timeline Schemas
# ============================================================================

class DocumentResponse(BaseModel):
    id: UUID
    case_id: UUID
    file_name: str
    file_type: str
    file_size: int
    file_path: str
    document_type: DocumentType
    description: Optional[str] = None
    uploaded_at: datetime

    class Config:
        from_attributes = True


class DocumentUpdate(BaseModel):
    document_type: Optional[DocumentType] = None
    description: Optional[str] = None


class TimelineEventResponse(BaseModel):
    id: UUID
    case_id: UUID
    event_type: TimelineEventType
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    document_id: Optional[UUID] = None
    event_date: datetime

    class Config:
        from_attributes = True


class CommunicationResponse(BaseModel):
    id: UUID
    type: CommunicationType
    direction: CommunicationDirection
    subject: Optional[str] = None
    content: Optional[str] = None
    delivery_method: Optional[DeliveryMethod] = None
    delivery_status: Optional[str] = None
    delivery_ref: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ============================================================================
# AI Output Schemas
# ============================================================================

class Strength(str, enum.Enum):
    strong = "strong"
    moderate = "moderate"
    weak = "weak"


class Severity(str, enum.Enum):
    high = "high"
    medium = "medium"
    low = "low"


class LegalBasisItem(BaseModel):
    articles: List[str]
    explanation: str
    strength: Strength


class RiskFactor(BaseModel):
    factor: str
    severity: Severity
    mitigation: Optional[str] = None


class CaseAnalysis(BaseModel):
    """Structured case analysis expected from the model"""
    win_probability: float = Field(..., ge=0, le=1, validation_alias=_camel("win_probability", "winProbability"))
    legal_basis: List[LegalBasisItem] = Field(..., validation_alias=_camel("legal_basis", "legalBasis"))
    risk_factors: List[RiskFactor] = Field(..., validation_alias=_camel("risk_factors", "riskFactors"))
    recommended_action: str = Field(..., validation_alias=_camel("recommended_action", "recommendedAction"))
    estimated_timeline: str = Field(..., validation_alias=_camel("estimated_timeline", "estimatedTimeline"))
    next_steps: List[str] = Field(..., validation_alias=_camel("next_steps", "nextSteps"))
    summary: str


class AnalysisResponse(CaseAnalysis):
    fallback: bool = False


class GeneratedLetter(BaseModel):
    """Demand letter body expected from the model"""
    content: str = Field(..., min_length=1)
    legal_basis: List[str] = Field(..., validation_alias=_camel("legal_basis", "legalBasis"))
    summary: str


class NegotiationAdviceRequest(BaseModel):
    opponent_response: str = Field(..., min_length=10)


class NegotiationAdvice(BaseModel):
    analysis: str
    suggested_response: str = Field(..., validation_alias=_camel("suggested_response", "suggestedResponse"))
    recommended_offer: Optional[float] = Field(None, validation_alias=_camel("recommended_offer", "recommendedOffer"))
    strategy: str


# ============================================================================
# Demand Letter Schemas
# ============================================================================

class DemandLetterCreate(BaseModel):
    tone: LetterTone = LetterTone.formal
    response_deadline_days: int = Field(14, ge=7, le=30)


class DemandLetterResponse(BaseModel):
    id: UUID
    case_id: UUID
    content: str
    legal_basis: Optional[List[str]] = None
    ai_summary: Optional[str] = None
    ai_tone: LetterTone
    response_deadline: date
    status: DemandLetterStatus
    sent_at: Optional[datetime] = None
    delivery_ref: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PrintableLetterResponse(BaseModel):
    demand_letter_id: UUID
    text: str


class DeliveryResponse(BaseModel):
    success: bool
    delivery_ref: Optional[str] = None
    error: Optional[str] = None


# ============================================================================
# Court Filing Schemas
# ============================================================================

class CourtFilingResponse(BaseModel):
    id: UUID
    case_id: UUID
    filing_type: FilingType
    content: str
    xml_content: str
    court_code: str
    court_name: str
    court_fee: float
    status: FilingStatus
    signature_method: Optional[SignatureMethod] = None
    signed_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    court_ref: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class FilingSubmitRequest(BaseModel):
    signature_method: SignatureMethod


class FilingSubmissionResponse(BaseModel):
    success: bool
    court_ref: Optional[str] = None
    error: Optional[str] = None


# ============================================================================
# Lawyer Review Schemas
# ============================================================================

class LawyerReviewCreate(BaseModel):
    review_type: ReviewType
    document_content: Optional[str] = None


class LawyerReviewComplete(BaseModel):
    approved: bool
    comments: Optional[str] = None
    corrections: Optional[str] = None


class LawyerReviewResponse(BaseModel):
    id: UUID
    case_id: UUID
    user_id: UUID
    lawyer_id: Optional[UUID] = None
    review_type: ReviewType
    document_content: str
    fee: float
    status: ReviewStatus
    approved: Optional[bool] = None
    comments: Optional[str] = None
    corrections: Optional[str] = None
    requested_at: datetime
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ============================================================================
# Case Detail & Notifications
# ============================================================================

class CaseDetailResponse(CaseResponse):
    documents: List[DocumentResponse] = []
    timeline_events: List[TimelineEventResponse] = []
    demand_letters: List[DemandLetterResponse] = []
    court_filings: List[CourtFilingResponse] = []
    communications: List[CommunicationResponse] = []
    lawyer_reviews: List[LawyerReviewResponse] = []


class NotificationResponse(BaseModel):
    id: UUID
    case_id: Optional[UUID] = None
    type: NotificationType
    title: str
    message: str
    action_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ============================================================================
# Reference Schemas
# ============================================================================

class CivilCodeGroupResponse(BaseModel):
    key: str
    articles: List[str]
    title_lt: str
    title_en: str


class CourtFeeResponse(BaseModel):
    claim_amount: float
    court_fee: int


class PersonalCodeRequest(BaseModel):
    personal_code: str


class PersonalCodeResponse(BaseModel):
    valid: bool
    masked: str
