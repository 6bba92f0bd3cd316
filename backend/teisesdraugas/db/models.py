"""
SQLAlchemy ORM Models
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from teisesdraugas.db.database import Base

# ============================================================================
# Enums
# ============================================================================

class UserRole(str, enum.Enum):
    """User roles"""
    USER = "USER"
    LAWYER = "LAWYER"
    ADMIN = "ADMIN"


class CaseType(str, enum.Enum):
    CONSUMER_DISPUTE = "CONSUMER_DISPUTE"
    RENTAL_DEPOSIT = "RENTAL_DEPOSIT"
    UNPAID_INVOICE = "UNPAID_INVOICE"
    CONTRACT_BREACH = "CONTRACT_BREACH"
    PROPERTY_DAMAGE = "PROPERTY_DAMAGE"
    SERVICE_COMPLAINT = "SERVICE_COMPLAINT"
    EMPLOYMENT_DISPUTE = "EMPLOYMENT_DISPUTE"
    OTHER = "OTHER"


class CaseCategory(str, enum.Enum):
    """Where the dispute happened"""
    VINTED = "VINTED"
    AIRBNB = "AIRBNB"
    FREELANCE = "FREELANCE"
    LANDLORD_TENANT = "LANDLORD_TENANT"
    ONLINE_PURCHASE = "ONLINE_PURCHASE"
    LOCAL_SERVICE = "LOCAL_SERVICE"
    OTHER = "OTHER"


class OpponentType(str, enum.Enum):
    INDIVIDUAL = "INDIVIDUAL"
    COMPANY = "COMPANY"
    PLATFORM = "PLATFORM"
    GOVERNMENT = "GOVERNMENT"


class CaseStatus(str, enum.Enum):
    """Case lifecycle status, declared in workflow order"""
    INTAKE = "INTAKE"
    ANALYSIS = "ANALYSIS"
    DEMAND_LETTER = "DEMAND_LETTER"
    AWAITING_RESPONSE = "AWAITING_RESPONSE"
    NEGOTIATION = "NEGOTIATION"
    PREPARING_FILING = "PREPARING_FILING"
    FILED = "FILED"
    IN_COURT = "IN_COURT"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class CaseStep(str, enum.Enum):
    """Coarse workflow phase shown as progress in the UI"""
    ANALYSIS = "ANALYSIS"
    DEMAND_LETTER = "DEMAND_LETTER"
    RESPONSE = "RESPONSE"
    COURT_FILING = "COURT_FILING"
    RESOLUTION = "RESOLUTION"


class DocumentType(str, enum.Enum):
    SCREENSHOT = "SCREENSHOT"
    CONTRACT = "CONTRACT"
    INVOICE = "INVOICE"
    CORRESPONDENCE = "CORRESPONDENCE"
    PHOTO_EVIDENCE = "PHOTO_EVIDENCE"
    IDENTITY = "IDENTITY"
    BANK_STATEMENT = "BANK_STATEMENT"
    COURT_DOCUMENT = "COURT_DOCUMENT"
    OTHER = "OTHER"


class TimelineEventType(str, enum.Enum):
    CASE_CREATED = "CASE_CREATED"
    DOCUMENT_UPLOADED = "DOCUMENT_UPLOADED"
    AI_ANALYSIS_COMPLETE = "AI_ANALYSIS_COMPLETE"
    DEMAND_LETTER_CREATED = "DEMAND_LETTER_CREATED"
    DEMAND_LETTER_SENT = "DEMAND_LETTER_SENT"
    NEGOTIATION_ADVICE = "NEGOTIATION_ADVICE"
    COURT_FILING_PREPARED = "COURT_FILING_PREPARED"
    COURT_FILING_SUBMITTED = "COURT_FILING_SUBMITTED"
    LAWYER_REVIEW_REQUESTED = "LAWYER_REVIEW_REQUESTED"
    LAWYER_REVIEW_COMPLETE = "LAWYER_REVIEW_COMPLETE"
    STATUS_CHANGED = "STATUS_CHANGED"
    CASE_RESOLVED = "CASE_RESOLVED"
    CASE_CLOSED = "CASE_CLOSED"


class LetterTone(str, enum.Enum):
    formal = "formal"
    firm = "firm"
    final_warning = "final_warning"


class DemandLetterStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"


class FilingType(str, enum.Enum):
    PAYMENT_ORDER = "PAYMENT_ORDER"
    SMALL_CLAIM = "SMALL_CLAIM"
    REGULAR_CLAIM = "REGULAR_CLAIM"


class FilingStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    READY_TO_SIGN = "READY_TO_SIGN"
    SIGNED = "SIGNED"
    SUBMITTED = "SUBMITTED"


class SignatureMethod(str, enum.Enum):
    """National e-signature schemes accepted by e.teismas"""
    smart_id = "smart-id"
    mobile_id = "mobile-id"


class CommunicationType(str, enum.Enum):
    DEMAND_LETTER = "DEMAND_LETTER"
    OPPONENT_RESPONSE = "OPPONENT_RESPONSE"
    COURT_NOTICE = "COURT_NOTICE"
    OTHER = "OTHER"


class CommunicationDirection(str, enum.Enum):
    OUTGOING = "OUTGOING"
    INCOMING = "INCOMING"


class DeliveryMethod(str, enum.Enum):
    E_PRISTATYMAS = "E_PRISTATYMAS"
    EMAIL = "EMAIL"
    POST = "POST"


class ReviewType(str, enum.Enum):
    DEMAND_LETTER = "DEMAND_LETTER"
    COURT_FILING = "COURT_FILING"
    SETTLEMENT_AGREEMENT = "SETTLEMENT_AGREEMENT"
    GENERAL_ADVICE = "GENERAL_ADVICE"


class ReviewStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class NotificationType(str, enum.Enum):
    CASE_UPDATE = "CASE_UPDATE"
    REVIEW_COMPLETE = "REVIEW_COMPLETE"
    DEADLINE_WARNING = "DEADLINE_WARNING"


class AIInteractionType(str, enum.Enum):
    case_analysis = "case_analysis"
    demand_letter_generation = "demand_letter_generation"
    negotiation_advice = "negotiation_advice"


# ============================================================================
# Models
# ============================================================================

class User(Base):
    """Account mirrored from the identity provider"""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255))
    phone = Column(String(50))
    personal_code = Column(String(11))
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.USER)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    cases = relationship("Case", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")


class Case(Base):
    __tablename__ = "cases"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    case_number = Column(String(20), unique=True, nullable=False)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    case_type = Column(SQLEnum(CaseType), nullable=False)
    category = Column(SQLEnum(CaseCategory), nullable=False)
    claim_amount = Column(Numeric(10, 2), nullable=False)

    # Opponent
    opponent_name = Column(String(255))
    opponent_email = Column(String(255))
    opponent_phone = Column(String(50))
    opponent_address = Column(Text)
    opponent_type = Column(SQLEnum(OpponentType))
    incident_date = Column(Date)

    # Workflow
    status = Column(SQLEnum(CaseStatus), nullable=False, default=CaseStatus.INTAKE)
    current_step = Column(SQLEnum(CaseStep), nullable=False, default=CaseStep.ANALYSIS)

    # AI outputs, overwritten on every successful analysis
    win_probability = Column(Float)
    legal_basis = Column(JSON)
    risk_assessment = Column(JSON)
    recommended_action = Column(Text)

    # Court linkage
    court_case_number = Column(String(100))
    filing_date = Column(DateTime)
    response_deadline = Column(Date)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="cases")
    documents = relationship(
        "Document", back_populates="case", cascade="all, delete-orphan",
        order_by="Document.uploaded_at.desc()",
    )
    timeline_events = relationship(
        "TimelineEvent", back_populates="case", cascade="all, delete-orphan",
        order_by="TimelineEvent.event_date.desc()",
    )
    demand_letters = relationship(
        "DemandLetter", back_populates="case", cascade="all, delete-orphan",
        order_by="DemandLetter.created_at.desc()",
    )
    court_filings = relationship(
        "CourtFiling", back_populates="case", cascade="all, delete-orphan",
        order_by="CourtFiling.created_at.desc()",
    )
    communications = relationship(
        "Communication", back_populates="case", cascade="all, delete-orphan",
        order_by="Communication.created_at.desc()",
    )
    lawyer_reviews = relationship(
        "LawyerReview", back_populates="case", cascade="all, delete-orphan",
        order_by="LawyerReview.requested_at.desc()",
    )

    __table_args__ = (
        Index("idx_cases_user_status", "user_id", "status"),
    )


class Document(Base):
    """Evidence file uploaded to a case"""
    __tablename__ = "documents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = Column(Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    file_name = Column(String(255), nullable=False)
    file_type = Column(String(100), nullable=False)
    file_size = Column(Integer, nullable=False)
    file_path = Column(String(500), nullable=False)
    document_type = Column(SQLEnum(DocumentType), nullable=False, default=DocumentType.OTHER)
    description = Column(Text)

    uploaded_at = Column(DateTime, default=datetime.utcnow)

    case = relationship("Case", back_populates="documents")


class TimelineEvent(Base):
    """Append-only case history entry"""
    __tablename__ = "timeline_events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = Column(Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    event_type = Column(SQLEnum(TimelineEventType), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    icon = Column(String(50))
    color = Column(String(20))
    document_id = Column(Uuid, ForeignKey("documents.id", ondelete="SET NULL"))
    event_date = Column(DateTime, default=datetime.utcnow)

    case = relationship("Case", back_populates="timeline_events")
    document = relationship("Document")


class DemandLetter(Base):
    __tablename__ = "demand_letters"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = Column(Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)

    content = Column(Text, nullable=False)
    legal_basis = Column(JSON)
    ai_summary = Column(Text)
    ai_tone = Column(SQLEnum(LetterTone), nullable=False)
    response_deadline = Column(Date, nullable=False)

    status = Column(SQLEnum(DemandLetterStatus), nullable=False, default=DemandLetterStatus.DRAFT)
    sent_at = Column(DateTime)
    delivery_ref = Column(String(100))

    created_at = Column(DateTime, default=datetime.utcnow)

    case = relationship("Case", back_populates="demand_letters")


class CourtFiling(Base):
    __tablename__ = "court_filings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = Column(Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    filing_type = Column(SQLEnum(FilingType), nullable=False, default=FilingType.PAYMENT_ORDER)

    content = Column(Text, nullable=False)
    xml_content = Column(Text, nullable=False)
    court_code = Column(String(10), nullable=False)
    court_name = Column(String(255), nullable=False)
    court_fee = Column(Numeric(10, 2), nullable=False)

    status = Column(SQLEnum(FilingStatus), nullable=False, default=FilingStatus.DRAFT)
    signature_method = Column(SQLEnum(SignatureMethod))
    signed_at = Column(DateTime)
    submitted_at = Column(DateTime)
    court_ref = Column(String(100))

    created_at = Column(DateTime, default=datetime.utcnow)

    case = relationship("Case", back_populates="court_filings")


class Communication(Base):
    """Message exchanged with the opponent or the court"""
    __tablename__ = "communications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = Column(Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(SQLEnum(CommunicationType), nullable=False)
    direction = Column(SQLEnum(CommunicationDirection), nullable=False)
    subject = Column(String(255))
    content = Column(Text)
    delivery_method = Column(SQLEnum(DeliveryMethod))
    delivery_status = Column(String(50))
    delivery_ref = Column(String(100))
    sent_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)

    case = relationship("Case", back_populates="communications")


class LawyerReview(Base):
    """
    Paid review request. ``document_content`` is a copy of the reviewed text
    taken when the review was requested; later edits to the letter or filing
    do not reach the reviewer.
    """
    __tablename__ = "lawyer_reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = Column(Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    lawyer_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"))

    review_type = Column(SQLEnum(ReviewType), nullable=False)
    document_content = Column(Text, nullable=False)
    fee = Column(Numeric(10, 2), nullable=False)

    status = Column(SQLEnum(ReviewStatus), nullable=False, default=ReviewStatus.PENDING)
    approved = Column(Boolean)
    comments = Column(Text)
    corrections = Column(Text)

    requested_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime)

    case = relationship("Case", back_populates="lawyer_reviews")
    user = relationship("User", foreign_keys=[user_id])
    lawyer = relationship("User", foreign_keys=[lawyer_id])


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    case_id = Column(Uuid, ForeignKey("cases.id", ondelete="SET NULL"))
    type = Column(SQLEnum(NotificationType), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    action_url = Column(String(500))
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="notifications")


class AIInteractionLog(Base):
    """
    Compliance record of one language-model call (EU AI Act traceability).
    Rows are only ever inserted.
    """
    __tablename__ = "ai_interaction_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"))
    case_id = Column(Uuid, ForeignKey("cases.id", ondelete="SET NULL"), index=True)
    interaction_type = Column(SQLEnum(AIInteractionType), nullable=False)

    prompt = Column(Text, nullable=False)
    response = Column(Text)
    model_used = Column(String(255), nullable=False)
    input_tokens = Column(Integer, default=0)
    output_tokens = Column(Integer, default=0)
    tokens_used = Column(Integer, default=0)

    success = Column(Boolean, nullable=False)
    error_message = Column(Text)
    disclaimer_shown = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
