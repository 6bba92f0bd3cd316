"""
Court filing endpoints
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from teisesdraugas.api.deps import get_court_filing_service, get_current_user, get_pdf_renderer
from teisesdraugas.db.database import get_db
from teisesdraugas.db.models import CourtFiling, User
from teisesdraugas.db.schemas import CourtFilingResponse, FilingSubmissionResponse, FilingSubmitRequest
from teisesdraugas.services import case_service
from teisesdraugas.services.court_filing_service import CourtFilingService, get_filing_for_user
from teisesdraugas.services.filing_pdf import FilingPdfRenderer
from teisesdraugas.utils.exceptions import CourtFilingNotFoundError

router = APIRouter()


def _owned_filing(db: Session, filing_id: UUID, user: User) -> CourtFiling:
    filing = get_filing_for_user(db, filing_id, user)
    if not filing:
        raise CourtFilingNotFoundError()
    return filing


@router.post(
    "/cases/{case_id}/court-filings",
    response_model=CourtFilingResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_court_filing(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    filing_service: CourtFilingService = Depends(get_court_filing_service),
):
    case = case_service.get_owned_case(db, case_id, current_user)
    return filing_service.generate(db, case, current_user)


@router.get("/cases/{case_id}/court-filings", response_model=List[CourtFilingResponse])
def list_court_filings(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    case = case_service.get_owned_case(db, case_id, current_user)
    return (
        db.query(CourtFiling)
        .filter(CourtFiling.case_id == case.id)
        .order_by(CourtFiling.created_at.desc())
        .all()
    )


@router.post("/court-filings/{filing_id}/ready-to-sign", response_model=CourtFilingResponse)
def mark_ready_to_sign(
    filing_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    filing_service: CourtFilingService = Depends(get_court_filing_service),
):
    filing = _owned_filing(db, filing_id, current_user)
    return filing_service.mark_ready_to_sign(db, filing)


@router.get("/court-filings/{filing_id}/pdf")
def download_filing_pdf(
    filing_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    renderer: FilingPdfRenderer = Depends(get_pdf_renderer),
):
    filing = _owned_filing(db, filing_id, current_user)
    pdf_bytes = renderer.render(filing)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="teismo-isakymas-{filing.id}.pdf"'},
    )


@router.get("/court-filings/{filing_id}/xml")
def download_filing_xml(
    filing_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filing = _owned_filing(db, filing_id, current_user)
    return Response(content=filing.xml_content, media_type="application/xml")


@router.post("/court-filings/{filing_id}/submit", response_model=FilingSubmissionResponse)
def submit_court_filing(
    filing_id: UUID,
    data: FilingSubmitRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    filing_service: CourtFilingService = Depends(get_court_filing_service),
):
    """
    Sign and submit to e.teismas. Only READY_TO_SIGN or SIGNED filings go out;
    anything else is reported as an unsuccessful submission.
    """
    filing = _owned_filing(db, filing_id, current_user)
    result = filing_service.submit(db, filing, filing.case, data.signature_method)
    return FilingSubmissionResponse(success=result.success, court_ref=result.reference, error=result.error)
