"""
Static legal reference endpoints. No authentication required.
"""
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Query

from teisesdraugas.db.models import CaseType
from teisesdraugas.db.schemas import (
    CivilCodeGroupResponse,
    CourtFeeResponse,
    PersonalCodeRequest,
    PersonalCodeResponse,
)
from teisesdraugas.services.court_fees import calculate_court_fee
from teisesdraugas.services.legal_reference import CIVIL_CODE_REFERENCES, reference_groups_for
from teisesdraugas.utils.validators import mask_personal_code, validate_personal_code

router = APIRouter()


@router.get("/civil-code", response_model=List[CivilCodeGroupResponse])
def civil_code(case_type: Optional[CaseType] = Query(None, description="Only groups relevant to this case type")):
    if case_type is not None:
        return reference_groups_for(case_type)
    return [{"key": key, **group} for key, group in CIVIL_CODE_REFERENCES.items()]


@router.get("/court-fee", response_model=CourtFeeResponse)
def court_fee(amount: Decimal = Query(..., gt=0, description="Claim amount in EUR")):
    return CourtFeeResponse(claim_amount=float(amount), court_fee=calculate_court_fee(amount))


@router.post("/personal-code/validate", response_model=PersonalCodeResponse)
def personal_code(data: PersonalCodeRequest):
    code = data.personal_code.strip()
    valid = validate_personal_code(code)
    return PersonalCodeResponse(valid=valid, masked=mask_personal_code(code) if valid else "")
