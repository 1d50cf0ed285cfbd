"""Identifier format checks."""

from fastapi import APIRouter

from backend.invoicing.schemas.invoice import IdentifierCheckRead
from backend.invoicing.services.identifiers import validate_classification_code, validate_registration_number

router = APIRouter(prefix="/identifiers", tags=["identifiers"])


@router.get("/registration-number/{value}", response_model=IdentifierCheckRead)
async def check_registration_number(value: str):
    check = validate_registration_number(value)
    return IdentifierCheckRead(value=value, valid=check.valid, reason=check.reason, advisory=check.advisory)


@router.get("/classification-code/{value}", response_model=IdentifierCheckRead)
async def check_classification_code(value: str):
    check = validate_classification_code(value)
    return IdentifierCheckRead(value=value, valid=check.valid, reason=check.reason, advisory=check.advisory)
