"""Format checks for GST registration numbers (GSTIN) and HSN/SAC codes."""

import re
from dataclasses import dataclass
from typing import Optional

# 2-digit state code, 10-char PAN (5 letters, 4 digits, 1 letter),
# entity-count code, literal "Z", check character.
GSTIN_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][0-9A-Z]Z[0-9A-Z]$")
GSTIN_LENGTH = 15
MIN_CLASSIFICATION_CODE_LENGTH = 4


@dataclass(frozen=True)
class IdentifierCheck:
    valid: bool
    reason: Optional[str] = None
    # Advisory checks never block invoice creation
    advisory: bool = False


def validate_registration_number(value: Optional[str]) -> IdentifierCheck:
    if value is None or value == "":
        return IdentifierCheck(False, "Registration number is missing")
    if len(value) != GSTIN_LENGTH:
        return IdentifierCheck(False, f"Registration number must be {GSTIN_LENGTH} characters, got {len(value)}")
    if not GSTIN_PATTERN.match(value):
        return IdentifierCheck(False, "Invalid registration number format")
    return IdentifierCheck(True)


def validate_classification_code(value: Optional[str]) -> IdentifierCheck:
    if not value:
        return IdentifierCheck(False, "Missing HSN/SAC code", advisory=True)
    if len(value.strip()) < MIN_CLASSIFICATION_CODE_LENGTH:
        return IdentifierCheck(
            False,
            f"HSN/SAC code should have at least {MIN_CLASSIFICATION_CODE_LENGTH} characters",
            advisory=True,
        )
    return IdentifierCheck(True, advisory=True)


def jurisdiction_of(registration_number: str) -> str:
    """Return the state code a valid GSTIN was issued under."""
    return registration_number[:2]
