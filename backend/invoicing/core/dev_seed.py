import logging
import os

from sqlalchemy.orm import Session

from backend.invoicing.core.settings import Settings
from backend.invoicing.models.party import PARTY_KIND_ISSUER, Party
from backend.invoicing.services.identifiers import validate_registration_number

logger = logging.getLogger(__name__)


def ensure_default_issuer(db: Session, settings: Settings) -> None:
    """
    Create the configured issuing business for local development if it does not exist.
    Skips execution when running under pytest or when no issuer is configured.
    """
    if os.getenv("PYTEST_CURRENT_TEST"):
        return
    if not settings.dev_issuer_name or not settings.dev_issuer_registration_number:
        return

    check = validate_registration_number(settings.dev_issuer_registration_number)
    if not check.valid:
        logger.error("Configured dev issuer registration number rejected: %s", check.reason)
        return

    existing = (
        db.query(Party)
        .filter(
            Party.kind == PARTY_KIND_ISSUER,
            Party.registration_number == settings.dev_issuer_registration_number,
        )
        .first()
    )
    if existing:
        return

    db.add(
        Party(
            kind=PARTY_KIND_ISSUER,
            name=settings.dev_issuer_name,
            address_line1=settings.dev_issuer_address,
            registration_number=settings.dev_issuer_registration_number,
        )
    )
    db.commit()
    logger.info("Seeded development issuer %s", settings.dev_issuer_name)
