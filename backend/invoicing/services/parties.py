"""Party directory: resolves customers and issuers by id."""

from typing import Optional, Protocol

from sqlalchemy.orm import Session

from backend.invoicing.crud.crud_invoice import storage_guard
from backend.invoicing.models.party import PARTY_KIND_ISSUER, Party
from backend.invoicing.schemas.party import PartyRecord


class PartyDirectory(Protocol):
    def get_customer(self, customer_id: int) -> Optional[PartyRecord]: ...

    def get_issuer(self, issuer_id: Optional[int] = None) -> Optional[PartyRecord]: ...


class SqlPartyDirectory:
    """Party directory backed by the ``parties`` table."""

    def __init__(self, db: Session):
        self.db = db

    def get_customer(self, customer_id: int) -> Optional[PartyRecord]:
        with storage_guard(self.db, "customer lookup"):
            party = self.db.query(Party).filter(Party.id == customer_id).first()
        return PartyRecord.model_validate(party) if party else None

    def get_issuer(self, issuer_id: Optional[int] = None) -> Optional[PartyRecord]:
        """Return the given issuer, or the first issuer holding a registration number."""
        with storage_guard(self.db, "issuer lookup"):
            query = self.db.query(Party).filter(Party.kind == PARTY_KIND_ISSUER)
            if issuer_id is not None:
                party = query.filter(Party.id == issuer_id).first()
            else:
                party = (
                    query.filter(Party.registration_number.isnot(None))
                    .order_by(Party.id.asc())
                    .first()
                )
        return PartyRecord.model_validate(party) if party else None
