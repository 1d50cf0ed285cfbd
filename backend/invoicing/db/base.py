from backend.invoicing.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.invoicing.models.party import Party  # noqa: F401
from backend.invoicing.models.invoice import Invoice  # noqa: F401
from backend.invoicing.models.invoice_item import InvoiceItem  # noqa: F401
