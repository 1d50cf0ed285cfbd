"""Per-line GST computation."""

from decimal import Decimal, ROUND_HALF_UP

from backend.invoicing.core.errors import InvalidItem
from backend.invoicing.schemas.invoice_item import InvoiceItemBase, InvoiceItemComputed

CURRENCY_QUANTUM = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def round_currency(value: Decimal, quantum: Decimal = CURRENCY_QUANTUM) -> Decimal:
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


def _component(taxable_amount: Decimal, rate: Decimal, quantum: Decimal) -> Decimal:
    return round_currency(taxable_amount * rate / HUNDRED, quantum)


def calculate_line_item(
    item: InvoiceItemBase,
    *,
    intra_state: bool,
    index: int | None = None,
    quantum: Decimal = CURRENCY_QUANTUM,
) -> InvoiceItemComputed:
    """Compute taxable amount and tax components for one line.

    Intra-state supply applies CGST and SGST only; inter-state supply applies
    IGST only. Cess applies either way. Each component is rounded half-up on
    its own, never derived by subtraction.
    """
    quantity = Decimal(item.quantity)
    unit_price = Decimal(item.unit_price)
    discount = Decimal(item.discount or 0)

    if quantity <= 0:
        raise InvalidItem("quantity must be greater than zero", index)
    if unit_price < 0:
        raise InvalidItem("unit price cannot be negative", index)
    if discount < 0:
        raise InvalidItem("discount cannot be negative", index)

    gross_amount = quantity * unit_price
    if discount > gross_amount:
        raise InvalidItem(f"discount {discount} exceeds gross amount {gross_amount}", index)
    taxable_amount = round_currency(gross_amount - discount, quantum)

    if intra_state:
        cgst_amount = _component(taxable_amount, Decimal(item.cgst_rate), quantum)
        sgst_amount = _component(taxable_amount, Decimal(item.sgst_rate), quantum)
        igst_amount = round_currency(ZERO, quantum)
    else:
        cgst_amount = round_currency(ZERO, quantum)
        sgst_amount = round_currency(ZERO, quantum)
        igst_amount = _component(taxable_amount, Decimal(item.igst_rate), quantum)
    cess_amount = _component(taxable_amount, Decimal(item.cess_rate), quantum)

    total_amount = taxable_amount + cgst_amount + sgst_amount + igst_amount + cess_amount

    return InvoiceItemComputed(
        **item.model_dump(include=set(InvoiceItemBase.model_fields)),
        taxable_amount=taxable_amount,
        cgst_amount=cgst_amount,
        sgst_amount=sgst_amount,
        igst_amount=igst_amount,
        cess_amount=cess_amount,
        total_amount=total_amount,
    )


def rate_warnings(item: InvoiceItemBase, *, intra_state: bool, index: int) -> list[str]:
    """Advisory notes about rates that the place-of-supply rule ignores."""
    label = f"Item {index + 1}"
    warnings = []
    if intra_state:
        if item.igst_rate > 0:
            warnings.append(f"{label}: IGST rate ignored for intra-state supply")
        if item.cgst_rate != item.sgst_rate:
            warnings.append(f"{label}: CGST rate {item.cgst_rate}% differs from SGST rate {item.sgst_rate}%")
    elif item.cgst_rate > 0 or item.sgst_rate > 0:
        warnings.append(f"{label}: CGST/SGST rates ignored for inter-state supply")
    return warnings
