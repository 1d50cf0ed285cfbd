"""Printable renditions of a stored invoice.

Rendering is pure formatting of the persisted record; amounts are never
recomputed here.
"""

from decimal import Decimal
from html import escape

from backend.invoicing.core.jurisdictions import state_name
from backend.invoicing.schemas.invoice import InvoiceRead

_STYLE = """
    body { font-family: Arial, sans-serif; margin: 0; padding: 20px; background: #f5f5f5; }
    .invoice-container { max-width: 800px; margin: 0 auto; background: white; padding: 30px; border: 1px solid #ddd; }
    .invoice-header { text-align: center; margin-bottom: 30px; border-bottom: 2px solid #333; padding-bottom: 20px; }
    .invoice-title { font-size: 24px; font-weight: bold; color: #333; }
    .invoice-number { font-size: 18px; color: #666; margin-top: 5px; }
    .invoice-details { display: flex; justify-content: space-between; margin-bottom: 30px; }
    .party-info { flex: 1; }
    .invoice-items table { width: 100%; border-collapse: collapse; }
    .invoice-items th, .invoice-items td { border: 1px solid #ddd; padding: 8px; text-align: left; }
    .totals-table { width: 300px; margin-left: auto; }
    .total-row td { font-weight: bold; border-top: 2px solid #333; }
    .invoice-footer { text-align: center; margin-top: 30px; color: #666; font-size: 12px; }
"""


def _money(value: Decimal, symbol: str) -> str:
    return f"{symbol}{Decimal(value):.2f}"


def _rate(value: Decimal) -> str:
    return f"{Decimal(value).normalize():f}"


def _text(value) -> str:
    return escape(str(value)) if value is not None else ""


def render_invoice_html(invoice: InvoiceRead, currency_symbol: str = "₹") -> str:
    def m(value):
        return escape(_money(value, currency_symbol))

    rows = []
    for item in invoice.items:
        rows.append(
            "<tr>"
            f"<td>{_text(item.description)}</td>"
            f"<td>{_text(item.classification_code or '-')}</td>"
            f"<td>{_text(_rate(item.quantity))}</td>"
            f"<td>{m(item.unit_price)}</td>"
            f"<td>{m(item.discount)}</td>"
            f"<td>{m(item.taxable_amount)}</td>"
            f"<td>{m(item.cgst_amount)} @{_rate(item.cgst_rate)}%</td>"
            f"<td>{m(item.sgst_amount)} @{_rate(item.sgst_rate)}%</td>"
            f"<td>{m(item.igst_amount)} @{_rate(item.igst_rate)}%</td>"
            f"<td>{m(item.cess_amount)} @{_rate(item.cess_rate)}%</td>"
            f"<td>{m(item.total_amount)}</td>"
            "</tr>"
        )

    customer_gstin = (
        f"<p>GSTIN: {_text(invoice.customer_registration_number)}</p>"
        if invoice.customer_registration_number
        else ""
    )
    rows_html = "".join(rows)
    reverse_charge = "Yes" if invoice.reverse_charge else "No"

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>Tax Invoice - {_text(invoice.invoice_number)}</title>
  <style>{_STYLE}</style>
</head>
<body>
  <div class="invoice-container">
    <div class="invoice-header">
      <div class="invoice-title">TAX INVOICE</div>
      <div class="invoice-number">Invoice No: {_text(invoice.invoice_number)}</div>
      <div>Date: {invoice.invoice_date:%d-%m-%Y}</div>
      <div>Due Date: {invoice.due_date:%d-%m-%Y}</div>
    </div>
    <div class="invoice-details">
      <div class="party-info">
        <h3>Billed From:</h3>
        <p><strong>{_text(invoice.issuer_name)}</strong></p>
        <p>{_text(invoice.issuer_address)}</p>
        <p>GSTIN: {_text(invoice.issuer_registration_number)}</p>
      </div>
      <div class="party-info">
        <h3>Billed To:</h3>
        <p><strong>{_text(invoice.customer_name)}</strong></p>
        <p>{_text(invoice.customer_address)}</p>
        {customer_gstin}
      </div>
    </div>
    <div class="invoice-items">
      <table>
        <thead>
          <tr>
            <th>Description</th><th>HSN/SAC</th><th>Qty</th><th>Rate</th><th>Discount</th>
            <th>Taxable Amt</th><th>CGST</th><th>SGST</th><th>IGST</th><th>Cess</th><th>Total</th>
          </tr>
        </thead>
        <tbody>
          {rows_html}
        </tbody>
      </table>
    </div>
    <table class="totals-table">
      <tr><td>Subtotal:</td><td>{m(invoice.subtotal)}</td></tr>
      <tr><td>CGST:</td><td>{m(invoice.cgst_total)}</td></tr>
      <tr><td>SGST:</td><td>{m(invoice.sgst_total)}</td></tr>
      <tr><td>IGST:</td><td>{m(invoice.igst_total)}</td></tr>
      <tr><td>Cess:</td><td>{m(invoice.cess_total)}</td></tr>
      <tr class="total-row"><td>Total Amount:</td><td>{m(invoice.grand_total)}</td></tr>
    </table>
    <div class="invoice-footer">
      <p>Place of Supply: {_text(invoice.place_of_supply)} - {_text(state_name(invoice.place_of_supply))}</p>
      <p>Reverse Charge: {reverse_charge}</p>
      <p>Payment Status: {_text(invoice.payment_status.value)}</p>
      <p>This is a computer-generated invoice and does not require a signature.</p>
    </div>
  </div>
</body>
</html>
"""


def render_invoice_text(invoice: InvoiceRead, currency_symbol: str = "₹") -> str:
    def m(value):
        return _money(value, currency_symbol)

    lines = []
    lines.append("TAX INVOICE")
    lines.append(f"Invoice No: {invoice.invoice_number}")
    lines.append(f"Date: {invoice.invoice_date:%d-%m-%Y}")
    lines.append(f"Due Date: {invoice.due_date:%d-%m-%Y}")
    lines.append("")
    lines.append("== Billed From ==")
    lines.append(invoice.issuer_name)
    lines.append(invoice.issuer_address or "")
    lines.append(f"GSTIN: {invoice.issuer_registration_number}")
    lines.append("")
    lines.append("== Billed To ==")
    lines.append(invoice.customer_name)
    lines.append(invoice.customer_address or "")
    if invoice.customer_registration_number:
        lines.append(f"GSTIN: {invoice.customer_registration_number}")
    lines.append("")
    lines.append("== Items ==")
    for number, item in enumerate(invoice.items, start=1):
        lines.append(
            f"{number}. {item.description} [{item.classification_code or '-'}] "
            f"{_rate(item.quantity)} x {m(item.unit_price)} - {m(item.discount)} = {m(item.taxable_amount)}"
        )
        lines.append(
            f"   CGST {m(item.cgst_amount)} @{_rate(item.cgst_rate)}% | "
            f"SGST {m(item.sgst_amount)} @{_rate(item.sgst_rate)}% | "
            f"IGST {m(item.igst_amount)} @{_rate(item.igst_rate)}% | "
            f"Cess {m(item.cess_amount)} @{_rate(item.cess_rate)}% | "
            f"Total {m(item.total_amount)}"
        )
    lines.append("")
    lines.append("== Totals ==")
    lines.append(f"Subtotal: {m(invoice.subtotal)}")
    lines.append(f"CGST: {m(invoice.cgst_total)}")
    lines.append(f"SGST: {m(invoice.sgst_total)}")
    lines.append(f"IGST: {m(invoice.igst_total)}")
    lines.append(f"Cess: {m(invoice.cess_total)}")
    lines.append(f"Total Amount: {m(invoice.grand_total)}")
    lines.append("")
    lines.append(f"Place of Supply: {invoice.place_of_supply} - {state_name(invoice.place_of_supply)}")
    lines.append(f"Reverse Charge: {'Yes' if invoice.reverse_charge else 'No'}")
    lines.append(f"Payment Status: {invoice.payment_status.value}")
    return "\n".join(lines)
