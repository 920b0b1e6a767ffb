# carwash/services/receipt.py
"""
Sales receipt ("boleta") math and its plain-text rendering.
Prices are tax-inclusive; the 18% rate is fixed, not a setting.
"""

from datetime import date
from typing import Optional
from carwash.config import settings
from carwash.schemas.dashboard import ReceiptBreakdown
from carwash.schemas.service import ServiceRecord

TAX_RATE = 0.18


def compute_receipt(service: ServiceRecord) -> ReceiptBreakdown:
    """Split a tax-inclusive price into base and tax. Not rounded."""
    gross = float(service.price)
    base = gross / (1 + TAX_RATE)
    return ReceiptBreakdown(gross_total=gross, base_amount=base, tax_amount=gross - base)


def render_receipt_text(service: ServiceRecord, issued_on: Optional[date] = None) -> str:
    """Receipt text for chat apps (WhatsApp *bold* markup)."""
    issued_on = issued_on or date.today()
    breakdown = compute_receipt(service)
    rule = "-" * 28
    return "\n".join([
        "🧾 *BOLETA DE VENTA ELECTRÓNICA*",
        f"*{settings.BUSINESS_NAME.upper()}*",
        rule,
        f"Ticket: #{service.id}",
        f"Fecha: {issued_on.strftime('%d/%m/%Y')}",
        f"Cliente: {service.customer_name}",
        f"Placa: {service.plate}",
        rule,
        "DESCRIPCIÓN          IMPORTE",
        f"{service.service_type.value}    S/ {breakdown.gross_total:.2f}",
        rule,
        f"Op. gravada: S/ {breakdown.base_amount:.2f}",
        f"IGV (18%): S/ {breakdown.tax_amount:.2f}",
        f"*TOTAL: S/ {breakdown.gross_total:.2f}*",
        rule,
        "Gracias por su visita! 🚗✨",
        "",
    ])
