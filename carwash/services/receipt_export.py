# carwash/services/receipt_export.py
"""
Receipt ("boleta") export as an A6 PDF, for download or printing.
Built with fpdf2 core fonts, so text is limited to Latin-1.
"""

from datetime import date
from typing import Optional
from fpdf import FPDF
from carwash.config import settings
from carwash.schemas.service import ServiceRecord
from carwash.services.receipt import TAX_RATE, compute_receipt
from carwash.utils.logger import get_logger

logger = get_logger(__name__)

EXPORT_FAILED = "Error al generar PDF."
A6_MM = (105, 148)   # fpdf2 has no named A6 format


class ExportError(Exception):
    pass


def receipt_filename(service: ServiceRecord) -> str:
    return f"Boleta-{service.id}.pdf"


def _latin1(text: str) -> str:
    return text.encode("latin-1", errors="replace").decode("latin-1")


def render_receipt_pdf(service: ServiceRecord, issued_on: Optional[date] = None) -> bytes:
    """Render one ticket's receipt. Raises ExportError if rendering fails."""
    issued_on = issued_on or date.today()
    breakdown = compute_receipt(service)

    try:
        pdf = FPDF(orientation="P", unit="mm", format=A6_MM)
        pdf.set_margins(8, 8, 8)
        pdf.set_auto_page_break(auto=True, margin=8)
        pdf.add_page()

        # --- Header ---
        pdf.set_font("Helvetica", "B", 14)
        pdf.cell(0, 7, _latin1(settings.BUSINESS_NAME.upper()), new_x="LMARGIN", new_y="NEXT", align="C")
        pdf.set_font("Helvetica", "", 8)
        pdf.cell(0, 5, _latin1("BOLETA DE VENTA ELECTRÓNICA"), new_x="LMARGIN", new_y="NEXT", align="C")
        pdf.ln(3)

        # --- Ticket data ---
        pdf.set_font("Helvetica", "", 9)
        for label, value in (
            ("Ticket", f"#{service.id}"),
            ("Fecha", issued_on.strftime("%d/%m/%Y")),
            ("Cliente", service.customer_name),
            ("Placa", service.plate),
        ):
            pdf.cell(22, 5, f"{label}:")
            pdf.cell(0, 5, _latin1(value), new_x="LMARGIN", new_y="NEXT")
        pdf.ln(2)

        # --- Line item ---
        pdf.set_font("Helvetica", "B", 9)
        pdf.cell(60, 6, _latin1("Descripción"), border="B")
        pdf.cell(0, 6, "Importe", border="B", align="R", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font("Helvetica", "", 9)
        pdf.cell(60, 6, _latin1(service.service_type.value))
        pdf.cell(0, 6, f"S/ {breakdown.gross_total:.2f}", align="R", new_x="LMARGIN", new_y="NEXT")
        pdf.ln(2)

        # --- Totals ---
        pdf.cell(60, 5, "Op. gravada")
        pdf.cell(0, 5, f"S/ {breakdown.base_amount:.2f}", align="R", new_x="LMARGIN", new_y="NEXT")
        pdf.cell(60, 5, f"IGV ({TAX_RATE:.0%})")
        pdf.cell(0, 5, f"S/ {breakdown.tax_amount:.2f}", align="R", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font("Helvetica", "B", 11)
        pdf.cell(60, 7, "TOTAL")
        pdf.cell(0, 7, f"S/ {breakdown.gross_total:.2f}", align="R", new_x="LMARGIN", new_y="NEXT")

        # --- Footer ---
        pdf.ln(4)
        pdf.set_font("Helvetica", "I", 8)
        pdf.cell(0, 5, "Gracias por su visita!", new_x="LMARGIN", new_y="NEXT", align="C")

        content = bytes(pdf.output())
    except Exception as e:
        logger.error(f"[EXPORT] Receipt PDF failed for {service.id}: {e}", exc_info=True)
        raise ExportError(EXPORT_FAILED) from e

    logger.info(f"[EXPORT] Receipt PDF for {service.id} ({len(content)} bytes)")
    return content
