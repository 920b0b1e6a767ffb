# carwash/routers/services.py
"""Tickets — intake, edit, workflow actions, receipts and WhatsApp links."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from carwash.dependencies import get_ledger
from carwash.schemas.dashboard import ReceiptBreakdown
from carwash.schemas.service import (
    ServiceCreate,
    ServiceRecord,
    ServiceUpdate,
    StatusUpdate,
    WhatsAppLinkOut,
)
from carwash.services.ledger import LedgerError, LedgerStore, TransitionError
from carwash.services.messaging import build_whatsapp_link, normalize_phone
from carwash.services.receipt import compute_receipt, render_receipt_text
from carwash.services.receipt_export import ExportError, receipt_filename, render_receipt_pdf

router = APIRouter()


def _get_or_404(ledger: LedgerStore, service_id: str) -> ServiceRecord:
    service = ledger.get_service(service_id)
    if not service:
        raise HTTPException(status_code=404, detail=f"Ticket '{service_id}' not found")
    return service


@router.get("/services", response_model=list[ServiceRecord], summary="List tickets, most recent first")
def list_services(q: str = None, ledger: LedgerStore = Depends(get_ledger)):
    """Optional `q` filters by customer name, plate or ticket id."""
    return ledger.search_services(q or "")


@router.post("/services", response_model=ServiceRecord, status_code=201, summary="Register a new ticket")
def create_service(body: ServiceCreate, ledger: LedgerStore = Depends(get_ledger)):
    try:
        return ledger.add_service(body)
    except LedgerError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/services/{service_id}", response_model=ServiceRecord)
def get_service(service_id: str, ledger: LedgerStore = Depends(get_ledger)):
    return _get_or_404(ledger, service_id)


@router.put("/services/{service_id}", response_model=ServiceRecord, summary="Edit a ticket in place")
def update_service(service_id: str, body: ServiceUpdate, ledger: LedgerStore = Depends(get_ledger)):
    updated = ledger.update_service(service_id, body)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Ticket '{service_id}' not found")
    return updated


@router.delete("/services/{service_id}", summary="Remove a ticket")
def remove_service(service_id: str, ledger: LedgerStore = Depends(get_ledger)):
    """Customer totals are not recalculated. Unknown ids are a no-op."""
    removed = ledger.remove_service(service_id)
    return {"status": "removed" if removed else "not_found", "id": service_id}


@router.put("/services/{service_id}/status", response_model=ServiceRecord, summary="Set any status directly")
def set_status(service_id: str, body: StatusUpdate, ledger: LedgerStore = Depends(get_ledger)):
    updated = ledger.set_status(service_id, body.status)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Ticket '{service_id}' not found")
    return updated


def _run_action(ledger: LedgerStore, service_id: str, action: str) -> ServiceRecord:
    try:
        updated = getattr(ledger, action)(service_id)
    except TransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Ticket '{service_id}' not found")
    return updated


@router.post("/services/{service_id}/start", response_model=ServiceRecord, summary="WAITING → IN_PROCESS")
def start_service(service_id: str, ledger: LedgerStore = Depends(get_ledger)):
    return _run_action(ledger, service_id, "start")


@router.post("/services/{service_id}/finish", response_model=ServiceRecord, summary="IN_PROCESS → READY")
def finish_service(service_id: str, ledger: LedgerStore = Depends(get_ledger)):
    return _run_action(ledger, service_id, "finish")


@router.post("/services/{service_id}/deliver", response_model=ServiceRecord, summary="READY → DELIVERED")
def deliver_service(service_id: str, ledger: LedgerStore = Depends(get_ledger)):
    return _run_action(ledger, service_id, "deliver")


@router.get("/services/{service_id}/receipt", summary="Receipt with 18% tax breakdown")
def get_receipt(service_id: str, ledger: LedgerStore = Depends(get_ledger)):
    service = _get_or_404(ledger, service_id)
    breakdown: ReceiptBreakdown = compute_receipt(service)
    return {
        "service": service.model_dump(mode="json", by_alias=True),
        "breakdown": breakdown.model_dump(by_alias=True),
        "text": render_receipt_text(service),
    }


@router.get("/services/{service_id}/receipt.pdf", summary="Receipt as A6 PDF")
def get_receipt_pdf(service_id: str, ledger: LedgerStore = Depends(get_ledger)):
    service = _get_or_404(ledger, service_id)
    try:
        content = render_receipt_pdf(service)
    except ExportError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{receipt_filename(service)}"'},
    )


@router.get("/services/{service_id}/whatsapp", response_model=WhatsAppLinkOut, summary="wa.me link with the receipt")
def get_whatsapp_link(service_id: str, ledger: LedgerStore = Depends(get_ledger)):
    service = _get_or_404(ledger, service_id)
    return WhatsAppLinkOut(
        phone=normalize_phone(service.phone),
        url=build_whatsapp_link(service.phone, render_receipt_text(service)),
    )
