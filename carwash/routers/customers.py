# carwash/routers/customers.py
"""Customer CRM — the aggregates kept in sync by ticket attribution."""

from fastapi import APIRouter, Depends, HTTPException
from carwash.dependencies import get_ledger
from carwash.schemas.customer import Customer, CustomerCreate
from carwash.schemas.service import ServiceRecord, WhatsAppLinkOut
from carwash.services.ledger import LedgerError, LedgerStore
from carwash.services.messaging import build_whatsapp_link, normalize_phone

router = APIRouter()


@router.get("/customers", response_model=list[Customer], summary="List customers")
def list_customers(q: str = None, ledger: LedgerStore = Depends(get_ledger)):
    """Optional `q` filters by name or plate."""
    return ledger.search_customers(q or "")


@router.post("/customers", response_model=Customer, status_code=201, summary="Add a customer manually")
def create_customer(body: CustomerCreate, ledger: LedgerStore = Depends(get_ledger)):
    try:
        return ledger.add_customer(body)
    except LedgerError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/customers/{customer_id}", summary="Remove a customer (tickets are kept)")
def remove_customer(customer_id: str, ledger: LedgerStore = Depends(get_ledger)):
    removed = ledger.remove_customer(customer_id)
    return {"status": "removed" if removed else "not_found", "id": customer_id}


@router.get("/customers/{customer_id}/services", response_model=list[ServiceRecord])
def customer_services(customer_id: str, ledger: LedgerStore = Depends(get_ledger)):
    if not ledger.get_customer(customer_id):
        raise HTTPException(status_code=404, detail=f"Customer '{customer_id}' not found")
    return ledger.services_for_customer(customer_id)


@router.get("/customers/{customer_id}/whatsapp", response_model=WhatsAppLinkOut)
def customer_whatsapp(customer_id: str, ledger: LedgerStore = Depends(get_ledger)):
    customer = ledger.get_customer(customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail=f"Customer '{customer_id}' not found")
    return WhatsAppLinkOut(phone=normalize_phone(customer.phone), url=build_whatsapp_link(customer.phone))
