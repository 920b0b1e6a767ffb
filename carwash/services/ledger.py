# carwash/services/ledger.py
"""
Operational ledger — the authoritative service (ticket) and customer collections.

One LedgerStore is created per process and shared by every request. Its
methods are the only write path: each mutation runs under a lock, updates
the in-memory collections and then rewrites the affected slot(s) through the
persistence gateway. Persistence is fire-and-forget; a failed write is
logged and the in-memory state stands.

Workflow:  WAITING --start--> IN_PROCESS --finish--> READY --deliver--> DELIVERED
DEBT and CANCELLED (or anything else) can be set directly with set_status();
the guided path is a convenience, not enforced.
"""

import threading
import uuid
from datetime import datetime
from typing import Callable, Optional
from carwash import seed
from carwash.schemas.customer import Customer, CustomerCreate
from carwash.schemas.service import ServiceCreate, ServiceRecord, ServiceStatus, ServiceUpdate
from carwash.services.attribution import attribute_service
from carwash.services.persistence import (
    CUSTOMERS_SLOT,
    SERVICES_SLOT,
    load_collection,
    save_collection,
)
from carwash.utils.logger import get_logger

logger = get_logger(__name__)

TRANSITIONS = {
    "start": (ServiceStatus.WAITING, ServiceStatus.IN_PROCESS),
    "finish": (ServiceStatus.IN_PROCESS, ServiceStatus.READY),
    "deliver": (ServiceStatus.READY, ServiceStatus.DELIVERED),
}

# Fields that may be cleared by an edit; the rest ignore explicit nulls
_NULLABLE_FIELDS = {"notes"}


class LedgerError(Exception):
    """Raised when a mutation is rejected before anything is changed."""


class TransitionError(LedgerError):
    """Raised when a guided action does not apply to the ticket's current status."""


def display_time(moment: datetime) -> str:
    return moment.strftime("%H:%M")


class LedgerStore:
    def __init__(self, gateway, clock: Callable[[], datetime] = datetime.now):
        self._gateway = gateway
        self._clock = clock
        self._lock = threading.RLock()
        self._services: list[ServiceRecord] = []
        self._customers: list[Customer] = []

    # ── Startup ───────────────────────────────────────────────────────────
    def load(self) -> None:
        """Read both slots once. Missing slots are seeded with sample data."""
        with self._lock:
            self._services = load_collection(self._gateway, SERVICES_SLOT, ServiceRecord, seed.sample_services)
            self._customers = load_collection(self._gateway, CUSTOMERS_SLOT, Customer, seed.sample_customers)
        logger.info(f"[LEDGER] Ready: {len(self._services)} services, {len(self._customers)} customers")

    def reset(self) -> None:
        """Factory reset: replace everything with the sample data."""
        with self._lock:
            self._services = seed.sample_services()
            self._customers = seed.sample_customers()
            self._save_services()
            self._save_customers()
        logger.warning("[LEDGER] Reset to sample data")

    # ── Reads ─────────────────────────────────────────────────────────────
    @property
    def services(self) -> list[ServiceRecord]:
        with self._lock:
            return list(self._services)

    @property
    def customers(self) -> list[Customer]:
        with self._lock:
            return list(self._customers)

    def get_service(self, service_id: str) -> Optional[ServiceRecord]:
        with self._lock:
            return next((s for s in self._services if s.id == service_id), None)

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        with self._lock:
            return next((c for c in self._customers if c.id == customer_id), None)

    def search_services(self, term: str = "") -> list[ServiceRecord]:
        """Case-insensitive match on customer name, plate or ticket id."""
        term = (term or "").strip().lower()
        services = self.services
        if not term:
            return services
        return [
            s for s in services
            if term in s.customer_name.lower() or term in s.plate.lower() or term in s.id.lower()
        ]

    def search_customers(self, term: str = "") -> list[Customer]:
        term = (term or "").strip().lower()
        customers = self.customers
        if not term:
            return customers
        return [c for c in customers if term in c.name.lower() or term in c.plate.lower()]

    def services_for_customer(self, customer_id: str) -> list[ServiceRecord]:
        return [s for s in self.services if s.customer_id == customer_id]

    # ── Service mutations ─────────────────────────────────────────────────
    def add_service(self, intake: ServiceCreate) -> ServiceRecord:
        """
        Insert a new ticket at the head of the collection and credit it to a
        customer (created on first sight). A ticket taken in as DEBT flags
        its customer. Both slots are rewritten.
        """
        if not (intake.plate or "").strip() or not (intake.customer_name or "").strip():
            raise LedgerError("Plate and customer name are required")

        with self._lock:
            if intake.id and any(s.id == intake.id for s in self._services):
                raise LedgerError(f"Ticket {intake.id} already exists")

            record = ServiceRecord(
                **intake.model_dump(exclude={"id", "entry_time"}),
                id=intake.id or self._new_service_id(),
                entry_time=intake.entry_time or display_time(self._clock()),
            )
            attribution = attribute_service(self._customers, record, self._new_customer_id)
            record = record.model_copy(update={"customer_id": attribution.customer.id})

            self._services = [record, *self._services]
            self._customers = attribution.customers
            if record.status == ServiceStatus.DEBT:
                self._refresh_debt(record.customer_id)
            self._save_services()
            self._save_customers()

        logger.info(
            f"[LEDGER] Ticket {record.id} added: {record.plate} {record.service_type.value} "
            f"{record.price:.2f} → {record.customer_id}"
        )
        return record

    def remove_service(self, service_id: str) -> bool:
        """Delete a ticket. Customer aggregates are left exactly as they are."""
        with self._lock:
            remaining = [s for s in self._services if s.id != service_id]
            if len(remaining) == len(self._services):
                logger.debug(f"[LEDGER] remove_service: {service_id} not found")
                return False
            self._services = remaining
            self._save_services()
        logger.info(f"[LEDGER] Ticket {service_id} removed")
        return True

    def update_service(self, service_id: str, changes: ServiceUpdate) -> Optional[ServiceRecord]:
        """
        Edit a ticket in place. This is not a new visit: attribution does not
        run and total_visits is untouched. A price change moves the owning
        customer's total_spent by the difference.
        """
        data = {
            k: v for k, v in changes.model_dump(exclude_unset=True).items()
            if v is not None or k in _NULLABLE_FIELDS
        }
        with self._lock:
            current = self.get_service(service_id)
            if current is None:
                return None
            updated = ServiceRecord.model_validate({**current.model_dump(), **data})
            if updated.status == ServiceStatus.DELIVERED and current.status != ServiceStatus.DELIVERED:
                updated = self._stamp_exit(updated)

            customers_changed = False
            delta = updated.price - current.price
            if delta and updated.customer_id:
                customers_changed = self._replace_customer(
                    updated.customer_id,
                    lambda c: {"total_spent": c.total_spent + delta},
                )

            self._replace_service(updated)
            if updated.status != current.status:
                customers_changed = self._refresh_debt(updated.customer_id) or customers_changed

            self._save_services()
            if customers_changed:
                self._save_customers()

        logger.info(f"[LEDGER] Ticket {service_id} edited: {sorted(data)}")
        return updated

    def set_status(self, service_id: str, status: ServiceStatus) -> Optional[ServiceRecord]:
        """Overwrite the status with any value, bypassing the guided workflow."""
        with self._lock:
            current = self.get_service(service_id)
            if current is None:
                return None
            return self._change_status(current, ServiceStatus(status))

    def start(self, service_id: str) -> Optional[ServiceRecord]:
        return self._transition(service_id, "start")

    def finish(self, service_id: str) -> Optional[ServiceRecord]:
        return self._transition(service_id, "finish")

    def deliver(self, service_id: str) -> Optional[ServiceRecord]:
        return self._transition(service_id, "deliver")

    # ── Customer mutations ────────────────────────────────────────────────
    def add_customer(self, intake: CustomerCreate) -> Customer:
        with self._lock:
            if intake.id and any(c.id == intake.id for c in self._customers):
                raise LedgerError(f"Customer {intake.id} already exists")
            customer = Customer(
                **intake.model_dump(exclude={"id"}),
                id=intake.id or self._new_customer_id(),
            )
            self._customers = [customer, *self._customers]
            self._save_customers()
        logger.info(f"[LEDGER] Customer {customer.id} added: {customer.name}")
        return customer

    def remove_customer(self, customer_id: str) -> bool:
        """Delete a customer record. Their tickets stay."""
        with self._lock:
            remaining = [c for c in self._customers if c.id != customer_id]
            if len(remaining) == len(self._customers):
                return False
            self._customers = remaining
            self._save_customers()
        logger.info(f"[LEDGER] Customer {customer_id} removed")
        return True

    # ── Internals (call with the lock held) ───────────────────────────────
    def _transition(self, service_id: str, action: str) -> Optional[ServiceRecord]:
        source, target = TRANSITIONS[action]
        with self._lock:
            current = self.get_service(service_id)
            if current is None:
                return None
            if current.status != source:
                raise TransitionError(
                    f"Cannot {action} ticket {service_id}: status is {current.status.value}, "
                    f"expected {source.value}"
                )
            return self._change_status(current, target)

    def _change_status(self, current: ServiceRecord, status: ServiceStatus) -> ServiceRecord:
        updated = current.model_copy(update={"status": status})
        if status == ServiceStatus.DELIVERED and current.status != ServiceStatus.DELIVERED:
            updated = self._stamp_exit(updated)
        self._replace_service(updated)
        self._save_services()
        if self._refresh_debt(updated.customer_id):
            self._save_customers()
        logger.info(f"[LEDGER] Ticket {current.id}: {current.status.value} → {status.value}")
        return updated

    def _stamp_exit(self, record: ServiceRecord) -> ServiceRecord:
        return record.model_copy(update={"exit_time": display_time(self._clock())})

    def _replace_service(self, record: ServiceRecord) -> None:
        self._services = [record if s.id == record.id else s for s in self._services]

    def _replace_customer(self, customer_id: str, change: Callable[[Customer], dict]) -> bool:
        customer = self.get_customer(customer_id)
        if customer is None:
            return False
        updated = customer.model_copy(update=change(customer))
        if updated == customer:
            return False
        self._customers = [updated if c.id == customer_id else c for c in self._customers]
        return True

    def _refresh_debt(self, customer_id: Optional[str]) -> bool:
        """has_debt follows whether any of the customer's tickets is in DEBT."""
        if not customer_id:
            return False
        owes = any(s.customer_id == customer_id and s.status == ServiceStatus.DEBT for s in self._services)
        return self._replace_customer(customer_id, lambda c: {"has_debt": owes})

    def _new_service_id(self) -> str:
        while True:
            candidate = f"TKT-{uuid.uuid4().hex[:6].upper()}"
            if all(s.id != candidate for s in self._services):
                return candidate

    def _new_customer_id(self) -> str:
        while True:
            candidate = f"C-{uuid.uuid4().hex[:8]}"
            if all(c.id != candidate for c in self._customers):
                return candidate

    def _save_services(self) -> None:
        save_collection(self._gateway, SERVICES_SLOT, self._services)

    def _save_customers(self) -> None:
        save_collection(self._gateway, CUSTOMERS_SLOT, self._customers)
