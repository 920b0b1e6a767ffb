# carwash/services/attribution.py
"""
Customer attribution: every new ticket credits exactly one customer.

Resolution order:
  1. explicit customer_id chosen at intake (if it exists)
  2. first customer whose name OR plate matches the ticket
  3. otherwise a brand new customer (1 visit, price spent, no debt)

A match on only one of name/plate may be two different people sharing a
name (or a car changing hands), so it is logged for manual review.
"""

from dataclasses import dataclass
from typing import Callable, Optional
from carwash.schemas.customer import Customer
from carwash.schemas.service import ServiceRecord
from carwash.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Attribution:
    customers: list[Customer]   # new collection, same order as before
    customer: Customer          # the created or updated record
    created: bool


def find_match(customers: list[Customer], service: ServiceRecord) -> Optional[Customer]:
    if service.customer_id:
        for c in customers:
            if c.id == service.customer_id:
                return c
        logger.warning(f"[ATTRIBUTION] Unknown customer_id {service.customer_id} on {service.id}, matching by name/plate")

    for c in customers:
        if c.name == service.customer_name or c.plate == service.plate:
            if c.name != service.customer_name or c.plate != service.plate:
                logger.warning(
                    f"[ATTRIBUTION] Possible merge: ticket {service.id} "
                    f"({service.customer_name}, {service.plate}) credited to "
                    f"{c.id} ({c.name}, {c.plate})"
                )
            return c
    return None


def attribute_service(
    customers: list[Customer],
    service: ServiceRecord,
    new_customer_id: Callable[[], str],
) -> Attribution:
    existing = find_match(customers, service)

    if existing is None:
        customer = Customer(
            id=new_customer_id(),
            name=service.customer_name,
            phone=service.phone,
            plate=service.plate,
            total_visits=1,
            total_spent=service.price,
            has_debt=False,
        )
        logger.info(f"[ATTRIBUTION] New customer {customer.id} ({customer.name}, {customer.plate})")
        return Attribution(customers=[*customers, customer], customer=customer, created=True)

    customer = existing.model_copy(update={
        "total_visits": existing.total_visits + 1,
        "total_spent": existing.total_spent + service.price,
    })
    updated = [customer if c.id == existing.id else c for c in customers]
    logger.info(f"[ATTRIBUTION] {customer.id}: visits={customer.total_visits} spent={customer.total_spent:.2f}")
    return Attribution(customers=updated, customer=customer, created=False)
