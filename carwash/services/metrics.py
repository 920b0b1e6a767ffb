# carwash/services/metrics.py
"""
Live dashboard KPIs, recomputed from the service collection on every read.
No caching and no date window: the store is treated as one working day.
"""

from typing import Iterable
from carwash.schemas.dashboard import MetricsSnapshot, ServiceTypeCount
from carwash.schemas.service import ServiceRecord, ServiceStatus

IN_PROCESS_STATES = {ServiceStatus.IN_PROCESS, ServiceStatus.WAITING}
# READY counts as revenue even before the customer pays
REVENUE_STATES = {ServiceStatus.DELIVERED, ServiceStatus.READY}


def compute_metrics(services: Iterable[ServiceRecord]) -> MetricsSnapshot:
    in_process = ready = debt = 0
    revenue = 0.0
    for s in services:
        if s.status in IN_PROCESS_STATES:
            in_process += 1
        elif s.status == ServiceStatus.READY:
            ready += 1
        elif s.status == ServiceStatus.DEBT:
            debt += 1
        if s.status in REVENUE_STATES:
            revenue += s.price

    return MetricsSnapshot(
        cars_in_process=in_process,
        cars_ready=ready,
        revenue_today=revenue,
        debt_count=debt,
    )


def service_distribution(services: Iterable[ServiceRecord]) -> list[ServiceTypeCount]:
    """Tickets per service type, in first-seen order."""
    counts: dict[str, int] = {}
    for s in services:
        name = s.service_type.value
        counts[name] = counts.get(name, 0) + 1
    return [ServiceTypeCount(name=name, value=value) for name, value in counts.items()]
