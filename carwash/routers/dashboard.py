# carwash/routers/dashboard.py
"""Live KPIs, charts and the AI daily report."""

from fastapi import APIRouter, Depends
from carwash.dependencies import get_inbox, get_ledger
from carwash.schemas.dashboard import HourlyBucket, MetricsSnapshot, ReportOut, ServiceTypeCount
from carwash.services.assistant import generate_daily_report
from carwash.services.inbox import InboxStore
from carwash.services.ledger import LedgerStore
from carwash.services.metrics import compute_metrics, service_distribution
from carwash.services.time_parser import hourly_traffic
from carwash.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/dashboard/metrics", response_model=MetricsSnapshot, summary="Cars in process, ready, revenue, debts")
def get_metrics(ledger: LedgerStore = Depends(get_ledger)):
    return compute_metrics(ledger.services)


@router.get("/dashboard/traffic", response_model=list[HourlyBucket], summary="Cars per entry hour (8AM-8PM)")
def get_traffic(ledger: LedgerStore = Depends(get_ledger)):
    return hourly_traffic(ledger.services)


@router.get("/dashboard/distribution", response_model=list[ServiceTypeCount], summary="Tickets per service type")
def get_distribution(ledger: LedgerStore = Depends(get_ledger)):
    return service_distribution(ledger.services)


@router.post("/dashboard/report", response_model=ReportOut, summary="Generate the daily operations report")
async def create_report(ledger: LedgerStore = Depends(get_ledger)):
    services = ledger.services
    report = await generate_daily_report(compute_metrics(services), services)
    return ReportOut(report=report)


@router.post("/dashboard/reset", summary="Factory reset to sample data")
def reset_data(ledger: LedgerStore = Depends(get_ledger), inbox: InboxStore = Depends(get_inbox)):
    ledger.reset()
    inbox.reset()
    logger.warning("[RESET] Ledger and inbox restored to sample data")
    return {"status": "reset"}
