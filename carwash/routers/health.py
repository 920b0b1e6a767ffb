# carwash/routers/health.py
"""
System health check endpoint.
Returns status of backend + slot database + in-memory ledger sizes.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from carwash.database import get_db
from carwash.dependencies import get_inbox, get_ledger
from carwash.services.inbox import InboxStore
from carwash.services.ledger import LedgerStore
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(
    db: Session = Depends(get_db),
    ledger: LedgerStore = Depends(get_ledger),
    inbox: InboxStore = Depends(get_inbox),
):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "ledger": {
            "services": len(ledger.services),
            "customers": len(ledger.customers),
            "conversations": len(inbox.conversations),
        },
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
