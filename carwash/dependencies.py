# carwash/dependencies.py
"""FastAPI dependencies for the per-process stores created at startup."""

from fastapi import Request
from carwash.services.inbox import InboxStore
from carwash.services.ledger import LedgerStore


def get_ledger(request: Request) -> LedgerStore:
    return request.app.state.ledger


def get_inbox(request: Request) -> InboxStore:
    return request.app.state.inbox
