# carwash/schemas/dashboard.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class MetricsSnapshot(BaseModel):
    cars_in_process: int
    cars_ready: int
    revenue_today: float
    debt_count: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class HourlyBucket(BaseModel):
    hour: int          # 8..20
    name: str          # chart label, e.g. "2PM"
    cars: int


class ServiceTypeCount(BaseModel):
    name: str
    value: int


class ReceiptBreakdown(BaseModel):
    """Full precision; rounding is left to whoever displays it."""

    gross_total: float
    base_amount: float
    tax_amount: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ReportOut(BaseModel):
    report: str
