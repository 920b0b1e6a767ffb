# carwash/schemas/service.py
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field
from pydantic.alias_generators import to_camel


class ServiceStatus(str, Enum):
    WAITING = "WAITING"
    IN_PROCESS = "IN_PROCESS"
    READY = "READY"
    DELIVERED = "DELIVERED"
    DEBT = "DEBT"
    CANCELLED = "CANCELLED"


# Labels shown to customers (receipts, chat context)
STATUS_LABELS = {
    ServiceStatus.WAITING: "En Espera",
    ServiceStatus.IN_PROCESS: "En Proceso",
    ServiceStatus.READY: "Listo",
    ServiceStatus.DELIVERED: "Entregado",
    ServiceStatus.DEBT: "Debe",
    ServiceStatus.CANCELLED: "Cancelado",
}


class ServiceType(str, Enum):
    BASIC = "Lavado Básico"
    PREMIUM = "Lavado Premium"
    WAX = "Encerado"
    DETAIL = "Detailing Interior"
    FULL = "Paquete Completo"


def _normalize_plate(value: str) -> str:
    value = value.strip().upper()
    if not value:
        raise ValueError("plate is required")
    return value


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("value is required")
    return value


Plate = Annotated[str, AfterValidator(_normalize_plate)]
OptionalPlate = Annotated[str, AfterValidator(lambda value: value.strip().upper())]
RequiredText = Annotated[str, AfterValidator(_require_text)]


class ServiceRecord(BaseModel):
    """One vehicle's visit through the wash workflow (a ticket)."""

    id: str
    plate: Plate
    customer_name: str
    phone: str = ""
    service_type: ServiceType
    price: float = Field(ge=0)
    status: ServiceStatus = ServiceStatus.WAITING
    entry_time: str
    exit_time: Optional[str] = None
    notes: Optional[str] = None
    customer_id: Optional[str] = None   # set on attribution

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ServiceCreate(BaseModel):
    """Intake form. Id and entry time are generated when omitted."""

    id: Optional[str] = None
    plate: Plate
    customer_name: RequiredText
    phone: str = ""
    service_type: ServiceType = ServiceType.BASIC
    price: float = Field(ge=0)
    status: ServiceStatus = ServiceStatus.WAITING
    entry_time: Optional[str] = None
    notes: Optional[str] = None
    customer_id: Optional[str] = None   # explicit customer chosen at intake

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ServiceUpdate(BaseModel):
    """Edit form — only the fields that are sent get changed."""

    plate: Optional[Plate] = None
    customer_name: Optional[RequiredText] = None
    phone: Optional[str] = None
    service_type: Optional[ServiceType] = None
    price: Optional[float] = Field(default=None, ge=0)
    status: Optional[ServiceStatus] = None
    notes: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class StatusUpdate(BaseModel):
    status: ServiceStatus


class WhatsAppLinkOut(BaseModel):
    phone: str
    url: str
