# carwash/schemas/customer.py
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from carwash.schemas.service import OptionalPlate


class Customer(BaseModel):
    """Derived aggregate — created and updated by service attribution."""

    id: str
    name: str
    phone: str = ""
    plate: str = ""           # primary vehicle
    total_visits: int = 0
    total_spent: float = 0.0
    has_debt: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CustomerCreate(BaseModel):
    id: Optional[str] = None
    name: str = Field(min_length=1)
    phone: str = ""
    plate: OptionalPlate = ""   # may be blank; normalized like ticket plates
    total_visits: int = Field(default=0, ge=0)
    total_spent: float = Field(default=0.0, ge=0)
    has_debt: bool = False

    class Config:
        alias_generator = to_camel
        populate_by_name = True
