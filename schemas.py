"""
Request/record schemas validated at the API boundary.

The same record types describe the JSON snapshots stored on DailyReport.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InventoryLine(BaseModel):
    model_config = ConfigDict(extra='forbid')

    item_id: int
    quantity: int = Field(ge=0)


class ProductLine(BaseModel):
    model_config = ConfigDict(extra='forbid')

    product_id: int
    quantity: int = Field(ge=0)


class BalanceEntry(BaseModel):
    """Closing amount for one payment method (cash, momo, card, ...)."""
    model_config = ConfigDict(extra='forbid')

    method: str = Field(min_length=1, max_length=30)
    amount: int


class DayCloseRequest(BaseModel):
    model_config = ConfigDict(extra='forbid')

    report_date: date
    checked_in_count: int = Field(ge=0)
    new_patients_count: int = Field(ge=0)
    total_payments: int = Field(ge=0)
    total_expenses: int = Field(ge=0)
    balances: list[BalanceEntry] = Field(default_factory=list)
    inventory_used: list[InventoryLine] = Field(default_factory=list)
    products_sold: list[ProductLine] = Field(default_factory=list)
    additional_note: Optional[str] = Field(default=None, max_length=2000)

    @field_validator('additional_note')
    @classmethod
    def blank_note_is_none(cls, value):
        if value is not None and not value.strip():
            return None
        return value


class PatientCreate(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str = Field(min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=30)
    email: Optional[str] = Field(default=None, max_length=120)

    @field_validator('name')
    @classmethod
    def strip_name(cls, value):
        value = value.strip()
        if not value:
            raise ValueError('Name is required')
        return value
