# backend/rentcycle/schemas.py
from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .domain.lease_duration import LeaseDuration, calculate_end_date, validate_lease_dates

PaymentStatusLiteral = Literal["completed", "pending", "failed"]
RentStatusLiteral = Literal["paid", "pending", "overdue"]


# -------------------- Properties / Tenants --------------------

class PropertyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    address: Optional[str] = None
    status: Literal["occupied", "vacant", "maintenance"] = "vacant"


class PropertyOut(PropertyCreate):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class TenantCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None


class TenantOut(TenantCreate):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# -------------------- Leases --------------------

class LeaseCreate(BaseModel):
    property_id: int
    tenant_id: Optional[int] = None
    monthly_rent: float = Field(..., ge=0)
    start_date: date
    end_date: Optional[date] = None
    notes: Optional[str] = None

    # alternative to end_date: the term, e.g. 11 months or 2 years
    duration_value: Optional[int] = Field(default=None, ge=1, le=99)
    duration_unit: Literal["months", "years"] = "months"

    @model_validator(mode="after")
    def _resolve_term(self) -> "LeaseCreate":
        if self.end_date is None and self.duration_value is not None:
            self.end_date = calculate_end_date(
                self.start_date, LeaseDuration(self.duration_value, self.duration_unit)
            )

        msg = validate_lease_dates(self.start_date, self.end_date)
        if msg:
            raise ValueError(msg)
        return self

    def lease_fields(self) -> dict:
        return self.model_dump(exclude={"duration_value", "duration_unit"})


class LeaseOut(BaseModel):
    id: int
    property_id: int
    tenant_id: Optional[int] = None
    monthly_rent: float
    start_date: date
    end_date: Optional[date] = None
    is_active: bool
    notes: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class LeaseStatusOut(BaseModel):
    lease_id: Optional[int] = None
    status: Literal["active", "expiring_today", "expiring_soon", "expired"]
    message: str
    days_remaining: int = Field(..., ge=0)
    priority: int = Field(..., ge=1, le=5)


# -------------------- Payments --------------------

class PaymentCreate(BaseModel):
    lease_id: int
    payment_date: date
    payment_amount: float = Field(..., gt=0)
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    payment_type: str = "Rent"
    payment_type_details: Optional[str] = None
    status: PaymentStatusLiteral = "completed"


class PaymentOut(BaseModel):
    id: int
    lease_id: int
    payment_date: date
    payment_amount: float
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    payment_type: str
    payment_type_details: Optional[str] = None
    status: PaymentStatusLiteral
    original_payment_id: Optional[int] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# -------------------- Dashboard --------------------

class PropertyRentStatusOut(BaseModel):
    property_id: int
    name: str
    lease_id: Optional[int] = None
    monthly_rent: float
    # null for vacant properties: they are never billed
    payment_status: Optional[RentStatusLiteral] = None
    amount_due: float
    days_occupied: int
    lease_status: LeaseStatusOut


class PortfolioSummaryOut(BaseModel):
    as_of: date
    total_collected: float
    total_pending: float
    total_overdue: float
    collection_rate: float = Field(..., ge=0, le=100)
    total_properties: int
    paid_properties: int
    pending_properties: int
    overdue_properties: int
    vacant_properties: int
    monthly_rent_roll: float
