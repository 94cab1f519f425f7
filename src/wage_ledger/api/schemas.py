"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Attendance schemas
# ============================================================================


class AttendanceResponse(BaseModel):
    """Schema for an attendance record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    labour_id: int
    project_id: int
    attendance_date: date
    worked_hours: Decimal
    wage_type: str
    status: str


class UnprocessedAttendanceResponse(BaseModel):
    """Schema for attendance without a wage record."""

    attendance: list[AttendanceResponse]


# ============================================================================
# Wage schemas
# ============================================================================


class WageItem(BaseModel):
    """One attendance record to generate a wage for."""

    attendance_id: int
    wage_type: str | None = None
    rate: Decimal | None = Field(default=None, gt=0)


class GenerateWagesRequest(BaseModel):
    """Schema for a wage generation batch."""

    wage_data: list[WageItem] = Field(min_length=1)


class WageResponse(BaseModel):
    """Schema for a wage record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    attendance_id: int
    labour_id: int
    project_id: int
    wage_type: str
    rate: Decimal
    worked_hours: Decimal
    total_amount: Decimal
    status: str
    approved_by: int | None = None
    approved_at: datetime | None = None
    created_at: datetime


class ItemFailureResponse(BaseModel):
    """Why an attendance record produced no wage."""

    model_config = ConfigDict(from_attributes=True)

    attendance_id: int
    code: str
    detail: str


class GenerateWagesResponse(BaseModel):
    """Schema for a wage generation result."""

    wages: list[WageResponse]
    failed: list[ItemFailureResponse]


class WageHistoryResponse(BaseModel):
    """Schema for listing wage records."""

    wages: list[WageResponse]


class LabourEarningsResponse(BaseModel):
    """Approved and pending totals for one labourer."""

    model_config = ConfigDict(from_attributes=True)

    labour_id: int
    approved_count: int
    approved_total: Decimal
    pending_total: Decimal


class MyWagesResponse(BaseModel):
    """A labourer's own wage records and earnings."""

    wages: list[WageResponse]
    summary: LabourEarningsResponse


class ReviewRequest(BaseModel):
    """Schema for a review decision."""

    status: str


class WageReviewResponse(BaseModel):
    """Schema for a reviewed wage."""

    wage: WageResponse


class WeeklyCostItem(BaseModel):
    """Cost total for one week."""

    model_config = ConfigDict(from_attributes=True)

    week_start: date
    total_cost: Decimal


class WeeklyCostResponse(BaseModel):
    """Schema for weekly cost rollup."""

    weekly_costs: list[WeeklyCostItem]


# ============================================================================
# Ledger schemas
# ============================================================================


class LedgerEntryResponse(BaseModel):
    """Schema for a ledger row with its running total."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    date: date
    type: str
    reference_id: int
    description: str
    amount: Decimal
    running_total: Decimal
    category: str | None = None
    approved_by: int | None = None
    approved_at: datetime | None = None


class PaginationResponse(BaseModel):
    """Pagination metadata."""

    page: int
    limit: int
    total: int
    total_pages: int


class LedgerFilters(BaseModel):
    """Filters applied to a ledger query."""

    start_date: date | None = None
    end_date: date | None = None
    type: str | None = None


class LedgerResponse(BaseModel):
    """Schema for a page of the project ledger."""

    entries: list[LedgerEntryResponse]
    pagination: PaginationResponse
    filters: LedgerFilters
    opening_balance: Decimal


class AdjustmentCreate(BaseModel):
    """Schema for a manual ledger adjustment."""

    model_config = ConfigDict(populate_by_name=True)

    adjustment_date: date = Field(alias="date")
    description: str = Field(min_length=1)
    amount: Decimal | str
    category: str = "ADJUSTMENT"
    notes: str | None = None


class AdjustmentResponse(BaseModel):
    """Schema for a recorded adjustment."""

    id: int
    project_id: int
    date: date
    description: str
    amount: Decimal
    category: str
    notes: str | None = None
    created_by: int
    created_at: datetime
    ledger_entry_id: int


class LedgerSummaryResponse(BaseModel):
    """Schema for per-type ledger totals."""

    project_id: int
    start_date: date | None = None
    end_date: date | None = None
    totals: dict[str, Decimal]
    grand_total: Decimal
    entry_count: int
    balance: Decimal


# ============================================================================
# Configuration schemas
# ============================================================================


class WageRateCreate(BaseModel):
    """Schema for configuring a rate."""

    project_id: int
    skill_type: str = Field(min_length=1)
    rate: Decimal = Field(gt=0)


class WageRateUpdate(BaseModel):
    """Schema for changing a rate."""

    rate: Decimal = Field(gt=0)


class WageRateResponse(BaseModel):
    """Schema for a configured rate."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    skill_type: str
    rate: Decimal
    created_by: int | None = None
    created_at: datetime


class WageRateListResponse(BaseModel):
    """Schema for listing rates of a project."""

    wage_rates: list[WageRateResponse]


class MaterialBillResponse(BaseModel):
    """Schema for a material bill."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    category: str
    total_amount: Decimal
    status: str
    approved_by: int | None = None
    approved_at: datetime | None = None


class MaterialReviewResponse(BaseModel):
    """Schema for a reviewed material bill."""

    bill: MaterialBillResponse


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
