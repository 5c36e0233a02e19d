"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from finance_tracker.config import settings
from finance_tracker.domain.models import DebtStatus, Frequency, Status, TransactionType
from finance_tracker.utils.date_utils import as_calendar_date


class CalendarDateModel(BaseModel):
    """Reads date fields as calendar dates, dropping any time-of-day or offset"""

    @field_validator("date", "due_date", "start_date", mode="before", check_fields=False)
    @classmethod
    def strip_time(cls, v):
        if v is None or isinstance(v, date):
            return v
        try:
            return as_calendar_date(v)
        except (TypeError, ValueError):
            return v  # Let pydantic report the invalid value


class MemberCreate(BaseModel):
    """Request body for POST /v1/members"""

    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")


class MemberResponse(BaseModel):
    member_id: str
    name: str
    email: str


class CategoryResponse(BaseModel):
    category_id: str
    name: str
    type: TransactionType


class RecurringCreate(CalendarDateModel):
    """Fields shared by revenue and expense creation"""

    member_id: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    value: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    category_id: str = Field(..., min_length=1)
    is_recurrent: bool = False
    frequency: Optional[Frequency] = None
    repetitions: Optional[int] = Field(
        default=None,
        ge=1,
        le=settings.max_repetitions,
        description="Occurrences to generate (recurrent records only)",
    )

    @model_validator(mode="after")
    def apply_recurrence_defaults(self):
        """Recurrent records default to monthly with the configured repetitions"""
        if self.is_recurrent:
            if self.frequency is None:
                self.frequency = Frequency.MONTHLY
            if self.repetitions is None:
                self.repetitions = settings.default_repetitions
        else:
            self.repetitions = 1
        return self


class RevenueCreate(RecurringCreate):
    """Request body for POST /v1/revenues"""

    date: date


class ExpenseCreate(RecurringCreate):
    """Request body for POST /v1/expenses"""

    due_date: date
    payment_method: str = Field(default="PIX", min_length=1)


class RevenueSchema(BaseModel):
    id: str
    member_id: str
    description: str
    value: Decimal
    date: date
    category_id: str
    status: Status
    is_recurrent: bool
    frequency: Optional[Frequency] = None


class ExpenseSchema(BaseModel):
    id: str
    member_id: str
    description: str
    value: Decimal
    due_date: date
    category_id: str
    payment_method: str
    status: Status
    is_recurrent: bool
    frequency: Optional[Frequency] = None


class RevenueBatchResponse(BaseModel):
    """Response for POST /v1/revenues"""

    revenues: List[RevenueSchema]


class ExpenseBatchResponse(BaseModel):
    """Response for POST /v1/expenses"""

    expenses: List[ExpenseSchema]


class DebtCreate(CalendarDateModel):
    """Request body for POST /v1/debts"""

    member_id: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    total_value: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    start_date: date
    frequency: Frequency = Frequency.MONTHLY
    installments_count: int = Field(..., ge=1, le=settings.max_installments)
    category_id: Optional[str] = None


class InstallmentSchema(BaseModel):
    """Single installment in a debt schedule"""

    installment_id: str
    installment_number: int
    value: Decimal
    due_date: date
    status: Status


class DebtResponse(BaseModel):
    """Response for debt endpoints"""

    debt_id: str
    member_id: str
    description: str
    total_value: Decimal
    start_date: date
    frequency: Frequency
    installments_count: int
    installment_value: Decimal
    status: DebtStatus
    category_id: Optional[str] = None
    installments: List[InstallmentSchema]


class DebtListResponse(BaseModel):
    member_id: str
    debts: List[DebtResponse]


class InstallmentStatusUpdate(BaseModel):
    """Request body for PATCH /v1/installments/{installment_id}"""

    status: Status


class InstallmentStatusResponse(BaseModel):
    installment: InstallmentSchema
    debt_id: str
    debt_status: DebtStatus


class StatementEntrySchema(BaseModel):
    id: str
    type: TransactionType
    description: str
    value: Decimal
    date: date
    status: Status
    category_id: Optional[str] = None


class SummaryResponse(BaseModel):
    """Response for GET /v1/summary"""

    member_id: str
    year: int
    month: int
    total_revenue: Decimal
    received_revenue: Decimal
    total_expense: Decimal
    total_paid: Decimal
    final_balance: Decimal
    recent: List[StatementEntrySchema]


class StatementResponse(BaseModel):
    """Response for GET /v1/statement"""

    member_id: str
    entries: List[StatementEntrySchema]
