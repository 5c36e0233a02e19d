"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import ClassVar, List, Optional


class TransactionType(str, Enum):
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class Frequency(str, Enum):
    """Period unit governing date advancement"""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class Status(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class DebtStatus(str, Enum):
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


@dataclass
class Member:
    """Family member profile owning revenues, expenses and debts"""

    id: str
    name: str
    email: str


@dataclass
class Category:
    id: str
    name: str
    type: TransactionType


@dataclass
class Revenue:
    """Incoming money, optionally a recurring template"""

    anchor_field: ClassVar[str] = "date"

    id: str
    member_id: str
    description: str
    value: Decimal
    date: date
    category_id: str
    status: Status = Status.PENDING
    is_recurrent: bool = False
    frequency: Optional[Frequency] = None


@dataclass
class Expense:
    """One-off expense, optionally a recurring template"""

    anchor_field: ClassVar[str] = "due_date"

    id: str
    member_id: str
    description: str
    value: Decimal
    due_date: date
    category_id: str
    payment_method: str = "PIX"
    status: Status = Status.PENDING
    is_recurrent: bool = False
    frequency: Optional[Frequency] = None


@dataclass
class Installment:
    """Single dated payment of a debt"""

    id: str
    debt_id: str
    installment_number: int
    value: Decimal
    due_date: date
    status: Status = Status.PENDING


@dataclass
class Debt:
    """Installment plan: a total split into equal dated chunks"""

    id: str
    member_id: str
    description: str
    total_value: Decimal
    start_date: date
    frequency: Frequency
    installments_count: int
    installment_value: Decimal
    status: DebtStatus = DebtStatus.ACTIVE
    category_id: Optional[str] = None
    installments: List[Installment] = field(default_factory=list)


@dataclass
class StatementEntry:
    """Revenue, expense or installment flattened for listings"""

    id: str
    type: TransactionType
    description: str
    value: Decimal
    date: date
    status: Status
    category_id: Optional[str] = None


@dataclass
class MonthlySummary:
    """Aggregates for one member and one calendar month"""

    year: int
    month: int
    total_revenue: Decimal
    received_revenue: Decimal
    total_expense: Decimal
    total_paid: Decimal
    final_balance: Decimal
    recent: List[StatementEntry]
