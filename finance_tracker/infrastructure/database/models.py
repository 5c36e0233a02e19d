"""SQLAlchemy ORM models for members, transactions, debts and installments"""

import uuid
from sqlalchemy import Column, String, Boolean, Date, DateTime, Integer, Numeric, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(14, 2, asdecimal=True)


def _new_id() -> str:
    return str(uuid.uuid4())


class MemberRecord(Base):
    """Family member profile"""

    __tablename__ = "member"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CategoryRecord(Base):
    """Revenue or expense category"""

    __tablename__ = "category"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    type = Column(String(16), nullable=False)


class RevenueRecord(Base):
    """Single revenue occurrence (recurrent occurrences are independent rows)"""

    __tablename__ = "revenue"

    id = Column(String(36), primary_key=True, default=_new_id)
    member_id = Column(String(36), ForeignKey("member.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    value = Column(Money, nullable=False)
    date = Column(Date, nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("category.id"), nullable=False)
    status = Column(String(16), nullable=False, default="PENDING")
    is_recurrent = Column(Boolean, nullable=False, default=False)
    frequency = Column(String(16), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ExpenseRecord(Base):
    """Single expense occurrence (recurrent occurrences are independent rows)"""

    __tablename__ = "expense"

    id = Column(String(36), primary_key=True, default=_new_id)
    member_id = Column(String(36), ForeignKey("member.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    value = Column(Money, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("category.id"), nullable=False)
    payment_method = Column(Text, nullable=False, default="PIX")
    status = Column(String(16), nullable=False, default="PENDING")
    is_recurrent = Column(Boolean, nullable=False, default=False)
    frequency = Column(String(16), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DebtRecord(Base):
    """Installment plan owning its installments"""

    __tablename__ = "debt"

    id = Column(String(36), primary_key=True, default=_new_id)
    member_id = Column(String(36), ForeignKey("member.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    total_value = Column(Money, nullable=False)
    start_date = Column(Date, nullable=False)
    frequency = Column(String(16), nullable=False)
    installments_count = Column(Integer, nullable=False)
    installment_value = Column(Money, nullable=False)
    status = Column(String(16), nullable=False, default="ACTIVE")
    category_id = Column(String(36), ForeignKey("category.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    installments = relationship(
        "InstallmentRecord",
        back_populates="debt",
        cascade="all, delete-orphan",
        order_by="InstallmentRecord.installment_number",
    )


class InstallmentRecord(Base):
    """Individual installment within a debt"""

    __tablename__ = "installment"
    __table_args__ = (UniqueConstraint("debt_id", "installment_number", name="uq_installment_debt_number"),)

    id = Column(String(36), primary_key=True)
    debt_id = Column(String(36), ForeignKey("debt.id", ondelete="CASCADE"), nullable=False, index=True)
    installment_number = Column(Integer, nullable=False)
    value = Column(Money, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    status = Column(String(16), nullable=False, default="PENDING")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    debt = relationship("DebtRecord", back_populates="installments")
