import enum

from sqlalchemy import Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from dealership.core.database import Base

METHOD_FULL_TRANSFER = "TT"


class InstallmentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    # one payment per order is checked by the service, there is no unique index
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), nullable=False, index=True)
    method: Mapped[str] = mapped_column(String(16), default=METHOD_FULL_TRANSFER, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    payment_date: Mapped[str] = mapped_column(String(19), nullable=False)


class InstallmentPlan(Base):
    __tablename__ = "installment_plans"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    payment_id: Mapped[int] = mapped_column(ForeignKey("payments.id", ondelete="CASCADE"), nullable=False)
    interest_rate: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    term_month: Mapped[int] = mapped_column(Integer, default=12, nullable=False)
    monthly_pay: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[InstallmentStatus] = mapped_column(
        Enum(InstallmentStatus), default=InstallmentStatus.ACTIVE, nullable=False
    )
