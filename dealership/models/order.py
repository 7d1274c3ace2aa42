from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from dealership.core.database import Base

STATUS_PENDING = "Pending"
STATUS_CANCELLED = "Cancelled"

AGREEMENT_PENDING = "Pending"
AGREEMENT_AGREE = "Agree"
AGREEMENT_DISAGREE = "Disagree"


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    # 0 means the order was raised by the dealer itself, not for a customer
    customer_id: Mapped[int] = mapped_column(default=0, nullable=False)
    dealer_staff_id: Mapped[int] = mapped_column(ForeignKey("user_accounts.id"), nullable=False)
    model_id: Mapped[int] = mapped_column(ForeignKey("vehicle_models.id"), nullable=False)
    order_date: Mapped[str] = mapped_column(String(19), nullable=False)
    status: Mapped[str] = mapped_column(String(32), default=STATUS_PENDING, nullable=False)
    is_custom: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class OrderDetail(Base):
    __tablename__ = "order_details"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    serial_id: Mapped[Optional[str]] = mapped_column(ForeignKey("vehicle_serials.serial_id"), nullable=True)
    # kept as text, parsed when totals are computed
    quantity: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    unit_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)


class Confirmation(Base):
    """Manual pricing gate for a custom order."""
    __tablename__ = "confirmations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    order_detail_id: Mapped[int] = mapped_column(
        ForeignKey("order_details.id", ondelete="CASCADE"), nullable=False
    )
    agreement: Mapped[str] = mapped_column(String(16), default=AGREEMENT_PENDING, nullable=False)
    date_time: Mapped[str] = mapped_column(String(19), nullable=False)
    staff_admin_id: Mapped[Optional[int]] = mapped_column(ForeignKey("user_accounts.id"), nullable=True)
