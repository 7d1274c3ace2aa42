from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from dealership.core.database import Base

SCHEDULE_PENDING = "PENDING"
SCHEDULE_APPROVED = "APPROVED"


class TestDriveSchedule(Base):
    __tablename__ = "test_drive_schedules"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False)
    serial_id: Mapped[str] = mapped_column(ForeignKey("vehicle_serials.serial_id"), nullable=False)
    date: Mapped[str] = mapped_column(String(19), nullable=False)
    status: Mapped[str] = mapped_column(String(16), default=SCHEDULE_PENDING, nullable=False)
