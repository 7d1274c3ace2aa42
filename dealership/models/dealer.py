from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from dealership.core.database import Base


class Dealer(Base):
    __tablename__ = "dealers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    dealer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
