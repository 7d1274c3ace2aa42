from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.models import Customer


@dataclass(frozen=True)
class CustomerFilter:
    dealer_id: Optional[int] = None
    name_contains: Optional[str] = None

    def clauses(self) -> List[ColumnElement[bool]]:
        out: List[ColumnElement[bool]] = []
        if self.dealer_id is not None:
            out.append(Customer.dealer_id == self.dealer_id)
        if self.name_contains:
            out.append(func.lower(Customer.name).contains(self.name_contains.strip().lower(), autoescape=True))
        return out


async def get_customer(db: AsyncSession, customer_id: int) -> Optional[Customer]:
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    return result.scalar_one_or_none()


async def list_customers(db: AsyncSession, flt: CustomerFilter = CustomerFilter()) -> List[Customer]:
    result = await db.execute(select(Customer).where(*flt.clauses()).order_by(Customer.id))
    return list(result.scalars().all())
