from typing import Optional

from dealership.schemas.common import CamelModel


class SaleRecordResponse(CamelModel):
    customer_id: int
    dealer_staff_id: int
    staff_name: str
    sale_date: str
    sale_amount: float
    order_count: int


class DealerSalesSummary(CamelModel):
    dealer_id: int
    dealer_name: str
    address: Optional[str] = None
    phone_number: Optional[str] = None
    total_sales: float
    total_orders: int


class MonthlySales(CamelModel):
    month: int
    total_sales: float
    total_orders: int
    total_cars: int


class SalesTarget(CamelModel):
    year: int
    total_cars: int
    total_orders: int
    total_sales: float
    average_monthly_sales: float
