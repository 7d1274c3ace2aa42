from dealership.core.database import Base
from dealership.models.user import Role, UserAccount, user_roles
from dealership.models.dealer import Dealer
from dealership.models.customer import Customer
from dealership.models.feedback import Feedback
from dealership.models.vehicle import VehicleModel, VehicleSerial, VehicleVariant
from dealership.models.order import Confirmation, Order, OrderDetail
from dealership.models.payment import InstallmentPlan, InstallmentStatus, Payment
from dealership.models.promotion import DealerPromotion, Promotion
from dealership.models.schedule import TestDriveSchedule

__all__ = [
    "Base",
    "Confirmation",
    "Customer",
    "Dealer",
    "DealerPromotion",
    "Feedback",
    "InstallmentPlan",
    "InstallmentStatus",
    "Order",
    "OrderDetail",
    "Payment",
    "Promotion",
    "Role",
    "TestDriveSchedule",
    "UserAccount",
    "VehicleModel",
    "VehicleSerial",
    "VehicleVariant",
    "user_roles",
]
