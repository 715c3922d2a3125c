"""Models package - exports all SQLAlchemy models."""
from salon_pos.models.product import Product
from salon_pos.models.staff import Staff
from salon_pos.models.customer import Customer
from salon_pos.models.shop_settings import ShopSettings
from salon_pos.models.transaction import Transaction
from salon_pos.models.appointment import Appointment, AppointmentStatus
from salon_pos.models.license import License

__all__ = [
    'Product', 'Staff', 'Customer', 'ShopSettings', 'Transaction',
    'Appointment', 'AppointmentStatus', 'License',
]
