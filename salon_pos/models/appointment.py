"""Appointment model."""
from sqlalchemy import Column, BigInteger, String, Text, Integer, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from salon_pos.database import Base, BigIntPK
import enum


class AppointmentStatus(str, enum.Enum):
    """Appointment lifecycle status."""
    SCHEDULED = 'scheduled'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    NO_SHOW = 'no_show'


class Appointment(Base):
    """Booked service slot for a customer with a staff member."""

    __tablename__ = 'appointment'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    customer_id = Column(BigInteger, ForeignKey('customer.id', ondelete='CASCADE'), nullable=False)
    staff_id = Column(BigInteger, ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    service_id = Column(BigInteger, ForeignKey('product.id', ondelete='CASCADE'), nullable=False)
    appointment_date = Column(Date, nullable=False, index=True)
    appointment_time = Column(String(5), nullable=False)  # HH:MM
    duration_minutes = Column(Integer, nullable=False, default=60)
    status = Column(String(20), nullable=False, default=AppointmentStatus.SCHEDULED.value)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    customer = relationship('Customer')
    staff = relationship('Staff')
    service = relationship('Product')

    def __repr__(self):
        return f"<Appointment(id={self.id}, date={self.appointment_date}, time='{self.appointment_time}', status='{self.status}')>"

    def to_dict(self):
        return {
            'id': self.id,
            'customer_id': self.customer_id,
            'staff_id': self.staff_id,
            'service_id': self.service_id,
            'appointment_date': self.appointment_date.isoformat(),
            'appointment_time': self.appointment_time,
            'duration_minutes': self.duration_minutes,
            'status': self.status,
            'notes': self.notes,
            'customer': {'name': self.customer.name, 'phone': self.customer.phone} if self.customer else None,
            'staff': {'name': self.staff.name} if self.staff else None,
            'service': {
                'name': self.service.name,
                'price': str(self.service.price),
                'icon': self.service.icon,
            } if self.service else None,
        }
