"""Customer model."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from salon_pos.database import Base, BigIntPK


class Customer(Base):
    """Customer (client of the business)."""

    __tablename__ = 'customer'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}')>"

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'phone': self.phone, 'email': self.email}
