"""Transaction model - one record per completed checkout."""
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from salon_pos.database import Base, BigIntPK


class Transaction(Base):
    """
    Completed sale.

    Line items are stored denormalized in ``products`` as they were at
    checkout time (id, name, price, icon, quantity, total), so later
    catalog edits never rewrite history.
    """

    __tablename__ = 'sale_transaction'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    staff_id = Column(BigInteger, ForeignKey('staff.id', ondelete='SET NULL'), nullable=True)
    customer_id = Column(BigInteger, ForeignKey('customer.id', ondelete='SET NULL'), nullable=True)
    payment_method = Column(String(20), nullable=False, default='cash')
    products = Column(JSON, nullable=False, default=list)
    services = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(10, 2), nullable=False)
    vat = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    staff = relationship('Staff')
    customer = relationship('Customer')

    def __repr__(self):
        return f"<Transaction(id={self.id}, total={self.total}, payment_method='{self.payment_method}')>"

    def to_dict(self):
        return {
            'id': self.id,
            'staff_id': self.staff_id,
            'customer_id': self.customer_id,
            'payment_method': self.payment_method,
            'products': self.products,
            'services': self.services,
            'subtotal': str(self.subtotal),
            'vat': str(self.vat),
            'total': str(self.total),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
