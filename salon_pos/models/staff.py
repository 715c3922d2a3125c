"""Staff model."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from salon_pos.database import Base, BigIntPK


class Staff(Base):
    """Staff member who can be credited with a sale or appointment."""

    __tablename__ = 'staff'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    name = Column(String(120), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Staff(id={self.id}, name='{self.name}')>"

    def to_dict(self):
        return {'id': self.id, 'name': self.name}
