"""License model - gates access to the POS."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from salon_pos.database import Base, BigIntPK


class License(Base):
    """Software license bought through the hosted payment page."""

    __tablename__ = 'license'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=True, index=True)  # NULL until the key is activated
    status = Column(String(20), nullable=False, default='inactive', index=True)
    license_key = Column(String(64), nullable=True, unique=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<License(user_id='{self.user_id}', status='{self.status}')>"

    @property
    def is_active(self):
        """Check if license is active."""
        return self.status == 'active'
