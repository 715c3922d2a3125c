"""Shop settings model - one row per business account."""
from sqlalchemy import Column, String, Boolean, Numeric, DateTime
from sqlalchemy.sql import func
from salon_pos.database import Base, BigIntPK


class ShopSettings(Base):
    """Business-level settings read when a POS session loads."""

    __tablename__ = 'shop_settings'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True)
    shop_name = Column(String(200), nullable=False, default='')
    vat_enabled = Column(Boolean, nullable=False, default=True)
    vat_rate = Column(Numeric(5, 4), nullable=False, default=0.20)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ShopSettings(user_id='{self.user_id}', vat_enabled={self.vat_enabled})>"
