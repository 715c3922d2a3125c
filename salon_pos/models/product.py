"""Product model (sellable products and services)."""
from sqlalchemy import Column, BigInteger, String, Text, Boolean, Integer, Numeric, DateTime
from sqlalchemy.sql import func
from salon_pos.database import Base, BigIntPK


class Product(Base):
    """Catalog item. Services are products with ``is_service`` set."""

    __tablename__ = 'product'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    sku = Column(String(100), nullable=True)
    barcode = Column(String(100), nullable=True)
    category = Column(String(120), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    cost = Column(Numeric(10, 2), nullable=False, default=0)
    stock_quantity = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=10)
    track_inventory = Column(Boolean, nullable=False, default=True)
    is_service = Column(Boolean, nullable=False, default=False)
    icon = Column(String(16), nullable=True)
    supplier = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', sku='{self.sku}')>"

    @property
    def is_low_stock(self) -> bool:
        """Tracked products at or below their threshold."""
        return bool(self.track_inventory) and self.stock_quantity <= self.low_stock_threshold

    def to_dict(self):
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'sku': self.sku,
            'barcode': self.barcode,
            'category': self.category,
            'price': str(self.price),
            'cost': str(self.cost if self.cost is not None else 0),
            'stock_quantity': self.stock_quantity,
            'low_stock_threshold': self.low_stock_threshold,
            'track_inventory': self.track_inventory,
            'is_service': self.is_service,
            'icon': self.icon,
            'supplier': self.supplier,
            'is_low_stock': self.is_low_stock,
        }
