"""Catalog service - product/service CRUD and catalog reads for the POS."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from salon_pos.exceptions import BusinessLogicError, NotFoundError
from salon_pos.models import Product
from salon_pos.services.cache_service import get_cache
from salon_pos.services.sale_session import CatalogItem

logger = logging.getLogger(__name__)

CATALOG_MODULE = 'catalog'

_OPTIONAL_TEXT_FIELDS = ('description', 'sku', 'barcode', 'category', 'icon', 'supplier')


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def _parse_product_fields(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Validate and coerce product input. Returns the fields to set."""
    fields: Dict[str, Any] = {}

    if not partial or 'name' in data:
        name = (data.get('name') or '').strip()
        if not name:
            raise BusinessLogicError('Name and Price are required')
        fields['name'] = name

    if not partial or 'price' in data:
        try:
            price = Decimal(str(data.get('price')))
        except (InvalidOperation, ValueError, TypeError):
            raise BusinessLogicError('Name and Price are required')
        if price < 0:
            raise BusinessLogicError('Price cannot be negative')
        fields['price'] = price.quantize(Decimal('0.01'))

    if not partial or 'cost' in data:
        try:
            fields['cost'] = Decimal(str(data.get('cost') or 0)).quantize(Decimal('0.01'))
        except (InvalidOperation, ValueError):
            fields['cost'] = Decimal('0.00')

    if not partial or 'stock_quantity' in data:
        try:
            fields['stock_quantity'] = int(data.get('stock_quantity') or 0)
        except (ValueError, TypeError):
            fields['stock_quantity'] = 0

    if not partial or 'low_stock_threshold' in data:
        default_threshold = current_app.config.get('LOW_STOCK_THRESHOLD', 10)
        try:
            fields['low_stock_threshold'] = int(data.get('low_stock_threshold', default_threshold))
        except (ValueError, TypeError):
            raise BusinessLogicError('Low stock threshold must be a whole number')

    if not partial or 'track_inventory' in data:
        fields['track_inventory'] = _to_bool(data.get('track_inventory', True))
    if not partial or 'is_service' in data:
        fields['is_service'] = _to_bool(data.get('is_service', False))

    for key in _OPTIONAL_TEXT_FIELDS:
        if not partial or key in data:
            fields[key] = (data.get(key) or '').strip() or None

    return fields


def invalidate_catalog_cache(user_id: str) -> None:
    """Drop cached catalog reads for an account."""
    get_cache().invalidate_module(user_id, CATALOG_MODULE)


def list_products(session: Session, user_id: str, services_only: bool = False) -> List[Product]:
    """All products of an account ordered by name."""
    query = session.query(Product).filter(Product.user_id == user_id)
    if services_only:
        query = query.filter(Product.is_service.is_(True))
    return query.order_by(Product.name).all()


def get_catalog(session: Session, user_id: str) -> List[Dict[str, Any]]:
    """Catalog as plain dicts, cached per account."""
    ttl = current_app.config.get('CACHE_CATALOG_TTL', 60)
    return get_cache().memoize(
        user_id, CATALOG_MODULE, 'all',
        lambda: [p.to_dict() for p in list_products(session, user_id)],
        ttl=ttl
    )


def filter_products(products: List[Dict[str, Any]], query: str) -> List[Dict[str, Any]]:
    """Case-insensitive substring match on name, sku or barcode."""
    query = (query or '').strip().lower()
    if not query:
        return list(products)
    return [
        p for p in products
        if query in (p.get('name') or '').lower()
        or query in (p.get('sku') or '').lower()
        or query in (p.get('barcode') or '').lower()
    ]


def find_by_code(session: Session, user_id: str, code: str) -> Optional[Product]:
    """Exact barcode or SKU lookup (what a scanner sends)."""
    code = str(code or '').strip()
    if not code:
        return None
    return session.query(Product).filter(
        Product.user_id == user_id,
        or_(
            func.lower(Product.barcode) == code.lower(),
            func.lower(Product.sku) == code.lower()
        )
    ).first()


def get_product(session: Session, user_id: str, product_id: int) -> Product:
    product = session.query(Product).filter(
        Product.id == product_id,
        Product.user_id == user_id
    ).first()
    if not product:
        raise NotFoundError('Product not found')
    return product


def get_catalog_item(session: Session, user_id: str, product_id: int) -> CatalogItem:
    """Snapshot of one product for the cart."""
    return CatalogItem.from_product(get_product(session, user_id, product_id))


def low_stock_products(session: Session, user_id: str) -> List[Product]:
    return session.query(Product).filter(
        Product.user_id == user_id,
        Product.track_inventory.is_(True),
        Product.stock_quantity <= Product.low_stock_threshold
    ).order_by(Product.stock_quantity, Product.name).all()


def create_product(session: Session, user_id: str, data: Dict[str, Any]) -> Product:
    product = Product(user_id=user_id, **_parse_product_fields(data))
    session.add(product)
    session.commit()
    invalidate_catalog_cache(user_id)
    logger.info(f"Product created: {product.id} ({product.name})")
    return product


def update_product(session: Session, user_id: str, product_id: int, data: Dict[str, Any]) -> Product:
    product = get_product(session, user_id, product_id)
    for key, value in _parse_product_fields(data, partial=True).items():
        setattr(product, key, value)
    session.commit()
    invalidate_catalog_cache(user_id)
    return product


def delete_product(session: Session, user_id: str, product_id: int) -> None:
    product = get_product(session, user_id, product_id)
    session.delete(product)
    session.commit()
    invalidate_catalog_cache(user_id)
    logger.info(f"Product deleted: {product_id}")
