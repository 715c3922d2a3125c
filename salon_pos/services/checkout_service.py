"""
Checkout service - turns the active sale into a Transaction.

The write (transaction record + stock decrement for tracked products) is
one database transaction attempted once. On failure nothing in the sale
session changes, so the cashier can retry.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from salon_pos.exceptions import EmptySaleError, PersistenceFailure
from salon_pos.models import Product, Transaction
from salon_pos.services.catalog_service import invalidate_catalog_cache
from salon_pos.services.sale_session import DEFAULT_VAT_RATE, SaleSessionManager

logger = logging.getLogger(__name__)


def _transaction_lines(manager: SaleSessionManager) -> List[Dict[str, Any]]:
    """Line items as stored on the transaction record."""
    return [
        {
            'id': line.item_id,
            'name': line.name,
            'price': str(line.price),
            'icon': line.icon,
            'quantity': line.quantity,
            'total': str(line.line_total),
        }
        for line in manager.active.items
    ]


def _decrement_stock(session: Session, user_id: str, manager: SaleSessionManager) -> None:
    """Lock tracked product rows and take the sold quantities off."""
    sold: Dict[int, int] = {}
    for line in manager.active.items:
        if line.track_inventory:
            sold[line.item_id] = sold.get(line.item_id, 0) + line.quantity
    if not sold:
        return

    products = session.query(Product).filter(
        Product.id.in_(list(sold.keys())),
        Product.user_id == user_id
    ).with_for_update().all()

    for product in products:
        if product.track_inventory:
            product.stock_quantity = (product.stock_quantity or 0) - sold[product.id]


def checkout(
    manager: SaleSessionManager,
    session: Session,
    user_id: str,
    vat_enabled: bool = True,
    vat_rate: Decimal = DEFAULT_VAT_RATE
) -> Transaction:
    """
    Persist the active sale and start a new one.

    Raises EmptySaleError when there is nothing to charge and
    PersistenceFailure when the store rejects the write; in both cases the
    sale session is left untouched.
    """
    if manager.active.is_empty:
        raise EmptySaleError('Cart is empty')

    sale = manager.active
    totals = manager.compute_totals(vat_enabled, vat_rate)

    try:
        transaction = Transaction(
            user_id=user_id,
            staff_id=sale.staff_id,
            customer_id=sale.customer_id,
            payment_method=sale.payment_method.value,
            services=[],
            products=_transaction_lines(manager),
            subtotal=totals.subtotal,
            vat=totals.tax,
            total=totals.grand_total
        )
        session.add(transaction)
        _decrement_stock(session, user_id, manager)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Checkout failed for {user_id}: {e}")
        raise PersistenceFailure('Error processing transaction') from e

    logger.info(f"Transaction {transaction.id} recorded: {totals.grand_total} ({sale.payment_method.value})")
    manager.reset()
    invalidate_catalog_cache(user_id)
    return transaction
