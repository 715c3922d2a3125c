"""
Sale Session Manager - active cart and parked sales.

Holds the one mutable cart of a POS session plus any sales parked aside
for later. Everything here is plain in-memory state; the POS blueprint
round-trips it through the signed session cookie with ``to_dict`` /
``from_dict`` between requests, and the checkout service reads it.
"""

import enum
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple

from salon_pos.exceptions import BusinessLogicError, EmptySaleError, NotFoundError

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
DEFAULT_VAT_RATE = Decimal('0.20')


class PaymentMethod(str, enum.Enum):
    """How the customer pays for a sale."""
    CASH = 'cash'
    CARD = 'card'
    CARD_TERMINAL = 'card_terminal'
    CONTACTLESS = 'contactless'
    MOBILE = 'mobile'
    OTHER = 'other'


def parse_payment_method(value: Any) -> PaymentMethod:
    """Normalize user input ('Card', 'card-terminal', ...) to a PaymentMethod."""
    if isinstance(value, PaymentMethod):
        return value
    normalized = str(value or '').strip().lower().replace('-', '_').replace(' ', '_')
    try:
        return PaymentMethod(normalized)
    except ValueError:
        raise BusinessLogicError(f'Invalid payment method: {value}')


@dataclass(frozen=True)
class CatalogItem:
    """Read-only snapshot of a sellable product or service."""
    id: int
    name: str
    price: Decimal
    icon: Optional[str] = None
    track_inventory: bool = False
    stock_quantity: int = 0

    @classmethod
    def from_product(cls, product) -> 'CatalogItem':
        """Build a snapshot from a Product row."""
        return cls(
            id=product.id,
            name=product.name,
            price=Decimal(str(product.price)),
            icon=product.icon,
            track_inventory=bool(product.track_inventory),
            stock_quantity=int(product.stock_quantity or 0),
        )

    @property
    def out_of_stock(self) -> bool:
        return self.track_inventory and self.stock_quantity <= 0


@dataclass(frozen=True)
class LineItem:
    """One catalog item and its quantity inside a sale."""
    cart_id: str
    item_id: int
    name: str
    price: Decimal
    quantity: int
    icon: Optional[str] = None
    track_inventory: bool = False
    stock_quantity: int = 0

    @property
    def line_total(self) -> Decimal:
        return (self.price * self.quantity).quantize(CENT)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cart_id': self.cart_id,
            'item_id': self.item_id,
            'name': self.name,
            'price': str(self.price),
            'quantity': self.quantity,
            'icon': self.icon,
            'track_inventory': self.track_inventory,
            'stock_quantity': self.stock_quantity,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LineItem':
        return cls(
            cart_id=data['cart_id'],
            item_id=int(data['item_id']),
            name=data['name'],
            price=Decimal(str(data['price'])),
            quantity=int(data['quantity']),
            icon=data.get('icon'),
            track_inventory=bool(data.get('track_inventory', False)),
            stock_quantity=int(data.get('stock_quantity', 0)),
        )


@dataclass(frozen=True)
class Totals:
    """Derived money figures for a sale."""
    subtotal: Decimal
    tax: Decimal
    grand_total: Decimal
    item_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'subtotal': str(self.subtotal),
            'tax': str(self.tax),
            'grand_total': str(self.grand_total),
            'item_count': self.item_count,
        }


@dataclass
class ActiveSale:
    """The sale currently being rung up."""
    items: List[LineItem] = field(default_factory=list)
    staff_id: Optional[int] = None
    customer_id: Optional[int] = None
    payment_method: PaymentMethod = PaymentMethod.CASH

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, cart_id: str) -> Optional[int]:
        """Index of the line with ``cart_id`` or None."""
        for index, line in enumerate(self.items):
            if line.cart_id == cart_id:
                return index
        return None


@dataclass(frozen=True)
class ParkedSale:
    """Immutable snapshot of a sale set aside for later."""
    id: str
    items: Tuple[LineItem, ...]
    staff_id: Optional[int]
    customer_id: Optional[int]
    payment_method: PaymentMethod
    parked_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'items': [line.to_dict() for line in self.items],
            'staff_id': self.staff_id,
            'customer_id': self.customer_id,
            'payment_method': self.payment_method.value,
            'parked_at': self.parked_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ParkedSale':
        return cls(
            id=data['id'],
            items=tuple(LineItem.from_dict(line) for line in data.get('items', [])),
            staff_id=data.get('staff_id'),
            customer_id=data.get('customer_id'),
            payment_method=PaymentMethod(data.get('payment_method', PaymentMethod.CASH.value)),
            parked_at=datetime.fromisoformat(data['parked_at']),
        )


def compute_totals(items, vat_enabled: bool = True, vat_rate: Decimal = DEFAULT_VAT_RATE) -> Totals:
    """Subtotal, VAT and grand total for a list of line items."""
    subtotal = sum((line.price * line.quantity for line in items), Decimal('0')).quantize(CENT)
    if vat_enabled:
        tax = (subtotal * Decimal(str(vat_rate))).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        tax = Decimal('0.00')
    return Totals(
        subtotal=subtotal,
        tax=tax,
        grand_total=(subtotal + tax).quantize(CENT),
        item_count=sum(line.quantity for line in items),
    )


class SaleSessionManager:
    """
    Owns the active sale and the parked sales of one POS session.

    Single mutator: every call runs to completion synchronously, so no
    locking is done here.
    """

    def __init__(self):
        self.active = ActiveSale()
        self._parked: List[ParkedSale] = []

    @property
    def parked(self) -> Tuple[ParkedSale, ...]:
        """Parked sales in creation order."""
        return tuple(self._parked)

    # ------------------------------------------------------------------
    # Cart operations
    # ------------------------------------------------------------------

    def add(self, item: CatalogItem) -> Optional[LineItem]:
        """
        Add one unit of ``item``.

        Bumps the quantity when the catalog item is already in the cart,
        otherwise appends a new line. Tracked items with no stock are
        ignored and None is returned.
        """
        if item.out_of_stock:
            logger.debug(f"Ignoring add of out-of-stock item {item.id}")
            return None

        for index, line in enumerate(self.active.items):
            if line.item_id == item.id:
                updated = replace(line, quantity=line.quantity + 1)
                self.active.items[index] = updated
                return updated

        line = LineItem(
            cart_id=f"{item.id}-{uuid.uuid4().hex[:12]}",
            item_id=item.id,
            name=item.name,
            price=item.price,
            quantity=1,
            icon=item.icon,
            track_inventory=item.track_inventory,
            stock_quantity=item.stock_quantity,
        )
        self.active.items.append(line)
        return line

    def set_quantity(self, cart_id: str, quantity: int) -> None:
        """Replace a line's quantity; zero or less removes the line."""
        quantity = int(quantity)
        if quantity <= 0:
            self.remove(cart_id)
            return
        index = self.active.find(cart_id)
        if index is None:
            return
        self.active.items[index] = replace(self.active.items[index], quantity=quantity)

    def remove(self, cart_id: str) -> None:
        """Drop a line from the cart if it is there."""
        index = self.active.find(cart_id)
        if index is not None:
            del self.active.items[index]

    def select_staff(self, staff_id: Optional[int]) -> None:
        self.active.staff_id = int(staff_id) if staff_id else None

    def select_customer(self, customer_id: Optional[int]) -> None:
        self.active.customer_id = int(customer_id) if customer_id else None

    def select_payment_method(self, method: Any) -> PaymentMethod:
        self.active.payment_method = parse_payment_method(method)
        return self.active.payment_method

    def compute_totals(self, vat_enabled: bool = True, vat_rate: Decimal = DEFAULT_VAT_RATE) -> Totals:
        """Totals of the active sale."""
        return compute_totals(self.active.items, vat_enabled, vat_rate)

    def reset(self) -> None:
        """Start a new, empty sale without parking the current one."""
        self.active = ActiveSale()

    # ------------------------------------------------------------------
    # Parked sales
    # ------------------------------------------------------------------

    def park(self) -> ParkedSale:
        """Set the active sale aside and start an empty one."""
        if self.active.is_empty:
            raise EmptySaleError('Cannot park an empty sale')

        parked = ParkedSale(
            id=uuid.uuid4().hex,
            items=tuple(self.active.items),
            staff_id=self.active.staff_id,
            customer_id=self.active.customer_id,
            payment_method=self.active.payment_method,
            parked_at=datetime.now(),
        )
        self._parked.append(parked)
        self.reset()
        logger.info(f"Parked sale {parked.id} ({len(parked.items)} lines)")
        return parked

    def get_parked(self, parked_id: str) -> Optional[ParkedSale]:
        for parked in self._parked:
            if parked.id == parked_id:
                return parked
        return None

    def resume(self, parked_id: str) -> ActiveSale:
        """Make a parked sale the active one again."""
        parked = self.get_parked(parked_id)
        if parked is None:
            raise NotFoundError('Parked sale not found')

        if not self.active.is_empty:
            logger.warning(f"Resuming {parked_id} replaces an active sale with {len(self.active.items)} lines")

        self.active = ActiveSale(
            items=list(parked.items),
            staff_id=parked.staff_id,
            customer_id=parked.customer_id,
            payment_method=parked.payment_method,
        )
        self._parked.remove(parked)
        logger.info(f"Resumed parked sale {parked_id}")
        return self.active

    def discard(self, parked_id: str) -> None:
        """Delete a parked sale. There is no undo."""
        parked = self.get_parked(parked_id)
        if parked is not None:
            self._parked.remove(parked)
            logger.info(f"Discarded parked sale {parked_id}")

    # ------------------------------------------------------------------
    # Serialization (session cookie)
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'active': {
                'items': [line.to_dict() for line in self.active.items],
                'staff_id': self.active.staff_id,
                'customer_id': self.active.customer_id,
                'payment_method': self.active.payment_method.value,
            },
            'parked': [parked.to_dict() for parked in self._parked],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'SaleSessionManager':
        manager = cls()
        if not data:
            return manager

        active = data.get('active') or {}
        manager.active = ActiveSale(
            items=[LineItem.from_dict(line) for line in active.get('items', [])],
            staff_id=active.get('staff_id'),
            customer_id=active.get('customer_id'),
            payment_method=PaymentMethod(active.get('payment_method', PaymentMethod.CASH.value)),
        )
        manager._parked = [ParkedSale.from_dict(parked) for parked in data.get('parked', [])]
        return manager
