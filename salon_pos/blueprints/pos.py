"""POS blueprint - cart, parked sales and checkout (JSON)."""
import re
from flask import Blueprint, request, session, jsonify, current_app, g, Response
from typing import Any, Dict, Tuple, Union

from salon_pos.database import get_session
from salon_pos.exceptions import BusinessLogicError, NotFoundError, PersistenceFailure
from salon_pos.middleware import require_login
from salon_pos.blueprints.metrics import pos_checkouts_total, pos_parked_sales_total
from salon_pos.services import catalog_service, customer_service, settings_service
from salon_pos.services.checkout_service import checkout
from salon_pos.services.sale_session import SaleSessionManager, CatalogItem, compute_totals
from salon_pos.utils.formatters import money

pos_bp = Blueprint('pos', __name__, url_prefix='/pos')

SESSION_KEY = 'pos_sale'


def get_manager() -> SaleSessionManager:
    """Sale session of the current browser session."""
    return SaleSessionManager.from_dict(session.get(SESSION_KEY))


def save_manager(manager: SaleSessionManager) -> None:
    session[SESSION_KEY] = manager.to_dict()
    session.modified = True


def _payload() -> Dict[str, Any]:
    """JSON object body, or the form fields. Any other JSON shape reads as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    return data if isinstance(data, dict) else {}


def _whole_number(value: Any, label: str) -> int:
    """Integer from JSON or form input; fractions and booleans are rejected."""
    if isinstance(value, bool):
        raise BusinessLogicError(f'{label} must be a whole number')
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and re.fullmatch(r'-?\d+', value.strip()):
        return int(value)
    raise BusinessLogicError(f'{label} must be a whole number')


def _optional_id(value: Any, label: str):
    """Id from the request, or None when cleared."""
    if value in (None, '', 0, '0'):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BusinessLogicError(f'Invalid {label}')


def _sale_state(manager: SaleSessionManager) -> Dict[str, Any]:
    """Cart, totals and parked summaries as returned by every POS call."""
    vat_enabled, vat_rate = settings_service.vat_config(get_session(), g.user_id)
    totals = manager.compute_totals(vat_enabled, vat_rate)

    cart = []
    for line in manager.active.items:
        data = line.to_dict()
        data['line_total'] = str(line.line_total)
        cart.append(data)

    parked = []
    for entry in manager.parked:
        parked_totals = compute_totals(entry.items, vat_enabled, vat_rate)
        parked.append({
            'id': entry.id,
            'parked_at': entry.parked_at.isoformat(),
            'item_count': parked_totals.item_count,
            'grand_total': str(parked_totals.grand_total),
            'staff_id': entry.staff_id,
            'customer_id': entry.customer_id,
        })

    return {
        'status': 'ok',
        'cart': cart,
        'staff_id': manager.active.staff_id,
        'customer_id': manager.active.customer_id,
        'payment_method': manager.active.payment_method.value,
        'vat_enabled': vat_enabled,
        'vat_rate': str(vat_rate),
        'totals': totals.to_dict(),
        'parked': parked,
    }


def _respond(manager: SaleSessionManager, status_code: int = 200, **extra) -> Tuple[Response, int]:
    save_manager(manager)
    body = _sale_state(manager)
    body.update(extra)
    return jsonify(body), status_code


@pos_bp.route('/', methods=['GET'])
@require_login
def state() -> Tuple[Response, int]:
    """Current sale session."""
    return jsonify(_sale_state(get_manager())), 200


@pos_bp.route('/load', methods=['GET'])
@require_login
def load() -> Response:
    """Everything the register screen needs when a session starts."""
    db_session = get_session()
    settings = settings_service.get_settings(db_session, g.user_id)
    return jsonify({
        'status': 'ok',
        'settings': settings_service.settings_to_dict(settings),
        'products': catalog_service.get_catalog(db_session, g.user_id),
        'staff': [s.to_dict() for s in settings_service.list_staff(db_session, g.user_id)],
        'customers': [c.to_dict() for c in customer_service.list_customers(db_session, g.user_id)],
    })


@pos_bp.route('/products', methods=['GET'])
@require_login
def product_search() -> Response:
    """Catalog filtered by name, SKU or barcode."""
    products = catalog_service.get_catalog(get_session(), g.user_id)
    query = request.args.get('q', '')[:100]
    return jsonify({'status': 'ok', 'products': catalog_service.filter_products(products, query)})


@pos_bp.route('/products/lookup', methods=['GET'])
@require_login
def product_lookup() -> Response:
    """Exact barcode/SKU match."""
    product = catalog_service.find_by_code(get_session(), g.user_id, request.args.get('code', ''))
    if not product:
        raise NotFoundError('No product with that code')
    return jsonify({'status': 'ok', 'product': product.to_dict()})


@pos_bp.route('/cart/add', methods=['POST'])
@require_login
def cart_add() -> Tuple[Response, int]:
    """Add one unit of a product (by id or scanned code)."""
    data = _payload()
    db_session = get_session()

    if data.get('code'):
        product = catalog_service.find_by_code(db_session, g.user_id, data['code'])
        if not product:
            raise NotFoundError('No product with that code')
        item = CatalogItem.from_product(product)
    else:
        product_id = _whole_number(data.get('product_id'), 'product_id')
        item = catalog_service.get_catalog_item(db_session, g.user_id, product_id)

    manager = get_manager()
    line = manager.add(item)
    return _respond(manager, added=line is not None)


@pos_bp.route('/cart/update', methods=['POST'])
@require_login
def cart_update() -> Tuple[Response, int]:
    """Set the quantity of a cart line (0 or less removes it)."""
    data = _payload()
    quantity = _whole_number(data.get('quantity'), 'quantity')

    manager = get_manager()
    manager.set_quantity(str(data.get('cart_id', '')), quantity)
    return _respond(manager)


@pos_bp.route('/cart/remove', methods=['POST'])
@require_login
def cart_remove() -> Tuple[Response, int]:
    manager = get_manager()
    manager.remove(str(_payload().get('cart_id', '')))
    return _respond(manager)


@pos_bp.route('/cart/staff', methods=['POST'])
@require_login
def cart_staff() -> Tuple[Response, int]:
    staff_id = _optional_id(_payload().get('staff_id'), 'staff_id')
    if staff_id is not None:
        staff_id = settings_service.get_staff(get_session(), g.user_id, staff_id).id

    manager = get_manager()
    manager.select_staff(staff_id)
    return _respond(manager)


@pos_bp.route('/cart/customer', methods=['POST'])
@require_login
def cart_customer() -> Tuple[Response, int]:
    customer_id = _optional_id(_payload().get('customer_id'), 'customer_id')
    if customer_id is not None:
        customer_id = customer_service.get_customer(get_session(), g.user_id, customer_id).id

    manager = get_manager()
    manager.select_customer(customer_id)
    return _respond(manager)


@pos_bp.route('/cart/payment-method', methods=['POST'])
@require_login
def cart_payment_method() -> Tuple[Response, int]:
    manager = get_manager()
    manager.select_payment_method(_payload().get('payment_method'))
    return _respond(manager)


@pos_bp.route('/new-sale', methods=['POST'])
@require_login
def new_sale() -> Tuple[Response, int]:
    """Clear the cart without parking it."""
    manager = get_manager()
    manager.reset()
    return _respond(manager)


@pos_bp.route('/park', methods=['POST'])
@require_login
def park() -> Tuple[Response, int]:
    """Set the current sale aside."""
    manager = get_manager()
    parked = manager.park()
    pos_parked_sales_total.labels(event='parked').inc()
    return _respond(manager, 201, parked_id=parked.id)


@pos_bp.route('/parked', methods=['GET'])
@require_login
def parked_list() -> Response:
    manager = get_manager()
    return jsonify({
        'status': 'ok',
        'parked': [entry.to_dict() for entry in manager.parked],
    })


@pos_bp.route('/parked/<parked_id>/resume', methods=['POST'])
@require_login
def parked_resume(parked_id: str) -> Tuple[Response, int]:
    """Bring a parked sale back. A vanished id leaves everything as is."""
    manager = get_manager()
    try:
        manager.resume(parked_id)
        pos_parked_sales_total.labels(event='resumed').inc()
    except NotFoundError:
        current_app.logger.info(f"Resume of unknown parked sale {parked_id} ignored")
    return _respond(manager)


@pos_bp.route('/parked/<parked_id>/discard', methods=['POST'])
@require_login
def parked_discard(parked_id: str) -> Tuple[Response, int]:
    manager = get_manager()
    manager.discard(parked_id)
    pos_parked_sales_total.labels(event='discarded').inc()
    return _respond(manager)


@pos_bp.route('/checkout', methods=['POST'])
@require_login
def checkout_sale() -> Union[Response, Tuple[Response, int]]:
    """Charge the active sale. Failures leave the cart as it was."""
    db_session = get_session()
    vat_enabled, vat_rate = settings_service.vat_config(db_session, g.user_id)

    manager = get_manager()
    try:
        transaction = checkout(manager, db_session, g.user_id, vat_enabled, vat_rate)
    except PersistenceFailure:
        pos_checkouts_total.labels(outcome='failed').inc()
        raise
    except BusinessLogicError:
        pos_checkouts_total.labels(outcome='rejected').inc()
        raise

    pos_checkouts_total.labels(outcome='success').inc()
    symbol = current_app.config.get('CURRENCY_SYMBOL', '£')
    return _respond(
        manager,
        201,
        transaction=transaction.to_dict(),
        message=f"{money(transaction.total, symbol)} charged successfully!"
    )
