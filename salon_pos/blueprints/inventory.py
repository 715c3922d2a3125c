"""Inventory blueprint - product and service CRUD (JSON)."""
from flask import Blueprint, request, jsonify, g, Response
from typing import Tuple

from salon_pos.database import get_session
from salon_pos.middleware import require_login
from salon_pos.services import catalog_service

inventory_bp = Blueprint('inventory', __name__, url_prefix='/inventory')


@inventory_bp.route('/products', methods=['GET'])
@require_login
def products_list() -> Response:
    """All products, optionally filtered by ?q= (name, SKU, barcode)."""
    products = [p.to_dict() for p in catalog_service.list_products(get_session(), g.user_id)]
    query = request.args.get('q', '')
    return jsonify({'status': 'ok', 'products': catalog_service.filter_products(products, query)})


@inventory_bp.route('/products/low-stock', methods=['GET'])
@require_login
def products_low_stock() -> Response:
    products = catalog_service.low_stock_products(get_session(), g.user_id)
    return jsonify({'status': 'ok', 'products': [p.to_dict() for p in products]})


@inventory_bp.route('/products', methods=['POST'])
@require_login
def products_create() -> Tuple[Response, int]:
    product = catalog_service.create_product(get_session(), g.user_id, request.get_json(silent=True) or {})
    return jsonify({'status': 'ok', 'product': product.to_dict()}), 201


@inventory_bp.route('/products/<int:product_id>', methods=['GET'])
@require_login
def products_detail(product_id: int) -> Response:
    product = catalog_service.get_product(get_session(), g.user_id, product_id)
    return jsonify({'status': 'ok', 'product': product.to_dict()})


@inventory_bp.route('/products/<int:product_id>', methods=['PUT', 'PATCH'])
@require_login
def products_update(product_id: int) -> Response:
    product = catalog_service.update_product(get_session(), g.user_id, product_id, request.get_json(silent=True) or {})
    return jsonify({'status': 'ok', 'product': product.to_dict()})


@inventory_bp.route('/products/<int:product_id>', methods=['DELETE'])
@require_login
def products_delete(product_id: int) -> Response:
    catalog_service.delete_product(get_session(), g.user_id, product_id)
    return jsonify({'status': 'ok'})
