"""
Integration tests for the POS blueprint: cart, parked sales and checkout
through the HTTP API, with state kept in the session cookie.
"""

from decimal import Decimal

import pytest

from salon_pos.models import Product, ShopSettings, Transaction


def _add(client, product_id):
    return client.post('/pos/cart/add', json={'product_id': product_id})


class TestAuthRequired:

    def test_anonymous_request_is_rejected(self, client):
        response = client.get('/pos/')
        assert response.status_code == 401
        assert response.get_json()['status'] == 'error'


class TestCartApi:

    def test_add_same_product_twice(self, authenticated_client, catalog):
        _add(authenticated_client, catalog['shampoo'])
        response = _add(authenticated_client, catalog['shampoo'])

        data = response.get_json()
        assert response.status_code == 200
        assert len(data['cart']) == 1
        assert data['cart'][0]['quantity'] == 2
        assert data['totals']['subtotal'] == '20.00'
        assert data['totals']['tax'] == '4.00'
        assert data['totals']['grand_total'] == '24.00'

    def test_totals_use_shop_vat_settings(self, authenticated_client, session, user_id, catalog):
        session.add(ShopSettings(user_id=user_id, shop_name='Salon', vat_enabled=False, vat_rate=Decimal('0.20')))
        session.commit()

        data = _add(authenticated_client, catalog['shampoo']).get_json()
        assert data['vat_enabled'] is False
        assert Decimal(data['totals']['tax']) == 0
        assert data['totals']['grand_total'] == data['totals']['subtotal']

    def test_out_of_stock_product_not_added(self, authenticated_client, catalog):
        data = _add(authenticated_client, catalog['wax']).get_json()

        assert data['added'] is False
        assert data['cart'] == []

    def test_add_by_scanned_code(self, authenticated_client, catalog):
        response = authenticated_client.post('/pos/cart/add', json={'code': '5000001'})

        assert response.status_code == 200
        assert response.get_json()['cart'][0]['item_id'] == catalog['shampoo']

    def test_add_by_numeric_code(self, authenticated_client, catalog):
        response = authenticated_client.post('/pos/cart/add', json={'code': 5000001})

        assert response.status_code == 200
        cart = response.get_json()['cart']
        assert len(cart) == 1
        assert cart[0]['item_id'] == catalog['shampoo']

    @pytest.mark.parametrize('body', [[1, 2], 'shampoo', 42])
    def test_non_object_json_body_is_rejected(self, authenticated_client, catalog, body):
        assert authenticated_client.post('/pos/cart/add', json=body).status_code == 400
        assert authenticated_client.post('/pos/cart/update', json=body).status_code == 400

    def test_add_unknown_product(self, authenticated_client, catalog):
        response = _add(authenticated_client, 999999)
        assert response.status_code == 404

    def test_cannot_add_other_accounts_product(self, authenticated_client, session, other_user_id):
        foreign = Product(user_id=other_user_id, name='Foreign', price=Decimal('1.00'), track_inventory=False)
        session.add(foreign)
        session.commit()

        response = _add(authenticated_client, foreign.id)
        assert response.status_code == 404

    def test_update_and_remove(self, authenticated_client, catalog):
        data = _add(authenticated_client, catalog['haircut']).get_json()
        cart_id = data['cart'][0]['cart_id']

        data = authenticated_client.post('/pos/cart/update', json={'cart_id': cart_id, 'quantity': 3}).get_json()
        assert data['cart'][0]['quantity'] == 3
        assert data['cart'][0]['line_total'] == '75.00'

        data = authenticated_client.post('/pos/cart/update', json={'cart_id': cart_id, 'quantity': 0}).get_json()
        assert data['cart'] == []

        _add(authenticated_client, catalog['haircut'])
        cart_id = authenticated_client.get('/pos/').get_json()['cart'][0]['cart_id']
        data = authenticated_client.post('/pos/cart/remove', json={'cart_id': cart_id}).get_json()
        assert data['cart'] == []

    @pytest.mark.parametrize('quantity', [2.7, True, '2.5', 'two', None])
    def test_update_rejects_non_whole_quantity(self, authenticated_client, catalog, quantity):
        cart_id = _add(authenticated_client, catalog['haircut']).get_json()['cart'][0]['cart_id']

        response = authenticated_client.post('/pos/cart/update', json={'cart_id': cart_id, 'quantity': quantity})

        assert response.status_code == 400
        assert response.get_json()['message'] == 'quantity must be a whole number'
        assert authenticated_client.get('/pos/').get_json()['cart'][0]['quantity'] == 1

    @pytest.mark.parametrize('quantity', [4, 4.0, '4'])
    def test_update_accepts_whole_quantity(self, authenticated_client, catalog, quantity):
        cart_id = _add(authenticated_client, catalog['haircut']).get_json()['cart'][0]['cart_id']

        data = authenticated_client.post('/pos/cart/update', json={'cart_id': cart_id, 'quantity': quantity}).get_json()
        assert data['cart'][0]['quantity'] == 4

    def test_update_unknown_cart_id_is_noop(self, authenticated_client, catalog):
        _add(authenticated_client, catalog['haircut'])
        response = authenticated_client.post('/pos/cart/update', json={'cart_id': 'missing', 'quantity': 5})

        assert response.status_code == 200
        assert response.get_json()['cart'][0]['quantity'] == 1

    def test_select_staff_customer_and_payment(self, authenticated_client, staff_id, customer_id):
        authenticated_client.post('/pos/cart/staff', json={'staff_id': staff_id})
        authenticated_client.post('/pos/cart/customer', json={'customer_id': customer_id})
        data = authenticated_client.post('/pos/cart/payment-method', json={'payment_method': 'contactless'}).get_json()

        assert data['staff_id'] == staff_id
        assert data['customer_id'] == customer_id
        assert data['payment_method'] == 'contactless'

    def test_invalid_payment_method(self, authenticated_client):
        response = authenticated_client.post('/pos/cart/payment-method', json={'payment_method': 'barter'})
        assert response.status_code == 400

    def test_new_sale_clears_cart(self, authenticated_client, catalog):
        _add(authenticated_client, catalog['haircut'])
        data = authenticated_client.post('/pos/new-sale').get_json()

        assert data['cart'] == []
        assert data['parked'] == []


class TestParkedApi:

    def test_park_empty_sale(self, authenticated_client):
        response = authenticated_client.post('/pos/park')

        assert response.status_code == 400
        assert authenticated_client.get('/pos/').get_json()['parked'] == []

    def test_park_and_resume(self, authenticated_client, catalog):
        _add(authenticated_client, catalog['shampoo'])
        _add(authenticated_client, catalog['shampoo'])
        response = authenticated_client.post('/pos/park')

        assert response.status_code == 201
        data = response.get_json()
        parked_id = data['parked_id']
        assert data['cart'] == []
        assert data['parked'][0]['id'] == parked_id
        assert data['parked'][0]['item_count'] == 2
        assert data['parked'][0]['grand_total'] == '24.00'

        data = authenticated_client.post(f'/pos/parked/{parked_id}/resume').get_json()
        assert data['parked'] == []
        assert data['cart'][0]['quantity'] == 2

    def test_parked_list(self, authenticated_client, catalog):
        _add(authenticated_client, catalog['haircut'])
        authenticated_client.post('/pos/park')

        data = authenticated_client.get('/pos/parked').get_json()
        assert len(data['parked']) == 1
        assert data['parked'][0]['items'][0]['name'] == 'Haircut'

    def test_discard_then_resume_is_silent(self, authenticated_client, catalog):
        _add(authenticated_client, catalog['haircut'])
        parked_id = authenticated_client.post('/pos/park').get_json()['parked_id']

        data = authenticated_client.post(f'/pos/parked/{parked_id}/discard').get_json()
        assert data['parked'] == []

        response = authenticated_client.post(f'/pos/parked/{parked_id}/resume')
        assert response.status_code == 200
        assert response.get_json()['cart'] == []


class TestCheckoutApi:

    def test_checkout_success(self, authenticated_client, session, user_id, catalog):
        _add(authenticated_client, catalog['shampoo'])
        _add(authenticated_client, catalog['shampoo'])

        response = authenticated_client.post('/pos/checkout')

        assert response.status_code == 201
        data = response.get_json()
        assert data['message'] == '£24.00 charged successfully!'
        assert data['cart'] == []
        assert session.query(Transaction).filter_by(user_id=user_id).count() == 1
        assert session.get(Product, catalog['shampoo']).stock_quantity == 3

    def test_checkout_empty_cart(self, authenticated_client):
        response = authenticated_client.post('/pos/checkout')

        assert response.status_code == 400
        assert response.get_json()['message'] == 'Cart is empty'

    def test_failed_checkout_keeps_cart(self, authenticated_client, catalog, monkeypatch):
        from salon_pos.blueprints import pos
        from salon_pos.exceptions import PersistenceFailure

        _add(authenticated_client, catalog['haircut'])

        def failing_checkout(*args, **kwargs):
            raise PersistenceFailure()

        monkeypatch.setattr(pos, 'checkout', failing_checkout)
        response = authenticated_client.post('/pos/checkout')

        assert response.status_code == 502
        assert response.get_json()['message'] == 'Error processing transaction'
        assert len(authenticated_client.get('/pos/').get_json()['cart']) == 1


class TestCatalogApi:

    def test_search(self, authenticated_client, catalog):
        data = authenticated_client.get('/pos/products?q=sh-0').get_json()
        assert [p['name'] for p in data['products']] == ['Shampoo']

    def test_load(self, authenticated_client, catalog, staff_id, customer_id):
        data = authenticated_client.get('/pos/load').get_json()

        assert [p['name'] for p in data['products']] == ['Hair Wax', 'Haircut', 'Shampoo']
        assert data['staff'][0]['id'] == staff_id
        assert data['customers'][0]['id'] == customer_id
        assert data['settings']['vat_enabled'] is True

    def test_lookup(self, authenticated_client, catalog):
        assert authenticated_client.get('/pos/products/lookup?code=sh-001').status_code == 200
        assert authenticated_client.get('/pos/products/lookup?code=nope').status_code == 404
