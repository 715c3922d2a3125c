"""
Integration tests for inventory (product CRUD) and account isolation.
"""

from decimal import Decimal

from salon_pos.models import Product


class TestInventoryApi:

    def test_create_product(self, authenticated_client, session, user_id):
        response = authenticated_client.post('/inventory/products', json={
            'name': 'Serum',
            'price': '12.5',
            'stock_quantity': '8',
            'icon': '💧',
            'sku': ' SR-1 ',
        })

        assert response.status_code == 201
        product = response.get_json()['product']
        assert product['price'] == '12.50'
        assert product['track_inventory'] is True
        assert product['is_service'] is False
        assert product['low_stock_threshold'] == 10
        assert product['sku'] == 'SR-1'
        assert session.query(Product).filter_by(user_id=user_id, name='Serum').count() == 1

    def test_name_and_price_required(self, authenticated_client):
        response = authenticated_client.post('/inventory/products', json={'name': 'No price'})
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Name and Price are required'

        response = authenticated_client.post('/inventory/products', json={'price': '3'})
        assert response.status_code == 400

    def test_update_product(self, authenticated_client, session, catalog):
        response = authenticated_client.patch(f"/inventory/products/{catalog['shampoo']}", json={
            'price': '11.00',
            'stock_quantity': 40,
        })

        assert response.status_code == 200
        product = session.get(Product, catalog['shampoo'])
        assert product.price == Decimal('11.00')
        assert product.stock_quantity == 40
        assert product.name == 'Shampoo'

    def test_delete_product(self, authenticated_client, session, catalog):
        response = authenticated_client.delete(f"/inventory/products/{catalog['wax']}")

        assert response.status_code == 200
        assert session.get(Product, catalog['wax']) is None

    def test_list_and_filter(self, authenticated_client, catalog):
        data = authenticated_client.get('/inventory/products?q=hair').get_json()
        assert [p['name'] for p in data['products']] == ['Hair Wax', 'Haircut']

    def test_low_stock(self, authenticated_client, catalog):
        data = authenticated_client.get('/inventory/products/low-stock').get_json()
        # Haircut is untracked, so never low on stock
        assert [p['name'] for p in data['products']] == ['Hair Wax', 'Shampoo']

    def test_other_account_products_are_invisible(self, client, catalog, other_user_id):
        with client.session_transaction() as sess:
            sess['user_id'] = other_user_id

        assert client.get('/inventory/products').get_json()['products'] == []
        assert client.get(f"/inventory/products/{catalog['shampoo']}").status_code == 404
        assert client.delete(f"/inventory/products/{catalog['shampoo']}").status_code == 404
