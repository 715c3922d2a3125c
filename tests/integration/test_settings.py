"""
Integration tests for shop settings, staff and customers.
"""

from decimal import Decimal

from salon_pos.models import ShopSettings, Staff


class TestShopSettings:

    def test_defaults_without_row(self, authenticated_client):
        data = authenticated_client.get('/settings/').get_json()

        assert data['settings']['shop_name'] == ''
        assert data['settings']['vat_enabled'] is True
        assert Decimal(data['settings']['vat_rate']) == Decimal('0.20')

    def test_save_is_upsert(self, authenticated_client, session, user_id):
        authenticated_client.put('/settings/', json={'shop_name': 'Demly Salon', 'vat_enabled': False})
        authenticated_client.put('/settings/', json={'shop_name': 'Demly Salon & Spa'})

        rows = session.query(ShopSettings).filter_by(user_id=user_id).all()
        assert len(rows) == 1
        assert rows[0].shop_name == 'Demly Salon & Spa'
        assert rows[0].vat_enabled is False

    def test_invalid_vat_rate(self, authenticated_client):
        response = authenticated_client.put('/settings/', json={'vat_rate': '1.5'})
        assert response.status_code == 400


class TestStaff:

    def test_staff_crud(self, authenticated_client, session, user_id):
        response = authenticated_client.post('/settings/staff', json={'name': '  Sam  '})
        assert response.status_code == 201
        staff_id = response.get_json()['staff']['id']
        assert response.get_json()['staff']['name'] == 'Sam'

        authenticated_client.patch(f'/settings/staff/{staff_id}', json={'name': 'Samantha'})
        assert session.get(Staff, staff_id).name == 'Samantha'

        assert authenticated_client.delete(f'/settings/staff/{staff_id}').status_code == 200
        assert session.query(Staff).filter_by(user_id=user_id).count() == 0

    def test_name_required(self, authenticated_client):
        response = authenticated_client.post('/settings/staff', json={'name': '   '})
        assert response.status_code == 400
        assert response.get_json()['message'] == 'Name is required'

    def test_staff_listed_by_name(self, authenticated_client):
        for name in ('Zoe', 'Alex'):
            authenticated_client.post('/settings/staff', json={'name': name})

        data = authenticated_client.get('/settings/').get_json()
        assert [s['name'] for s in data['staff']] == ['Alex', 'Zoe']


class TestCustomers:

    def test_create_and_list(self, authenticated_client):
        response = authenticated_client.post('/settings/customers', json={'name': 'Jo', 'phone': ''})
        assert response.status_code == 201
        assert response.get_json()['customer']['phone'] is None

        data = authenticated_client.get('/settings/customers').get_json()
        assert [c['name'] for c in data['customers']] == ['Jo']
