import pytest
from decimal import Decimal
import uuid

from salon_pos import create_app
from salon_pos.database import create_tables, drop_tables, get_session
from salon_pos.middleware.license_gate import clear_license_cache
from salon_pos.models import Product, Staff, Customer, License


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing."""
    app = create_app('config.TestConfig')
    return app


@pytest.fixture(scope='function', autouse=True)
def _database(app):
    """Fresh schema for every test."""
    with app.app_context():
        create_tables()
    clear_license_cache()
    yield
    get_session().remove()
    with app.app_context():
        drop_tables()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session():
    """Create database session for testing."""
    session = get_session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(scope='function')
def user_id():
    """Account id as issued by the external auth provider."""
    return f'user-{uuid.uuid4().hex[:8]}'


@pytest.fixture(scope='function')
def other_user_id():
    """Second account for isolation tests."""
    return f'other-{uuid.uuid4().hex[:8]}'


@pytest.fixture(scope='function')
def catalog(session, user_id):
    """
    Seed a small catalog and return product ids by key.

    - 'shampoo': tracked, 10.00, 5 in stock
    - 'haircut': service, untracked, 25.00
    - 'wax': tracked, 7.99, out of stock
    """
    products = {
        'shampoo': Product(user_id=user_id, name='Shampoo', price=Decimal('10.00'), icon='🧴',
                           barcode='5000001', sku='SH-001', track_inventory=True, stock_quantity=5),
        'haircut': Product(user_id=user_id, name='Haircut', price=Decimal('25.00'), icon='✂️',
                           track_inventory=False, stock_quantity=0, is_service=True),
        'wax': Product(user_id=user_id, name='Hair Wax', price=Decimal('7.99'),
                       track_inventory=True, stock_quantity=0),
    }
    session.add_all(products.values())
    session.commit()
    return {key: product.id for key, product in products.items()}


@pytest.fixture(scope='function')
def staff_id(session, user_id):
    member = Staff(user_id=user_id, name='Alex')
    session.add(member)
    session.commit()
    return member.id


@pytest.fixture(scope='function')
def customer_id(session, user_id):
    customer = Customer(user_id=user_id, name='Jane Doe', phone='07700 900000')
    session.add(customer)
    session.commit()
    return customer.id


@pytest.fixture(scope='function')
def active_license(session, user_id):
    license = License(user_id=user_id, status='active', license_key=uuid.uuid4().hex)
    session.add(license)
    session.commit()
    return license.id


@pytest.fixture(scope='function')
def authenticated_client(client, user_id):
    """Client whose session carries the account id."""
    with client.session_transaction() as sess:
        sess['user_id'] = user_id
    return client
