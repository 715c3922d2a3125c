"""
Flask CLI commands.

Commands:
- flask init-db: Create all tables
- flask seed-demo: Load a demo catalog, staff and license for an account
"""

import click
import uuid
from decimal import Decimal
from salon_pos.database import create_tables, get_session
from salon_pos.models import Product, Staff, Customer, License
from salon_pos.services import settings_service


DEMO_PRODUCTS = [
    # name, price, icon, track_inventory, stock, is_service
    ('Haircut', Decimal('25.00'), '✂️', False, 0, True),
    ('Colour', Decimal('60.00'), '🎨', False, 0, True),
    ('Blow Dry', Decimal('18.00'), '💨', False, 0, True),
    ('Shampoo', Decimal('9.50'), '🧴', True, 24, False),
    ('Conditioner', Decimal('10.50'), '🧴', True, 18, False),
    ('Hair Wax', Decimal('7.99'), '🪮', True, 3, False),
]


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create database tables."""
        create_tables()
        click.echo(click.style('✅ Tables created.', fg='green'))

    @app.cli.command('seed-demo')
    @click.option('--user-id', required=True, help='Account id to seed')
    @click.option('--with-license/--without-license', default=True, help='Also create an active license')
    def seed_demo(user_id, with_license):
        """Seed a demo salon for an account."""
        session = get_session()

        if session.query(Product).filter_by(user_id=user_id).first():
            click.echo(click.style(f'❌ Account {user_id} already has products.', fg='red'))
            return

        try:
            for name, price, icon, track, stock, is_service in DEMO_PRODUCTS:
                session.add(Product(
                    user_id=user_id,
                    name=name,
                    price=price,
                    icon=icon,
                    track_inventory=track,
                    stock_quantity=stock,
                    is_service=is_service
                ))
            session.add_all([Staff(user_id=user_id, name=n) for n in ('Alex', 'Sam')])
            session.add(Customer(user_id=user_id, name='Walk-in'))
            if with_license:
                session.add(License(user_id=user_id, status='active', license_key=uuid.uuid4().hex))
            session.commit()
            settings_service.save_settings(session, user_id, {'shop_name': 'Demo Salon', 'vat_enabled': True})

            click.echo(click.style(f'\n✅ Demo data created for {user_id}', fg='green', bold=True))
            click.echo(f'   Products: {len(DEMO_PRODUCTS)}')
        except Exception as e:
            session.rollback()
            click.echo(click.style(f'❌ Error seeding demo data: {str(e)}', fg='red'))
