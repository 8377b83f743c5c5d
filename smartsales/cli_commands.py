"""
Flask CLI commands for the Smart Sales POS.

Commands:
- flask init-db: Create the database tables
- flask seed-demo: Load the demo catalog
- flask create-customer: Register a customer by email
- flask recent-sales: Print the most recent sales
- flask low-stock: Print products at or below a stock threshold
"""

import click
from flask import current_app

from smartsales.domain import Product
from smartsales.exceptions import SmartSalesError
from smartsales.repositories import get_stores
from smartsales.services import report_service
from smartsales.services.customer_service import register_customer
from smartsales.utils.formatters import money, timestamp

DEMO_PRODUCTS = [
    ('Wireless Mouse', 'Logitech', '24.99', 30),
    ('Mechanical Keyboard', 'Keychron', '89.00', 12),
    ('USB-C Hub', 'Anker', '39.99', 20),
    ('27" Monitor', 'Dell', '229.50', 6),
    ('Laptop Stand', 'Rain Design', '44.95', 3),
]


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create the database tables."""
        from smartsales.database import create_schema
        create_schema()
        click.echo(click.style('Database tables created.', fg='green'))

    @app.cli.command('seed-demo')
    def seed_demo():
        """Load the demo catalog if the catalog is empty."""
        catalog = get_stores().catalog
        if catalog.find_all():
            click.echo(click.style('Catalog already has products, nothing to do.', fg='yellow'))
            return

        for name, manufacturer, price, stock in DEMO_PRODUCTS:
            product = catalog.add(Product(id=0, name=name, manufacturer=manufacturer,
                                          price=price, quantity_in_stock=stock))
            click.echo(f'   {product}')
        click.echo(click.style(f'Seeded {len(DEMO_PRODUCTS)} products.', fg='green'))

    @app.cli.command('create-customer')
    @click.option('--name', prompt=True, help='Customer name')
    @click.option('--email', prompt=True, help='Customer email')
    def create_customer(name, email):
        """Create a customer, or show the existing one for that email."""
        try:
            customer = register_customer(get_stores().customers, name, email)
        except SmartSalesError as e:
            click.echo(click.style(f'Customer could not be saved: {e.message}', fg='red'))
            return
        click.echo(click.style(f'Customer saved with id: {customer.id}', fg='green'))

    @app.cli.command('recent-sales')
    @click.option('--limit', type=int, default=None, help='How many recent sales')
    def recent_sales(limit):
        """RECENT SALES REPORT."""
        if limit is None:
            limit = current_app.config.get('RECENT_SALES_LIMIT', 10)
        try:
            report = report_service.recent_sales_report(get_stores().sales, limit)
        except SmartSalesError as e:
            click.echo(click.style(e.message, fg='red'))
            return

        click.echo('RECENT SALES REPORT')
        click.echo('-' * 38)
        if not report['summaries']:
            click.echo('No sales found.')
            return
        for s in report['summaries']:
            click.echo(f'#{s.sale_id}  {timestamp(s.created_at)}  {s.customer_name} <{s.customer_email}>  {money(s.total)}')
        click.echo('-' * 38)
        click.echo(f"Sales Count: {report['count']}")
        click.echo(f"Grand Total: {money(report['grand_total'])}")

    @app.cli.command('low-stock')
    @click.option('--threshold', type=int, default=None, help='Low stock threshold')
    def low_stock(threshold):
        """LOW STOCK REPORT."""
        if threshold is None:
            threshold = current_app.config.get('LOW_STOCK_THRESHOLD', 10)
        try:
            report = report_service.low_stock_report(get_stores().catalog, threshold)
        except SmartSalesError as e:
            click.echo(click.style(e.message, fg='red'))
            return

        click.echo('LOW STOCK REPORT')
        click.echo(f'Threshold: {threshold}')
        click.echo('-' * 38)
        if not report['products']:
            click.echo('No low stock items found.')
            return
        for product in report['products']:
            click.echo(str(product))
