"""
SQLAlchemy-backed stores.

Every write method commits or rolls back its own unit of work on the session
it was given; domain values are returned, never ORM instances.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import desc, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from smartsales.domain import Customer, Product, Sale, SaleLine, SaleSummary
from smartsales.exceptions import (
    InsufficientStockError, PersistenceError, ProductMissingError, SmartSalesError,
)
from smartsales.models import (
    Customer as CustomerModel,
    Product as ProductModel,
    ProductStock,
    Sale as SaleModel,
    SaleLine as SaleLineModel,
)
from smartsales.repositories.base import (
    check_limit, check_new_price, check_new_quantity, check_sale_preconditions,
)

logger = logging.getLogger(__name__)


def _to_product(model: ProductModel) -> Product:
    return Product(
        id=model.id,
        name=model.name,
        manufacturer=model.manufacturer,
        price=model.price,
        quantity_in_stock=int(model.on_hand_qty),
    )


def _to_customer(model: CustomerModel) -> Customer:
    return Customer(id=model.id, name=model.name, email=model.email)


class SqlProductCatalog:
    """Catalog over the ``product`` and ``product_stock`` tables."""

    def __init__(self, session):
        self.session = session

    def _fresh_query(self):
        # populate_existing: always overwrite identity-map state with database state
        return (self.session.query(ProductModel)
                .options(joinedload(ProductModel.stock))
                .populate_existing())

    def find_by_id(self, product_id: int) -> Optional[Product]:
        model = self._fresh_query().filter(ProductModel.id == product_id).first()
        return _to_product(model) if model else None

    def find_all(self) -> List[Product]:
        return [_to_product(m) for m in self._fresh_query().order_by(ProductModel.id).all()]

    def search(self, term: str) -> List[Product]:
        pattern = f'%{term.lower()}%'
        query = self._fresh_query().filter(
            or_(
                func.lower(ProductModel.name).like(pattern),
                func.lower(ProductModel.manufacturer).like(pattern),
            )
        ).order_by(ProductModel.id)
        return [_to_product(m) for m in query.all()]

    def add(self, product: Product) -> Product:
        check_new_price(product.price)
        check_new_quantity(product.quantity_in_stock)
        try:
            model = ProductModel(
                name=product.name,
                manufacturer=product.manufacturer,
                price=product.price,
            )
            if product.id > 0:
                model.id = product.id
            self.session.add(model)
            self.session.flush()
            self.session.add(ProductStock(product_id=model.id, on_hand_qty=product.quantity_in_stock))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return self.find_by_id(model.id)

    def update_quantity(self, product_id: int, new_qty: int) -> None:
        check_new_quantity(new_qty)
        try:
            result = self.session.execute(
                update(ProductStock)
                .where(ProductStock.product_id == product_id)
                .values(on_hand_qty=new_qty)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                # Products created without a stock row start at zero
                if self.session.get(ProductModel, product_id) is None:
                    raise ProductMissingError(product_id)
                self.session.add(ProductStock(product_id=product_id, on_hand_qty=new_qty))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.debug(f"Stock for product {product_id} set to {new_qty}")


class SqlCustomerStore:
    """Customer store over the ``customer`` table."""

    def __init__(self, session):
        self.session = session

    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        model = self.session.get(CustomerModel, customer_id)
        return _to_customer(model) if model else None

    def find_by_email(self, email: str) -> Optional[Customer]:
        model = self.session.query(CustomerModel).filter(
            func.lower(CustomerModel.email) == email.lower()
        ).first()
        return _to_customer(model) if model else None

    def find_all(self) -> List[Customer]:
        models = self.session.query(CustomerModel).order_by(CustomerModel.name, CustomerModel.id).all()
        return [_to_customer(m) for m in models]

    def create_or_get_by_email(self, name: str, email: str) -> Customer:
        """
        Return the customer registered under ``email`` or create it.

        Safe against a concurrent insert thanks to the unique index on
        lower(email): the loser of the race rolls back and reads the winner.
        """
        existing = self.find_by_email(email)
        if existing:
            return existing

        try:
            model = CustomerModel(name=name, email=email)
            self.session.add(model)
            self.session.commit()
            logger.info(f"Customer created: id={model.id} email={email}")
            return _to_customer(model)

        except IntegrityError:
            self.session.rollback()

            existing = self.find_by_email(email)
            if existing:
                return existing
            raise PersistenceError(f'Could not create or retrieve customer {email}')


class SqlSaleStore:
    """Sale store over the ``sale`` and ``sale_line`` tables."""

    def __init__(self, session):
        self.session = session

    def save(self, sale: Sale, reserve_stock: bool = False) -> Sale:
        """
        Insert the sale header, then every line, then commit.

        Nothing is written if a precondition fails. Any failure after the
        first write rolls the whole unit back; the input Sale is never given
        an id in that case.
        """
        check_sale_preconditions(sale)
        session = self.session

        try:
            if reserve_stock:
                self._reserve_stock(sale.lines)

            # 1. Header
            header = SaleModel(customer_id=sale.customer.id)
            session.add(header)
            session.flush()
            if header.id is None:
                raise PersistenceError('Failed to obtain generated sale id')
            sale_id = header.id

            # 2. Lines, as one batch tied to the header
            session.add_all([
                SaleLineModel(
                    sale_id=sale_id,
                    product_id=line.product.id,
                    qty=line.quantity,
                    unit_price=line.unit_price,
                )
                for line in sale.lines
            ])
            session.flush()
            inserted = session.query(func.count(SaleLineModel.id)).filter(
                SaleLineModel.sale_id == sale_id
            ).scalar()
            if not inserted:
                raise PersistenceError('Insert into sale_line failed. No rows inserted')

            session.commit()

        except SmartSalesError:
            session.rollback()
            raise
        except Exception as e:
            session.rollback()
            logger.error(f"Error saving sale to database: {e}", exc_info=True)
            raise PersistenceError(f'Error saving sale: {e}') from e

        return sale.persisted_as(sale_id, header.created_at)

    def _reserve_stock(self, lines) -> None:
        """Conditionally decrement stock for every line inside the open transaction."""
        product_ids = [line.product.id for line in lines]
        # Lock stock rows; dialects without FOR UPDATE (SQLite) simply omit the clause
        self.session.query(ProductStock).filter(
            ProductStock.product_id.in_(product_ids)
        ).with_for_update().all()

        for line in lines:
            result = self.session.execute(
                update(ProductStock)
                .where(
                    ProductStock.product_id == line.product.id,
                    ProductStock.on_hand_qty >= line.quantity,
                )
                .values(on_hand_qty=ProductStock.on_hand_qty - line.quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                product = (self.session.query(ProductModel)
                           .options(joinedload(ProductModel.stock))
                           .populate_existing()
                           .filter(ProductModel.id == line.product.id)
                           .first())
                if product is None:
                    raise ProductMissingError(line.product.id)
                raise InsufficientStockError(
                    product.id, product.name, line.quantity, int(product.on_hand_qty)
                )

    def find_by_id(self, sale_id: int) -> Optional[Sale]:
        model = (self.session.query(SaleModel)
                 .options(
                     joinedload(SaleModel.customer),
                     joinedload(SaleModel.lines)
                     .joinedload(SaleLineModel.product)
                     .joinedload(ProductModel.stock),
                 )
                 .populate_existing()
                 .filter(SaleModel.id == sale_id)
                 .first())
        if model is None:
            return None

        lines = tuple(
            SaleLine(product=_to_product(line.product), quantity=line.qty, unit_price=line.unit_price)
            for line in model.lines
        )
        return Sale(
            customer=_to_customer(model.customer),
            lines=lines,
            id=model.id,
            created_at=model.created_at,
        )

    def recent_summaries(self, limit: int) -> List[SaleSummary]:
        check_limit(limit)
        total = func.coalesce(func.sum(SaleLineModel.qty * SaleLineModel.unit_price), 0)
        rows = (
            self.session.query(
                SaleModel.id.label('sale_id'),
                SaleModel.created_at.label('created_at'),
                CustomerModel.name.label('name'),
                CustomerModel.email.label('email'),
                total.label('total'),
            )
            .join(CustomerModel, CustomerModel.id == SaleModel.customer_id)
            .outerjoin(SaleLineModel, SaleLineModel.sale_id == SaleModel.id)
            .group_by(SaleModel.id, SaleModel.created_at, CustomerModel.name, CustomerModel.email)
            .order_by(desc(SaleModel.created_at), desc(SaleModel.id))
            .limit(limit)
            .all()
        )
        return [
            SaleSummary(
                sale_id=row.sale_id,
                created_at=row.created_at,
                customer_name=row.name,
                customer_email=row.email,
                total=Decimal(str(row.total)),
            )
            for row in rows
        ]
