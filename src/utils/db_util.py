import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.customer import Customer
from utils.billing import alert_for_usage
from utils.errors import NotFoundError, StorageError
from utils.store import CustomerStore
from utils.util import utc_now

logger = logging.getLogger("voltai")


class SqlCustomerStore(CustomerStore):
    """
    Durable store backed by the customers table. Needs an active flask app
    context, which every request has.
    """

    label = "SQL"

    def list(self) -> list[dict]:
        """
        Gets all customers, newest first

        Returns:
            list of customer dicts
        """
        try:
            query = db.select(Customer).order_by(
                Customer.created_at.desc(), Customer.id.desc()
            )
            customers = db.session.execute(query).scalars().all()
        except SQLAlchemyError as e:
            raise StorageError(f"error fetching customers: {e}") from e

        return [c.to_dict() for c in customers]

    def get(self, customer_id: int) -> dict:
        return self._find(customer_id).to_dict()

    def create(self, name: str, address: str, monthly_usage: float = 0) -> dict:
        """
        Inserts a new customer

        Args:
            name: customer name
            address: service address
            monthly_usage: initial monthly usage in kWh

        Returns:
            the stored customer as a dict
        """
        customer = Customer(
            name=name,
            address=address,
            monthly_usage=monthly_usage,
            alert=alert_for_usage(monthly_usage),
            created_at=utc_now(),
        )
        db.session.add(customer)
        self._commit("adding customer")
        return customer.to_dict()

    def update_usage(self, customer_id: int, usage: float) -> dict:
        """
        Overwrites the monthly usage of a customer and recomputes the alert

        Args:
            customer_id: id of the customer
            usage: new monthly usage in kWh

        Returns:
            the updated customer as a dict
        """
        customer = self._find(customer_id)
        customer.monthly_usage = usage
        customer.alert = alert_for_usage(usage)
        self._commit("updating usage")
        return customer.to_dict()

    def delete(self, customer_id: int) -> None:
        customer = self._find(customer_id)
        db.session.delete(customer)
        self._commit("deleting customer")

    def count(self) -> int:
        try:
            return db.session.execute(text("SELECT COUNT(*) FROM customers")).scalar()
        except SQLAlchemyError as e:
            raise StorageError(f"error counting customers: {e}") from e

    def _find(self, customer_id: int) -> Customer:
        try:
            customer = db.session.get(Customer, customer_id)
        except SQLAlchemyError as e:
            raise StorageError(f"error fetching customer {customer_id}: {e}") from e
        except OverflowError:
            # id beyond the INTEGER range, no such row can exist
            raise NotFoundError(f"customer not found: {customer_id}")

        if customer is None:
            raise NotFoundError(f"customer not found: {customer_id}")
        return customer

    def _commit(self, action: str) -> None:
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(f"error {action}: {e}") from e
