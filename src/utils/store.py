from abc import ABC, abstractmethod
import itertools
import logging
import threading

from utils.billing import alert_for_usage
from utils.errors import NotFoundError
from utils.util import utc_now

logger = logging.getLogger("voltai")

SAMPLE_CUSTOMERS = [
    {"name": "John Doe", "address": "123 Main St", "monthly_usage": 450},
    {"name": "Jane Smith", "address": "456 Oak Ave", "monthly_usage": 320},
    {"name": "Mike Johnson", "address": "789 Pine Rd", "monthly_usage": 890},
]


class CustomerStore(ABC):
    """
    Persistence for customer records. Records are plain dicts with the keys
    id, name, address, monthly_usage, alert and created_at.
    """

    label = "unknown"

    @abstractmethod
    def list(self) -> list[dict]:
        ...

    @abstractmethod
    def get(self, customer_id: int) -> dict:
        ...

    @abstractmethod
    def create(self, name: str, address: str, monthly_usage: float = 0) -> dict:
        ...

    @abstractmethod
    def update_usage(self, customer_id: int, usage: float) -> dict:
        ...

    @abstractmethod
    def delete(self, customer_id: int) -> None:
        ...

    def count(self) -> int:
        return len(self.list())


class InMemoryCustomerStore(CustomerStore):
    """
    Volatile store, records live in a dict keyed by id. Ids come from a
    monotonic counter so they are never reused after a delete.
    """

    label = "In-memory (temporary)"

    def __init__(self):
        self._customers = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def list(self) -> list[dict]:
        with self._lock:
            return [dict(c) for c in self._customers.values()]

    def get(self, customer_id: int) -> dict:
        with self._lock:
            return dict(self._find(customer_id))

    def create(self, name: str, address: str, monthly_usage: float = 0) -> dict:
        with self._lock:
            customer = {
                "id": next(self._ids),
                "name": name,
                "address": address,
                "monthly_usage": monthly_usage,
                "alert": alert_for_usage(monthly_usage),
                "created_at": utc_now().isoformat(),
            }
            self._customers[customer["id"]] = customer
            return dict(customer)

    def update_usage(self, customer_id: int, usage: float) -> dict:
        with self._lock:
            customer = self._find(customer_id)
            customer["monthly_usage"] = usage
            customer["alert"] = alert_for_usage(usage)
            return dict(customer)

    def delete(self, customer_id: int) -> None:
        with self._lock:
            self._find(customer_id)
            del self._customers[customer_id]

    def count(self) -> int:
        with self._lock:
            return len(self._customers)

    def _find(self, customer_id: int) -> dict:
        customer = self._customers.get(customer_id)
        if customer is None:
            raise NotFoundError(f"customer not found: {customer_id}")
        return customer


def seed_sample_customers(store: CustomerStore) -> None:
    """
    Adds the demo customers to an empty store

    Args:
        store: store to seed

    Returns:
        None
    """
    # check if sample data already exists
    if store.count():
        return

    for customer in SAMPLE_CUSTOMERS:
        store.create(
            customer["name"], customer["address"], customer["monthly_usage"]
        )
    logger.info(f"seeded {len(SAMPLE_CUSTOMERS)} sample customers")
