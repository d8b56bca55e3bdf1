"""
In-memory customer store shared by all request handlers.
"""

import json
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import TypeAdapter

from shared.errors import ConflictError, NotFoundError, ValidationError
from shared.logging import get_logger
from ..models import Customer


_CUSTOMER_LIST = TypeAdapter(List[Customer])


class CustomerStore:
    """Thread-safe customer collection keyed by id, kept in insertion order.

    Every read and write takes the same lock, so a listing never sees a
    half-applied create, update or delete. Records are immutable models, so
    the list returned by ``list_customers`` is a stable snapshot.
    """

    def __init__(self, customers: Optional[Iterable[Customer]] = None):
        self._customers: Dict[int, Customer] = {}
        self._lock = threading.Lock()
        self.logger = get_logger("customers.store")

        for customer in customers or []:
            self.create(customer)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CustomerStore":
        """Build a store seeded from a JSON array of customers."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(_CUSTOMER_LIST.validate_python(raw))

    def __len__(self) -> int:
        with self._lock:
            return len(self._customers)

    def list_customers(self) -> List[Customer]:
        """Return all customers in insertion order."""
        with self._lock:
            return list(self._customers.values())

    def create(self, customer: Customer) -> Customer:
        """Insert a new customer.

        Raises:
            ConflictError: a customer with the same id already exists
        """
        with self._lock:
            if customer.id in self._customers:
                raise ConflictError(
                    f"Customer {customer.id} already exists",
                    details={"id": customer.id}
                )
            self._customers[customer.id] = customer

        self.logger.info("Customer created", customer_id=customer.id)
        return customer

    def update(self, customer_id: int, customer: Customer) -> Customer:
        """Replace the mutable fields of an existing customer.

        Raises:
            ValidationError: ``customer.id`` differs from ``customer_id``
            NotFoundError: no customer with ``customer_id``
        """
        if customer.id != customer_id:
            raise ValidationError(
                "Customer id cannot be changed",
                details={"path_id": customer_id, "body_id": customer.id}
            )

        with self._lock:
            if customer_id not in self._customers:
                raise NotFoundError(f"Customer {customer_id} not found", details={"id": customer_id})
            # Reassigning an existing key keeps its position.
            self._customers[customer_id] = customer

        self.logger.info("Customer updated", customer_id=customer_id)
        return customer

    def delete(self, customer_id: int) -> None:
        """Remove a customer.

        Raises:
            NotFoundError: no customer with ``customer_id`` (including one already deleted)
        """
        with self._lock:
            if self._customers.pop(customer_id, None) is None:
                raise NotFoundError(f"Customer {customer_id} not found", details={"id": customer_id})

        self.logger.info("Customer deleted", customer_id=customer_id)
