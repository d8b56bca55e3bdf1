"""
Customer service for the Customer Access layer.
"""

from typing import Dict, List, Optional

from fastapi import Depends, Header, Response

from shared.base_service import BaseService
from shared.config import ServiceConfig
from .auth.claims import Claims
from .auth.policy import Operation, PolicyEvaluator
from .auth.token_service import TokenService
from .auth.token_validator import TokenValidator
from .handlers import CustomerHandlers
from .models import Customer, CustomerUpdate, LoginRequest, LoginResponse
from .store.customer_store import CustomerStore


SERVICE_NAME = "customers"
DEFAULT_PORT = 8080


class CustomerService(BaseService):
    """Customer service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None, store: Optional[CustomerStore] = None):
        super().__init__(SERVICE_NAME, DEFAULT_PORT, config)
        self.store = store if store is not None else self._load_store()

        self.token_service = TokenService(
            self.config.jwt_secret,
            self.config.credentials,
            ttl_seconds=self.config.token_ttl_seconds,
            algorithm=self.config.jwt_algorithm,
        )
        self.token_validator = TokenValidator(self.config.jwt_secret, algorithm=self.config.jwt_algorithm)
        self.policy_evaluator = PolicyEvaluator()
        self.handlers = CustomerHandlers(
            self.token_service,
            self.token_validator,
            self.policy_evaluator,
            self.store,
            metrics=self.metrics,
        )
        self.metrics.set_gauge("customers_total", len(self.store))

        self._setup_customer_routes()

    def _load_store(self) -> CustomerStore:
        if self.config.seed_file:
            store = CustomerStore.from_file(self.config.seed_file)
            self.logger.info("Customer store seeded", path=self.config.seed_file, count=len(store))
            return store
        return CustomerStore()

    def _setup_customer_routes(self):
        """Set up customer-specific routes."""
        handlers = self.handlers

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "Customer Access - Customer Service",
                "version": "1.0.0"
            }

        @self.app.post("/api/auth/login", response_model=LoginResponse)
        def login(request: LoginRequest):
            """Exchange a username/password pair for a bearer token."""
            return handlers.login(request)

        @self.app.get("/api/customers", response_model=List[Customer])
        def list_customers(authorization: Optional[str] = Header(default=None)):
            """List all customers."""
            return handlers.list_customers(authorization)

        def require(operation: Operation):
            def dependency(authorization: Optional[str] = Header(default=None)) -> Optional[Claims]:
                return handlers.authorize(operation, authorization)
            return Depends(dependency)

        # Routes with a body authorize in a dependency so 401/403 win over body validation.
        @self.app.post("/api/customers", response_model=Customer, status_code=201,
                       dependencies=[require(Operation.CREATE_CUSTOMER)])
        def create_customer(customer: Customer):
            """Create a customer. Requires the User role."""
            return handlers.apply_create(customer)

        @self.app.put("/api/customers/{customer_id}", status_code=204,
                      dependencies=[require(Operation.UPDATE_CUSTOMER)])
        def update_customer(customer_id: int, update: CustomerUpdate):
            """Update a customer. Requires the User role."""
            handlers.apply_update(customer_id, update)
            return Response(status_code=204)

        @self.app.delete("/api/customers/{customer_id}", status_code=204)
        def delete_customer(customer_id: int, authorization: Optional[str] = Header(default=None)):
            """Delete a customer. Requires the Admin role."""
            handlers.delete_customer(authorization, customer_id)
            return Response(status_code=204)

    async def _check_dependencies(self) -> Dict[str, str]:
        """Check customer service dependencies."""
        return {"customer_store": "ok"}


def create_app(config: Optional[ServiceConfig] = None, store: Optional[CustomerStore] = None):
    """Create FastAPI application."""
    service = CustomerService(config=config, store=store)
    return service.app


def main():
    CustomerService().run()


if __name__ == "__main__":
    main()
