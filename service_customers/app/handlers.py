"""
Request handlers for the Customer service.

Each handler runs the same pipeline: look up the operation's policy,
validate the bearer token when the policy needs one, evaluate the policy,
and only then touch the store. The first failure stops the pipeline.
"""

from typing import List, Optional

from shared.errors import AuthenticationError, ValidationError
from shared.logging import get_logger, set_user_context
from shared.metrics import MetricsCollector
from .auth.claims import Claims
from .auth.policy import Operation, PolicyEvaluator
from .auth.token_service import TokenService
from .auth.token_validator import TokenValidator
from .models import Customer, CustomerUpdate, LoginRequest, LoginResponse
from .store.customer_store import CustomerStore


class CustomerHandlers:
    """Composes token validation, policy evaluation and the customer store."""

    def __init__(
        self,
        token_service: TokenService,
        token_validator: TokenValidator,
        policy_evaluator: PolicyEvaluator,
        store: CustomerStore,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.token_service = token_service
        self.token_validator = token_validator
        self.policy_evaluator = policy_evaluator
        self.store = store
        self.metrics = metrics
        self.logger = get_logger("customers.handlers")

    def login(self, request: LoginRequest) -> LoginResponse:
        try:
            issued = self.token_service.issue_token(request.username, request.password)
        except AuthenticationError:
            self._count("tokens_issued_total", status="rejected")
            raise

        self._count("tokens_issued_total", status="issued")
        return LoginResponse(
            token=issued.access_token,
            token_type=issued.token_type,
            expires_in=issued.expires_in
        )

    def list_customers(self, authorization: Optional[str]) -> List[Customer]:
        self.authorize(Operation.LIST_CUSTOMERS, authorization)
        return self.store.list_customers()

    def create_customer(self, authorization: Optional[str], customer: Customer) -> Customer:
        self.authorize(Operation.CREATE_CUSTOMER, authorization)
        return self.apply_create(customer)

    def update_customer(self, authorization: Optional[str], customer_id: int,
                        update: CustomerUpdate) -> Customer:
        self.authorize(Operation.UPDATE_CUSTOMER, authorization)
        return self.apply_update(customer_id, update)

    def apply_create(self, customer: Customer) -> Customer:
        """Store step of create. Callers must have authorized CREATE_CUSTOMER."""
        created = self.store.create(customer)
        self._refresh_customer_gauge()
        return created

    def apply_update(self, customer_id: int, update: CustomerUpdate) -> Customer:
        """Store step of update. Callers must have authorized UPDATE_CUSTOMER."""
        if update.id is not None and update.id != customer_id:
            raise ValidationError(
                "Body id does not match path id",
                details={"path_id": customer_id, "body_id": update.id}
            )
        return self.store.update(customer_id, update.to_customer(customer_id))

    def delete_customer(self, authorization: Optional[str], customer_id: int) -> None:
        self.authorize(Operation.DELETE_CUSTOMER, authorization)
        self.store.delete(customer_id)
        self._refresh_customer_gauge()

    def authorize(self, operation: Operation, authorization: Optional[str]) -> Optional[Claims]:
        """Validate the caller (if the operation needs it) and enforce the operation's policy."""
        policy = self.policy_evaluator.policy_for(operation)

        claims: Optional[Claims] = None
        if policy.requires_authentication:
            try:
                claims = self.token_validator.validate_header(authorization)
            except AuthenticationError as e:
                self._count("token_validations_total", status=e.code.lower())
                self.logger.warning("Token validation failed", operation=operation.value, code=e.code)
                raise
            self._count("token_validations_total", status="valid")
            set_user_context(claims.subject)

        decision = self.policy_evaluator.authorize(claims, policy)
        self._count(
            "authorization_decisions_total",
            operation=operation.value,
            decision="allow" if decision.allowed else "deny"
        )

        if not decision.allowed:
            self.logger.warning(
                "Authorization denied",
                operation=operation.value,
                reason=decision.reason.value if decision.reason else None,
                role=claims.role if claims else None
            )
            decision.raise_for_denial()

        return claims

    def _count(self, metric_name: str, **labels) -> None:
        if self.metrics is not None:
            self.metrics.increment_counter(metric_name, **labels)

    def _refresh_customer_gauge(self) -> None:
        if self.metrics is not None:
            self.metrics.set_gauge("customers_total", len(self.store))
