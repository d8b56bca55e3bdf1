"""
Shared utilities for the Customer Access layer.

This package aggregates common building blocks consumed by the services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI application skeleton (middleware, health, metrics)
- test_helpers: Factories and token generators for tests

Do not import from service packages into shared/.
"""
