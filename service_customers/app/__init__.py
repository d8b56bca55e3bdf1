"""
Customer Service package for the Customer Access layer.

This package exposes the FastAPI application serving the customer record
set behind JWT authentication and role-based authorization:

- app.main: Application entrypoint that wires routes and lifecycle.
- app.handlers: Per-operation pipeline (token check, policy, store call).
- app.auth: Token issuing, token validation and role policies.
- app.store: In-memory, lock-guarded customer store.

Design notes:
- Module import must not read configuration or build state; everything is
  constructed in `create_app` so tests get fresh instances.
- Use the shared/ utilities for logging, metrics, config and errors.
- Tokens are stateless; nothing about an issued token is kept server-side.
"""
