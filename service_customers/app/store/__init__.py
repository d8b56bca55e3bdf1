"""
Customer storage package.

Only an in-memory store is provided; it is safe to share across request
threads.
"""

from .customer_store import CustomerStore

__all__ = ["CustomerStore"]
