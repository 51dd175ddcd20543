"""
AWS Lambda Handlers Module.

This module contains the Lambda function handlers that serve as entry points
for the storefront form:

- upsert_handler: register or update a customer and a product under warranty
- lookup_handler: return a customer's name and phone by email

Both handlers use AWS Lambda Powertools for structured logging with
correlation IDs, tracing and custom metrics.
"""

__version__ = "1.0.0"

# Re-export handler utilities for convenience
from service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
