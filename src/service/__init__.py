"""
Club Dvigi Service Module.

This package contains the shared implementation of the Club Dvigi form
functions, following a three-layer layout:

- handlers: API Gateway entry points, CORS and error mapping
- logic: registration and lookup flows
- dal: Shopify Admin GraphQL gateway
- models: request, upstream and response models

All durable state lives in Shopify; the functions keep nothing between
invocations.
"""

__version__ = "1.0.0"
__description__ = "Club Dvigi registration and lookup functions for Shopify"

# Re-export commonly used classes for convenience
from service.models.input import LookupCustomerRequest, UpsertCustomerRequest
from service.models.output import LookupCustomerOutput, UpsertCustomerOutput
from service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "UpsertCustomerRequest",
    "LookupCustomerRequest",
    "UpsertCustomerOutput",
    "LookupCustomerOutput",
    "logger",
    "tracer",
    "metrics",
]
