"""
Service Models Package

This package contains all Pydantic models used throughout the service,
including request models, Admin API response models, and response bodies.
"""

from .input import LookupCustomerRequest, UpsertCustomerRequest
from .output import (
    EXISTING_CUSTOMER_MESSAGE,
    NEW_CUSTOMER_MESSAGE,
    ErrorOutput,
    LookupCustomerOutput,
    UpsertCustomerOutput,
)
from .customer import (
    CustomerInput,
    CustomerMutationPayload,
    GraphQLResponse,
    Metafield,
    MetafieldsSetPayload,
    ShopifyCustomer,
    UserError,
    WarrantyEntry,
)

__all__ = [
    # Input models
    "UpsertCustomerRequest",
    "LookupCustomerRequest",

    # Output models
    "UpsertCustomerOutput",
    "LookupCustomerOutput",
    "ErrorOutput",
    "EXISTING_CUSTOMER_MESSAGE",
    "NEW_CUSTOMER_MESSAGE",

    # Upstream and domain models
    "CustomerInput",
    "CustomerMutationPayload",
    "GraphQLResponse",
    "Metafield",
    "MetafieldsSetPayload",
    "ShopifyCustomer",
    "UserError",
    "WarrantyEntry",
]
