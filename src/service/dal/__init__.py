"""
Data Access Layer (DAL) for the Club Dvigi service.

All durable state lives in Shopify. This module defines the gateway interface
the business logic depends on and the factory that builds the Shopify
implementation from the configured shop settings.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from service.models.customer import CustomerInput, Metafield, ShopifyCustomer


@runtime_checkable
class CustomerGateway(Protocol):
    """Protocol defining the customer operations the handlers need."""

    def find_customer_by_email(self, email: str) -> Optional[ShopifyCustomer]:
        """Find the first customer with this email, including tags."""
        ...

    def find_customer_contact_by_email(self, email: str) -> Optional[ShopifyCustomer]:
        """Find the first customer with this email, including name and phone."""
        ...

    def create_customer(self, customer_input: CustomerInput) -> str:
        """Create a customer and return its ID."""
        ...

    def update_customer(self, customer_id: str, customer_input: CustomerInput) -> None:
        """Update an existing customer."""
        ...

    def get_warranty_metafield(self, customer_id: str) -> Optional[Metafield]:
        """Read the warranty metafield of a customer."""
        ...

    def set_warranty_metafield(self, customer_id: str, value: str) -> None:
        """Write the warranty metafield of a customer."""
        ...

    def close(self) -> None:
        """Release the underlying HTTP client."""
        ...


def get_customer_gateway(transport: Optional[Any] = None) -> CustomerGateway:
    """
    Factory function to build the gateway for the configured shop.

    Reads the environment on every call, so missing configuration surfaces as a
    per-request ``ConfigurationError`` rather than an import failure.

    Args:
        transport: Optional httpx transport for the gateway's client

    Returns:
        Gateway instance owning a fresh HTTP client
    """
    # Import here to avoid circular imports
    from service.dal.shopify_handler import ShopifyCustomerGateway
    from service.handlers.models.env_vars import get_shop_settings

    return ShopifyCustomerGateway(get_shop_settings(), transport=transport)


__all__ = [
    'CustomerGateway',
    'get_customer_gateway',
]
