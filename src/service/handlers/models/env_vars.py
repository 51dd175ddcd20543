"""
Environment variable models for type-safe configuration.

This module defines the Pydantic model for the environment variables read by the
Club Dvigi handlers and the immutable settings object handed to the Shopify gateway.
"""

from dataclasses import dataclass
from typing import Annotated

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field

from service.handlers.utils.errors import ConfigurationError
from service.handlers.utils.observability import logger

DEFAULT_API_VERSION = '2025-01'
DEFAULT_WARRANTY_NAMESPACE = 'dvigi'
DEFAULT_WARRANTY_KEY = 'warranty_items'


class ShopEnvVars(BaseModel):
    """Environment variables for the Shopify-backed handlers."""

    # Shop host, e.g. acme.myshopify.com
    SHOPIFY_STORE: Annotated[str, Field(
        description='Shopify shop domain',
        min_length=1
    )]

    SHOPIFY_ADMIN_TOKEN: Annotated[str, Field(
        description='Admin API access token',
        min_length=1
    )]

    SHOPIFY_API_VERSION: Annotated[str, Field(
        default=DEFAULT_API_VERSION,
        description='Admin GraphQL API version',
        pattern=r'^(\d{4}-\d{2}|unstable)$'
    )] = DEFAULT_API_VERSION

    WARRANTY_METAFIELD_NAMESPACE: Annotated[str, Field(
        default=DEFAULT_WARRANTY_NAMESPACE,
        description='Namespace of the customer metafield holding warranty entries',
        min_length=1
    )] = DEFAULT_WARRANTY_NAMESPACE

    WARRANTY_METAFIELD_KEY: Annotated[str, Field(
        default=DEFAULT_WARRANTY_KEY,
        description='Key of the customer metafield holding warranty entries',
        min_length=1
    )] = DEFAULT_WARRANTY_KEY

    # Service name for observability
    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='club-dvigi',
        description='Service name for AWS Powertools'
    )] = 'club-dvigi'

    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'


@dataclass(frozen=True)
class ShopSettings:
    """Connection settings for one shop's Admin GraphQL API."""

    shop: str
    access_token: str
    api_version: str = DEFAULT_API_VERSION
    warranty_namespace: str = DEFAULT_WARRANTY_NAMESPACE
    warranty_key: str = DEFAULT_WARRANTY_KEY

    @property
    def graphql_url(self) -> str:
        return f'https://{self.shop}/admin/api/{self.api_version}/graphql.json'

    @classmethod
    def from_env_vars(cls, env_vars: ShopEnvVars) -> 'ShopSettings':
        return cls(
            shop=env_vars.SHOPIFY_STORE,
            access_token=env_vars.SHOPIFY_ADMIN_TOKEN,
            api_version=env_vars.SHOPIFY_API_VERSION,
            warranty_namespace=env_vars.WARRANTY_METAFIELD_NAMESPACE,
            warranty_key=env_vars.WARRANTY_METAFIELD_KEY,
        )


def get_shop_env_vars() -> ShopEnvVars:
    """
    Get typed environment variables for the Shopify handlers.

    Returns:
        Validated environment variables model instance

    Raises:
        ConfigurationError: If the shop domain or admin token is missing
    """
    try:
        return get_environment_variables(model=ShopEnvVars)
    except ValueError as exc:
        logger.error('Shopify configuration is incomplete', extra={'error': str(exc)})
        raise ConfigurationError(details={'reason': str(exc)}) from exc


def get_shop_settings() -> ShopSettings:
    """Load the environment and return the settings injected into the gateway."""
    return ShopSettings.from_env_vars(get_shop_env_vars())
