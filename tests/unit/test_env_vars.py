"""
Unit tests for environment configuration.
"""

from unittest.mock import patch

import pytest
from aws_lambda_env_modeler import get_environment_variables

from service.dal import get_customer_gateway
from service.dal.shopify_handler import ShopifyCustomerGateway
from service.handlers.models.env_vars import (
    ShopEnvVars,
    ShopSettings,
    get_shop_env_vars,
    get_shop_settings,
)
from service.handlers.utils.errors import ConfigurationError


class TestShopSettings:

    def test_graphql_url(self):
        settings = ShopSettings(shop="acme.myshopify.com", access_token="t")

        assert settings.graphql_url == "https://acme.myshopify.com/admin/api/2025-01/graphql.json"

    def test_from_env_vars(self):
        env_vars = ShopEnvVars(
            SHOPIFY_STORE="acme.myshopify.com",
            SHOPIFY_ADMIN_TOKEN="shpat_x",
            SHOPIFY_API_VERSION="2025-04",
        )

        settings = ShopSettings.from_env_vars(env_vars)

        assert settings.shop == "acme.myshopify.com"
        assert settings.access_token == "shpat_x"
        assert settings.api_version == "2025-04"
        assert settings.warranty_namespace == "dvigi"
        assert settings.warranty_key == "warranty_items"

    def test_empty_store_is_invalid(self):
        with pytest.raises(ValueError):
            ShopEnvVars(SHOPIFY_STORE="", SHOPIFY_ADMIN_TOKEN="shpat_x")

    @pytest.mark.parametrize("api_version", ["2025-01", "2024-10", "unstable"])
    def test_accepted_api_versions(self, api_version):
        env_vars = ShopEnvVars(SHOPIFY_STORE="acme.myshopify.com", SHOPIFY_ADMIN_TOKEN="shpat_x", SHOPIFY_API_VERSION=api_version)

        assert ShopSettings.from_env_vars(env_vars).graphql_url == f"https://acme.myshopify.com/admin/api/{api_version}/graphql.json"

    @pytest.mark.parametrize("api_version", ["latest", "2025-1", ""])
    def test_rejected_api_versions(self, api_version):
        with pytest.raises(ValueError):
            ShopEnvVars(SHOPIFY_STORE="acme.myshopify.com", SHOPIFY_ADMIN_TOKEN="shpat_x", SHOPIFY_API_VERSION=api_version)


class TestLoading:

    def test_environment_model_is_loaded_by_modeler(self):
        env_vars = get_environment_variables(model=ShopEnvVars)

        assert isinstance(env_vars, ShopEnvVars)
        assert env_vars.SHOPIFY_STORE == "dvigi-test.myshopify.com"
        assert env_vars.SHOPIFY_API_VERSION == "2025-01"

    def test_loads_from_environment(self):
        settings = get_shop_settings()

        assert settings.shop == "dvigi-test.myshopify.com"
        assert settings.access_token == "shpat_test_token"

    def test_missing_configuration_raises(self):
        with patch(
            "service.handlers.models.env_vars.get_environment_variables",
            side_effect=ValueError("failed to load environment variables"),
        ):
            with pytest.raises(ConfigurationError) as exc_info:
                get_shop_env_vars()

        assert exc_info.value.message == "Faltan variables de entorno"

    def test_gateway_factory_uses_environment(self):
        gateway = get_customer_gateway()
        try:
            assert isinstance(gateway, ShopifyCustomerGateway)
            assert gateway.settings.shop == "dvigi-test.myshopify.com"
        finally:
            gateway.close()
