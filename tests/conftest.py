"""
Pytest configuration and shared fixtures for the Club Dvigi functions.

The Shopify Admin API is replaced by ``FakeShopifyAdmin``, an in-memory
store served through ``httpx.MockTransport``, so the real gateway code runs
end to end without touching the network.
"""

import json
import os
import re
from typing import Any, Dict, List, Optional
from unittest.mock import Mock, patch

import httpx
import pytest

# Test environment configuration, set before the service modules are imported
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "SHOPIFY_STORE": "dvigi-test.myshopify.com",
    "SHOPIFY_ADMIN_TOKEN": "shpat_test_token",
    "POWERTOOLS_SERVICE_NAME": "test-club-dvigi",
    "POWERTOOLS_METRICS_NAMESPACE": "TestClubDvigi",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    "LOG_LEVEL": "DEBUG",
})

from service.dal.shopify_handler import ShopifyCustomerGateway  # noqa: E402
from service.handlers.models.env_vars import ShopSettings  # noqa: E402
from service.handlers.utils.observability import metrics  # noqa: E402

TEST_ORIGIN = "https://dvigi.com.ar"
METAFIELD_LOCATION = re.compile(r'namespace:"([^"]+)",\s*key:"([^"]+)"')


class FakeShopifyAdmin:
    """In-memory stand-in for the Admin GraphQL endpoint."""

    def __init__(self) -> None:
        self.customers: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.operations: List[str] = []
        self.user_errors: Dict[str, str] = {}
        self.forced_responses: Dict[str, Any] = {}
        self._next_id = 1000

    # Test helpers

    def add_customer(
        self,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone: Optional[str] = None,
        tags: Optional[List[str]] = None,
        warranty_value: Optional[str] = None,
    ) -> str:
        customer_id = self._new_id()
        self.customers[customer_id] = {
            "id": customer_id,
            "email": email,
            "firstName": first_name,
            "lastName": last_name,
            "phone": phone,
            "tags": list(tags or []),
            "metafields": {},
        }
        if warranty_value is not None:
            self.customers[customer_id]["metafields"][("dvigi", "warranty_items")] = warranty_value
        return customer_id

    def customer_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return next((c for c in self.customers.values() if c["email"] == email), None)

    def warranty_value(self, customer_id: str) -> Optional[str]:
        return self.customers[customer_id]["metafields"].get(("dvigi", "warranty_items"))

    def warranty_items(self, customer_id: str) -> List[Any]:
        return json.loads(self.warranty_value(customer_id) or "[]")

    def request_bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    # Transport

    def handle(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        query = payload["query"]
        variables = payload.get("variables") or {}
        operation = self._operation(query)

        self.requests.append(request)
        self.operations.append(operation)

        if operation in self.forced_responses:
            forced = self.forced_responses[operation]
            if isinstance(forced, httpx.Response):
                return forced
            return httpx.Response(200, json=forced)

        resolver = getattr(self, f"_resolve_{operation}")
        return httpx.Response(200, json={"data": resolver(query, variables)})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # Resolvers

    @staticmethod
    def _operation(query: str) -> str:
        for operation in ("metafieldsSet", "customerCreate", "customerUpdate"):
            if operation in query:
                return operation
        if "customers(" in query:
            return "customers"
        if "metafield(" in query:
            return "customer"
        raise AssertionError(f"Unexpected GraphQL document: {query}")

    def _new_id(self) -> str:
        self._next_id += 1
        return f"gid://shopify/Customer/{self._next_id}"

    def _user_error(self, operation: str) -> Optional[List[Dict[str, str]]]:
        message = self.user_errors.get(operation)
        return [{"message": message}] if message else None

    def _resolve_customers(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        email = variables["q"].removeprefix("email:")
        customer = self.customer_by_email(email)
        nodes = []
        if customer:
            nodes.append({k: v for k, v in customer.items() if k != "metafields"})
        return {"customers": {"nodes": nodes}}

    def _resolve_customerCreate(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        errors = self._user_error("customerCreate")
        if errors:
            return {"customerCreate": {"customer": None, "userErrors": errors}}

        customer_input = variables["input"]
        customer_id = self.add_customer(
            email=customer_input["email"],
            first_name=customer_input.get("firstName"),
            last_name=customer_input.get("lastName"),
            phone=customer_input.get("phone"),
            tags=customer_input.get("tags"),
        )
        return {"customerCreate": {"customer": {"id": customer_id}, "userErrors": []}}

    def _resolve_customerUpdate(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        errors = self._user_error("customerUpdate")
        if errors:
            return {"customerUpdate": {"customer": None, "userErrors": errors}}

        customer = self.customers[variables["id"]]
        for field, value in variables["input"].items():
            customer[field] = value
        return {"customerUpdate": {"customer": {"id": customer["id"]}, "userErrors": []}}

    def _resolve_customer(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        customer = self.customers.get(variables["id"])
        if customer is None:
            return {"customer": None}

        location = METAFIELD_LOCATION.search(query).groups()
        value = customer["metafields"].get(location)
        metafield = {"id": "gid://shopify/Metafield/1", "value": value} if value is not None else None
        return {"customer": {"metafield": metafield}}

    def _resolve_metafieldsSet(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        errors = self._user_error("metafieldsSet")
        if errors:
            return {"metafieldsSet": {"userErrors": errors}}

        location = METAFIELD_LOCATION.search(query).groups()
        self.customers[variables["ownerId"]]["metafields"][location] = variables["value"]
        return {"metafieldsSet": {"userErrors": []}}


@pytest.fixture
def shop_settings() -> ShopSettings:
    return ShopSettings(shop="dvigi-test.myshopify.com", access_token="shpat_test_token")


@pytest.fixture
def fake_shopify() -> FakeShopifyAdmin:
    return FakeShopifyAdmin()


@pytest.fixture
def gateway(fake_shopify, shop_settings):
    """Real Shopify gateway wired to the fake Admin API."""
    with ShopifyCustomerGateway(shop_settings, transport=fake_shopify.transport()) as gw:
        yield gw


@pytest.fixture
def patched_gateway(fake_shopify, shop_settings):
    """Point both handlers at the fake Admin API."""

    def build_gateway():
        return ShopifyCustomerGateway(shop_settings, transport=fake_shopify.transport())

    with patch("service.handlers.upsert_handler.get_customer_gateway", side_effect=build_gateway), \
            patch("service.handlers.lookup_handler.get_customer_gateway", side_effect=build_gateway):
        yield fake_shopify


@pytest.fixture
def make_event():
    """Build an API Gateway REST proxy event carrying a JSON body."""

    def _make(
        body: Any = None,
        method: str = "POST",
        origin: Optional[str] = TEST_ORIGIN,
        path: str = "/api/clubdvigi-upsert",
        raw_body: Optional[str] = None,
    ) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json", "User-Agent": "test-agent/1.0"}
        if origin:
            headers["origin"] = origin
        return {
            "httpMethod": method,
            "path": path,
            "headers": headers,
            "body": raw_body if raw_body is not None else (json.dumps(body) if body is not None else None),
            "requestContext": {
                "requestId": "test-request-id-123",
                "stage": "test",
                "httpMethod": method,
                "path": path,
            },
            "pathParameters": None,
            "queryStringParameters": None,
            "isBase64Encoded": False,
        }

    return _make


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-club-dvigi-function"
    context.function_version = "$LATEST"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-club-dvigi-function"
    context.memory_limit_in_mb = 256
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-club-dvigi-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    context.get_remaining_time_in_millis.return_value = 30000
    return context


@pytest.fixture(autouse=True)
def reset_metrics():
    """Drop metrics recorded by tests that bypass the decorated handler."""
    yield
    metrics.clear_metrics()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
