"""
Shopify Admin GraphQL implementation of the customer gateway.

Each gateway owns one ``httpx.Client`` for the lifetime of a single request.
Calls are sequential, never retried, and use the client's default timeout.
"""

from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from service.handlers.models.env_vars import ShopSettings
from service.handlers.utils.errors import UpstreamServiceError, UpstreamUserError
from service.handlers.utils.observability import logger, tracer
from service.models.customer import (
    CustomerInput,
    CustomerMutationPayload,
    GraphQLResponse,
    Metafield,
    MetafieldsSetPayload,
    ShopifyCustomer,
)

ModelT = TypeVar('ModelT', bound=BaseModel)

SEARCH_CUSTOMER_QUERY = """
      query($q:String!){
        customers(first:1, query:$q){
          nodes{ id email tags }
        }
      }"""

LOOKUP_CUSTOMER_QUERY = """
      query ($q: String!) {
        customers(first: 1, query: $q) {
          nodes { id email firstName lastName phone }
        }
      }"""

CREATE_CUSTOMER_MUTATION = """
        mutation($input:CustomerInput!){
          customerCreate(input:$input){
            customer{ id }
            userErrors{ message }
          }
        }"""

UPDATE_CUSTOMER_MUTATION = """
        mutation($id:ID!,$input:CustomerInput!){
          customerUpdate(id:$id,input:$input){
            customer{ id }
            userErrors{ message }
          }
        }"""

GET_METAFIELD_QUERY = """
      query($id:ID!){{
        customer(id:$id){{
          metafield(namespace:"{namespace}", key:"{key}"){{
            id
            value
          }}
        }}
      }}"""

SET_METAFIELD_MUTATION = """
      mutation($ownerId:ID!,$value:String!){{
        metafieldsSet(metafields:[{{
          ownerId:$ownerId,
          namespace:"{namespace}",
          key:"{key}",
          type:"json",
          value:$value
        }}]){{
          userErrors{{ message }}
        }}
      }}"""


def _dig(data: Optional[dict[str, Any]], *path: Any) -> Any:
    """Walk a nested response, returning None as soon as a step is missing."""
    current: Any = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
    return current


class ShopifyCustomerGateway:
    """Customer operations against one shop's Admin GraphQL API."""

    def __init__(self, settings: ShopSettings, transport: Optional[httpx.BaseTransport] = None) -> None:
        """
        Initialize the gateway.

        Args:
            settings: Shop domain, token, API version and warranty metafield location
            transport: Optional httpx transport, used to point the client at a fake API
        """
        self.settings = settings
        self._client = httpx.Client(
            headers={
                'X-Shopify-Access-Token': settings.access_token,
                'Content-Type': 'application/json',
            },
            transport=transport,
        )
        logger.debug(f'Shopify gateway initialized for shop: {settings.shop}')

    def __enter__(self) -> 'ShopifyCustomerGateway':
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @tracer.capture_method
    def execute(self, operation: str, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """
        POST a GraphQL document and return its ``data`` object.

        Raises:
            UpstreamServiceError: On transport failure, a non-JSON body, or top-level GraphQL errors
        """
        try:
            response = self._client.post(
                self.settings.graphql_url,
                json={'query': query, 'variables': variables},
            )
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(f'Shopify request failed: {exc}', operation) from exc

        try:
            envelope = GraphQLResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UpstreamServiceError(
                'Shopify returned an unreadable response',
                operation,
                {'status_code': response.status_code},
            ) from exc

        messages = envelope.error_messages()
        if messages:
            raise UpstreamServiceError(
                '; '.join(messages),
                operation,
                {'status_code': response.status_code},
            )

        logger.debug('Shopify operation completed', extra={'operation': operation, 'status_code': response.status_code})
        return envelope.data or {}

    def _parse(self, model: type[ModelT], raw: Any, operation: str) -> Optional[ModelT]:
        if raw is None:
            return None
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            raise UpstreamServiceError(
                f'Unexpected {operation} response shape',
                operation,
                {'validation_errors': exc.error_count()},
            ) from exc

    def _search(self, query: str, email: str) -> Optional[ShopifyCustomer]:
        data = self.execute('customers', query, {'q': f'email:{email}'})
        return self._parse(ShopifyCustomer, _dig(data, 'customers', 'nodes', 0), 'customers')

    @tracer.capture_method
    def find_customer_by_email(self, email: str) -> Optional[ShopifyCustomer]:
        """Return the first customer matching the email, with its tags."""
        return self._search(SEARCH_CUSTOMER_QUERY, email)

    @tracer.capture_method
    def find_customer_contact_by_email(self, email: str) -> Optional[ShopifyCustomer]:
        """Return the first customer matching the email, with name and phone."""
        return self._search(LOOKUP_CUSTOMER_QUERY, email)

    def _mutate_customer(self, operation: str, query: str, variables: dict[str, Any]) -> CustomerMutationPayload:
        data = self.execute(operation, query, variables)
        payload = self._parse(CustomerMutationPayload, _dig(data, operation), operation) or CustomerMutationPayload()
        user_error = payload.first_user_error
        if user_error:
            raise UpstreamUserError(user_error.message, operation, user_error.field)
        return payload

    @tracer.capture_method
    def create_customer(self, customer_input: CustomerInput) -> str:
        """
        Create a customer and return its ID.

        Raises:
            UpstreamUserError: If Shopify rejects the input
            UpstreamServiceError: If Shopify accepts it but returns no customer
        """
        payload = self._mutate_customer(
            'customerCreate',
            CREATE_CUSTOMER_MUTATION,
            {'input': customer_input.to_variables()},
        )
        if payload.customer is None:
            raise UpstreamServiceError('customerCreate returned no customer', 'customerCreate')
        return payload.customer.id

    @tracer.capture_method
    def update_customer(self, customer_id: str, customer_input: CustomerInput) -> None:
        """Update an existing customer in place."""
        self._mutate_customer(
            'customerUpdate',
            UPDATE_CUSTOMER_MUTATION,
            {'id': customer_id, 'input': customer_input.to_variables()},
        )

    @tracer.capture_method
    def get_warranty_metafield(self, customer_id: str) -> Optional[Metafield]:
        """Read the customer's warranty metafield, if it has one."""
        query = GET_METAFIELD_QUERY.format(
            namespace=self.settings.warranty_namespace,
            key=self.settings.warranty_key,
        )
        data = self.execute('customer', query, {'id': customer_id})
        return self._parse(Metafield, _dig(data, 'customer', 'metafield'), 'customer')

    @tracer.capture_method
    def set_warranty_metafield(self, customer_id: str, value: str) -> None:
        """
        Overwrite the customer's warranty metafield with a JSON string.

        Raises:
            UpstreamUserError: If Shopify rejects the write
        """
        query = SET_METAFIELD_MUTATION.format(
            namespace=self.settings.warranty_namespace,
            key=self.settings.warranty_key,
        )
        data = self.execute('metafieldsSet', query, {'ownerId': customer_id, 'value': value})
        payload = self._parse(MetafieldsSetPayload, _dig(data, 'metafieldsSet'), 'metafieldsSet')
        user_error = payload.first_user_error if payload else None
        if user_error:
            raise UpstreamUserError(user_error.message, 'metafieldsSet', user_error.field)
