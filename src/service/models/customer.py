"""
Customer and warranty models.

Upstream models mirror the slices of the Shopify Admin GraphQL schema that the
handlers select. They accept the camelCase wire names and ignore anything else
the API returns. ``WarrantyEntry`` is the record stored inside the customer's
warranty metafield.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UpstreamModel(BaseModel):
    """Base for models parsed from Admin API responses."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class UserError(UpstreamModel):
    """A request-level validation failure reported next to the payload."""

    field: Optional[list[str]] = None
    message: str = ''


class ShopifyCustomer(UpstreamModel):
    """Customer node as returned by the ``customers`` and ``customer`` queries."""

    id: str
    email: Optional[str] = None
    first_name: Annotated[Optional[str], Field(alias='firstName')] = None
    last_name: Annotated[Optional[str], Field(alias='lastName')] = None
    phone: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    @field_validator('tags', mode='before')
    @classmethod
    def null_tags_are_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class CustomerReference(UpstreamModel):
    id: str


class Metafield(UpstreamModel):
    id: Optional[str] = None
    value: Optional[str] = None


class _MutationPayload(UpstreamModel):
    user_errors: Annotated[Optional[list[UserError]], Field(alias='userErrors')] = None

    @property
    def first_user_error(self) -> Optional[UserError]:
        return self.user_errors[0] if self.user_errors else None


class CustomerMutationPayload(_MutationPayload):
    """Payload of ``customerCreate`` and ``customerUpdate``."""

    customer: Optional[CustomerReference] = None


class MetafieldsSetPayload(_MutationPayload):
    """Payload of ``metafieldsSet``."""


class GraphQLResponse(UpstreamModel):
    """Top-level GraphQL envelope.

    Shopify sends ``errors`` as a list of objects for query errors and as a
    plain string for authentication failures.
    """

    data: Optional[dict[str, Any]] = None
    errors: Optional[list[Any] | dict[str, Any] | str] = None

    def error_messages(self) -> list[str]:
        if not self.errors:
            return []
        if isinstance(self.errors, str):
            return [self.errors]
        if isinstance(self.errors, dict):
            return [str(self.errors.get('message', self.errors))]
        return [
            str(error.get('message', error)) if isinstance(error, dict) else str(error)
            for error in self.errors
        ]


class CustomerInput(BaseModel):
    """``CustomerInput`` variables sent to the create and update mutations."""

    email: str
    first_name: Annotated[Optional[str], Field(serialization_alias='firstName')] = None
    last_name: Annotated[Optional[str], Field(serialization_alias='lastName')] = None
    phone: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    def to_variables(self) -> dict[str, Any]:
        # Absent fields are omitted so the mutation leaves them untouched
        return self.model_dump(by_alias=True, exclude_none=True)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with milliseconds and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class WarrantyEntry(BaseModel):
    """One product registered under warranty by a customer."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: str | int = ''
    handle: str = ''
    title: str = ''
    month: Optional[int | str] = None
    year: Optional[int | str] = None
    recorded_at: Annotated[str, Field(alias='recordedAt', default_factory=utc_timestamp)]

    @property
    def identity(self) -> tuple[Any, Any, Any]:
        """The (handle, month, year) triple that makes an entry unique."""
        return (self.handle, self.month, self.year)

    @property
    def is_admissible(self) -> bool:
        """An entry needs a title or a handle to be worth storing."""
        return bool(self.title or self.handle)

    def matches(self, stored: Any) -> bool:
        """True when a raw stored item has the same identity as this entry."""
        if not isinstance(stored, dict):
            return False
        return (stored.get('handle'), stored.get('month'), stored.get('year')) == self.identity

    def to_stored(self) -> dict[str, Any]:
        # Missing month/year are left out of the stored JSON rather than nulled
        return self.model_dump(by_alias=True, exclude_none=True)
