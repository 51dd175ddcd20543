"""
Input models for request validation using Pydantic.

This module defines the bodies accepted from the storefront form. Field names
match the form's snake_case payload; unknown fields are ignored.
"""

from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator


class UpsertCustomerRequest(BaseModel):
    """Request model for registering a customer and a product under warranty."""

    # Optional here so that its absence maps to the form's own 400 message
    email: Annotated[str | None, Field(
        default=None,
        description='Customer email, used as the lookup key',
        examples=['ana@example.com']
    )] = None

    first_name: Annotated[str | None, Field(default=None, examples=['Ana'])] = None
    last_name: Annotated[str | None, Field(default=None, examples=['Pérez'])] = None

    whatsapp: Annotated[str | None, Field(
        default=None,
        description='Phone number stored as the customer phone',
        examples=['+5491122334455']
    )] = None

    notify_channel: Annotated[str | None, Field(
        default=None,
        description='Preferred notification channel; "whatsapp" adds a tag',
        examples=['whatsapp', 'email']
    )] = None

    product_id: Annotated[str | int | None, Field(default=None, examples=['gid://shopify/Product/1'])] = None
    product_handle: Annotated[str | None, Field(default=None, examples=['filter-x'])] = None
    product_title: Annotated[str | None, Field(default=None, examples=['Filtro X'])] = None

    # Compared by exact value, so 3 and "3" are different months
    month: Annotated[int | str | None, Field(default=None, examples=[3, '03'])] = None
    year: Annotated[int | str | None, Field(default=None, examples=[2024])] = None

    tags: Annotated[list[str], Field(
        default_factory=list,
        description='Extra tags to add to the customer'
    )]

    @field_validator('tags', mode='before')
    @classmethod
    def coerce_tags(cls, v: Any) -> Any:
        """Anything other than a list counts as no tags."""
        return v if isinstance(v, list) else []


class LookupCustomerRequest(BaseModel):
    """Request model for looking up a customer's contact details."""

    email: Annotated[str | None, Field(
        default=None,
        description='Customer email to look up',
        examples=['ana@example.com']
    )] = None
