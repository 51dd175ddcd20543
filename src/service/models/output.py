"""
Output models for API responses using Pydantic.

This module defines the bodies returned to the storefront form by the upsert
and lookup functions.
"""

from typing import Annotated

from pydantic import BaseModel, Field

EXISTING_CUSTOMER_MESSAGE = 'Actualizamos tus datos y tu producto en Club Dvigi 💧'
NEW_CUSTOMER_MESSAGE = 'Te registramos en Club Dvigi y guardamos tu producto 💙'


class UpsertCustomerOutput(BaseModel):
    """Response model for a successful registration."""

    ok: Annotated[bool, Field(description='Always true on success')] = True

    existed: Annotated[bool, Field(
        description='Whether the customer was already registered before this request'
    )]

    message: Annotated[str, Field(
        description='Localized confirmation shown to the customer',
        examples=[EXISTING_CUSTOMER_MESSAGE, NEW_CUSTOMER_MESSAGE]
    )]

    @classmethod
    def for_customer(cls, existed: bool) -> 'UpsertCustomerOutput':
        return cls(
            existed=existed,
            message=EXISTING_CUSTOMER_MESSAGE if existed else NEW_CUSTOMER_MESSAGE,
        )


class LookupCustomerOutput(BaseModel):
    """Response model for a found customer; absent fields are empty strings."""

    first_name: Annotated[str, Field(examples=['Ana'])] = ''
    last_name: Annotated[str, Field(examples=['Pérez'])] = ''
    phone: Annotated[str, Field(examples=['+5491122334455'])] = ''


class ErrorOutput(BaseModel):
    """Error response body."""

    error: Annotated[str, Field(
        description='Human readable error message',
        examples=['Email requerido']
    )]
