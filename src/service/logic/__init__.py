"""
Business Logic Layer Package

This package contains the registration and lookup flows. The services depend
only on the ``CustomerGateway`` interface, never on the HTTP client directly.
"""

from .lookup_service import CustomerLookupService
from .registration_service import (
    CustomerRegistrationService,
    RegistrationResult,
    admit_warranty_entry,
    decode_warranty_list,
    merge_tags,
)

__all__ = [
    "CustomerLookupService",
    "CustomerRegistrationService",
    "RegistrationResult",
    "admit_warranty_entry",
    "decode_warranty_list",
    "merge_tags",
]
