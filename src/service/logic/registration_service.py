"""
Business Logic Layer for Club Dvigi registrations.

A registration finds the customer by email, creates or updates it with the
merged tag set, then appends the submitted product to the warranty list kept
in a JSON metafield. Steps run strictly in order because each one needs the
customer ID or data produced by the previous step. Nothing guards the
read-modify-write of tags and warranty list against a concurrent request for
the same email; the last writer wins.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from aws_lambda_powertools.metrics import MetricUnit

from service.dal import CustomerGateway
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.customer import CustomerInput, WarrantyEntry
from service.models.input import UpsertCustomerRequest

CLUB_TAG = 'clubdvigi'
FORM_COMPLETED_TAG = 'Completó Formulario Web'
WHATSAPP_TAG = 'clubdvigi_whatsapp'
WHATSAPP_CHANNEL = 'whatsapp'


def _reject_non_finite(constant: str) -> Any:
    raise ValueError(f'non-finite number {constant} in stored warranty list')


def merge_tags(existing: Iterable[str], requested: Iterable[str], notify_channel: Optional[str]) -> list[str]:
    """
    Union of the customer's current tags and the tags this registration adds.

    Existing tags come first and insertion order is kept; duplicates are
    collapsed by exact string equality.
    """
    added = list(requested)
    if notify_channel == WHATSAPP_CHANNEL:
        added.append(WHATSAPP_TAG)
    added.extend([CLUB_TAG, FORM_COMPLETED_TAG])
    return list(dict.fromkeys([*existing, *added]))


def decode_warranty_list(raw: Optional[str], customer_id: str) -> list[Any]:
    """Decode the stored warranty list, falling back to an empty list on bad data."""
    if not raw:
        return []

    try:
        items = json.loads(raw, parse_constant=_reject_non_finite)
    except ValueError as exc:
        logger.warning(
            'Stored warranty list is not valid JSON, starting from an empty list',
            extra={'customer_id': customer_id, 'error': str(exc)},
        )
        metrics.add_metric(name='WarrantyListCorrupt', unit=MetricUnit.Count, value=1)
        return []

    if not isinstance(items, list):
        logger.warning(
            'Stored warranty list is not a list, starting from an empty list',
            extra={'customer_id': customer_id, 'stored_type': type(items).__name__},
        )
        metrics.add_metric(name='WarrantyListCorrupt', unit=MetricUnit.Count, value=1)
        return []

    return items


def admit_warranty_entry(items: list[Any], entry: WarrantyEntry) -> tuple[list[Any], bool]:
    """
    Append ``entry`` unless it is a duplicate or carries neither title nor handle.

    Returns:
        The resulting list and whether the entry was appended
    """
    if not entry.is_admissible:
        return items, False
    if any(entry.matches(item) for item in items):
        return items, False
    return [*items, entry.to_stored()], True


@dataclass
class RegistrationResult:
    """Outcome of a registration."""

    customer_id: str
    existed: bool
    entry_appended: bool
    tags: list[str] = field(default_factory=list)
    warranty_items: list[Any] = field(default_factory=list)


class CustomerRegistrationService:
    """Registers customers and their products under warranty."""

    def __init__(self, gateway: CustomerGateway) -> None:
        self.gateway = gateway

    @tracer.capture_method
    def register(self, request: UpsertCustomerRequest) -> RegistrationResult:
        """
        Create or update the customer and record the submitted product.

        Args:
            request: Validated form body; ``email`` must be set

        Returns:
            RegistrationResult describing what changed

        Raises:
            UpstreamUserError: If Shopify rejects the customer or metafield write
            UpstreamServiceError: If Shopify cannot be reached or answers unusably
        """
        email = request.email
        found = self.gateway.find_customer_by_email(email)
        existed = found is not None

        tags = merge_tags(found.tags if found else [], request.tags, request.notify_channel)
        customer_input = CustomerInput(
            email=email,
            first_name=request.first_name or None,
            last_name=request.last_name or None,
            phone=request.whatsapp or None,
            tags=tags,
        )

        if found is None:
            customer_id = self.gateway.create_customer(customer_input)
            metrics.add_metric(name='CustomerCreated', unit=MetricUnit.Count, value=1)
            logger.info('Customer created', extra={'customer_id': customer_id})
        else:
            customer_id = found.id
            self.gateway.update_customer(customer_id, customer_input)
            metrics.add_metric(name='CustomerUpdated', unit=MetricUnit.Count, value=1)
            logger.info('Customer updated', extra={'customer_id': customer_id})

        tracer.put_annotation('customer_existed', existed)

        metafield = self.gateway.get_warranty_metafield(customer_id)
        items = decode_warranty_list(metafield.value if metafield else None, customer_id)

        entry = WarrantyEntry(
            product_id=request.product_id or '',
            handle=request.product_handle or '',
            title=request.product_title or '',
            month=request.month,
            year=request.year,
        )
        items, appended = admit_warranty_entry(items, entry)
        metrics.add_metric(
            name='WarrantyEntryAppended' if appended else 'WarrantyEntrySkipped',
            unit=MetricUnit.Count,
            value=1,
        )

        # Written back even when unchanged
        self.gateway.set_warranty_metafield(
            customer_id,
            json.dumps(items, ensure_ascii=False, separators=(',', ':')),
        )

        logger.info(
            'Registration completed',
            extra={
                'customer_id': customer_id,
                'existed': existed,
                'entry_appended': appended,
                'warranty_item_count': len(items),
            },
        )

        return RegistrationResult(
            customer_id=customer_id,
            existed=existed,
            entry_appended=appended,
            tags=tags,
            warranty_items=items,
        )
