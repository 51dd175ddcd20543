"""
Business Logic Layer for customer lookups.
"""

from typing import Optional

from aws_lambda_powertools.metrics import MetricUnit

from service.dal import CustomerGateway
from service.handlers.utils.observability import logger, metrics, tracer
from service.models.output import LookupCustomerOutput


class CustomerLookupService:
    """Reads a customer's contact details so the form can be prefilled."""

    def __init__(self, gateway: CustomerGateway) -> None:
        self.gateway = gateway

    @tracer.capture_method
    def lookup(self, email: str) -> Optional[LookupCustomerOutput]:
        """Return name and phone for the email, or None when no customer matches."""
        customer = self.gateway.find_customer_contact_by_email(email)

        if customer is None:
            metrics.add_metric(name='LookupMiss', unit=MetricUnit.Count, value=1)
            logger.info('No customer found for email')
            return None

        metrics.add_metric(name='LookupHit', unit=MetricUnit.Count, value=1)
        logger.info('Customer found', extra={'customer_id': customer.id})

        return LookupCustomerOutput(
            first_name=customer.first_name or '',
            last_name=customer.last_name or '',
            phone=customer.phone or '',
        )
