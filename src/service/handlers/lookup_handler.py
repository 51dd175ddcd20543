"""
Lookup Handler - Lambda function returning a customer's contact details.

Used by the storefront form to prefill name and phone once the email is known.
"""

from typing import Any, Dict, Optional

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes.common import BaseProxyEvent
from aws_lambda_powertools.utilities.typing import LambdaContext

from service.dal import get_customer_gateway
from service.handlers.utils.endpoint import form_endpoint, parse_form
from service.handlers.utils.http import build_response
from service.handlers.utils.observability import logger, metrics, tracer
from service.logic.lookup_service import CustomerLookupService
from service.models.input import LookupCustomerRequest


@form_endpoint
def process_lookup_request(event: BaseProxyEvent, origin: Optional[str]) -> Dict[str, Any]:
    """Look up the customer by email; 404 with ``{}`` when there is none."""
    request = parse_form(event, LookupCustomerRequest)

    gateway = get_customer_gateway()
    try:
        found = CustomerLookupService(gateway).lookup(request.email)
    finally:
        gateway.close()

    if found is None:
        return build_response(404, {}, origin)

    metrics.add_metric(name='SuccessCount', unit=MetricUnit.Count, value=1)
    return build_response(200, found.model_dump(), origin)


@metrics.log_metrics(capture_cold_start_metric=True)
@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lookup Lambda function handler with AWS Powertools

    Args:
        event: Lambda event payload
        context: Lambda context object

    Returns:
        API Gateway response
    """
    metrics.add_metric(name='RequestCount', unit=MetricUnit.Count, value=1)
    return process_lookup_request(event)
