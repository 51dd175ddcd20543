"""
Upsert Handler - Lambda function for Club Dvigi registrations.

Creates or updates a Shopify customer from the storefront form, tags it as a
Club Dvigi member and appends the submitted product to its warranty list.
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
from service.logic.registration_service import CustomerRegistrationService
from service.models.input import UpsertCustomerRequest
from service.models.output import UpsertCustomerOutput


@form_endpoint
def process_upsert_request(event: BaseProxyEvent, origin: Optional[str]) -> Dict[str, Any]:
    """
    Register the customer described by the form body.

    Args:
        event: API Gateway proxy event with a JSON body
        origin: Request Origin header, echoed in CORS headers

    Returns:
        API Gateway response with ``{ok, existed, message}``
    """
    request = parse_form(event, UpsertCustomerRequest)

    gateway = get_customer_gateway()
    try:
        result = CustomerRegistrationService(gateway).register(request)
    finally:
        gateway.close()

    metrics.add_metric(name='SuccessCount', unit=MetricUnit.Count, value=1)
    output = UpsertCustomerOutput.for_customer(result.existed)
    return build_response(200, output.model_dump(), origin)


@metrics.log_metrics(capture_cold_start_metric=True)
@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Upsert Lambda function handler with AWS Powertools

    Args:
        event: Lambda event payload
        context: Lambda context object

    Returns:
        API Gateway response
    """
    metrics.add_metric(name='RequestCount', unit=MetricUnit.Count, value=1)
    return process_upsert_request(event)
