"""
Shared request pipeline for the form endpoints.

``form_endpoint`` answers CORS preflights, rejects anything but POST, and is
the outer error boundary: service errors become their mapped status with
``{"error": message}``, anything else becomes a 500.
"""

import functools
from typing import Any, Callable, Dict, Optional, TypeVar

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes.common import BaseProxyEvent
from pydantic import BaseModel, ValidationError

from service.handlers.utils.errors import (
    GENERIC_ERROR_MESSAGE,
    METHOD_NOT_ALLOWED_MESSAGE,
    BaseServiceError,
    RequestValidationError,
    get_http_status_code,
    log_error_metrics,
)
from service.handlers.utils.http import (
    error_response,
    get_http_method,
    get_request_id,
    get_request_origin,
    parse_json_body,
    preflight_response,
    to_proxy_event,
)
from service.handlers.utils.observability import logger, metrics, tracer

EndpointFunc = Callable[[BaseProxyEvent, Optional[str]], Dict[str, Any]]
FormT = TypeVar('FormT', bound=BaseModel)


def parse_form(event: BaseProxyEvent, model: type[FormT]) -> FormT:
    """
    Validate the JSON body of a form submission.

    Raises:
        RequestValidationError: If the email is missing or a field has the wrong type
    """
    body = parse_json_body(event)
    if not body.get('email'):
        raise RequestValidationError()

    try:
        return model.model_validate(body)
    except ValidationError as e:
        first_error = e.errors()[0]
        field = '.'.join(str(part) for part in first_error['loc'])
        raise RequestValidationError(
            f"Invalid value for '{field}': {first_error['msg']}",
            details={'error_count': e.error_count()},
        ) from e


def form_endpoint(func: EndpointFunc) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    """Wrap ``func(proxy_event, origin)`` with CORS, method checks and error handling."""

    @functools.wraps(func)
    def wrapper(event: Dict[str, Any]) -> Dict[str, Any]:
        proxy_event = to_proxy_event(event)
        origin = get_request_origin(proxy_event)
        method = get_http_method(proxy_event)

        tracer.put_annotation('http_method', method or 'UNKNOWN')

        if method == 'OPTIONS':
            return preflight_response(origin)

        if method != 'POST':
            logger.info('Method not allowed', extra={'http_method': method})
            metrics.add_metric(name='MethodNotAllowed', unit=MetricUnit.Count, value=1)
            return error_response(405, METHOD_NOT_ALLOWED_MESSAGE, origin)

        try:
            return func(proxy_event, origin)

        except BaseServiceError as e:
            log_error_metrics(e)
            return error_response(get_http_status_code(e), e.message, origin)

        except Exception as e:
            logger.exception('Unexpected error in handler', extra={
                'error': str(e),
                'function_name': func.__name__,
                'request_id': get_request_id(proxy_event),
            })
            metrics.add_metric(name='ErrorCount', unit=MetricUnit.Count, value=1)
            return error_response(500, str(e) or GENERIC_ERROR_MESSAGE, origin)

    return wrapper
