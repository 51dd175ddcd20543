"""
Request parsing and response building for API Gateway events.

Both functions accept REST API (payload v1) events and HTTP API / function URL
(payload v2) events, read through the Powertools event data classes. Every
response carries the same permissive CORS headers, echoing the caller's Origin
when there is one.
"""

import binascii
import json
from typing import Any, Dict, Optional

from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent, APIGatewayProxyEventV2
from aws_lambda_powertools.utilities.data_classes.common import BaseProxyEvent

from service.models.output import ErrorOutput

ALLOWED_METHODS = 'POST, OPTIONS'
ALLOWED_HEADERS = 'Content-Type'
JSON_CONTENT_TYPE = 'application/json; charset=utf-8'
HTTP_API_PAYLOAD_VERSION = '2.0'


def cors_headers(origin: Optional[str]) -> Dict[str, str]:
    """CORS headers applied to every response."""
    return {
        'Vary': 'Origin',
        'Access-Control-Allow-Origin': origin or '*',
        'Access-Control-Allow-Methods': ALLOWED_METHODS,
        'Access-Control-Allow-Headers': ALLOWED_HEADERS,
    }


def to_proxy_event(event: Dict[str, Any]) -> BaseProxyEvent:
    """Wrap a raw event in the data class matching its payload version."""
    if event.get('version') == HTTP_API_PAYLOAD_VERSION:
        return APIGatewayProxyEventV2(event)
    return APIGatewayProxyEvent(event)


def get_request_origin(event: BaseProxyEvent) -> Optional[str]:
    return event.headers.get('origin')


def get_http_method(event: BaseProxyEvent) -> str:
    try:
        method = event.http_method
    except KeyError:
        return ''
    return (method or '').upper()


def get_request_id(event: BaseProxyEvent) -> str:
    try:
        return event.request_context.request_id
    except KeyError:
        return 'unknown'


def parse_json_body(event: BaseProxyEvent) -> Dict[str, Any]:
    """
    Decode the request body as a JSON object.

    A missing body, invalid JSON, or a JSON value that is not an object all
    yield an empty dict, so the request fails the required-email check.
    """
    try:
        parsed = event.json_body
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return {}

    return parsed if isinstance(parsed, dict) else {}


def build_response(status_code: int, body: Any, origin: Optional[str] = None) -> Dict[str, Any]:
    """Create an API Gateway proxy response with a JSON body and CORS headers."""
    return {
        'statusCode': status_code,
        'headers': {
            **cors_headers(origin),
            'Content-Type': JSON_CONTENT_TYPE,
        },
        'body': json.dumps(body, ensure_ascii=False),
    }


def error_response(status_code: int, message: str, origin: Optional[str] = None) -> Dict[str, Any]:
    return build_response(status_code, ErrorOutput(error=message).model_dump(), origin)


def preflight_response(origin: Optional[str] = None) -> Dict[str, Any]:
    """Empty 204 answer to a CORS preflight."""
    return {
        'statusCode': 204,
        'headers': cors_headers(origin),
        'body': '',
    }
