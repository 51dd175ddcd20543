"""
Customer Upsert Lambda Function - Entry point for the registration form.

This module serves as the Lambda function entry point that delegates to the
upsert handler in the shared service package.
"""

import os
import sys
from typing import Any, Dict

# Add the service module to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from service.handlers.upsert_handler import lambda_handler as upsert_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function entry point for the registration endpoint.

    Args:
        event: Lambda event payload (API Gateway event)
        context: Lambda context object

    Returns:
        API Gateway response dictionary
    """
    return upsert_handler(event, context)
