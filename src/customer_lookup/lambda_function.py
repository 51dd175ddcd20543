"""
Customer Lookup Lambda Function - Entry point for the form prefill lookup.

This module serves as the Lambda function entry point that delegates to the
lookup handler in the shared service package.
"""

import os
import sys
from typing import Any, Dict

# Add the service module to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from service.handlers.lookup_handler import lambda_handler as lookup_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function entry point for the lookup endpoint.

    Args:
        event: Lambda event payload (API Gateway event)
        context: Lambda context object

    Returns:
        API Gateway response dictionary
    """
    return lookup_handler(event, context)
