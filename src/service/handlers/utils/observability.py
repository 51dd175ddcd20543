"""
Shared AWS Lambda Powertools instances for the Club Dvigi handlers.

Both functions log, trace and emit metrics through these singletons so that
every record carries the same service name and correlation id.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

# CloudWatch namespace for registration and lookup KPIs
METRICS_NAMESPACE = 'ClubDvigi'

# Structured JSON logs with UTC timestamps; service from POWERTOOLS_SERVICE_NAME,
# level from LOG_LEVEL
logger: Logger = Logger(utc=True)

# X-Ray tracing; off outside Lambda or with POWERTOOLS_TRACE_DISABLED=true
tracer: Tracer = Tracer()

# Embedded metric format, flushed by metrics.log_metrics on each invocation
metrics = Metrics(namespace=METRICS_NAMESPACE)
