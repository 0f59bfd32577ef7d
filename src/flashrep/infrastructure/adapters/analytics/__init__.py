# Infrastructure Analytics Adapters Package
from .http_sink import HttpAnalyticsSink
from .logging_sink import LoggingAnalyticsSink

__all__ = ["HttpAnalyticsSink", "LoggingAnalyticsSink"]
