# Domain Session Package
from .models import CardAnswer, Session, SessionStatus, SessionSummary
from .ports import AnalyticsSink

__all__ = ["CardAnswer", "Session", "SessionStatus", "SessionSummary", "AnalyticsSink"]
