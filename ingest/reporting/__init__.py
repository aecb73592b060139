from ingest.reporting.actor import AnonymousActorContext, BaseActorContext, StaticActorContext
from ingest.reporting.error_reporter import ErrorReporter, ReportedFailure

__all__ = [
    "AnonymousActorContext",
    "BaseActorContext",
    "ErrorReporter",
    "ReportedFailure",
    "StaticActorContext",
]
