from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Protocol

from ingest.logging.logger import Log
from ingest.reporting.actor import AnonymousActorContext, BaseActorContext
from ingest.upload.exceptions import ConfigurationError


class ErrorLogger(Protocol):
    def error(self, message: str, **context: object) -> None: ...


@dataclass(frozen=True)
class ReportedFailure:
    """User-facing failure payload paired with an HTTP status code."""

    message: str
    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    @property
    def success(self) -> bool:
        return False

    @property
    def payload(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message}


class ErrorReporter:
    """Logs a failure with request and actor metadata and builds its payload.

    This is a terminal sink: no retries, no escalation.
    """

    STATUS_CODES: dict[type[Exception], int] = {
        ConfigurationError: HTTPStatus.UNPROCESSABLE_ENTITY,
    }

    def __init__(
        self,
        actor_context: BaseActorContext | None = None,
        logger: ErrorLogger = Log,
    ) -> None:
        self._actor_context = actor_context or AnonymousActorContext()
        self._logger = logger

    def report(
        self,
        message: str,
        context: Mapping[str, Any] | None = None,
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR,
    ) -> ReportedFailure:
        self._logger.error(
            message,
            request=dict(context) if context is not None else {},
            user_id=self._actor_context.current_actor_id(),
        )
        return ReportedFailure(message=message, status_code=int(status_code))

    def report_exception(
        self,
        exc: Exception,
        context: Mapping[str, Any] | None = None,
    ) -> ReportedFailure:
        """Report a propagated error with the status code for its type."""
        status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
        for exc_type, code in self.STATUS_CODES.items():
            if isinstance(exc, exc_type):
                status_code = code
                break
        return self.report(str(exc), context, status_code)
