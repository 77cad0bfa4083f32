"""
Audit Logger

DESIGN DECISION: Every ledger operation is logged, including the
ones rejected as part of normal control flow.
This provides:
1. Traceability of changes to a shared ledger
2. Debugging capability when a stored document looks wrong
3. Visibility into commands that had no effect

The audit logger:
- Is synchronous, matching the ledger operations it reports on
- Gracefully handles failures (never breaks a ledger operation)
"""

import logging
import sys
from typing import Optional

import structlog

from debtledger.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route stdlib logging (and therefore structlog) to stdout.

    Call once at process startup.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Events are written to the structured local log, at a level
    matching their severity.
    """

    def __init__(self, logger_name: str = "debtledger.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()
        severity = event.severity.value

        try:
            if severity in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif severity == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif severity == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # A broken log sink must not abort a ledger operation
            print(f"WARNING: Failed to write audit event: {e}", file=sys.stderr)
            return False

        return True

    def log_error(
        self,
        error: BaseException,
        ledger_code: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Log an exception that aborted an operation."""
        self.log(
            AuditEventBuilder.system_error(
                error_type=type(error).__name__,
                error_message=str(error),
                ledger_code=ledger_code,
                details=details,
            )
        )

    def log_external_service_error(self, service: str, error: BaseException) -> None:
        """Log a failure talking to an external service."""
        self.log(
            AuditEventBuilder.external_service_error(
                service=service,
                error_message=str(error),
            )
        )
