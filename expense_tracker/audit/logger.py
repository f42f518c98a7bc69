"""
Audit Logger

Writes AuditEvents as JSON lines through structlog, at a log level chosen
from each event's severity. Registrations, logins, token rejections and
expense writes all pass through here.

log() swallows its own failures and returns False, so a broken log
handler never fails the request that triggered it.
"""

import logging
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at the given level."""
    logging.basicConfig(format="%(message)s", level=level.upper())


def get_logger(name: Optional[str] = None):
    return structlog.get_logger(name)


class AuditLogger:
    """
    Async front end over the audit log.

    Writes every event as one structured log line.
    """

    def __init__(self, logger_name: str = "expense_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            logging.getLogger(__name__).exception("Failed to write audit event")
            return False

        return True

    async def log_user_registered(self, user_id: str, username: str) -> None:
        await self.log(AuditEventBuilder.user_registered(user_id, username))

    async def log_registration_rejected(self, username: str, reason: str) -> None:
        await self.log(AuditEventBuilder.registration_rejected(username, reason))

    async def log_login_succeeded(self, user_id: str, username: str) -> None:
        await self.log(AuditEventBuilder.login_succeeded(user_id, username))

    async def log_login_failed(self, username: str) -> None:
        await self.log(AuditEventBuilder.login_failed(username))

    async def log_token_rejected(self, reason: str) -> None:
        await self.log(AuditEventBuilder.token_rejected(reason))

    async def log_expense_created(
        self,
        expense_id: str,
        owner_id: str,
        amount: str,
        category: str,
    ) -> None:
        """Log expense creation."""
        event = AuditEventBuilder.expense_created(
            expense_id=expense_id,
            owner_id=owner_id,
            amount=amount,
            category=category,
        )
        await self.log(event)

    async def log_expense_updated(
        self,
        expense_id: str,
        owner_id: str,
        changed_fields: list[str],
    ) -> None:
        """Log expense update."""
        event = AuditEventBuilder.expense_updated(
            expense_id=expense_id,
            owner_id=owner_id,
            changed_fields=changed_fields,
        )
        await self.log(event)

    async def log_expense_deleted(self, expense_id: str, owner_id: str) -> None:
        await self.log(AuditEventBuilder.expense_deleted(expense_id, owner_id))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        actor_id: Optional[str] = None,
    ) -> None:
        """Log a storage failure."""
        event = AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            actor_id=actor_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an unexpected error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        )
        await self.log(event)
