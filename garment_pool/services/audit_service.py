"""
Audit log service.

Every write to the audit log goes through append(). Reading the
log doubles as the housekeeping trigger: entries past the
retention window are purged and the staleness sweep runs before
a page is returned, so no separate scheduler is needed.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from garment_pool.config import get_settings
from garment_pool.models.audit_log import AuditLogEntry
from garment_pool.models.base import utcnow
from garment_pool.models.enums import LogType, Severity
from garment_pool.services.notifier import Notifier, LoggingNotifier
from garment_pool.services.staleness import StalenessSweeper

logger = logging.getLogger(__name__)

WATERMARK = LogType.SYSTEM_ID_WATERMARK.value


@dataclass
class LogPage:
    logs: list[AuditLogEntry]
    page: int
    pages: int
    total: int


class AuditLogService:
    """
    Append, page through, purge and acknowledge log entries.

    Like the other services, this one never commits. Writes that
    belong to an inventory transition share its transaction and
    roll back with it.
    """

    def __init__(
        self,
        db: Session,
        notifier: Notifier | None = None,
        recipients: list[str] | None = None,
    ):
        settings = get_settings()
        self.db = db
        self.notifier = notifier or LoggingNotifier()
        self.recipients = (
            settings.NOTIFY_RECIPIENTS if recipients is None else recipients
        )
        self.page_size = settings.LOG_PAGE_SIZE
        self.retention = timedelta(weeks=settings.LOG_RETENTION_WEEKS)
        self.stale_after = timedelta(weeks=settings.STALE_AFTER_WEEKS)
        self.timestamp_format = settings.TIMESTAMP_FORMAT

    def format_timestamp(self, value: datetime) -> str:
        return value.strftime(self.timestamp_format)

    def append(
        self,
        type: str,
        severity: Severity,
        message: str,
        related_item_id: int | None = None,
    ) -> AuditLogEntry:
        """Add an entry to the current transaction."""
        entry = AuditLogEntry(
            type=type,
            severity=severity,
            message=message,
            related_item_id=related_item_id,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def raise_watermark(self, system_id: int) -> None:
        """
        Record a deleted ``system_id`` so it stays taken.

        Deletion log entries go away with mark-as-read and the
        retention purge; the watermark row does not, so the
        allocator never issues a deleted id again. There is at
        most one watermark row and it only moves up.
        """
        mark = self.db.execute(
            select(AuditLogEntry)
            .where(AuditLogEntry.type == WATERMARK)
            .order_by(AuditLogEntry.related_item_id.desc())
            .limit(1)
        ).scalar_one_or_none()

        if mark is None:
            self.db.add(AuditLogEntry(
                type=WATERMARK,
                severity=Severity.INFO,
                message="Highest system id ever deleted.",
                related_item_id=system_id,
            ))
        elif (mark.related_item_id or 0) < system_id:
            mark.related_item_id = system_id
        self.db.flush()

    def purge_expired(self, now: datetime | None = None) -> int:
        """Delete entries older than the retention window."""
        cutoff = (now or utcnow()) - self.retention
        result = self.db.execute(
            delete(AuditLogEntry).where(
                AuditLogEntry.created_at < cutoff,
                AuditLogEntry.type != WATERMARK,
            )
        )
        if result.rowcount:
            logger.info("Purged %d expired log entries", result.rowcount)
        return result.rowcount

    def _housekeeping(self, now: datetime) -> None:
        """
        Retention purge and staleness sweep, best-effort.

        Runs in a savepoint: if either step fails, its changes
        are dropped and the log page is served anyway.
        """
        sweeper = StalenessSweeper(
            self.db,
            self,
            self.notifier,
            self.recipients,
            stale_after=self.stale_after,
        )
        try:
            with self.db.begin_nested():
                self.purge_expired(now)
                sweeper.sweep(now)
        except SQLAlchemyError:
            logger.exception("Log housekeeping failed")

    def list_logs(self, page: int = 1, now: datetime | None = None) -> LogPage:
        """
        Return one page of entries, newest first.

        Pages start at 1; smaller values are clamped. ``pages`` is
        at least 1 even for an empty log.
        """
        now = now or utcnow()
        self._housekeeping(now)

        page = max(1, page)
        visible = AuditLogEntry.type != WATERMARK
        total = self.db.execute(
            select(func.count()).select_from(AuditLogEntry).where(visible)
        ).scalar()
        pages = max(1, math.ceil(total / self.page_size))

        logs = self.db.execute(
            select(AuditLogEntry)
            .where(visible)
            .order_by(AuditLogEntry.created_at.desc(), AuditLogEntry.id.desc())
            .offset((page - 1) * self.page_size)
            .limit(self.page_size)
        ).scalars().all()

        return LogPage(logs=list(logs), page=page, pages=pages, total=total)

    def delete_logs(self, ids: list[int]) -> int:
        """Delete the given entries ("mark as read"). Unknown ids are ignored."""
        if not ids:
            return 0
        result = self.db.execute(
            delete(AuditLogEntry).where(
                AuditLogEntry.id.in_(list(set(ids))),
                AuditLogEntry.type != WATERMARK,
            )
        )
        return result.rowcount
