"""
Staleness sweep.

Finds garments that have been in circulation for longer than
the configured threshold, records one YELLOW warning per
garment and mails every recipient about it. A garment that
already has a warning in the log is not reported again.
"""

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from garment_pool.errors import TransportError
from garment_pool.models.audit_log import AuditLogEntry
from garment_pool.models.base import utcnow
from garment_pool.models.enums import ItemStatus, LogType, Severity
from garment_pool.models.item import InventoryItem
from garment_pool.services.notifier import Notifier

if TYPE_CHECKING:
    from garment_pool.services.audit_service import AuditLogService

logger = logging.getLogger(__name__)

DEFAULT_STALE_AFTER = timedelta(weeks=6)


class StalenessSweeper:

    def __init__(
        self,
        db: Session,
        audit_log: "AuditLogService",
        notifier: Notifier,
        recipients: list[str],
        stale_after: timedelta = DEFAULT_STALE_AFTER,
    ):
        self.db = db
        self.audit_log = audit_log
        self.notifier = notifier
        self.recipients = recipients
        self.stale_after = stale_after

    def find_candidates(self, now: datetime) -> list[InventoryItem]:
        """
        Circulating garments past the threshold with no warning yet.

        The reference time is issued_at, or updated_at for rows
        that were put into circulation by a manual edit without
        an issue date.
        """
        cutoff = now - self.stale_after
        reference = func.coalesce(
            InventoryItem.issued_at, InventoryItem.updated_at
        )
        already_warned = select(AuditLogEntry.related_item_id).where(
            AuditLogEntry.type == LogType.STALENESS_WARNING.value,
            AuditLogEntry.related_item_id.is_not(None),
        )

        items = self.db.execute(
            select(InventoryItem)
            .where(
                InventoryItem.status == ItemStatus.CIRCULATING,
                reference < cutoff,
                InventoryItem.system_id.not_in(already_warned),
            )
            .order_by(InventoryItem.system_id)
        ).scalars().all()
        return list(items)

    def sweep(self, now: datetime | None = None) -> list[InventoryItem]:
        """
        Warn about every fresh candidate.

        Each warning is written in its own savepoint; a failed
        write is logged and that garment is skipped (it will be
        picked up again on the next sweep). Mail goes out only
        after the warning is in the log.
        """
        now = now or utcnow()
        warned = []

        for item in self.find_candidates(now):
            message = self._render(item)
            try:
                with self.db.begin_nested():
                    self.audit_log.append(
                        LogType.STALENESS_WARNING.value,
                        Severity.YELLOW,
                        message,
                        related_item_id=item.system_id,
                    )
            except SQLAlchemyError:
                logger.exception(
                    "Could not record staleness warning for item %d",
                    item.system_id,
                )
                continue

            # Mail is not transactional: if the caller's commit fails
            # after this, the next sweep mails about this item again.
            self._notify(item, message)
            warned.append(item)

        if warned:
            logger.info("Staleness sweep warned about %d item(s)", len(warned))
        return warned

    def _render(self, item: InventoryItem) -> str:
        since = item.issued_at or item.updated_at
        weeks = int(self.stale_after.days // 7)
        issued_to = item.issued_to or "unknown"
        return (
            f"Garment {item.describe()} with system id {item.system_id} "
            f"has been in circulation for more than {weeks} weeks "
            f"(issued to {issued_to} on {self.audit_log.format_timestamp(since)})."
        )

    def _notify(self, item: InventoryItem, message: str) -> None:
        if not self.recipients:
            logger.debug("No recipients configured, skipping mail")
            return

        subject = f"Garment {item.system_id} overdue"
        for recipient in self.recipients:
            try:
                self.notifier.send(recipient, subject, message)
            except TransportError as e:
                logger.warning(
                    "Staleness mail for item %d to %s failed: %s",
                    item.system_id, recipient, e,
                )
