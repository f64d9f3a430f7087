"""
System id allocation for newly created garments.

Ids are four digits (1000-9999) because that is what fits on
the printed label. The allocator reads the current maximum once
per creation batch and counts up from there in memory, so it
must share the session (and transaction) of the inserts it
allocates for.
"""

import logging

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from garment_pool.errors import SystemIdOverflowError
from garment_pool.models.audit_log import AuditLogEntry
from garment_pool.models.item import (
    InventoryItem,
    FIRST_SYSTEM_ID,
    MAX_SYSTEM_ID,
)

logger = logging.getLogger(__name__)


class SystemIdAllocator:
    """
    Hands out sequential system ids inside one transaction.

    The first call locks the row holding the current maximum
    (SELECT ... FOR UPDATE where the backend supports it), so a
    concurrent batch waits instead of reading the same maximum.
    Where that does not serialize writers, the primary key on
    system_id rejects the second batch at flush time.
    """

    def __init__(self, db: Session):
        self.db = db
        self._last: int | None = None

    def _current_max(self) -> int:
        top = self.db.execute(
            select(InventoryItem.system_id)
            .order_by(InventoryItem.system_id.desc())
            .limit(1)
            .with_for_update()
        ).scalar_one_or_none()
        # Includes the watermark row, which holds the highest id
        # ever deleted and survives purge and mark-as-read.
        logged = self.db.execute(
            select(func.max(AuditLogEntry.related_item_id))
        ).scalar()
        candidates = [v for v in (top, logged) if v is not None]
        return max(candidates, default=FIRST_SYSTEM_ID - 1)

    def next_id(self) -> int:
        """
        Return the next free system id.

        Raises SystemIdOverflowError once the ceiling is passed.
        The cursor is not advanced on failure.
        """
        if self._last is None:
            self._last = self._current_max()

        candidate = self._last + 1
        if candidate > MAX_SYSTEM_ID:
            logger.warning(
                "System id space exhausted (next would be %d)", candidate
            )
            raise SystemIdOverflowError(
                f"System id overflow: {candidate} exceeds {MAX_SYSTEM_ID}"
            )

        self._last = candidate
        return candidate

    def allocate(self, count: int) -> list[int]:
        """Allocate ``count`` consecutive ids, all or none."""
        if self._last is None:
            self._last = self._current_max()
        start = self._last
        try:
            return [self.next_id() for _ in range(count)]
        except SystemIdOverflowError:
            self._last = start
            raise
