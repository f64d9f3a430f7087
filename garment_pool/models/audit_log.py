"""
Audit log model.

Records every state-changing operation and every condition the
system detects on its own (stale garments). Entries are written
once and never updated; they leave the table either through
"mark as read" or the retention purge. The one exception is the
system id watermark row, which only moves up and is never removed.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Integer, Text, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from garment_pool.models.base import Base, utcnow
from garment_pool.models.enums import Severity


class AuditLogEntry(Base):
    """
    Immutable record of a system event.

    related_item_id is a lookup reference only. It is not a
    foreign key: the entry describing a deletion outlives the
    item it talks about.
    """

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    severity: Mapped[Severity] = mapped_column(
        SAEnum(Severity, name="severity_enum", create_constraint=True),
        nullable=False,
        default=Severity.INFO,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    related_item_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, index=True
    )

    def __repr__(self) -> str:
        return f"<AuditLogEntry {self.id} {self.type} ({self.severity.value})>"
