"""
Inventory item model.

One row per physical garment. The system id is the stable
identity handed out by the allocator; the barcode is whatever
was printed on the label and may be edited later.

Which timestamp fields are meaningful depends on the status:
stored items carry stored_at, circulating items carry the
issued_* fields. Transitions clear the other set.
"""

from datetime import datetime

from sqlalchemy import (
    String, Boolean, DateTime, Integer, Text,
    CheckConstraint, Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from garment_pool.models.base import Base, utcnow
from garment_pool.models.enums import Category, ItemStatus

FIRST_SYSTEM_ID = 1000
MAX_SYSTEM_ID = 9999


class InventoryItem(Base):
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint(
            f"system_id BETWEEN {FIRST_SYSTEM_ID} AND {MAX_SYSTEM_ID}",
            name="ck_items_system_id_range",
        ),
    )

    # Assigned by SystemIdAllocator, never by the database.
    system_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False
    )
    barcode: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    category: Mapped[Category] = mapped_column(
        SAEnum(Category, name="category_enum", create_constraint=True),
        nullable=False,
    )
    size: Mapped[str] = mapped_column(String(50), nullable=False)
    known_to_partner: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    status: Mapped[ItemStatus] = mapped_column(
        SAEnum(ItemStatus, name="item_status_enum", create_constraint=True),
        nullable=False,
        default=ItemStatus.STORED,
        index=True,
    )
    remark: Mapped[str | None] = mapped_column(Text, nullable=True)

    stored_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    issued_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    issued_to: Mapped[str | None] = mapped_column(String(100), nullable=True)
    issued_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    def describe(self) -> str:
        """Human label used in log messages."""
        return f"{self.category.value} ({self.size}) [{self.barcode}]"

    def __repr__(self) -> str:
        return (
            f"<InventoryItem {self.system_id} {self.barcode} "
            f"({self.status.value})>"
        )
