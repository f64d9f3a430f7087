"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from garment_pool.models.base import Base
from garment_pool.models.enums import (
    Category,
    ItemStatus,
    Severity,
    LogType,
)
from garment_pool.models.item import InventoryItem
from garment_pool.models.audit_log import AuditLogEntry

__all__ = [
    "Base",
    "Category",
    "ItemStatus",
    "Severity",
    "LogType",
    "InventoryItem",
    "AuditLogEntry",
]
