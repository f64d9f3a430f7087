"""Business logic services."""

from garment_pool.services.audit_service import AuditLogService
from garment_pool.services.item_service import ItemService
from garment_pool.services.staleness import StalenessSweeper

__all__ = ["AuditLogService", "ItemService", "StalenessSweeper"]
