"""
Pydantic schemas for the audit log.
"""

from datetime import datetime

from pydantic import BaseModel

from garment_pool.models.enums import Severity


class LogEntryResponse(BaseModel):
    id: int
    type: str
    severity: Severity
    message: str
    related_item_id: int | None
    created_at: datetime

    model_config = {"from_attributes": True}


class LogPageResponse(BaseModel):
    logs: list[LogEntryResponse]
    page: int
    pages: int
    total: int


class DeleteLogsRequest(BaseModel):
    ids: list[int]


class DeleteLogsResponse(BaseModel):
    deleted_count: int
