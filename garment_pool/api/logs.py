"""
Audit log API endpoints.

Reading the log also runs the retention purge and the staleness
sweep, so GET /logs writes and therefore commits.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from garment_pool.api.deps import require_authorized
from garment_pool.models.base import get_db
from garment_pool.services.audit_service import AuditLogService
from garment_pool.services.notifier import Notifier, get_notifier
from garment_pool.schemas.log import (
    LogEntryResponse,
    LogPageResponse,
    DeleteLogsRequest,
    DeleteLogsResponse,
)

router = APIRouter(
    prefix="/logs",
    tags=["Logs"],
    dependencies=[Depends(require_authorized)],
)


@router.get("", response_model=LogPageResponse)
def list_logs(
    page: int = Query(default=1, ge=1),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    """One page of log entries, newest first."""
    service = AuditLogService(db, notifier=notifier)
    result = service.list_logs(page)
    # Staleness mail has already gone out at this point; a failed
    # commit drops the warning and the next read sends it again.
    db.commit()

    return LogPageResponse(
        logs=[LogEntryResponse.model_validate(e) for e in result.logs],
        page=result.page,
        pages=result.pages,
        total=result.total,
    )


@router.post("/delete", response_model=DeleteLogsResponse)
def delete_logs(request: DeleteLogsRequest, db: Session = Depends(get_db)):
    """Mark entries as read by deleting them."""
    service = AuditLogService(db)
    deleted = service.delete_logs(request.ids)
    db.commit()
    return DeleteLogsResponse(deleted_count=deleted)
