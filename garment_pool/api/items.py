"""
Inventory item API endpoints.

The API layer is thin: it maps engine errors to status codes
and owns the commit. Business logic lives in ItemService.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from garment_pool.api.deps import require_authorized
from garment_pool.errors import InventoryError
from garment_pool.models.base import get_db
from garment_pool.services.item_service import ItemService
from garment_pool.schemas.item import (
    ItemResponse,
    ItemUpdate,
    StoreInRequest,
    IssueOutRequest,
    BatchResponse,
    BulkCreateRequest,
    BulkCreateResponse,
    CreatedItem,
    ImportRequest,
    ImportResponse,
)

router = APIRouter(
    prefix="/items",
    tags=["Items"],
    dependencies=[Depends(require_authorized)],
)


@router.get("", response_model=list[ItemResponse])
def list_items(db: Session = Depends(get_db)):
    """All garments, most recently changed first."""
    return ItemService(db).list_items()


@router.get("/{system_id}", response_model=ItemResponse)
def get_item(system_id: int, db: Session = Depends(get_db)):
    """Get a single garment."""
    try:
        return ItemService(db).get_item(system_id)
    except InventoryError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/store-in", response_model=BatchResponse)
def store_in(request: StoreInRequest, db: Session = Depends(get_db)):
    """
    Store a scan batch.

    Unknown barcodes are reported in ``missing``, not as an error.
    """
    service = ItemService(db)
    try:
        result = service.store_in(request.barcodes)
        db.commit()
    except InventoryError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return BatchResponse(updated_count=result.updated_count, missing=result.missing)


@router.post("/issue-out", response_model=BatchResponse)
def issue_out(request: IssueOutRequest, db: Session = Depends(get_db)):
    """Issue a scan batch to a person."""
    service = ItemService(db)
    try:
        result = service.issue_out(
            request.barcodes, request.issued_by, request.issued_to
        )
        db.commit()
    except InventoryError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return BatchResponse(updated_count=result.updated_count, missing=result.missing)


@router.post("/bulk", response_model=BulkCreateResponse, status_code=201)
def bulk_create(request: BulkCreateRequest, db: Session = Depends(get_db)):
    """Create and store new garments. Existing barcodes are skipped."""
    service = ItemService(db)
    try:
        result = service.bulk_create(request.items)
        db.commit()
    except InventoryError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return BulkCreateResponse(
        created=[CreatedItem.model_validate(row) for row in result.created],
        skipped_existing=result.skipped_existing,
    )


@router.post("/import", response_model=ImportResponse, status_code=201)
def import_rows(request: ImportRequest, db: Session = Depends(get_db)):
    """Create garments from parsed CSV rows; bad rows come back as errors."""
    service = ItemService(db)
    try:
        result = service.import_rows(request.rows)
        db.commit()
    except InventoryError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return ImportResponse(
        created=[CreatedItem.model_validate(row) for row in result.created],
        skipped_existing=result.skipped_existing,
        errors=result.errors,
    )


@router.patch("/{system_id}", response_model=ItemResponse)
def edit_item(
    system_id: int,
    request: ItemUpdate,
    db: Session = Depends(get_db),
):
    """Manually overwrite fields of a garment."""
    service = ItemService(db)
    try:
        item = service.edit_item(system_id, request)
        db.commit()
        return item
    except InventoryError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{system_id}")
def delete_item(system_id: int, db: Session = Depends(get_db)):
    """Delete a garment. Its system id is not handed out again."""
    service = ItemService(db)
    try:
        service.delete_item(system_id)
        db.commit()
    except InventoryError as e:
        db.rollback()
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"ok": True}
