"""
Pydantic schemas for inventory item operations.

These define the API contract. They are separate from the
database models because the API shape and the storage shape
differ (the API speaks in barcodes, the store in system ids).
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from garment_pool.models.enums import Category, ItemStatus


def _strip(v):
    return v.strip() if isinstance(v, str) else v


# --- Request Schemas ---

class ItemCreate(BaseModel):
    """A garment to be created and stored."""
    barcode: str = Field(min_length=1, max_length=100)
    category: Category
    size: str = Field(min_length=1, max_length=50)
    known_to_partner: bool = False

    @field_validator("barcode", "size", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class ItemUpdate(BaseModel):
    """
    Manual edit of a single garment.

    Only the fields present in the request are written.
    """
    category: Category | None = None
    size: str | None = Field(default=None, min_length=1, max_length=50)
    barcode: str | None = Field(default=None, min_length=1, max_length=100)
    known_to_partner: bool | None = None
    status: ItemStatus | None = None
    remark: str | None = None
    issued_by: str | None = Field(default=None, max_length=100)
    issued_to: str | None = Field(default=None, max_length=100)

    @field_validator(
        "size", "barcode", "remark", "issued_by", "issued_to", mode="before"
    )
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class StoreInRequest(BaseModel):
    barcodes: list[str]


class IssueOutRequest(BaseModel):
    barcodes: list[str]
    issued_by: str = ""
    issued_to: str = ""


class BulkCreateRequest(BaseModel):
    items: list[ItemCreate]


class ImportRequest(BaseModel):
    """Rows of an already-parsed CSV file, keyed by header."""
    rows: list[dict[str, str]]


# --- Response Schemas ---

class ItemResponse(BaseModel):
    system_id: int
    barcode: str
    category: Category
    size: str
    known_to_partner: bool
    status: ItemStatus
    remark: str | None
    stored_at: datetime | None
    issued_by: str | None
    issued_to: str | None
    issued_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BatchResponse(BaseModel):
    """Result of a store-in or issue-out scan batch."""
    updated_count: int
    missing: list[str]


class CreatedItem(BaseModel):
    system_id: int
    barcode: str

    model_config = {"from_attributes": True}


class BulkCreateResponse(BaseModel):
    created: list[CreatedItem]
    skipped_existing: int


class ImportResponse(BulkCreateResponse):
    errors: list[str]
