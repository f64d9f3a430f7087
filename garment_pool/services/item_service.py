"""
Item service: the garment lifecycle.

Store-in and issue-out work on scan batches: the barcodes are
matched against the inventory, every matched garment is moved in
one bulk UPDATE, one aggregated log entry describes the batch and
the unmatched barcodes go back to the caller, who may create them
and scan again. Creation, manual edits and deletion work on
single garments or explicit lists.

No method commits. The router commits on success and rolls back
on any InventoryError, so a batch lands completely or not at all.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from garment_pool.errors import ConflictError, NotFoundError, ValidationError
from garment_pool.models.base import utcnow
from garment_pool.models.enums import ItemStatus, LogType, Severity
from garment_pool.models.item import InventoryItem
from garment_pool.schemas.item import ItemCreate, ItemUpdate
from garment_pool.services.allocator import SystemIdAllocator
from garment_pool.services.audit_service import AuditLogService
from garment_pool.services.barcode import BarcodeMatch, match_barcodes
from garment_pool.services.csv_import import map_csv_rows

logger = logging.getLogger(__name__)

# Fields a manual edit may not set to NULL.
REQUIRED_FIELDS = ("category", "size", "barcode", "known_to_partner", "status")


@dataclass
class BatchResult:
    updated_count: int
    missing: list[str]


@dataclass
class BulkCreateResult:
    created: list[InventoryItem]
    skipped_existing: int


@dataclass
class ImportResult(BulkCreateResult):
    errors: list[str] = field(default_factory=list)


def clean_barcodes(barcodes: Iterable[str]) -> list[str]:
    """Trim, drop empties and exact duplicates, keep scan order."""
    seen: dict[str, None] = {}
    for raw in barcodes:
        value = raw.strip() if isinstance(raw, str) else ""
        if value:
            seen.setdefault(value, None)
    return list(seen)


def summarize_by_group(items: Iterable[InventoryItem]) -> str:
    """
    "3x HOSE L, 1x POLO M" for a batch of garments.

    Largest groups first; equal counts keep first-seen order.
    """
    counts = Counter(f"{item.category.value} {item.size}" for item in items)
    groups = sorted(counts.items(), key=lambda kv: -kv[1])
    return ", ".join(f"{count}x {label}" for label, count in groups)


class ItemService:

    def __init__(self, db: Session, audit_log: AuditLogService | None = None):
        self.db = db
        self.audit_log = audit_log or AuditLogService(db)

    # --- Queries ---

    def get_item(self, system_id: int) -> InventoryItem:
        """Get a garment by system id."""
        item = self.db.get(InventoryItem, system_id)
        if not item:
            raise NotFoundError(f"Item {system_id} not found")
        return item

    def list_items(self) -> list[InventoryItem]:
        """All garments, most recently changed first."""
        items = self.db.execute(
            select(InventoryItem).order_by(
                InventoryItem.updated_at.desc(), InventoryItem.system_id
            )
        ).scalars().all()
        return list(items)

    # --- Scan batches ---

    def _match(self, barcodes: list[str]) -> BarcodeMatch[InventoryItem]:
        stored = self.db.execute(
            select(InventoryItem).order_by(InventoryItem.system_id)
        ).scalars().all()
        return match_barcodes(barcodes, stored)

    def _bulk_update(self, items: list[InventoryItem], **values) -> int:
        if not items:
            return 0
        result = self.db.execute(
            update(InventoryItem)
            .where(InventoryItem.system_id.in_([i.system_id for i in items]))
            .values(**values)
        )
        return result.rowcount

    def store_in(self, barcodes: list[str]) -> BatchResult:
        """
        Put every matched garment back into storage.

        Clears the issue fields and stamps stored_at. Unknown
        barcodes are returned in ``missing``.
        """
        incoming = clean_barcodes(barcodes)
        if not incoming:
            raise ValidationError("No barcodes given")

        match = self._match(incoming)
        now = utcnow()
        updated = self._bulk_update(
            match.matched,
            status=ItemStatus.STORED,
            stored_at=now,
            issued_by=None,
            issued_to=None,
            issued_at=None,
            updated_at=now,
        )

        if updated:
            self.audit_log.append(
                LogType.STORE_IN_SUMMARY.value,
                Severity.GREEN,
                f"{updated} garment(s) stored on "
                f"{self.audit_log.format_timestamp(now)}: "
                f"{summarize_by_group(match.matched)}.",
            )

        logger.info(
            "Store-in: %d updated, %d missing", updated, len(match.missing)
        )
        return BatchResult(updated_count=updated, missing=match.missing)

    def issue_out(
        self, barcodes: list[str], issued_by: str, issued_to: str
    ) -> BatchResult:
        """
        Hand every matched garment out to ``issued_to``.

        Both names are required and checked before anything is
        read or written.
        """
        issued_by = (issued_by or "").strip()
        issued_to = (issued_to or "").strip()
        incoming = clean_barcodes(barcodes)

        if not incoming:
            raise ValidationError("No barcodes given")
        if not issued_by or not issued_to:
            raise ValidationError("issued_by and issued_to are required")

        match = self._match(incoming)
        now = utcnow()
        updated = self._bulk_update(
            match.matched,
            status=ItemStatus.CIRCULATING,
            issued_by=issued_by,
            issued_to=issued_to,
            issued_at=now,
            stored_at=None,
            updated_at=now,
        )

        if updated:
            self.audit_log.append(
                LogType.ISSUE_OUT_SUMMARY.value,
                Severity.RED,
                f"{issued_by} issued {summarize_by_group(match.matched)} "
                f"to {issued_to} on {self.audit_log.format_timestamp(now)}.",
            )

        logger.info(
            "Issue-out to %s: %d updated, %d missing",
            issued_to, updated, len(match.missing),
        )
        return BatchResult(updated_count=updated, missing=match.missing)

    # --- Creation ---

    def bulk_create(self, items: list[ItemCreate]) -> BulkCreateResult:
        """
        Create new garments in storage.

        Barcodes that already exist (exact match) are skipped and
        counted. Within the request the last occurrence of a
        barcode wins. System ids are allocated for the whole batch
        before the first insert, so running out of ids leaves the
        table untouched.
        """
        if not items:
            raise ValidationError("No valid items given")

        unique: dict[str, ItemCreate] = {}
        for item in items:
            unique[item.barcode.strip()] = item

        existing = set(self.db.execute(
            select(InventoryItem.barcode).where(
                InventoryItem.barcode.in_(list(unique))
            )
        ).scalars().all())
        to_create = [
            (barcode, item) for barcode, item in unique.items()
            if barcode not in existing
        ]

        created = []
        if to_create:
            ids = SystemIdAllocator(self.db).allocate(len(to_create))
            now = utcnow()
            for system_id, (barcode, item) in zip(ids, to_create):
                row = InventoryItem(
                    system_id=system_id,
                    barcode=barcode,
                    category=item.category,
                    size=item.size.strip(),
                    known_to_partner=item.known_to_partner,
                    status=ItemStatus.STORED,
                    stored_at=now,
                )
                self.db.add(row)
                created.append(row)

            try:
                self.db.flush()
            except IntegrityError as e:
                raise ConflictError(
                    "Barcode or system id was taken by a concurrent write"
                ) from e

            self.audit_log.append(
                LogType.CREATION_SUMMARY.value,
                Severity.GREEN,
                f"{len(created)} new garment(s) created and stored on "
                f"{self.audit_log.format_timestamp(now)}.",
            )

        skipped = len(unique) - len(to_create)
        logger.info("Bulk create: %d created, %d skipped", len(created), skipped)
        return BulkCreateResult(created=created, skipped_existing=skipped)

    def import_rows(self, rows: list[dict[str, str]]) -> ImportResult:
        """Map CSV rows and create the valid ones."""
        mapping = map_csv_rows(rows)
        if not mapping.items:
            detail = "; ".join(mapping.errors[:3])
            raise ValidationError(
                f"No importable rows{': ' + detail if detail else ''}"
            )

        result = self.bulk_create(mapping.items)
        return ImportResult(
            created=result.created,
            skipped_existing=result.skipped_existing,
            errors=mapping.errors,
        )

    # --- Single garments ---

    def edit_item(self, system_id: int, changes: ItemUpdate) -> InventoryItem:
        """
        Overwrite the supplied fields of one garment.

        Every save stamps issued_at with the current time,
        whichever fields were changed.
        """
        item = self.get_item(system_id)
        data = changes.model_dump(exclude_unset=True)
        for key in REQUIRED_FIELDS:
            if key in data and data[key] is None:
                del data[key]

        barcode = data.get("barcode")
        if barcode is not None and barcode != item.barcode:
            clash = self.db.execute(
                select(InventoryItem.system_id).where(
                    InventoryItem.barcode == barcode,
                    InventoryItem.system_id != system_id,
                )
            ).scalar_one_or_none()
            if clash is not None:
                raise ConflictError(
                    f"Barcode '{barcode}' is already used by item {clash}"
                )

        for key, value in data.items():
            setattr(item, key, value)
        item.issued_at = utcnow()

        try:
            self.db.flush()
        except IntegrityError as e:
            raise ConflictError(f"Item {system_id} could not be saved") from e

        self.audit_log.append(
            LogType.MANUAL.value,
            Severity.INFO,
            f"Garment {item.describe()} was edited.",
            related_item_id=item.system_id,
        )
        return item

    def delete_item(self, system_id: int) -> None:
        """
        Remove a garment.

        The id goes into the watermark row in the same transaction,
        so it is never allocated again. The readable log entry is
        written in a savepoint after that; if that write fails the
        delete still stands.
        """
        item = self.get_item(system_id)
        label = item.describe()

        self.db.delete(item)
        self.db.flush()
        self.audit_log.raise_watermark(system_id)

        try:
            with self.db.begin_nested():
                self.audit_log.append(
                    LogType.MANUAL.value,
                    Severity.INFO,
                    f"Garment {label} with system id {system_id} was deleted.",
                    related_item_id=system_id,
                )
        except SQLAlchemyError:
            logger.exception("Could not log deletion of item %d", system_id)

        logger.info("Deleted item %d", system_id)
