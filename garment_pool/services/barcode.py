"""
Barcode normalization and matching.

Barcodes reach the system typed by hand, read by a camera
scanner or imported from CSV, so the same label shows up as
"00042", "042" or "42", and letter codes in either case.
normalize_barcode() folds those variants into one key;
match_barcodes() reconciles an incoming scan batch against the
stored inventory.
"""

from dataclasses import dataclass, field
from typing import Generic, Iterable, Protocol, TypeVar


class HasBarcode(Protocol):
    barcode: str


RowT = TypeVar("RowT", bound=HasBarcode)


def _is_decimal(value: str) -> bool:
    # str.isdigit() also accepts superscripts and other scripts' digits
    return value.isascii() and value.isdigit()


def normalize_barcode(raw: str) -> str:
    """
    Canonical comparison key for a barcode.

    Numeric codes lose their leading zeros ("0000" becomes "0"),
    everything else is uppercased. Empty input gives "", which
    callers must skip.
    """
    value = raw.strip()
    if not value:
        return ""
    if _is_decimal(value):
        return value.lstrip("0") or "0"
    return value.upper()


@dataclass
class BarcodeMatch(Generic[RowT]):
    matched: list[RowT] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def match_barcodes(
    incoming: Iterable[str], stored: Iterable[RowT]
) -> BarcodeMatch[RowT]:
    """
    Partition incoming barcodes into stored rows and unknown codes.

    The exact (trimmed) barcode is tried first, so a caller that
    sends the precise stored value never lands on a different row
    that merely normalizes the same way. The normalized key is
    the fallback for scanner and typing drift. On index
    collisions the first stored row wins.

    Each stored row appears at most once in ``matched``, however
    many equivalent codes pointed at it. ``missing`` keeps the
    trimmed incoming value.
    """
    by_exact: dict[str, RowT] = {}
    by_normalized: dict[str, RowT] = {}

    for row in stored:
        exact = row.barcode.strip()
        if exact:
            by_exact.setdefault(exact, row)
        normalized = normalize_barcode(row.barcode)
        if normalized:
            by_normalized.setdefault(normalized, row)

    matched: dict[str, RowT] = {}
    missing: list[str] = []

    for raw in incoming:
        exact = raw.strip()
        if not exact:
            continue

        hit = by_exact.get(exact)
        if hit is None:
            hit = by_normalized.get(normalize_barcode(exact))

        if hit is None:
            missing.append(exact)
        else:
            matched.setdefault(hit.barcode, hit)

    return BarcodeMatch(matched=list(matched.values()), missing=missing)
