"""
Mapping of CSV rows to new garments.

Rows arrive already split into dicts keyed by the file's header
line. Spreadsheets exported by different people name the columns
differently ("Größe", "groesse", "size"), so headers are folded
to a bare ASCII key and looked up through alias lists.
"""

import re
from dataclasses import dataclass, field

from pydantic import ValidationError as PydanticValidationError

from garment_pool.models.enums import Category
from garment_pool.schemas.item import ItemCreate

BARCODE_ALIASES = ["barcode", "bar_code", "code", "strichcode", "ean"]
# "gre" and "grsse" are "Größe" read with the wrong encoding
SIZE_ALIASES = ["groesse", "größe", "size", "gre", "grsse"]
CATEGORY_ALIASES = ["kategorie", "category", "typ"]
PARTNER_ALIASES = ["cws", "bei cws bekannt", "cws bekannt"]

CATEGORY_LABELS = {
    "HOSE": Category.HOSE,
    "POLO": Category.POLO,
    "POLOSHIRT": Category.POLO,
    "SWEATJACKE": Category.SWEATJACKE,
    "SOFTSHELL": Category.SOFTSHELLJACKE,
    "SOFTSHELLJACKE": Category.SOFTSHELLJACKE,
    "HARDSHELL": Category.HARDSHELLJACKE,
    "HARDSHELLJACKE": Category.HARDSHELLJACKE,
}

TRUTHY = {"1", "true", "ja", "yes", "y", "x", "bekannt"}

_UMLAUTS = str.maketrans({"ä": "ae", "ö": "oe", "ü": "ue", "ß": "ss"})


@dataclass
class CsvMappingResult:
    items: list[ItemCreate] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def normalize_header(value: str) -> str:
    """'Größe ' -> 'groesse', 'Bar-Code' -> 'barcode'."""
    folded = value.strip().lower().translate(_UMLAUTS)
    return re.sub(r"[^a-z0-9]", "", folded)


def _lookup(row: dict[str, str], aliases: list[str]) -> str:
    index = {
        normalize_header(key): (value or "").strip()
        for key, value in row.items()
        if key is not None
    }
    for alias in aliases:
        hit = index.get(normalize_header(alias))
        if hit is not None:
            return hit
    return ""


def parse_category(value: str) -> Category | None:
    key = re.sub(r"\s+", "", value).upper()
    return CATEGORY_LABELS.get(key)


def parse_partner_flag(value: str) -> bool:
    return value.strip().lower() in TRUTHY


def map_csv_rows(rows: list[dict[str, str]]) -> CsvMappingResult:
    """
    Turn parsed CSV rows into ItemCreate requests.

    Rows without barcode, size or a recognised category are not
    fatal; they are reported in ``errors`` with their 1-based
    row number and the rest of the file is still mapped.
    """
    result = CsvMappingResult()

    for row_no, row in enumerate(rows, start=1):
        barcode = _lookup(row, BARCODE_ALIASES)
        size = _lookup(row, SIZE_ALIASES)
        category = parse_category(_lookup(row, CATEGORY_ALIASES))
        known = parse_partner_flag(_lookup(row, PARTNER_ALIASES))

        if not barcode or not size or category is None:
            result.errors.append(
                f"Row {row_no}: needs barcode, category and size "
                f"(category e.g. HOSE/POLO/SWEATJACKE)."
            )
            continue

        try:
            item = ItemCreate(
                barcode=barcode,
                category=category,
                size=size,
                known_to_partner=known,
            )
        except PydanticValidationError as e:
            result.errors.append(
                f"Row {row_no}: {e.errors()[0]['msg']}"
            )
            continue

        result.items.append(item)

    return result
