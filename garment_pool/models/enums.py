"""
Shared enumerations for database models.

Mapped to database enums so that only valid values can be
stored.
"""

import enum


class Category(str, enum.Enum):
    """Garment categories kept in the pool."""
    HOSE = "HOSE"
    POLO = "POLO"
    SWEATJACKE = "SWEATJACKE"
    SOFTSHELLJACKE = "SOFTSHELLJACKE"
    HARDSHELLJACKE = "HARDSHELLJACKE"


class ItemStatus(str, enum.Enum):
    """Where a garment currently is in its lifecycle."""
    STORED = "STORED"
    CIRCULATING = "CIRCULATING"
    DEFECTIVE_REPAIR = "DEFECTIVE_REPAIR"
    DEFECTIVE_DISPOSED = "DEFECTIVE_DISPOSED"


class Severity(str, enum.Enum):
    """Advisory classification of an audit log entry."""
    INFO = "INFO"
    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class LogType(str, enum.Enum):
    """Tags written by the engine into AuditLogEntry.type."""
    CREATION_SUMMARY = "CREATION_SUMMARY"
    STORE_IN_SUMMARY = "STORE_IN_SUMMARY"
    ISSUE_OUT_SUMMARY = "ISSUE_OUT_SUMMARY"
    MANUAL = "MANUAL"
    STALENESS_WARNING = "STALENESS_WARNING"
    # Bookkeeping row: hidden from readers and kept forever.
    SYSTEM_ID_WATERMARK = "SYSTEM_ID_WATERMARK"
