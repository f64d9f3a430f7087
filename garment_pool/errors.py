"""
Error taxonomy for the inventory engine.

Every error carries the HTTP status the API layer answers with.
Services raise them before writing (validation, not found) or
while flushing (conflict, overflow); the router rolls back the
session and turns them into an HTTPException.
"""


class InventoryError(ValueError):
    """Base class for engine errors surfaced to the caller."""

    status_code = 400


class ValidationError(InventoryError):
    """Missing or malformed input. Nothing was written."""

    status_code = 400


class NotFoundError(InventoryError):
    """The referenced system id does not exist."""

    status_code = 404


class ConflictError(InventoryError):
    """A barcode or system id is already taken."""

    status_code = 409


class SystemIdOverflowError(InventoryError):
    """The system id ceiling has been reached."""

    status_code = 400


class TransportError(Exception):
    """An outbound notification could not be delivered.

    Only raised by notifiers; the staleness sweep logs and
    swallows it, so it never reaches an API caller.
    """
