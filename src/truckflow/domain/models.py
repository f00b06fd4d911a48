"""Session and audit event models plus input normalization.

Both models are frozen: a state change produces a new ``TruckSession``
via :meth:`TruckSession.advance`, and audit events are never modified
after creation.  Identifiers (``id``) are assigned by the store.
"""

from __future__ import annotations

import math
from typing import Any, Self

from pydantic import BaseModel, Field, field_validator

from truckflow.domain.lifecycle import EventType, InvoiceStatus, SessionState


def normalize_truck_id(raw: str | None) -> str:
    """Trim *raw* and return the truck identifier.

    Raises:
        ValueError: If the identifier is missing or blank.
    """
    truck_id = (raw or "").strip()
    if not truck_id:
        msg = "truckId is required"
        raise ValueError(msg)
    return truck_id


def parse_weight(raw: Any, *, label: str) -> float:
    """Coerce *raw* into a finite, strictly positive weight.

    Accepts numbers and numeric strings (as submitted by forms or the CLI).
    Booleans are rejected even though Python treats them as ints.

    Raises:
        ValueError: With a message naming *label* (e.g. ``"tare"``).
    """
    msg = f"Valid {label} weight is required (positive number)"
    if raw is None or isinstance(raw, bool):
        raise ValueError(msg)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(msg) from None
    if not math.isfinite(value) or value <= 0:
        raise ValueError(msg)
    return value


def format_weight(value: float | None) -> str:
    """Render a weight without a trailing ``.0`` for whole numbers."""
    if value is None:
        return "-"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class TruckSession(BaseModel):
    """One truck's pass through the weighbridge/dock workflow."""

    model_config = {"frozen": True}

    id: int | None = None
    truck_id: str
    state: SessionState = SessionState.ENTRY
    tare_weight: float | None = None
    gross_weight: float | None = None
    invoice_status: InvoiceStatus = InvoiceStatus.NONE
    movement_lock: bool = False
    visit_count: int = Field(default=0, ge=0)
    created_at: str
    updated_at: str
    version: int = 0

    @field_validator("truck_id")
    @classmethod
    def _strip_truck_id(cls, value: str) -> str:
        return normalize_truck_id(value)

    @property
    def is_active(self) -> bool:
        return self.state != SessionState.EXITED

    @property
    def net_weight(self) -> float | None:
        """Gross minus tare, once both are recorded."""
        if self.gross_weight is None or self.tare_weight is None:
            return None
        return self.gross_weight - self.tare_weight

    def advance(self, timestamp: str, **changes: Any) -> Self:
        """Return a copy with *changes* applied and ``updated_at`` refreshed."""
        return self.model_copy(update={**changes, "updated_at": timestamp})

    def to_payload(self) -> dict[str, Any]:
        """Serialize for ``ServiceResult.data`` (store bookkeeping excluded)."""
        return self.model_dump(mode="json", exclude={"id", "version"})


class AuditEvent(BaseModel):
    """Immutable record of an accepted or denied action."""

    model_config = {"frozen": True}

    id: int | None = None
    truck_id: str
    event_type: EventType
    message: str
    timestamp: str

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
