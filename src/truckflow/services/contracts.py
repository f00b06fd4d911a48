"""Typed payload contracts for service and adapter boundaries.

These models validate operation payload shapes before they leave the
service layer so a renamed or missing key fails fast in tests.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

from truckflow.domain.lifecycle import EventType, InvoiceStatus, SessionState

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="json")


class SessionData(BaseModel):
    """Payload for every single-session operation."""

    model_config = ConfigDict(extra="forbid")

    truck_id: str
    state: SessionState
    tare_weight: float | None = None
    gross_weight: float | None = None
    invoice_status: InvoiceStatus
    movement_lock: bool
    visit_count: int
    created_at: str
    updated_at: str


class SessionListData(BaseModel):
    """Payload contract for ``SessionLifecycleService.list_all``."""

    count: int
    items: list[SessionData]


class EventItem(BaseModel):
    """One audit event row."""

    id: int
    truck_id: str
    event_type: EventType
    message: str
    timestamp: str


class EventListData(BaseModel):
    """Payload contract for ``AuditQueryService.list_events``."""

    truck_id: str
    count: int
    items: list[EventItem]
