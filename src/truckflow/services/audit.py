"""AuditQueryService: read access to a truck's audit trail."""

from __future__ import annotations

from truckflow.domain.models import normalize_truck_id
from truckflow.services.base import BaseService
from truckflow.services.contracts import EventListData, dump_validated
from truckflow.services.result import ErrorCode, ServiceResult
from truckflow.services.telemetry import traced


class AuditQueryService(BaseService):
    """Lists audit events; never writes."""

    @traced
    def list_events(self, truck_id: str | None) -> ServiceResult:
        """All events for *truck_id* across every session, newest first.

        An unknown truck yields an empty list rather than NOT_FOUND.
        """
        op = "events_list"
        try:
            tid = normalize_truck_id(truck_id)
        except ValueError as exc:
            return self._failure(op, ErrorCode.INVALID_ARGUMENT, str(exc))

        with self._yard.transaction() as txn:
            events = txn.events.list_for_truck(tid)

        items = [e.to_payload() for e in events]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                EventListData,
                {"truck_id": tid, "count": len(items), "items": items},
            ),
            message=f"{len(items)} event(s) found",
        )
