"""DockGuard: post-invoice movement lock for dock access.

Runs before the generic transition policy for the dock action only.
The policy table would also reject a dock request once the state is
INVOICE_GENERATED; the guard exists so that such an attempt is recorded
as a VIOLATION rather than an ordinary REJECTED out-of-order request.

The guard itself is pure.  The lifecycle service appends the VIOLATION
audit event for every denial it returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from truckflow.domain.lifecycle import InvoiceStatus

if TYPE_CHECKING:
    from truckflow.domain.models import TruckSession

MOVEMENT_RESTRICTED_REASON = (
    "Movement restricted: Invoice already generated. Dock re-entry is not permitted."
)


@dataclass(frozen=True)
class GuardResult:
    """Outcome of :func:`check_dock_access`."""

    allowed: bool
    reason: str | None = None


def check_dock_access(session: TruckSession) -> GuardResult:
    """Deny dock access once the invoice exists or movement is locked."""
    if session.invoice_status == InvoiceStatus.GENERATED or session.movement_lock:
        return GuardResult(allowed=False, reason=MOVEMENT_RESTRICTED_REASON)
    return GuardResult(allowed=True)
