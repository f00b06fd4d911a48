"""BaseService: abstract foundation for all truckflow services.

Every service receives a :class:`Yard` at construction time. The Yard
provides transactional access to the session and audit stores.
Services own their transaction boundaries via ``self._yard.transaction()``
or, for per-truck mutations, ``self._yard.truck_transaction(truck_id)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from truckflow.services.result import ErrorCode, ServiceError, ServiceResult

if TYPE_CHECKING:
    from truckflow.infrastructure.yard import Yard


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class SessionLifecycleService(BaseService):
            def exit(self, truck_id: str) -> ServiceResult:
                with self._yard.truck_transaction(truck_id) as txn:
                    ...
    """

    def __init__(self, yard: Yard) -> None:
        self._yard = yard

    @staticmethod
    def _failure(
        op: str,
        code: ErrorCode,
        message: str,
        *,
        data: dict[str, Any] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        """Build a failed ServiceResult."""
        return ServiceResult(
            ok=False,
            op=op,
            data=data or {},
            error=ServiceError(code=code, message=message, detail=detail),
        )
