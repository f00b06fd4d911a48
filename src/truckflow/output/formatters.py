"""Output mode selection for ServiceResult.

Four modes: Rich human output (default), ``--json`` (the full
ServiceResult), ``--wire`` (the ``{success, data, message}`` envelope
used by the HTTP layer), and ``--quiet``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic.alias_generators import to_camel

from truckflow.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from truckflow.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    wire: bool = False
    quiet: bool = False
    verbose: bool = False


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {to_camel(str(k)): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


def to_wire(result: ServiceResult) -> dict[str, Any]:
    """Map a ServiceResult onto the ``{success, data, message}`` envelope.

    Keys inside ``data`` are camelCased (``truckId``, ``visitCount``).
    List operations put the item list itself in ``data``.  Failures carry
    ``data: null`` except movement violations, which carry the session.
    """
    data: Any = result.data or None
    if data is not None and "items" in data:
        data = data["items"]

    if result.ok:
        message = result.message
    else:
        message = result.error.message if result.error else "Unknown error"

    return {"success": result.ok, "data": _camelize(data), "message": message}


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display in the requested mode."""
    settings = settings or OutputSettings()
    if settings.wire:
        return json.dumps(to_wire(result), indent=2)
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
