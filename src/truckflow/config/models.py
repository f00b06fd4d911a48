"""Pydantic configuration sections with code-baked defaults.

Sparse TOML contract: defaults live here, truckflow.toml only holds overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    db_name: str = "truckflow.db"
    busy_timeout_ms: int = Field(default=5000, ge=0)
    lock_timeout_seconds: float = Field(default=10.0, gt=0)


class WeighbridgeConfig(BaseModel):
    """[weighbridge] section."""

    model_config = {"frozen": True}

    unit: str = "kg"
