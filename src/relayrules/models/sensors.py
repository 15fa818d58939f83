"""Derived per-relay status readings."""

from __future__ import annotations

from pydantic import Field

from relayrules.models._base import RulesBaseModel


class SensorReading(RulesBaseModel):
    """A relay's static fields plus its currently scheduled temperature."""

    pin: int
    designator: str = Field(alias="dec")
    relay_id: int
    temperature: float
    enabled: bool = Field(alias="enable")


class SensorStatus(RulesBaseModel):
    """Response envelope for the status endpoint."""

    sensors: list[SensorReading] = Field(default_factory=list)
