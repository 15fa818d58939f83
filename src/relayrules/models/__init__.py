"""Data models for the relay rule set and its derived status."""

from relayrules.models._base import RulesBaseModel
from relayrules.models.requests import (
    UNCHANGED,
    FieldUpdate,
    RelayPatch,
    RelayPatchPayload,
    SetTo,
    Unchanged,
)
from relayrules.models.rules import Circuit, Relay, RuleSet, ScheduleEntry
from relayrules.models.sensors import SensorReading, SensorStatus

__all__ = [
    "Circuit",
    "FieldUpdate",
    "Relay",
    "RelayPatch",
    "RelayPatchPayload",
    "RuleSet",
    "RulesBaseModel",
    "ScheduleEntry",
    "SensorReading",
    "SensorStatus",
    "SetTo",
    "UNCHANGED",
    "Unchanged",
]
