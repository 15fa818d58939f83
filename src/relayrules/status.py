"""Per-relay status projection."""

from __future__ import annotations

from datetime import datetime, timezone

from relayrules._constants import UTC_OFFSET
from relayrules.models.rules import RuleSet
from relayrules.models.sensors import SensorReading
from relayrules.schedule import InvalidEntryHook, resolve_temperature


def project_status(
    rule_set: RuleSet,
    now: datetime,
    *,
    offset: timezone = UTC_OFFSET,
    on_invalid: InvalidEntryHook | None = None,
) -> list[SensorReading]:
    """Build one reading per relay, circuits outer and relays inner, in source order."""
    return [
        SensorReading(
            pin=relay.pin,
            designator=relay.designator,
            relay_id=relay.relay_id,
            temperature=resolve_temperature(
                relay.schedule,
                circuit.base_temperature,
                now,
                offset=offset,
                on_invalid=on_invalid,
            ),
            enabled=relay.enabled,
        )
        for circuit, relay in rule_set.iter_relays()
    ]
