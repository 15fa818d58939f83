"""Persisted rule tree: circuits, relays and their schedules."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import Field

from relayrules.models._base import RulesBaseModel


class ScheduleEntry(RulesBaseModel):
    """A time-of-day checkpoint with its target temperature."""

    time: str = ""
    """Wall-clock time of day, e.g. ``"14:30 PM"``."""

    temperature: float = 0.0
    """Target temperature from this checkpoint onward."""


class Relay(RulesBaseModel):
    """An individually addressable heating element.

    ``(pin, designator)`` is the relay's natural key across the whole
    rule set.
    """

    pin: int = 0
    designator: str = Field(default="", alias="dec")
    relay_id: int = 0
    name: str = ""
    enabled: bool = Field(default=False, alias="enable")
    schedule: list[ScheduleEntry] = Field(default_factory=list)

    @property
    def key(self) -> tuple[int, str]:
        return (self.pin, self.designator)


class Circuit(RulesBaseModel):
    """A named group of relays sharing a base temperature."""

    name: str = ""
    base_temperature: float = Field(default=0.0, alias="temperature")
    """Fallback temperature used when no schedule entry applies."""

    parent_relay_id: int = 0
    relays: list[Relay] = Field(default_factory=list)


class RuleSet(RulesBaseModel):
    """Root of the persisted configuration."""

    circuits: list[Circuit] = Field(default_factory=list)

    def iter_relays(self) -> Iterator[tuple[Circuit, Relay]]:
        """Yield ``(circuit, relay)`` pairs in source order."""
        for circuit in self.circuits:
            for relay in circuit.relays:
                yield circuit, relay
