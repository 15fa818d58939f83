"""Relay patch request models.

The wire payload uses sentinel values for "leave unchanged": an empty
``name`` and a missing ``enable`` flag. :class:`RelayPatchPayload`
validates that payload; :meth:`RelayPatch.from_wire` turns it into
explicit :class:`SetTo` / :data:`UNCHANGED` field updates so the merge
code never has to interpret sentinels.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, StrictInt

from relayrules.exceptions import RequestDecodeError
from relayrules.models.rules import ScheduleEntry

T = TypeVar("T")


class Unchanged(enum.Enum):
    """Marker for a patch field that must keep its stored value."""

    UNCHANGED = "unchanged"

    def __repr__(self) -> str:
        return "UNCHANGED"


UNCHANGED = Unchanged.UNCHANGED


@dataclass(frozen=True, slots=True)
class SetTo(Generic[T]):
    """Replace the stored field value with ``value``."""

    value: T


FieldUpdate = Unchanged | SetTo[T]


class RelayPatchPayload(BaseModel):
    """Wire shape of a ``PATCH /relays`` body."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    pin: StrictInt
    dec: str = ""
    name: str | None = None
    enable: bool | None = None
    schedule: list[ScheduleEntry] | None = None


@dataclass(frozen=True)
class RelayPatch:
    """Partial update of a single relay addressed by ``(pin, designator)``."""

    pin: int
    designator: str = ""
    name: FieldUpdate[str] = UNCHANGED
    enabled: FieldUpdate[bool] = UNCHANGED
    schedule: FieldUpdate[list[ScheduleEntry]] = UNCHANGED

    @property
    def key(self) -> tuple[int, str]:
        return (self.pin, self.designator)

    @classmethod
    def from_payload(cls, payload: RelayPatchPayload) -> RelayPatch:
        """Map wire sentinels onto explicit field updates.

        * ``name``: missing or empty string keeps the stored name.
        * ``enable``: missing or ``null`` keeps the stored flag; an explicit
          ``false`` is applied.
        * ``schedule``: missing or ``null`` keeps the stored schedule; an
          explicit ``[]`` clears it.
        """
        name: FieldUpdate[str] = SetTo(payload.name) if payload.name else UNCHANGED
        enabled: FieldUpdate[bool] = UNCHANGED if payload.enable is None else SetTo(payload.enable)
        schedule: FieldUpdate[list[ScheduleEntry]] = (
            UNCHANGED if payload.schedule is None else SetTo(list(payload.schedule))
        )
        return cls(
            pin=payload.pin,
            designator=payload.dec,
            name=name,
            enabled=enabled,
            schedule=schedule,
        )

    @classmethod
    def from_wire(cls, data: Any) -> RelayPatch:
        """Validate a decoded JSON body and build a patch from it.

        Raises
        ------
        RequestDecodeError
            When *data* is not shaped like a relay patch.
        """
        try:
            payload = RelayPatchPayload.model_validate(data)
        except pydantic.ValidationError as exc:
            raise RequestDecodeError(f"invalid relay patch: {exc.errors(include_url=False)}") from exc
        return cls.from_payload(payload)
