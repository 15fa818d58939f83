"""Relay patch merging.

:func:`apply_patch` is pure: it returns an updated deep copy of the rule set and
never touches the input or the store. Persisting the result is the
caller's job (see :meth:`relayrules.service.RulesService.patch_relay`).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

from relayrules.exceptions import RelayNotFoundError, ScheduleValidationError
from relayrules.models.requests import FieldUpdate, RelayPatch, SetTo
from relayrules.models.rules import Circuit, Relay, RuleSet, ScheduleEntry

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def validate_schedule(schedule: Sequence[ScheduleEntry]) -> None:
    """Reject a schedule containing an entry with an empty ``time``.

    Raises
    ------
    ScheduleValidationError
        Carrying the whole offending schedule.
    """
    if any(not entry.time.strip() for entry in schedule):
        payload = [entry.to_wire() for entry in schedule]
        raise ScheduleValidationError(
            f"time field must not be empty: {payload}",
            schedule=payload,
        )


def _resolve(update: FieldUpdate[T], current: T) -> T:
    if isinstance(update, SetTo):
        return update.value
    return current


def _patch_relay(relay: Relay, patch: RelayPatch) -> Relay:
    changes: dict[str, Any] = {
        "name": _resolve(patch.name, relay.name),
        "enabled": _resolve(patch.enabled, relay.enabled),
        "schedule": list(_resolve(patch.schedule, relay.schedule)),
    }
    return relay.model_copy(update=changes)


def apply_patch(rule_set: RuleSet, patch: RelayPatch) -> RuleSet:
    """Apply *patch* to every relay matching its ``(pin, designator)`` key.

    The schedule, when set, replaces the stored one wholesale. Duplicate
    keys are not guarded against: all matching relays are patched alike.

    Raises
    ------
    ScheduleValidationError
        When the patch schedule has an entry without a time. Raised before
        anything is modified.
    RelayNotFoundError
        When no relay matches.
    """
    if isinstance(patch.schedule, SetTo):
        validate_schedule(patch.schedule.value)

    source = rule_set.model_copy(deep=True)
    matched = 0
    circuits: list[Circuit] = []
    for circuit in source.circuits:
        relays: list[Relay] = []
        for relay in circuit.relays:
            if relay.key == patch.key:
                relay = _patch_relay(relay, patch)
                matched += 1
            relays.append(relay)
        circuits.append(circuit.model_copy(update={"relays": relays}))

    if not matched:
        raise RelayNotFoundError(pin=patch.pin, designator=patch.designator)
    if matched > 1:
        _logger.debug("Relay %s/%s matched %d times; patched all", patch.pin, patch.designator, matched)
    return source.model_copy(update={"circuits": circuits})
