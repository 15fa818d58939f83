"""Request-level orchestration over a rule store."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timezone

from relayrules._constants import UTC_OFFSET
from relayrules.merge import apply_patch
from relayrules.models.requests import RelayPatch
from relayrules.models.rules import RuleSet
from relayrules.models.sensors import SensorStatus
from relayrules.schedule import InvalidEntryHook
from relayrules.status import project_status
from relayrules.store import RuleStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RulesService:
    """Reads and patches the rule set held by *store*.

    Every call loads fresh from the store; nothing is kept between calls.

    Usage::

        service = RulesService(JsonFileRuleStore("config/rules.json"))
        status = service.get_status()
    """

    def __init__(
        self,
        store: RuleStore,
        *,
        clock: Callable[[], datetime] = _utcnow,
        utc_offset: timezone = UTC_OFFSET,
        on_invalid_schedule: InvalidEntryHook | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._utc_offset = utc_offset
        self._on_invalid_schedule = on_invalid_schedule

    def get_rules(self) -> RuleSet:
        return self._store.load()

    def get_status(self) -> SensorStatus:
        """Resolve the scheduled temperature of every relay at the current time."""
        rule_set = self._store.load()
        readings = project_status(
            rule_set,
            self._clock(),
            offset=self._utc_offset,
            on_invalid=self._on_invalid_schedule,
        )
        return SensorStatus(sensors=readings)

    def patch_relay(self, patch: RelayPatch) -> RuleSet:
        """Apply *patch* and persist the result.

        Load, merge and save run inside the store's transaction, so
        concurrent patches cannot lose each other's updates. If any step
        fails the stored rule set is left untouched.
        """
        with self._store.transaction():
            rule_set = self._store.load()
            updated = apply_patch(rule_set, patch)
            self._store.save(updated)
        _logger.debug("Patched relay %s/%s", patch.pin, patch.designator)
        return updated
