from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path

import pytest

from relayrules.exceptions import RelayNotFoundError, ScheduleValidationError, StorageUnavailableError
from relayrules.models.requests import RelayPatch, SetTo
from relayrules.models.rules import Circuit, Relay, RuleSet, ScheduleEntry
from relayrules.service import RulesService
from relayrules.store import JsonFileRuleStore, MemoryRuleStore


def _clock() -> datetime:
    # 15:00 in UTC+3.
    return datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def _rule_set(relay_count: int = 2) -> RuleSet:
    return RuleSet(
        circuits=[
            Circuit(
                name="Ground floor",
                base_temperature=18.0,
                relays=[
                    Relay(
                        pin=pin,
                        designator="A",
                        relay_id=pin,
                        name=f"relay-{pin}",
                        enabled=True,
                        schedule=[ScheduleEntry(time="08:00", temperature=21.0)],
                    )
                    for pin in range(relay_count)
                ],
            )
        ]
    )


class _RecordingStore(MemoryRuleStore):
    def __init__(self, rule_set: RuleSet) -> None:
        super().__init__(rule_set)
        self.events: list[str] = []

    @contextmanager
    def transaction(self) -> Iterator[None]:
        self.events.append("enter")
        with super().transaction():
            yield
        self.events.append("exit")

    def load(self) -> RuleSet:
        self.events.append("load")
        return super().load()

    def save(self, rule_set: RuleSet) -> None:
        self.events.append("save")
        super().save(rule_set)


def test_get_rules_returns_stored_tree() -> None:
    service = RulesService(MemoryRuleStore(_rule_set()))
    assert service.get_rules() == _rule_set()


def test_get_status_resolves_with_injected_clock() -> None:
    service = RulesService(MemoryRuleStore(_rule_set()), clock=_clock)
    status = service.get_status()
    assert [reading.temperature for reading in status.sensors] == [21.0, 21.0]


def test_get_status_reports_invalid_schedule_times() -> None:
    rule_set = RuleSet(
        circuits=[Circuit(base_temperature=16.0, relays=[Relay(pin=1, schedule=[ScheduleEntry(time="soon")])])]
    )
    seen: list[str] = []
    service = RulesService(
        MemoryRuleStore(rule_set),
        clock=_clock,
        on_invalid_schedule=lambda entry, _exc: seen.append(entry.time),
    )
    assert service.get_status().sensors[0].temperature == 16.0
    assert seen == ["soon"]


def test_patch_runs_load_and_save_inside_transaction() -> None:
    store = _RecordingStore(_rule_set())
    RulesService(store).patch_relay(RelayPatch(pin=0, designator="A", name=SetTo("Hall")))
    assert store.events == ["enter", "load", "save", "exit"]
    assert store.load().circuits[0].relays[0].name == "Hall"


def test_patch_not_found_does_not_save() -> None:
    store = MemoryRuleStore(_rule_set())
    before = store.content
    with pytest.raises(RelayNotFoundError):
        RulesService(store).patch_relay(RelayPatch(pin=42, designator="A", name=SetTo("Ghost")))
    assert store.content == before
    assert store.save_count == 0


def test_patch_not_found_leaves_file_byte_for_byte(tmp_path: Path) -> None:
    path = tmp_path / "rules.json"
    path.write_text('{"circuits": [{"name": "x", "relays": [{"pin": 1, "dec": "A"}]}]}', encoding="utf-8")
    before = path.read_bytes()
    with pytest.raises(RelayNotFoundError):
        RulesService(JsonFileRuleStore(path)).patch_relay(RelayPatch(pin=1, designator="B"))
    assert path.read_bytes() == before


def test_invalid_schedule_does_not_save() -> None:
    store = MemoryRuleStore(_rule_set())
    patch = RelayPatch(pin=0, designator="A", schedule=SetTo([ScheduleEntry(time="", temperature=20.0)]))
    with pytest.raises(ScheduleValidationError):
        RulesService(store).patch_relay(patch)
    assert store.save_count == 0
    assert store.load() == _rule_set()


def test_patch_with_missing_file_raises_storage_unavailable(tmp_path: Path) -> None:
    service = RulesService(JsonFileRuleStore(tmp_path / "missing.json"))
    with pytest.raises(StorageUnavailableError):
        service.patch_relay(RelayPatch(pin=0, designator="A"))


def test_concurrent_patches_do_not_lose_updates(tmp_path: Path) -> None:
    relay_count = 16
    store = JsonFileRuleStore(tmp_path / "rules.json")
    store.save(_rule_set(relay_count))
    service = RulesService(store)
    barrier = threading.Barrier(relay_count)

    def worker(pin: int) -> None:
        barrier.wait()
        service.patch_relay(RelayPatch(pin=pin, designator="A", name=SetTo(f"patched-{pin}")))

    threads = [threading.Thread(target=worker, args=(pin,)) for pin in range(relay_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    names = [relay.name for _, relay in store.load().iter_relays()]
    assert names == [f"patched-{pin}" for pin in range(relay_count)]
