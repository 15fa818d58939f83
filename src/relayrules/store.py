"""Rule set persistence.

A store is the single source of truth for the rule tree. Nothing is
cached between requests: every read loads the backing resource and every
mutation rewrites it in full. Mutating callers must wrap their
load-mutate-save sequence in :meth:`RuleStore.transaction`.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

import pydantic

from relayrules._constants import JSON_INDENT
from relayrules.exceptions import CorruptDataError, StorageUnavailableError
from relayrules.models.rules import RuleSet

_logger = logging.getLogger(__name__)


def dump_rule_set(rule_set: RuleSet) -> str:
    """Serialize *rule_set* in the persisted, human-readable layout."""
    return json.dumps(rule_set.to_wire(), indent=JSON_INDENT, ensure_ascii=False) + "\n"


def parse_rule_set(text: str | bytes, *, source: str = "") -> RuleSet:
    """Parse persisted rules content.

    Raises
    ------
    CorruptDataError
        When *text* is not JSON or not shaped like a rule set.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CorruptDataError(f"rules file {source} is not valid JSON: {exc}", path=source) from exc
    try:
        return RuleSet.model_validate(data)
    except pydantic.ValidationError as exc:
        raise CorruptDataError(
            f"rules file {source} does not match the rule set layout: {exc.errors(include_url=False)}",
            path=source,
        ) from exc


class RuleStore(Protocol):
    """Structural store interface used by the service layer.

    Having a protocol here makes it easy to pass in-memory stores in tests
    while keeping the production implementation (`JsonFileRuleStore`)
    concrete.
    """

    def load(self) -> RuleSet: ...

    def save(self, rule_set: RuleSet) -> None: ...

    def transaction(self) -> contextlib.AbstractContextManager[None]: ...


class _LockedStore:
    """Owns the critical section shared by every mutating operation."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        """Hold the store lock for the duration of a load-mutate-save."""
        with self._lock:
            yield


class JsonFileRuleStore(_LockedStore):
    """Rule store backed by a JSON file on disk."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        super().__init__()
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> RuleSet:
        try:
            content = self._path.read_bytes()
        except OSError as exc:
            raise StorageUnavailableError(
                f"cannot read rules file {self._path}: {exc.strerror or exc}",
                path=str(self._path),
            ) from exc
        _logger.debug("Loaded %d bytes from %s", len(content), self._path)
        return parse_rule_set(content, source=str(self._path))

    def save(self, rule_set: RuleSet) -> None:
        """Atomically replace the rules file with *rule_set*.

        The content is written to a sibling temporary file which is then
        renamed over the target, so readers never observe a partial file.
        """
        text = dump_rule_set(rule_set)
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise StorageUnavailableError(
                f"cannot write rules file {self._path}: {exc.strerror or exc}",
                path=str(self._path),
            ) from exc
        _logger.debug("Saved %d circuits to %s", len(rule_set.circuits), self._path)


class MemoryRuleStore(_LockedStore):
    """Rule store kept in memory.

    Content is held in its serialized form so callers can never mutate
    stored state through a loaded model, and so tests can compare exact
    persisted bytes.
    """

    def __init__(self, rule_set: RuleSet | None = None) -> None:
        super().__init__()
        self._content = dump_rule_set(rule_set or RuleSet())
        self.save_count = 0

    @property
    def content(self) -> str:
        return self._content

    def load(self) -> RuleSet:
        return parse_rule_set(self._content, source="<memory>")

    def save(self, rule_set: RuleSet) -> None:
        self._content = dump_rule_set(rule_set)
        self.save_count += 1
