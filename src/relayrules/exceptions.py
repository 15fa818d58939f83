"""Custom exception hierarchy for relayrules."""

from __future__ import annotations

from typing import Any


class RelayRulesError(Exception):
    """Base exception for all relayrules errors."""


class ConfigError(RelayRulesError):
    """Invalid or missing configuration."""


class StorageUnavailableError(RelayRulesError):
    """Backing rules file is missing, unreadable or unwritable."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class CorruptDataError(RelayRulesError):
    """Backing rules file content does not parse into a rule set."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class ScheduleValidationError(RelayRulesError):
    """A schedule entry in a patch is missing its ``time`` field.

    ``schedule`` carries the offending schedule payload as plain dicts so
    it can be echoed back to the caller.
    """

    def __init__(self, message: str, *, schedule: list[dict[str, Any]] | None = None) -> None:
        self.schedule = schedule or []
        super().__init__(message)


class RelayNotFoundError(RelayRulesError):
    """No relay in the rule set matches the patch's (pin, designator) key."""

    def __init__(self, *, pin: int, designator: str) -> None:
        self.pin = pin
        self.designator = designator
        super().__init__("Not Found")


class RequestDecodeError(RelayRulesError):
    """Request body is not valid JSON or not shaped like a relay patch."""
