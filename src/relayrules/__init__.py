"""relayrules - HTTP API over heating circuit relay schedules."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("relayrules")
except PackageNotFoundError:
    __version__ = "0+local"
from relayrules.config import RulesConfig
from relayrules.exceptions import (
    ConfigError,
    CorruptDataError,
    RelayNotFoundError,
    RelayRulesError,
    RequestDecodeError,
    ScheduleValidationError,
    StorageUnavailableError,
)
from relayrules.merge import apply_patch, validate_schedule
from relayrules.models import (
    UNCHANGED,
    Circuit,
    Relay,
    RelayPatch,
    RuleSet,
    ScheduleEntry,
    SensorReading,
    SensorStatus,
    SetTo,
)
from relayrules.schedule import parse_time_of_day, resolve_temperature
from relayrules.service import RulesService
from relayrules.status import project_status
from relayrules.store import JsonFileRuleStore, MemoryRuleStore, RuleStore

__all__ = [
    "__version__",
    "Circuit",
    "ConfigError",
    "CorruptDataError",
    "JsonFileRuleStore",
    "MemoryRuleStore",
    "Relay",
    "RelayNotFoundError",
    "RelayPatch",
    "RelayRulesError",
    "RequestDecodeError",
    "RuleSet",
    "RuleStore",
    "RulesConfig",
    "RulesService",
    "ScheduleEntry",
    "ScheduleValidationError",
    "SensorReading",
    "SensorStatus",
    "SetTo",
    "StorageUnavailableError",
    "UNCHANGED",
    "apply_patch",
    "parse_time_of_day",
    "project_status",
    "resolve_temperature",
    "validate_schedule",
]
