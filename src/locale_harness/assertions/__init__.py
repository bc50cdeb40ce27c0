"""UI 断言层：结构快照 + 本地化内容检查"""
from .errors import (
    LocaleAssertionError,
    MissingCatalogKeyError,
    StructureMismatchError,
    ContentMismatchError,
    ScenarioStateError,
    SnapshotParseError,
)
from .aria_snapshot import StructuralSnapshot
from .scenario import LocaleScenario, ScenarioStep, ScenarioResult

__all__ = [
    "LocaleAssertionError",
    "MissingCatalogKeyError",
    "StructureMismatchError",
    "ContentMismatchError",
    "ScenarioStateError",
    "SnapshotParseError",
    "StructuralSnapshot",
    "LocaleScenario",
    "ScenarioStep",
    "ScenarioResult",
]
