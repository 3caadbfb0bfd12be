"""
Core practice/progress engine.

- models: catalog entities and the persisted ProgressState
- scoring: pure accuracy, streak and badge policy
- progress_store: owns ProgressState, records answers, persists
- errors: exception taxonomy shared by every layer
"""

from .errors import (
    BiasLabError,
    CatalogError,
    EmptyCatalogError,
    InvalidSettingError,
    InvariantViolation,
    PersistenceError,
    SessionStateError,
    UnknownOptionError,
)
from .models import (
    Badges,
    Concept,
    MasteryEntry,
    Option,
    ProgressState,
    Research,
    Scenario,
    Stats,
    UserSettings,
)
from .progress_store import ProgressStore

__all__ = [
    "Badges",
    "BiasLabError",
    "CatalogError",
    "Concept",
    "EmptyCatalogError",
    "InvalidSettingError",
    "InvariantViolation",
    "MasteryEntry",
    "Option",
    "PersistenceError",
    "ProgressState",
    "ProgressStore",
    "Research",
    "Scenario",
    "SessionStateError",
    "Stats",
    "UnknownOptionError",
    "UserSettings",
]
