"""
Progress Store: owns the learner's ProgressState.

Lifecycle:
    store = ProgressStore(backend)
    store.load()                      # explicit initialization
    store.record_answer(...)          # mutations persist synchronously
    store.reset()                     # explicit teardown back to defaults

Persistence is fire-and-forget: a failed write is logged and swallowed, and
the in-memory state stays authoritative until the next successful save.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any

from loguru import logger

from . import scoring
from .errors import InvalidSettingError, PersistenceError
from .models import THEMES, MasteryEntry, ProgressState

if TYPE_CHECKING:
    from biaslab.storage.backends import StorageBackend

DEFAULT_STORAGE_KEY = "biaslab:v1"
SETTING_KEYS = ("audio", "theme")


@dataclass(frozen=True)
class MissedConcept:
    """A row of the most-missed report."""

    concept_id: str
    seen: int
    correct: int
    rate: int


class ProgressStore:
    """Mutation and query operations over the persisted progress record."""

    def __init__(
        self,
        backend: StorageBackend,
        key: str = DEFAULT_STORAGE_KEY,
        today: Callable[[], date] = date.today,
    ):
        """
        Args:
            backend: Key/value storage the record is persisted through
            key: Fixed storage key of the record
            today: Clock returning the current local calendar day
        """
        self.backend = backend
        self.key = key
        self._today = today
        self._state = ProgressState()

    @property
    def state(self) -> ProgressState:
        return self._state

    # =========================================================================
    # Load / Save / Reset
    # =========================================================================

    def load(self) -> ProgressState:
        """
        Read the persisted record into memory.

        Missing or corrupt data degrades to defaults; fields present in a
        partially valid record are kept. Never raises.
        """
        self._state = self._read()
        return self._state

    def _read(self) -> ProgressState:
        try:
            raw = self.backend.get_item(self.key)
        except PersistenceError as e:
            logger.warning(f"Could not read progress, using defaults: {e}")
            return ProgressState()
        if not raw:
            return ProgressState()

        try:
            data: Any = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Stored progress is not valid JSON, using defaults: {e}")
            return ProgressState()
        if not isinstance(data, dict):
            logger.warning("Stored progress is not an object, using defaults")
            return ProgressState()

        state = ProgressState.from_dict(data)
        logger.debug(f"Loaded progress: {state.stats.total_answered} answered")
        return state

    def save(self) -> bool:
        """Persist the whole state. Returns False if the write failed."""
        try:
            self.backend.set_item(self.key, json.dumps(self._state.to_dict()))
        except PersistenceError as e:
            logger.warning(f"Progress not saved: {e}")
            return False
        return True

    def reset(self) -> None:
        """Clear persisted progress and start over from defaults, then persist them."""
        try:
            self.backend.remove_item(self.key)
        except PersistenceError as e:
            logger.warning(f"Could not clear stored progress: {e}")
        self._state = self._read()
        self.save()
        logger.info("Progress reset")

    # =========================================================================
    # Mutations
    # =========================================================================

    def record_answer(self, concept_ids: Iterable[str], correct: bool, scenario_id: str | None) -> None:
        """Apply one answered scenario to counters, mastery, streak and badges, then persist."""
        state = self._state
        stats = state.stats

        stats.total_answered += 1
        if correct:
            stats.total_correct += 1

        for concept_id in concept_ids:
            entry = state.mastery.setdefault(concept_id, MasteryEntry())
            entry.seen += 1
            if correct:
                entry.correct += 1

        if correct and scoring.bump_streak(stats, self._today()):
            logger.debug(f"Streak now {stats.streak} (best {stats.best_streak})")

        if scenario_id and scenario_id not in state.completed_scenario_ids:
            state.completed_scenario_ids.append(scenario_id)

        for badge in scoring.apply_badges(state.badges, stats):
            logger.info(f"Badge unlocked: {badge}")

        self.save()

    def set_setting(self, key: str, value: Any) -> None:
        """Update one presentation setting and persist."""
        if key == "audio":
            if not isinstance(value, bool):
                raise InvalidSettingError(f"audio must be a bool, got {value!r}")
            self._state.settings.audio = value
        elif key == "theme":
            if value not in THEMES:
                raise InvalidSettingError(f"theme must be one of {', '.join(THEMES)}, got {value!r}")
            self._state.settings.theme = value
        else:
            raise InvalidSettingError(f"Unknown setting {key!r}; expected one of {', '.join(SETTING_KEYS)}")
        self.save()

    # =========================================================================
    # Queries
    # =========================================================================

    def accuracy(self) -> int:
        """Overall accuracy 0..100 (0 before any answer)."""
        return scoring.accuracy(self._state.stats)

    def mastery_for(self, concept_id: str) -> MasteryEntry:
        """Mastery tally for a concept; a zero entry (not stored) when unseen."""
        return self._state.mastery.get(concept_id) or MasteryEntry()

    def mastery_rate(self, concept_id: str) -> int:
        return scoring.mastery_rate(self._state.mastery.get(concept_id))

    def most_missed(self, limit: int = 5) -> list[MissedConcept]:
        """Concepts with the lowest mastery rate first; ties keep first-seen order."""
        rows = [
            MissedConcept(
                concept_id=concept_id,
                seen=entry.seen,
                correct=entry.correct,
                rate=scoring.mastery_rate(entry),
            )
            for concept_id, entry in self._state.mastery.items()
        ]
        rows.sort(key=lambda row: row.rate)
        return rows[:limit]

    def badge_count(self) -> int:
        return len(self._state.badges.unlocked())
