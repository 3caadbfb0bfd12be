"""
Domain models for BiasLab.

Catalog entities (Concept, Scenario, Option) are read-only once loaded.
ProgressState is the only mutable, persisted entity; its JSON shape uses the
camelCase keys of the stored record:

    {
        "stats": {"totalAnswered", "totalCorrect", "streak", "bestStreak", "lastDay"},
        "badges": {"novice", "methodologist", "streaker"},
        "mastery": {"<concept id>": {"seen", "correct"}},
        "settings": {"audio", "theme"},
        "completedScenarioIds": [...]
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal

from loguru import logger

Theme = Literal["light", "dark"]
THEMES: tuple[str, ...] = ("light", "dark")


def _flag(data: dict[str, Any], key: str, default: bool) -> bool:
    """Read a stored boolean; anything that is not a real bool gives the default."""
    value = data.get(key, default)
    return value if isinstance(value, bool) else default


# =============================================================================
# Catalog
# =============================================================================


@dataclass(frozen=True)
class Research:
    """A citation backing a concept entry."""

    author: str
    year: int | str
    title: str
    doi: str | None = None


@dataclass(frozen=True)
class Concept:
    """A cognitive bias or logical fallacy, the unit of mastery tracking."""

    id: str
    name: str
    summary: str = ""
    definition: str = ""
    tags: tuple[str, ...] = ()
    contexts: tuple[str, ...] = ()
    classic_examples: tuple[str, ...] = ()
    related_research: tuple[Research, ...] = ()
    difficulty: int = 1
    color: str | None = None


@dataclass(frozen=True)
class Option:
    """One answer choice of a scenario."""

    id: str
    text: str
    is_correct: bool = False
    reason: str = ""


@dataclass(frozen=True)
class Scenario:
    """A multiple-choice item exercising one or more concepts."""

    id: str
    answers: frozenset[str]
    options: tuple[Option, ...]
    title: str = ""
    text: str = ""
    explainer: str | None = None

    def option(self, option_id: str) -> Option | None:
        """Return the option with this id, or None."""
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None

    @property
    def correct_option(self) -> Option:
        """The single option marked correct."""
        for opt in self.options:
            if opt.is_correct:
                return opt
        raise ValueError(f"Scenario {self.id!r} has no correct option")


# =============================================================================
# Progress State
# =============================================================================


@dataclass
class Stats:
    """Answer counters and the daily streak."""

    total_answered: int = 0
    total_correct: int = 0
    streak: int = 0
    best_streak: int = 0
    last_day: date | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAnswered": self.total_answered,
            "totalCorrect": self.total_correct,
            "streak": self.streak,
            "bestStreak": self.best_streak,
            "lastDay": self.last_day.isoformat() if self.last_day else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Stats:
        last_day = data.get("lastDay")
        return cls(
            total_answered=int(data.get("totalAnswered", 0)),
            total_correct=int(data.get("totalCorrect", 0)),
            streak=int(data.get("streak", 0)),
            best_streak=int(data.get("bestStreak", 0)),
            # Stored as YYYY-MM-DD; a full ISO timestamp keeps its date part
            last_day=date.fromisoformat(str(last_day)[:10]) if last_day else None,
        )


@dataclass
class MasteryEntry:
    """Per-concept running tally of exposures and correct responses."""

    seen: int = 0
    correct: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"seen": self.seen, "correct": self.correct}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MasteryEntry:
        return cls(seen=int(data.get("seen", 0)), correct=int(data.get("correct", 0)))


@dataclass
class Badges:
    """One-way achievement flags."""

    novice: bool = False
    methodologist: bool = False
    streaker: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {
            "novice": self.novice,
            "methodologist": self.methodologist,
            "streaker": self.streaker,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Badges:
        return cls(
            novice=_flag(data, "novice", False),
            methodologist=_flag(data, "methodologist", False),
            streaker=_flag(data, "streaker", False),
        )

    def unlocked(self) -> list[str]:
        """Names of unlocked badges in display order."""
        return [name for name, value in self.to_dict().items() if value]


@dataclass
class UserSettings:
    """Presentation preferences."""

    audio: bool = True
    theme: Theme = "dark"

    def to_dict(self) -> dict[str, Any]:
        return {"audio": self.audio, "theme": self.theme}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserSettings:
        theme = data.get("theme", "dark")
        return cls(
            audio=_flag(data, "audio", True),
            theme=theme if theme in THEMES else "dark",
        )


@dataclass
class ProgressState:
    """The persisted learner progress record."""

    stats: Stats = field(default_factory=Stats)
    mastery: dict[str, MasteryEntry] = field(default_factory=dict)
    badges: Badges = field(default_factory=Badges)
    settings: UserSettings = field(default_factory=UserSettings)
    completed_scenario_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "stats": self.stats.to_dict(),
            "badges": self.badges.to_dict(),
            "mastery": {cid: entry.to_dict() for cid, entry in self.mastery.items()},
            "settings": self.settings.to_dict(),
            "completedScenarioIds": list(self.completed_scenario_ids),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProgressState:
        """
        Build state from a persisted record.

        Missing sections and fields fall back to defaults; unknown keys are
        ignored. A section that cannot be parsed is replaced by its default
        while the other sections are kept.
        """
        state = cls()

        sections = {
            "stats": (Stats.from_dict, dict),
            "badges": (Badges.from_dict, dict),
            "settings": (UserSettings.from_dict, dict),
        }
        for key, (parse, expected) in sections.items():
            raw = data.get(key)
            if raw is None:
                continue
            if not isinstance(raw, expected):
                logger.warning(f"Ignoring malformed '{key}' section in stored progress")
                continue
            try:
                setattr(state, key, parse(raw))
            except (TypeError, ValueError, OverflowError) as e:
                logger.warning(f"Ignoring malformed '{key}' section in stored progress: {e}")

        raw_mastery = data.get("mastery")
        if isinstance(raw_mastery, dict):
            for concept_id, raw_entry in raw_mastery.items():
                if not isinstance(raw_entry, dict):
                    continue
                try:
                    state.mastery[str(concept_id)] = MasteryEntry.from_dict(raw_entry)
                except (TypeError, ValueError, OverflowError):
                    logger.warning(f"Dropping malformed mastery entry for {concept_id!r}")

        raw_completed = data.get("completedScenarioIds")
        if isinstance(raw_completed, list):
            for scenario_id in map(str, raw_completed):
                if scenario_id not in state.completed_scenario_ids:
                    state.completed_scenario_ids.append(scenario_id)

        return state
