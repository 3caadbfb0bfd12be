"""
Practice session engine.

A session walks an ordered scenario queue:

    ACTIVE(0) -> ACTIVE(1) -> ... -> COMPLETE

There are no backward transitions. A session completes when the queue is
exhausted or when it is ended early. Answer outcomes are delegated to the
ProgressStore; the engine itself keeps only ephemeral session state.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from biaslab.core.errors import EmptyCatalogError, SessionStateError, UnknownOptionError
from biaslab.core.models import Option, Scenario
from biaslab.core.progress_store import ProgressStore
from biaslab.core.scoring import percentage

# Maximum scenarios in a single-concept drill
DRILL_SIZE = 5


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETE = "complete"


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of one submitted answer, for the presentation layer to render."""

    scenario_id: str
    is_correct: bool
    chosen_option: Option
    correct_option: Option
    explainer: str | None = None


@dataclass(frozen=True)
class SessionSummary:
    correct_count: int
    attempted: int
    total: int


@dataclass
class PracticeSession:
    """Ephemeral state of one practice run; never persisted."""

    queue: list[Scenario]
    concept_filter: str | None = None
    index: int = 0
    correct_count: int = 0
    status: SessionStatus = SessionStatus.ACTIVE
    _answered: set[int] = field(default_factory=set, init=False, repr=False)

    @property
    def total(self) -> int:
        return len(self.queue)

    @property
    def is_drill(self) -> bool:
        return self.concept_filter is not None

    @property
    def is_complete(self) -> bool:
        return self.status is SessionStatus.COMPLETE

    @property
    def position(self) -> int:
        """1-based number of the scenario on screen, capped at total."""
        return min(self.index + 1, self.total)

    @property
    def progress_percent(self) -> int:
        return percentage(self.index, self.total)

    def is_answered(self) -> bool:
        """Whether the scenario at the current index already has an answer."""
        return self.index in self._answered

    def mark_answered(self, is_correct: bool) -> None:
        """Record that the current scenario has been answered."""
        self._answered.add(self.index)
        if is_correct:
            self.correct_count += 1

    def current_scenario(self) -> Scenario | None:
        """The scenario at the current index, or None once the session is complete."""
        if self.is_complete or self.index >= self.total:
            return None
        return self.queue[self.index]

    def advance(self) -> PracticeSession:
        """Move to the next scenario; completes the session when the queue runs out."""
        if self.is_complete:
            raise SessionStateError("Cannot advance a completed session")
        self.index += 1
        if self.index >= self.total:
            self.status = SessionStatus.COMPLETE
        return self

    def end(self) -> PracticeSession:
        """Complete the session now, whatever remains in the queue."""
        self.status = SessionStatus.COMPLETE
        return self

    def summary(self) -> SessionSummary:
        if not self.is_complete:
            raise SessionStateError("Summary is only available once the session is complete")
        return SessionSummary(correct_count=self.correct_count, attempted=self.index, total=self.total)


class PracticeEngine:
    """
    Builds sessions from a scenario pool and evaluates answers.

    Selection policy:
    - With a concept filter, the pool is the scenarios exercising that concept;
      an empty match falls back to the full catalog.
    - The pool is shuffled.
    - With a concept filter the shuffled pool is capped at drill_size.
    """

    def __init__(
        self,
        store: ProgressStore,
        rng: random.Random | None = None,
        drill_size: int = DRILL_SIZE,
    ):
        self.store = store
        self.rng = rng or random.Random()
        self.drill_size = drill_size

    def start_session(self, scenarios: Sequence[Scenario], concept_filter: str | None = None) -> PracticeSession:
        """Select and order a scenario queue. Raises EmptyCatalogError if there is nothing to practice."""
        if not scenarios:
            raise EmptyCatalogError("The catalog has no scenarios to practice")

        if concept_filter is not None:
            pool = [s for s in scenarios if concept_filter in s.answers]
            if not pool:
                logger.info(f"No scenarios for {concept_filter!r}; practicing the full catalog")
                pool = list(scenarios)
        else:
            pool = list(scenarios)

        self.rng.shuffle(pool)
        if concept_filter is not None:
            pool = pool[: self.drill_size]

        logger.info(f"Session started: {len(pool)} scenarios" + (f" (drill: {concept_filter})" if concept_filter else ""))
        return PracticeSession(queue=pool, concept_filter=concept_filter)

    def current_scenario(self, session: PracticeSession) -> Scenario | None:
        return session.current_scenario()

    def submit_answer(self, session: PracticeSession, scenario: Scenario, option_id: str) -> AnswerOutcome:
        """
        Evaluate the chosen option and record the outcome in the progress store.

        Valid once per scenario: the caller must advance before answering again.
        """
        current = session.current_scenario()
        if current is None:
            raise SessionStateError("Session is complete")
        if current.id != scenario.id:
            raise SessionStateError(f"Scenario {scenario.id!r} is not the current scenario ({current.id!r})")
        if session.is_answered():
            raise SessionStateError(f"Scenario {scenario.id!r} was already answered")

        chosen = scenario.option(option_id)
        if chosen is None:
            raise UnknownOptionError(scenario.id, option_id)
        correct_option = scenario.correct_option

        self.store.record_answer(scenario.answers, chosen.is_correct, scenario.id)
        session.mark_answered(chosen.is_correct)

        return AnswerOutcome(
            scenario_id=scenario.id,
            is_correct=chosen.is_correct,
            chosen_option=chosen,
            correct_option=correct_option,
            explainer=scenario.explainer,
        )

    def advance(self, session: PracticeSession) -> PracticeSession:
        return session.advance()

    def skip(self, session: PracticeSession) -> PracticeSession:
        """Move on without answering; skipped scenarios still count as attempted."""
        scenario = session.current_scenario()
        if scenario is not None and not session.is_answered():
            logger.debug(f"Skipped {scenario.id}")
        return session.advance()

    def end_session(self, session: PracticeSession) -> PracticeSession:
        return session.end()

    def summary(self, session: PracticeSession) -> SessionSummary:
        return session.summary()
