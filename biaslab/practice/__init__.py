"""Practice sessions: scenario selection, answer evaluation, summaries."""

from .session import (
    DRILL_SIZE,
    AnswerOutcome,
    PracticeEngine,
    PracticeSession,
    SessionStatus,
    SessionSummary,
)

__all__ = [
    "DRILL_SIZE",
    "AnswerOutcome",
    "PracticeEngine",
    "PracticeSession",
    "SessionStatus",
    "SessionSummary",
]
