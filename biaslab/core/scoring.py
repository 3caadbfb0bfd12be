"""
Scoring and badge policy.

Pure functions over progress counters:
- accuracy / mastery rate as whole percentages (half-up rounding)
- daily streak continuation
- badge unlock thresholds
"""

from __future__ import annotations

from datetime import date

from .models import Badges, MasteryEntry, Stats

# Badge thresholds
NOVICE_MIN_CORRECT = 5
METHODOLOGIST_MIN_ANSWERED = 25
STREAKER_MIN_BEST_STREAK = 10

BADGE_LABELS = {
    "novice": ("Novice Skeptic", f"{NOVICE_MIN_CORRECT} correct"),
    "methodologist": ("Methodologist", f"{METHODOLOGIST_MIN_ANSWERED} scenarios"),
    "streaker": ("Streaker", f"{STREAKER_MIN_BEST_STREAK}-day streak"),
}


def percentage(part: int, whole: int) -> int:
    """Return round(100 * part / whole) with halves rounded up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def accuracy(stats: Stats) -> int:
    """Overall accuracy 0..100."""
    return percentage(stats.total_correct, stats.total_answered)


def mastery_rate(entry: MasteryEntry | None) -> int:
    """Per-concept accuracy 0..100; 0 for an unseen concept."""
    if entry is None:
        return 0
    return percentage(entry.correct, entry.seen)


def continue_streak(streak: int, last_day: date | None, today: date) -> int | None:
    """
    Return the streak after a correct answer on `today`, or None if today already counted.

    Any earlier last_day continues the streak, even after a gap of several days.
    """
    if last_day == today:
        return None
    if last_day is None:
        return 1
    return streak + 1


def bump_streak(stats: Stats, today: date) -> bool:
    """Apply a correct answer to the streak in place. Returns True if the streak moved."""
    new_streak = continue_streak(stats.streak, stats.last_day, today)
    if new_streak is None:
        return False
    stats.streak = new_streak
    stats.last_day = today
    stats.best_streak = max(stats.best_streak, new_streak)
    return True


def earned_badges(stats: Stats) -> Badges:
    """Badge predicates evaluated against the current counters."""
    return Badges(
        novice=stats.total_correct >= NOVICE_MIN_CORRECT,
        methodologist=stats.total_answered >= METHODOLOGIST_MIN_ANSWERED,
        streaker=stats.best_streak >= STREAKER_MIN_BEST_STREAK,
    )


def apply_badges(badges: Badges, stats: Stats) -> list[str]:
    """
    Unlock every badge whose threshold is met; never clears one.

    Returns the names of badges newly unlocked by this call.
    """
    earned = earned_badges(stats)
    newly_unlocked = []
    if earned.novice and not badges.novice:
        badges.novice = True
        newly_unlocked.append("novice")
    if earned.methodologist and not badges.methodologist:
        badges.methodologist = True
        newly_unlocked.append("methodologist")
    if earned.streaker and not badges.streaker:
        badges.streaker = True
        newly_unlocked.append("streaker")
    return newly_unlocked
