"""Unit tests for ProgressState serialization and catalog entities."""

from datetime import date

import pytest

from biaslab.core.models import (
    Badges,
    MasteryEntry,
    Option,
    ProgressState,
    Scenario,
    Stats,
    UserSettings,
)


class TestProgressStateSerialization:
    def test_defaults(self):
        state = ProgressState()
        assert state.stats == Stats()
        assert state.badges == Badges()
        assert state.settings == UserSettings(audio=True, theme="dark")
        assert state.mastery == {}
        assert state.completed_scenario_ids == []

    def test_to_dict_uses_stored_record_keys(self):
        state = ProgressState(
            stats=Stats(total_answered=3, total_correct=2, streak=1, best_streak=4, last_day=date(2024, 5, 1)),
            mastery={"anchoring": MasteryEntry(seen=2, correct=1)},
            completed_scenario_ids=["s1"],
        )
        data = state.to_dict()
        assert data["stats"] == {
            "totalAnswered": 3,
            "totalCorrect": 2,
            "streak": 1,
            "bestStreak": 4,
            "lastDay": "2024-05-01",
        }
        assert data["mastery"] == {"anchoring": {"seen": 2, "correct": 1}}
        assert data["completedScenarioIds"] == ["s1"]
        assert data["settings"] == {"audio": True, "theme": "dark"}

    def test_round_trip(self):
        state = ProgressState(
            stats=Stats(total_answered=7, total_correct=5, streak=2, best_streak=3, last_day=date(2024, 1, 2)),
            mastery={"a": MasteryEntry(3, 2), "b": MasteryEntry(1, 0)},
            badges=Badges(novice=True),
            settings=UserSettings(audio=False, theme="light"),
            completed_scenario_ids=["x", "y"],
        )
        assert ProgressState.from_dict(state.to_dict()) == state

    def test_missing_sections_default(self):
        state = ProgressState.from_dict({"stats": {"totalAnswered": 4, "totalCorrect": 1}})
        assert state.stats.total_answered == 4
        assert state.stats.streak == 0
        assert state.stats.last_day is None
        assert state.badges == Badges()
        assert state.settings == UserSettings()

    def test_unknown_keys_ignored(self):
        state = ProgressState.from_dict({"legacy": 1, "badges": {"novice": True, "extra": True}})
        assert state.badges == Badges(novice=True)

    def test_malformed_section_falls_back_alone(self):
        state = ProgressState.from_dict(
            {"stats": {"totalAnswered": "many"}, "badges": {"streaker": True}, "settings": "loud"}
        )
        assert state.stats == Stats()
        assert state.badges == Badges(streaker=True)
        assert state.settings == UserSettings()

    def test_invalid_theme_defaults_to_dark(self):
        assert ProgressState.from_dict({"settings": {"theme": "neon"}}).settings.theme == "dark"

    def test_full_timestamp_last_day_keeps_date(self):
        state = ProgressState.from_dict({"stats": {"lastDay": "2024-02-03T10:00:00.000Z"}})
        assert state.stats.last_day == date(2024, 2, 3)

    def test_malformed_mastery_entries_dropped(self):
        state = ProgressState.from_dict({"mastery": {"ok": {"seen": 2, "correct": 1}, "bad": 5, "worse": {"seen": "x"}}})
        assert state.mastery == {"ok": MasteryEntry(seen=2, correct=1)}

    def test_completed_ids_deduplicated(self):
        state = ProgressState.from_dict({"completedScenarioIds": ["a", "b", "a"]})
        assert state.completed_scenario_ids == ["a", "b"]

    def test_completed_ids_deduplicated_after_str_conversion(self):
        state = ProgressState.from_dict({"completedScenarioIds": [1, 1, "1", "s2"]})
        assert state.completed_scenario_ids == ["1", "s2"]

    def test_non_finite_counters_reset_their_section(self):
        state = ProgressState.from_dict(
            {"stats": {"totalAnswered": float("inf")}, "settings": {"theme": "light"}}
        )
        assert state.stats == Stats()
        assert state.settings.theme == "light"

    def test_non_finite_mastery_entry_dropped(self):
        state = ProgressState.from_dict(
            {"mastery": {"ok": {"seen": 1, "correct": 1}, "bad": {"seen": float("nan")}, "worse": {"correct": float("-inf")}}}
        )
        assert state.mastery == {"ok": MasteryEntry(seen=1, correct=1)}

    @pytest.mark.parametrize("raw", ["false", "true", 1, 0, None, []])
    def test_non_bool_flags_use_defaults(self, raw):
        state = ProgressState.from_dict(
            {"badges": {"novice": raw, "streaker": True}, "settings": {"audio": raw}}
        )
        assert state.badges == Badges(streaker=True)
        assert state.settings.audio is True

    def test_bool_flags_kept(self):
        state = ProgressState.from_dict({"settings": {"audio": False}, "badges": {"methodologist": True}})
        assert state.settings.audio is False
        assert state.badges.methodologist is True


class TestScenario:
    @pytest.fixture
    def scenario(self):
        return Scenario(
            id="s1",
            answers=frozenset({"c1"}),
            options=(Option("a", "A"), Option("b", "B", is_correct=True), Option("c", "C")),
        )

    def test_option_lookup(self, scenario):
        assert scenario.option("c").text == "C"
        assert scenario.option("z") is None

    def test_correct_option(self, scenario):
        assert scenario.correct_option.id == "b"

    def test_correct_option_missing(self):
        scenario = Scenario(id="s2", answers=frozenset({"c1"}), options=(Option("a", "A"),))
        with pytest.raises(ValueError):
            _ = scenario.correct_option
