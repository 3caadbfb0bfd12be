"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""

from datetime import date, timedelta

import pytest

from biaslab.config import get_settings
from biaslab.content import Catalog
from biaslab.core.models import Concept, Option, Scenario
from biaslab.core.progress_store import ProgressStore
from biaslab.storage import MemoryStorage


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (practice flow across layers)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Controllable calendar day for streak tests."""

    def __init__(self, day: date):
        self.day = day

    def __call__(self) -> date:
        return self.day

    def advance(self, days: int = 1) -> None:
        self.day += timedelta(days=days)


def make_scenario(scenario_id: str, answers, correct: str = "a", option_ids=("a", "b", "c"), explainer=None) -> Scenario:
    """Build a scenario whose `correct` option is the only correct one."""
    return Scenario(
        id=scenario_id,
        title=f"Title {scenario_id}",
        text=f"Text {scenario_id}",
        answers=frozenset(answers),
        options=tuple(
            Option(id=oid, text=f"Option {oid}", is_correct=oid == correct, reason=f"Reason {oid}")
            for oid in option_ids
        ),
        explainer=explainer,
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings are cached per process; tests that change env need a fresh read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock():
    return FakeClock(date(2024, 3, 10))


@pytest.fixture
def backend():
    return MemoryStorage()


@pytest.fixture
def store(backend, clock):
    """Loaded store on an empty in-memory backend."""
    s = ProgressStore(backend, today=clock)
    s.load()
    return s


@pytest.fixture
def sample_catalog():
    """Three concepts, eight scenarios; 'anchoring' has six, 'orphan' has none."""
    concepts = (
        Concept(id="confirmation_bias", name="Confirmation Bias", summary="Seeing what you expect",
                tags=("cognitive bias", "evidence"), contexts=("news",)),
        Concept(id="anchoring", name="Anchoring Effect", summary="First numbers stick",
                tags=("numbers",), contexts=("negotiation", "pricing")),
        Concept(id="orphan", name="Orphan Fallacy", summary="No scenarios reference this"),
    )
    scenarios = (
        make_scenario("cb1", ["confirmation_bias"]),
        make_scenario("cb2", ["confirmation_bias"], correct="b"),
        *(make_scenario(f"an{i}", ["anchoring"]) for i in range(1, 7)),
    )
    return Catalog(concepts=concepts, scenarios=scenarios)


@pytest.fixture
def scenario_factory():
    return make_scenario
