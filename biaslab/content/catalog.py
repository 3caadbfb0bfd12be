"""Read-only catalog of concepts and scenarios."""

from __future__ import annotations

from dataclasses import dataclass, field

from biaslab.core.models import Concept, Scenario


@dataclass(frozen=True)
class Catalog:
    """Concepts and scenarios supplied by a loader; never mutated by the engine."""

    concepts: tuple[Concept, ...] = ()
    scenarios: tuple[Scenario, ...] = ()
    _concept_index: dict[str, Concept] = field(init=False, repr=False, compare=False)
    _scenario_index: dict[str, Scenario] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_concept_index", {c.id: c for c in self.concepts})
        object.__setattr__(self, "_scenario_index", {s.id: s for s in self.scenarios})

    def concept(self, concept_id: str) -> Concept | None:
        return self._concept_index.get(concept_id)

    def scenario(self, scenario_id: str) -> Scenario | None:
        return self._scenario_index.get(scenario_id)

    def scenarios_for(self, concept_id: str) -> list[Scenario]:
        """Scenarios whose answers include the concept, in catalog order."""
        return [s for s in self.scenarios if concept_id in s.answers]

    def search(self, query: str) -> list[Concept]:
        """
        Library search.

        Case-insensitive substring match against name, summary, tags and
        contexts. A blank query returns every concept.
        """
        q = query.strip().lower()
        if not q:
            return list(self.concepts)
        return [
            c
            for c in self.concepts
            if q in c.name.lower()
            or q in c.summary.lower()
            or any(q in tag.lower() for tag in c.tags)
            or any(q in ctx.lower() for ctx in c.contexts)
        ]
