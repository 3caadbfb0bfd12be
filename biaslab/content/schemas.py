"""
Pydantic records for raw catalog JSON.

These validate one entry of fallacies.json / scenarios.json before it is
turned into a read-only domain object. A scenario must carry exactly one
option with is_correct = true; answer evaluation depends on it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from biaslab.core.models import Concept, Option, Research, Scenario


class ResearchRecord(BaseModel):
    """Citation attached to a concept."""

    model_config = ConfigDict(extra="ignore")

    author: str
    year: int | str
    title: str
    doi: str | None = None

    def to_domain(self) -> Research:
        return Research(author=self.author, year=self.year, title=self.title, doi=self.doi or None)


class ConceptRecord(BaseModel):
    """One entry of fallacies.json."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="Stable concept key")
    name: str = Field(..., min_length=1)
    summary: str = ""
    definition: str = ""
    tags: list[str] = Field(default_factory=list)
    contexts: list[str] = Field(default_factory=list)
    classic_examples: list[str] = Field(default_factory=list)
    related_research: list[ResearchRecord] = Field(default_factory=list)
    difficulty: int = Field(default=1, description="1 (easy) to 5 (hard)")
    color: str | None = None

    @field_validator("difficulty")
    @classmethod
    def _clamp_difficulty(cls, value: int) -> int:
        return max(1, min(5, value))

    def to_domain(self) -> Concept:
        return Concept(
            id=self.id,
            name=self.name,
            summary=self.summary,
            definition=self.definition,
            tags=tuple(self.tags),
            contexts=tuple(self.contexts),
            classic_examples=tuple(self.classic_examples),
            related_research=tuple(r.to_domain() for r in self.related_research),
            difficulty=self.difficulty,
            color=self.color,
        )


class OptionRecord(BaseModel):
    """One answer choice."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    text: str
    is_correct: bool = False
    reason: str = ""


class ExplainersRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    short: str | None = None


class ScenarioRecord(BaseModel):
    """One entry of scenarios.json."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="Stable scenario key")
    title: str = ""
    text: str = ""
    answers: list[str] = Field(..., min_length=1, description="Concept ids this scenario exercises")
    options: list[OptionRecord] = Field(..., min_length=2)
    explainers: ExplainersRecord | None = None

    @model_validator(mode="after")
    def _check_options(self) -> ScenarioRecord:
        correct = sum(1 for opt in self.options if opt.is_correct)
        if correct != 1:
            raise ValueError(f"expected exactly one correct option, found {correct}")
        ids = [opt.id for opt in self.options]
        if len(set(ids)) != len(ids):
            raise ValueError("option ids must be unique")
        return self

    def to_domain(self) -> Scenario:
        return Scenario(
            id=self.id,
            title=self.title,
            text=self.text,
            answers=frozenset(self.answers),
            options=tuple(
                Option(id=o.id, text=o.text, is_correct=o.is_correct, reason=o.reason) for o in self.options
            ),
            explainer=self.explainers.short if self.explainers else None,
        )
