"""
Data models for QA Case Generator.

These Pydantic models define the structured shape that free-text provider
output is normalized into: test cases, per-provider results and the run that
groups them. Intermediate artifacts of the parsing nodes live at the bottom.
"""

from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from .exceptions import InvalidEditError, RunNotFoundError


# ==================== Enumerations ====================

class OutputFormat(str, Enum):
    """Output style the prompt requested, which selects the segmentation rules."""
    GHERKIN = "gherkin"
    PLAIN = "plain"


class Provider(str, Enum):
    """External LLM services queried for test case text."""
    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"

    @property
    def display_name(self) -> str:
        return {"openai": "OpenAI", "gemini": "Gemini", "claude": "Claude"}[self.value]


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NA = "N/A"


class Category(str, Enum):
    """Heuristic scenario category, see nodes.tagger."""
    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    EDGE = "Edge"


class ProviderStatus(str, Enum):
    """What a run can say about one provider column."""
    NOT_REQUESTED = "not_requested"
    FAILED = "failed"
    EMPTY = "empty"
    OK = "ok"


# ==================== Output Models ====================

class TestCase(BaseModel):
    """
    One normalized scenario.

    Only ``steps`` may change after creation, and only through
    ``replace_steps``; every other field is frozen.
    """
    __test__ = False  # not a pytest class

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., frozen=True, description="Process-unique test case ID")
    title: str = Field(..., frozen=True, description="Scenario name without provider prefixes")
    steps: List[str] = Field(..., description="Ordered step lines in source order")
    expected_result: str = Field("", frozen=True, description="Expected result block (plain format only)")
    priority: Priority = Field(Priority.NA, frozen=True, description="Parsed priority tag")
    format: OutputFormat = Field(..., frozen=True, description="Format the record was parsed with")

    @field_validator('steps')
    @classmethod
    def validate_non_empty_steps(cls, v):
        if not v:
            raise ValueError("Test case must have at least one step")
        return v

    @property
    def category(self) -> Category:
        """Derived from the current steps on every access."""
        from .nodes.tagger import classify
        return classify(self.steps)

    def replace_steps(self, steps: List[str]) -> None:
        """Replace the whole steps list after user review. Blank lines are dropped."""
        cleaned = [step.strip() for step in steps if step and step.strip()]
        if not cleaned:
            raise InvalidEditError(self.id, "a test case needs at least one non-blank step")
        self.steps = cleaned


class ProviderResult(BaseModel):
    """Cases and summary one requested provider contributed to a run."""
    model_config = ConfigDict(frozen=True)

    provider: Provider
    cases: Tuple[TestCase, ...] = Field(default_factory=tuple)
    summary: str = Field("", description="Coverage summary, empty when absent")
    failed: bool = Field(False, description="True if the provider call failed upstream")
    error: str = Field("", description="Failure message reported by the network layer")


class Run(BaseModel):
    """
    A single generation request's results, the unit of history and undo.

    The run, its provider results and their case lists are frozen; ``results``
    is a read-only mapping. Test case steps stay editable through
    ``edit_steps``.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"run-{uuid4().hex[:12]}")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    requested: Tuple[Provider, ...] = Field(default_factory=tuple, description="Providers in request order")
    results: Mapping[Provider, ProviderResult] = Field(default_factory=dict, validate_default=True)
    format: Optional[OutputFormat] = None
    description: str = Field("", description="Feature description the run was generated from")

    @field_validator('results')
    @classmethod
    def freeze_results(cls, v):
        return MappingProxyType(dict(v))

    @field_serializer('results')
    def serialize_results(self, results) -> Dict[Provider, ProviderResult]:
        return dict(results)

    @model_validator(mode='after')
    def validate_results(self):
        unknown = [p.value for p in self.results if p not in self.requested]
        if unknown:
            raise ValueError(f"Results for providers that were not requested: {unknown}")
        validate_unique_ids([case for result in self.results.values() for case in result.cases])
        return self

    def status(self, provider: Provider) -> ProviderStatus:
        if provider not in self.requested:
            return ProviderStatus.NOT_REQUESTED
        result = self.results.get(provider)
        if result is None or result.failed:
            return ProviderStatus.FAILED
        if not result.cases:
            return ProviderStatus.EMPTY
        return ProviderStatus.OK

    def cases_for(self, provider: Provider) -> Tuple[TestCase, ...]:
        result = self.results.get(provider)
        return result.cases if result else ()

    def summary_for(self, provider: Provider) -> str:
        result = self.results.get(provider)
        return result.summary if result else ""

    @property
    def total_cases(self) -> int:
        return sum(len(result.cases) for result in self.results.values())

    def find_case(self, case_id: str) -> TestCase:
        for result in self.results.values():
            for case in result.cases:
                if case.id == case_id:
                    return case
        raise RunNotFoundError(f"Test case {case_id} not found in run {self.id}")

    def edit_steps(self, case_id: str, steps: List[str]) -> TestCase:
        """Replace one test case's steps in place (last write wins)."""
        case = self.find_case(case_id)
        case.replace_steps(steps)
        return case


# ==================== Intermediate Models ====================

class TestCaseDraft(BaseModel):
    """Output of the record extractor, before an id is assigned."""
    __test__ = False

    title: str = "Untitled"
    steps: List[str] = Field(default_factory=list)
    expected_result: str = ""
    priority: Priority = Priority.NA


class ParsedOutput(BaseModel):
    """Parse result for one provider response."""
    cases: List[TestCase] = Field(default_factory=list)
    summary: str = ""


class ProviderFailure(BaseModel):
    """Reported by the network layer when a requested provider produced nothing."""
    message: str = Field(..., description="Human-readable failure reason")


# ==================== Validation Helpers ====================

def validate_unique_ids(items: List[BaseModel], id_field: str = "id") -> None:
    """Validate that all items have unique IDs."""
    ids = [getattr(item, id_field) for item in items]
    duplicates = [id for id in set(ids) if ids.count(id) > 1]
    if duplicates:
        raise ValueError(f"Duplicate IDs found: {duplicates}")
