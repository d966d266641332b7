"""
Data models for the scoring framework.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NewType, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Type aliases to enforce type safety
RecordId = NewType('RecordId', str)
QueryText = NewType('QueryText', str)


class DatasetName(str, Enum):
    SMALL = "small"
    LARGE = "large"


@dataclass(frozen=True)
class Record:
    """Single dataset row."""
    id: RecordId
    name: str


class TestCase(BaseModel):
    """One labeled query from a suite document."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1, description="Case identifier, unique within a suite")
    dataset: DatasetName = Field(description="Dataset the case was written against")
    query: str = Field(description="Name passed to the candidate's search")
    expected_ids: List[RecordId] = Field(alias="expectedIds", default_factory=list)
    false_positive_ids: List[RecordId] = Field(alias="falsePositiveIds", default_factory=list)
    tags: List[str] = Field(default_factory=list)
    notes: str = ""

    @field_validator("expected_ids", "false_positive_ids", mode="before")
    @classmethod
    def stringify_ids(cls, v):
        # Labels are sets; keep first occurrence so reports stay in suite order
        if isinstance(v, list):
            ids = []
            for item in v:
                record_id = "" if item is None else str(item).strip()
                if not record_id:
                    raise ValueError(f"label ids must be non-empty, got {item!r}")
                ids.append(record_id)
            return list(dict.fromkeys(ids))
        return v

    @model_validator(mode="after")
    def reject_overlap(self) -> "TestCase":
        overlap = sorted(set(self.expected_ids) & set(self.false_positive_ids))
        if overlap:
            raise ValueError(
                f"ids listed as both expected and false positive: {', '.join(overlap)}")
        return self


class TestSuite(BaseModel):
    """Ordered collection of test cases for one dataset."""
    model_config = ConfigDict(frozen=True)

    name: str
    dataset: DatasetName
    visibility: str = "public"
    seed: int = 0
    cases: List[TestCase] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_cases(self) -> "TestSuite":
        seen = set()
        duplicates = []
        for case in self.cases:
            if case.id in seen:
                duplicates.append(case.id)
            seen.add(case.id)
            if case.dataset != self.dataset:
                raise ValueError(
                    f"case '{case.id}' targets dataset '{case.dataset.value}' "
                    f"but suite targets '{self.dataset.value}'")
        if duplicates:
            raise ValueError(f"duplicate case ids: {', '.join(duplicates)}")
        return self


@dataclass
class CaseOutcome:
    """What the candidate produced for one case."""
    returned_ids: List[RecordId]
    elapsed_ms: float
    runtime_error: Optional[str] = None
    timed_out: bool = False


@dataclass(frozen=True)
class Classification:
    """Returned ids of one case split against its labels and the dataset."""
    hit_ids: List[RecordId]
    missing_ids: List[RecordId]
    fp_hits: List[RecordId]
    invalid_ids: List[RecordId]
    extras_unscored: List[RecordId]


@dataclass
class RunSummary:
    """Aggregate counters, derived metrics and timing for one suite run."""
    case_count: int = 0
    expected_total: int = 0
    expected_hits: int = 0
    listed_false_positive_count: int = 0
    unexpected_extra_count: int = 0
    invalid_id_count: int = 0
    returned_total: int = 0
    pass_cases: int = 0
    pass_rate: float = 0.0
    recall: float = 0.0
    precision: float = 0.0
    f1: float = 0.0
    penalty_points: float = 0.0
    score_raw: float = 0.0
    score_clamped: float = 0.0
    score: float = 0.0
    total_ms: float = 0.0
    avg_ms: float = 0.0
    p95_ms: float = 0.0
    qps: float = 0.0


@dataclass
class CaseReport:
    """Everything known about one evaluated case, for verbose reporting."""
    index: int
    case: TestCase
    outcome: CaseOutcome
    classification: Classification
    passed: bool


@dataclass
class RunResult:
    """Container for a finished run."""
    summary: RunSummary
    cases: List[CaseReport] = field(default_factory=list)
    setup_ms: float = 0.0
    cleanup_ms: float = 0.0
