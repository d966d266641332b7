"""
Scoring Framework for Name Matching Candidates

Runs a pluggable search function against a labeled suite and reports
recall, precision, F1, a penalty-adjusted score and latency statistics.
Designed to be project-agnostic and reusable.
"""

from .candidate import Candidate, CandidateAdapter, load_candidate, normalize_ids
from .dataset import DatasetIndex, parse_csv_line
from .errors import CandidateLoadError, DatasetFormatError, ScorerError, SuiteValidationError
from .evaluator import CaseEvaluator, classify, is_pass
from .metrics import (
    PENALTY_LISTED_FP,
    PENALTY_UNEXPECTED_EXTRA,
    MetricsAggregator,
    compute_penalty_points,
)
from .models import (
    CaseOutcome,
    CaseReport,
    Classification,
    DatasetName,
    QueryText,
    Record,
    RecordId,
    RunResult,
    RunSummary,
    TestCase,
    TestSuite,
)
from .runner import DEFAULT_TIMEOUT_MS, SuiteRunner, run_suite
from .suite import load_suite, parse_suite
from .timing import TimingCollector, percentile

__all__ = [
    "RecordId",
    "QueryText",
    "DatasetName",
    "Record",
    "TestCase",
    "TestSuite",
    "CaseOutcome",
    "Classification",
    "CaseReport",
    "RunSummary",
    "RunResult",
    "ScorerError",
    "DatasetFormatError",
    "SuiteValidationError",
    "CandidateLoadError",
    "DatasetIndex",
    "parse_csv_line",
    "load_suite",
    "parse_suite",
    "Candidate",
    "CandidateAdapter",
    "load_candidate",
    "normalize_ids",
    "CaseEvaluator",
    "classify",
    "is_pass",
    "MetricsAggregator",
    "compute_penalty_points",
    "PENALTY_LISTED_FP",
    "PENALTY_UNEXPECTED_EXTRA",
    "TimingCollector",
    "percentile",
    "SuiteRunner",
    "run_suite",
    "DEFAULT_TIMEOUT_MS",
]
