"""
Suite-level aggregation of case classifications into recall, precision, F1 and score.
"""

import logging
from typing import Iterable

from .models import Classification, RecordId, RunSummary

logger = logging.getLogger(__name__)

PENALTY_LISTED_FP = 0.02
PENALTY_UNEXPECTED_EXTRA = 0.05


def compute_penalty_points(listed_false_positive_count: int, unexpected_extra_count: int) -> float:
    """Score deduction for listed false positives and unexpected extras."""
    return (
        listed_false_positive_count * PENALTY_LISTED_FP
        + unexpected_extra_count * PENALTY_UNEXPECTED_EXTRA
    )


class MetricsAggregator:
    """Accumulates classification counts across a suite, in case order."""

    def __init__(self):
        self.case_count = 0
        self.expected_total = 0
        self.expected_hits = 0
        self.listed_false_positive_count = 0
        self.unexpected_extra_count = 0
        self.invalid_id_count = 0
        self.returned_total = 0
        self.pass_cases = 0

    def add(
        self,
        expected_ids: Iterable[RecordId],
        returned_ids: Iterable[RecordId],
        classification: Classification,
        passed: bool
    ) -> None:
        """Observe one classified case."""
        self.case_count += 1
        self.expected_total += len(set(expected_ids))
        self.expected_hits += len(classification.hit_ids)
        self.listed_false_positive_count += len(classification.fp_hits)
        self.unexpected_extra_count += len(classification.extras_unscored)
        self.invalid_id_count += len(classification.invalid_ids)
        self.returned_total += len(list(returned_ids))
        if passed:
            self.pass_cases += 1

    def finalize(self) -> RunSummary:
        """Compute derived metrics from the counters accumulated so far."""
        recall = (
            100.0 if self.expected_total == 0
            else (self.expected_hits / self.expected_total) * 100
        )
        precision = (
            0.0 if self.returned_total == 0
            else (self.expected_hits / self.returned_total) * 100
        )
        f1 = (
            0.0 if (recall + precision) == 0
            else (2 * recall * precision) / (recall + precision)
        )
        penalty_points = compute_penalty_points(
            self.listed_false_positive_count, self.unexpected_extra_count)
        score_raw = recall - penalty_points
        score_clamped = max(0.0, min(100.0, score_raw))
        # A single fabricated id voids the whole run
        score = 0.0 if self.invalid_id_count > 0 else score_clamped
        pass_rate = (
            100.0 if self.case_count == 0
            else (self.pass_cases / self.case_count) * 100
        )

        if self.invalid_id_count > 0:
            logger.warning(
                f"{self.invalid_id_count} invalid ids returned; score forced to 0")

        return RunSummary(
            case_count=self.case_count,
            expected_total=self.expected_total,
            expected_hits=self.expected_hits,
            listed_false_positive_count=self.listed_false_positive_count,
            unexpected_extra_count=self.unexpected_extra_count,
            invalid_id_count=self.invalid_id_count,
            returned_total=self.returned_total,
            pass_cases=self.pass_cases,
            pass_rate=pass_rate,
            recall=recall,
            precision=precision,
            f1=f1,
            penalty_points=penalty_points,
            score_raw=score_raw,
            score_clamped=score_clamped,
            score=score,
        )
