"""
Per-case classification of returned ids against labels and the dataset.
"""

import logging
from typing import AbstractSet, Iterable, Optional, Tuple

from .models import CaseOutcome, Classification, RecordId

logger = logging.getLogger(__name__)


def classify(
    expected_ids: Iterable[RecordId],
    false_positive_ids: Iterable[RecordId],
    returned_ids: Iterable[RecordId],
    valid_ids: AbstractSet[RecordId]
) -> Classification:
    """Split returned ids into hits, misses, listed false positives, invalid ids and extras.

    Membership is decided with set operations, so the order of `returned_ids`
    never changes which bucket an id lands in. Lists keep expected-id order
    for hits/misses and returned-id order for the rest, for readable reports.
    """
    expected = list(dict.fromkeys(expected_ids))
    returned = list(dict.fromkeys(returned_ids))
    expected_set = set(expected)
    fp_set = set(false_positive_ids)
    returned_set = set(returned)

    return Classification(
        hit_ids=[i for i in expected if i in returned_set],
        missing_ids=[i for i in expected if i not in returned_set],
        fp_hits=[i for i in returned if i in fp_set],
        invalid_ids=[i for i in returned if i not in valid_ids],
        extras_unscored=[
            i for i in returned
            if i in valid_ids and i not in expected_set and i not in fp_set
        ],
    )


def is_pass(classification: Classification, runtime_error: Optional[str]) -> bool:
    """A case passes only when nothing is missing, nothing extra came back and no error occurred."""
    return (
        not classification.missing_ids
        and not classification.fp_hits
        and not classification.extras_unscored
        and not classification.invalid_ids
        and runtime_error is None
    )


class CaseEvaluator:
    """Classifies case outcomes against one dataset's valid ids."""

    def __init__(self, valid_ids: AbstractSet[RecordId]):
        self.valid_ids = frozenset(valid_ids)

    def evaluate(
        self,
        expected_ids: Iterable[RecordId],
        false_positive_ids: Iterable[RecordId],
        outcome: CaseOutcome
    ) -> Tuple[Classification, bool]:
        """Classify one outcome and decide whether the case passed."""
        classification = classify(
            expected_ids, false_positive_ids, outcome.returned_ids, self.valid_ids)
        passed = is_pass(classification, outcome.runtime_error)
        logger.debug(
            f"Classified {len(outcome.returned_ids)} returned ids: "
            f"hits={len(classification.hit_ids)} missing={len(classification.missing_ids)} "
            f"fp={len(classification.fp_hits)} invalid={len(classification.invalid_ids)} "
            f"extras={len(classification.extras_unscored)} pass={passed}")
        return classification, passed
