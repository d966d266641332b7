"""
Sequential suite runner: setup, one case at a time, cleanup.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional, Union

from .candidate import CandidateAdapter
from .dataset import DatasetIndex
from .evaluator import CaseEvaluator
from .metrics import MetricsAggregator
from .models import CaseReport, RunResult, TestSuite
from .timing import TimingCollector

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 2000

CaseCallback = Callable[[CaseReport], None]


class SuiteRunner:
    """Evaluates a candidate against every case of a suite, in declaration order."""

    def __init__(
        self,
        suite: TestSuite,
        dataset: DatasetIndex,
        adapter: CandidateAdapter,
        dataset_path: Union[str, Path],
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
        on_case: Optional[CaseCallback] = None
    ):
        """Initialize runner; suite and dataset are treated as read-only."""
        if timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")
        self.suite = suite
        self.dataset = dataset
        self.adapter = adapter
        self.dataset_path = str(dataset_path)
        self.timeout_ms = timeout_ms
        self.on_case = on_case

    async def run(self) -> RunResult:
        """Run setup, every case, then cleanup, and return the finished result."""
        total_cases = len(self.suite.cases)
        logger.info(
            f"Starting run of suite '{self.suite.name}' ({total_cases} cases, "
            f"timeout={self.timeout_ms}ms)")

        evaluator = CaseEvaluator(self.dataset.valid_ids())
        aggregator = MetricsAggregator()
        timing = TimingCollector()
        result = RunResult(summary=aggregator.finalize())

        result.setup_ms = await self.adapter.setup(self.dataset_path)
        try:
            for index, case in enumerate(self.suite.cases, start=1):
                logger.debug(f"Running case {index}/{total_cases}: {case.id}")
                outcome = await self.adapter.search(case.query, self.timeout_ms)
                timing.record(outcome.elapsed_ms)

                classification, passed = evaluator.evaluate(
                    case.expected_ids, case.false_positive_ids, outcome)
                aggregator.add(case.expected_ids, outcome.returned_ids, classification, passed)

                report = CaseReport(
                    index=index,
                    case=case,
                    outcome=outcome,
                    classification=classification,
                    passed=passed,
                )
                result.cases.append(report)
                if self.on_case is not None:
                    self.on_case(report)
        finally:
            result.cleanup_ms = await self.adapter.cleanup()

        summary = aggregator.finalize()
        summary.total_ms = timing.total_ms
        summary.avg_ms = timing.avg_ms
        summary.p95_ms = timing.p95_ms
        summary.qps = timing.qps
        result.summary = summary

        logger.info(
            f"Run complete: {summary.pass_cases}/{summary.case_count} cases passed, "
            f"score={summary.score:.2f}")
        return result


def run_suite(
    suite: TestSuite,
    dataset: DatasetIndex,
    adapter: CandidateAdapter,
    dataset_path: Union[str, Path],
    timeout_ms: float = DEFAULT_TIMEOUT_MS,
    on_case: Optional[CaseCallback] = None
) -> RunResult:
    """Synchronous entry point around `SuiteRunner.run`."""
    runner = SuiteRunner(suite, dataset, adapter, dataset_path, timeout_ms, on_case)
    return asyncio.run(runner.run())
