"""
Console rendering of case results and the run summary.
"""

import os
import sys
from typing import Callable, List, Optional, TextIO

from name_challenge.packages.scoring_framework import (
    PENALTY_LISTED_FP,
    PENALTY_UNEXPECTED_EXTRA,
    CaseReport,
    DatasetIndex,
    RunResult,
    TestSuite,
)

Painter = Callable[[str], str]

ANSI = {
    "reset": "\x1b[0m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    "red": "\x1b[31m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "magenta": "\x1b[35m",
    "cyan": "\x1b[36m",
}

RULE_WIDTH = 88


def colors_enabled(stream: TextIO) -> bool:
    """Colors only on a terminal, and never when NO_COLOR is set."""
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty()) and not os.environ.get("NO_COLOR")


def format_percent(value: float) -> str:
    return f"{value:.2f}%"


class Reporter:
    """Writes the scorer's human-readable output to a stream."""

    def __init__(self, dataset: DatasetIndex, stream: Optional[TextIO] = None,
                 use_color: Optional[bool] = None):
        self.dataset = dataset
        self.stream = stream or sys.stdout
        self.use_color = colors_enabled(self.stream) if use_color is None else use_color

    # Painters

    def paint(self, value: str, code: str) -> str:
        if not self.use_color:
            return value
        return f"{ANSI[code]}{value}{ANSI['reset']}"

    def painter(self, code: str) -> Painter:
        return lambda value: self.paint(value, code)

    def score_painter(self, score: float) -> Painter:
        if score >= 85:
            return self.painter("green")
        if score >= 65:
            return self.painter("yellow")
        return self.painter("red")

    def percent_painter(self, percent: float) -> Painter:
        if percent >= 90:
            return self.painter("green")
        if percent >= 70:
            return self.painter("yellow")
        return self.painter("red")

    # Primitives

    def _write(self, line: str = "") -> None:
        self.stream.write(line + "\n")

    def _rule(self, char: str) -> str:
        return self.paint(char * RULE_WIDTH, "dim")

    def metric(self, label: str, value: str, painter: Optional[Painter] = None) -> None:
        painted = painter(value) if painter else value
        self._write(f"  {self.paint(f'{label}:'.ljust(24), 'dim')}{painted}")

    def _format_id_name(self, record_id: str) -> str:
        return f"[{record_id}] {self.dataset.name_of(record_id)}"

    def _list(self, label: str, values: List[str], painter: Painter) -> None:
        self._write(f"  {painter(f'{label} ({len(values)})')}")
        if not values:
            self._write(f"    {self.paint('- (none)', 'dim')}")
            return
        for value in values:
            self._write(f"    - {value}")

    def id_list(self, label: str, ids: List[str], painter: Painter) -> None:
        self._list(label, [self._format_id_name(record_id) for record_id in ids], painter)

    # Sections

    def header(self, dataset_name: str, suite: TestSuite, candidate_name: str) -> None:
        cyan = self.painter("cyan")
        self._write(self._rule("="))
        self._write(self.paint("Name Challenge Scorer", "bold"))
        self.metric("Dataset", dataset_name, cyan)
        self.metric("Suite", suite.name, cyan)
        self.metric("Cases", str(len(suite.cases)), cyan)
        self.metric("Submission", candidate_name, cyan)
        self._write(self._rule("="))

    def case(self, report: CaseReport, total_cases: int) -> None:
        case = report.case
        outcome = report.outcome
        classification = report.classification
        status = self.paint("PASS", "green") if report.passed else self.paint("FAIL", "red")

        self._write()
        self._write(self._rule("-"))
        self._write(
            f"{status} {self.paint(f'{report.index}/{total_cases}', 'bold')} "
            f"{self.paint(case.id, 'bold')} {self.paint(f'({outcome.elapsed_ms:.1f}ms)', 'dim')}")
        self._write(f"  {self.paint('query', 'cyan')}: {case.query}")

        self.id_list("expected", case.expected_ids, self.painter("cyan"))
        self.id_list("returned", outcome.returned_ids, self.painter("blue"))
        self.id_list("missing", classification.missing_ids, self.painter("red"))
        self.id_list("false positives", classification.fp_hits, self.painter("yellow"))

        if classification.invalid_ids:
            self._list("invalid ids", classification.invalid_ids, self.painter("yellow"))
        if classification.extras_unscored:
            self.id_list("extra unscored ids", classification.extras_unscored,
                         self.painter("magenta"))
        if outcome.runtime_error:
            self._write(f"  {self.paint('runtime error', 'red')}: {outcome.runtime_error}")

    def summary(self, result: RunResult) -> None:
        s = result.summary
        green = self.painter("green")
        yellow = self.painter("yellow")
        red = self.painter("red")

        self._write()
        self._write(self._rule("="))
        self._write(self.paint("Score Summary", "bold"))
        self.metric("Cases passed",
                    f"{s.pass_cases}/{s.case_count} ({format_percent(s.pass_rate)})",
                    self.percent_painter(s.pass_rate))
        self.metric("Recall", f"{format_percent(s.recall)} ({s.expected_hits}/{s.expected_total})",
                    self.percent_painter(s.recall))
        self.metric("Precision",
                    f"{format_percent(s.precision)} ({s.expected_hits}/{s.returned_total})",
                    self.percent_painter(s.precision))
        self.metric("F1", format_percent(s.f1), self.percent_painter(s.f1))
        self.metric("Listed false positives",
                    f"{s.listed_false_positive_count} (x{PENALTY_LISTED_FP})",
                    green if s.listed_false_positive_count == 0 else yellow)
        self.metric("Unexpected extras",
                    f"{s.unexpected_extra_count} (x{PENALTY_UNEXPECTED_EXTRA})",
                    green if s.unexpected_extra_count == 0 else red)
        self.metric("Invalid IDs", f"{s.invalid_id_count} (score=0 if >0)",
                    green if s.invalid_id_count == 0 else red)
        self.metric("Penalty points", f"{s.penalty_points:.2f}",
                    green if s.penalty_points == 0 else red)
        self.metric("Score raw", f"{s.score_raw:.2f}", self.score_painter(s.score_clamped))
        self.metric("Score", f"{s.score:.2f}", self.score_painter(s.score))

        self._write()
        self._write(self.paint("Timing", "bold"))
        self.metric("Setup", f"{result.setup_ms:.1f}ms")
        self.metric("Total", f"{s.total_ms:.1f}ms")
        self.metric("Average/query", f"{s.avg_ms:.1f}ms")
        self.metric("P95/query", f"{s.p95_ms:.1f}ms")
        self.metric("Approx QPS", f"{s.qps:.2f}")
        self.metric("Cleanup", f"{result.cleanup_ms:.1f}ms")
        self._write(self._rule("="))
