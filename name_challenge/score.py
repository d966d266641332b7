"""
Scoring script for name matching submissions.

Loads the dataset and suite, runs the candidate against every case and prints
the score summary.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from name_challenge.config import ScorerConfig, get_config
from name_challenge.packages.scoring_framework import (
    CandidateAdapter,
    DatasetIndex,
    RunResult,
    ScorerError,
    load_candidate,
    load_suite,
    run_suite,
)
from name_challenge.reporter import Reporter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LOAD_ERROR = 2


def load_env() -> None:
    """Load .env.local from the working directory, when present."""
    env_local_path = Path('.env.local')
    if env_local_path.exists():
        load_dotenv(env_local_path)
        logger.info("Loaded .env.local for local development")
    else:
        logger.debug("No .env.local file found")


def score(config: ScorerConfig, reporter_stream=None) -> RunResult:
    """Load inputs, run the candidate over the suite and report. Load errors propagate."""
    dataset_path = config.dataset_path()
    suite_path = config.suite_path()

    suite = load_suite(suite_path, expected_dataset=config.dataset)
    dataset = DatasetIndex.from_csv(dataset_path)
    adapter = CandidateAdapter(load_candidate(config.candidate), name=config.candidate)

    reporter = Reporter(dataset, stream=reporter_stream)
    total_cases = len(suite.cases)

    def on_case(report):
        if config.verbose:
            reporter.case(report, total_cases)

    reporter.header(config.dataset.value, suite, adapter.name)
    result = run_suite(
        suite,
        dataset,
        adapter,
        dataset_path=dataset_path,
        timeout_ms=config.timeout_ms,
        on_case=on_case,
    )
    reporter.summary(result)
    return result


def run(argv: Optional[List[str]] = None) -> int:
    """Main coordinator function."""
    load_env()
    try:
        config = get_config(argv)
    except ValidationError as e:
        logging.basicConfig(stream=sys.stderr)
        logger.error(f"Invalid scorer configuration:\n{e}")
        return EXIT_LOAD_ERROR

    # Log to stderr; the report owns stdout
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logger.info(
        f"Scoring candidate={config.candidate} dataset={config.dataset.value} "
        f"timeout_ms={config.timeout_ms}")

    try:
        score(config)
    except (ScorerError, FileNotFoundError) as e:
        logger.error(f"Cannot run scorer: {e}")
        return EXIT_LOAD_ERROR

    logger.info("Scoring complete")
    return EXIT_OK


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
