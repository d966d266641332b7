"""
Configuration management for scorer settings and command-line arguments.
"""

import argparse
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from name_challenge.packages.scoring_framework import DEFAULT_TIMEOUT_MS, DatasetName

DEFAULT_CANDIDATE = "name_challenge.submission.search"


class ScorerConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NAME_CHALLENGE_")

    dataset: DatasetName = Field(
        DatasetName.SMALL,
        description=f"Dataset to score against, allowed: {[d.value for d in DatasetName]}"
    )
    suite: Optional[Path] = Field(
        None, description="Suite JSON file (default: <data_dir>/suites/public_<dataset>.json)")
    data_dir: Path = Field(Path("data"), description="Root holding datasets/ and suites/")
    timeout_ms: int = Field(DEFAULT_TIMEOUT_MS, description="Per-query search timeout in ms")
    verbose: bool = Field(False, description="Print every case, not only the summary")
    candidate: str = Field(
        DEFAULT_CANDIDATE,
        description="Candidate to score: dotted module, path/to/file.py, optionally ':attribute'")
    log_level: str = Field('INFO', description="Logging level",
                           examples=["CRITICAL", "FATAL", "ERROR", "WARNING", "INFO", "DEBUG"])

    @field_validator("timeout_ms")
    def reject_non_positive_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeout_ms must be positive")
        return v

    @field_validator("log_level")
    def normalize_log_level(cls, v):
        return v.upper()

    def dataset_path(self) -> Path:
        """Absolute path of the dataset CSV passed to the candidate's setup."""
        return (self.data_dir / "datasets" / self.dataset.value / "names.csv").resolve()

    def suite_path(self) -> Path:
        if self.suite is not None:
            return self.suite.resolve()
        return (self.data_dir / "suites" / f"public_{self.dataset.value}.json").resolve()


def _timeout_arg(value: str) -> int:
    # An unparseable timeout falls back to the default instead of failing the run
    try:
        return int(value)
    except ValueError:
        return DEFAULT_TIMEOUT_MS


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Name Challenge Scorer")

    parser.add_argument(
        "--dataset",
        choices=[d.value for d in DatasetName],
        help="Dataset to score against (default: small, env: NAME_CHALLENGE_DATASET)",
    )

    parser.add_argument(
        "--suite",
        help="Suite JSON file (default: <data-dir>/suites/public_<dataset>.json)",
    )

    parser.add_argument(
        "--data-dir",
        help="Directory containing datasets/<name>/names.csv and suites/ (default: data)",
    )

    parser.add_argument(
        "--timeout-ms",
        type=_timeout_arg,
        help=f"Per-query timeout in milliseconds (default: {DEFAULT_TIMEOUT_MS})",
    )

    parser.add_argument(
        "--candidate",
        help=f"Candidate module or file to score (default: {DEFAULT_CANDIDATE})",
    )

    # Store None when absent so env/defaults are not overridden
    parser.add_argument(
        "--verbose",
        action="store_const",
        const=True,
        help="Print per-case results",
    )

    parser.add_argument(
        "--log-level",
        help="Logging level",
    )

    return parser.parse_args(argv)


def get_config(argv: Optional[List[str]] = None) -> ScorerConfig:
    args = parse_args(argv)
    # Only include CLI values that are actually set
    cli_overrides = {k: v for k, v in vars(args).items() if v is not None}
    return ScorerConfig(**cli_overrides)
