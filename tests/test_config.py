"""
Unit tests for scorer configuration.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from name_challenge.config import DEFAULT_CANDIDATE, ScorerConfig, get_config
from name_challenge.packages.scoring_framework import DatasetName


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for var in ("DATASET", "SUITE", "DATA_DIR", "TIMEOUT_MS", "VERBOSE", "CANDIDATE", "LOG_LEVEL"):
        monkeypatch.delenv(f"NAME_CHALLENGE_{var}", raising=False)


def test_defaults():
    config = get_config([])

    assert config.dataset == DatasetName.SMALL
    assert config.timeout_ms == 2000
    assert config.verbose is False
    assert config.candidate == DEFAULT_CANDIDATE
    assert config.log_level == "INFO"
    assert config.dataset_path() == (Path("data") / "datasets" / "small" / "names.csv").resolve()
    assert config.suite_path() == (Path("data") / "suites" / "public_small.json").resolve()


def test_cli_overrides(tmp_path):
    config = get_config([
        "--dataset", "large",
        "--data-dir", str(tmp_path),
        "--suite", str(tmp_path / "custom.json"),
        "--timeout-ms", "500",
        "--verbose",
        "--candidate", "pkg.mod:Cls",
        "--log-level", "debug",
    ])

    assert config.dataset == DatasetName.LARGE
    assert config.dataset_path() == tmp_path.resolve() / "datasets" / "large" / "names.csv"
    assert config.suite_path() == (tmp_path / "custom.json").resolve()
    assert config.timeout_ms == 500
    assert config.verbose is True
    assert config.candidate == "pkg.mod:Cls"
    assert config.log_level == "DEBUG"


def test_unparseable_timeout_falls_back_to_default():
    assert get_config(["--timeout-ms", "soon"]).timeout_ms == 2000


def test_invalid_dataset_rejected():
    with pytest.raises(SystemExit):
        get_config(["--dataset", "medium"])


def test_environment_is_used_when_cli_silent(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("NAME_CHALLENGE_DATASET", "large")
    monkeypatch.setenv("NAME_CHALLENGE_TIMEOUT_MS", "750")

    config = get_config([])
    assert config.dataset == DatasetName.LARGE
    assert config.timeout_ms == 750

    assert get_config(["--timeout-ms", "100"]).timeout_ms == 100


def test_non_positive_timeout_rejected():
    with pytest.raises(ValidationError):
        ScorerConfig(timeout_ms=0)
