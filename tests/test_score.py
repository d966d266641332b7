"""
End-to-end tests for the scoring CLI.
"""

import json

import pytest

from name_challenge.score import EXIT_LOAD_ERROR, EXIT_OK, run

MATCHER = '''
NAMES = {}


def setup(dataset_path):
    with open(dataset_path, encoding="utf-8") as f:
        next(f)
        for line in f:
            record_id, name = line.strip().split(",", 1)
            NAMES.setdefault(name.lower(), []).append(record_id)


def search(query):
    return NAMES.get(query.lower(), [])
'''


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NO_COLOR", raising=False)
    for var in ("DATASET", "SUITE", "DATA_DIR", "TIMEOUT_MS", "VERBOSE", "CANDIDATE", "LOG_LEVEL"):
        monkeypatch.delenv(f"NAME_CHALLENGE_{var}", raising=False)


@pytest.fixture
def matcher(tmp_path):
    path = tmp_path / "matcher.py"
    path.write_text(MATCHER, encoding="utf-8")
    return path


def test_scores_file_candidate(data_dir, matcher, capsys):
    code = run(["--data-dir", str(data_dir), "--candidate", str(matcher), "--verbose"])

    out = capsys.readouterr().out
    assert code == EXIT_OK
    assert "Name Challenge Scorer" in out
    assert "PASS 1/2 exact" in out
    assert "FAIL 2/2 fuzzy" in out
    assert "Cases passed:" in out and "1/2 (50.00%)" in out
    assert "33.33% (1/3)" in out


def test_summary_only_without_verbose(data_dir, matcher, capsys):
    assert run(["--data-dir", str(data_dir), "--candidate", str(matcher)]) == EXIT_OK
    out = capsys.readouterr().out
    assert "PASS 1/2" not in out
    assert "Score Summary" in out


def test_default_submission_scores_zero_recall(data_dir, capsys):
    assert run(["--data-dir", str(data_dir)]) == EXIT_OK
    assert "0.00% (0/3)" in capsys.readouterr().out


def test_dataset_mismatch_exits_before_running(data_dir, matcher, capsys, caplog):
    suite = data_dir / "suites" / "public_small.json"
    doc = json.loads(suite.read_text(encoding="utf-8"))
    doc["dataset"] = "large"
    for case in doc["cases"]:
        case["dataset"] = "large"
    suite.write_text(json.dumps(doc), encoding="utf-8")

    code = run(["--data-dir", str(data_dir), "--candidate", str(matcher)])

    assert code == EXIT_LOAD_ERROR
    assert "Suite dataset mismatch" in caplog.text
    assert "Score Summary" not in capsys.readouterr().out


def test_missing_dataset_exits(tmp_path, caplog):
    assert run(["--data-dir", str(tmp_path / "nowhere")]) == EXIT_LOAD_ERROR
    assert "not found" in caplog.text


def test_bad_candidate_exits(data_dir, caplog):
    code = run(["--data-dir", str(data_dir), "--candidate", "name_challenge.no_such_module"])
    assert code == EXIT_LOAD_ERROR
    assert "Cannot import candidate" in caplog.text


def test_undecodable_suite_exits(data_dir, matcher, capsys, caplog):
    (data_dir / "suites" / "public_small.json").write_bytes(b'{"name": "\xff\xfe"}')

    code = run(["--data-dir", str(data_dir), "--candidate", str(matcher)])

    assert code == EXIT_LOAD_ERROR
    assert "Cannot read suite" in caplog.text
    assert "Score Summary" not in capsys.readouterr().out


def test_unreadable_dataset_exits(data_dir, matcher, caplog):
    csv_path = data_dir / "datasets" / "small" / "names.csv"
    csv_path.unlink()
    csv_path.mkdir()

    code = run(["--data-dir", str(data_dir), "--candidate", str(matcher)])

    assert code == EXIT_LOAD_ERROR
    assert "Cannot read dataset" in caplog.text
