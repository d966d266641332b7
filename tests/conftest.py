import json
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path for `import name_challenge.*`
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from name_challenge.packages.scoring_framework import DatasetIndex, Record, RecordId, TestSuite  # noqa: E402

NAMES = [
    ("1", "John Smith"),
    ("2", "Jon Smyth"),
    ("3", "Jane Smith"),
    ("4", "Johnny Smithers"),
    ("5", "Maria Garcia"),
]


def make_case(case_id, expected, false_positives=(), query=None, dataset="small"):
    return {
        "id": case_id,
        "dataset": dataset,
        "query": query or f"query for {case_id}",
        "expectedIds": list(expected),
        "falsePositiveIds": list(false_positives),
        "tags": [],
        "notes": "",
    }


def make_suite_doc(cases, dataset="small", name="public-small"):
    return {
        "name": name,
        "dataset": dataset,
        "visibility": "public",
        "seed": 7,
        "cases": cases,
    }


@pytest.fixture
def dataset():
    """Five-record dataset with ids 1..5."""
    return DatasetIndex(Record(id=RecordId(i), name=n) for i, n in NAMES)


@pytest.fixture
def valid_ids(dataset):
    return dataset.valid_ids()


@pytest.fixture
def data_dir(tmp_path):
    """data/ tree with a small dataset CSV and a matching public suite."""
    root = tmp_path / "data"
    csv_dir = root / "datasets" / "small"
    csv_dir.mkdir(parents=True)
    rows = ["id,name"] + [f"{i},{n}" for i, n in NAMES]
    (csv_dir / "names.csv").write_text("\n".join(rows) + "\n", encoding="utf-8")

    suites = root / "suites"
    suites.mkdir()
    doc = make_suite_doc([
        make_case("exact", ["1"], query="John Smith"),
        make_case("fuzzy", ["1", "2"], ["3"], query="Jon Smith"),
    ])
    (suites / "public_small.json").write_text(json.dumps(doc), encoding="utf-8")
    return root


@pytest.fixture
def suite_factory():
    def build(cases, dataset="small"):
        return TestSuite.model_validate(make_suite_doc(cases, dataset=dataset))
    return build
