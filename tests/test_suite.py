"""
Unit tests for suite loading and validation.
"""

import json

import pytest

from name_challenge.packages.scoring_framework import (
    DatasetName,
    SuiteValidationError,
    load_suite,
    parse_suite,
)
from tests.conftest import make_case, make_suite_doc


def write_suite(tmp_path, doc):
    path = tmp_path / "suite.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_load_suite_parses_cases_in_order(tmp_path):
    doc = make_suite_doc([
        make_case("b", ["2"], ["3"]),
        make_case("a", [1, " 4 "]),
    ])
    suite = load_suite(write_suite(tmp_path, doc), expected_dataset="small")

    assert suite.name == "public-small"
    assert suite.dataset == DatasetName.SMALL
    assert suite.seed == 7
    assert [c.id for c in suite.cases] == ["b", "a"]
    assert suite.cases[0].false_positive_ids == ["3"]
    # ids are normalized to trimmed strings
    assert suite.cases[1].expected_ids == ["1", "4"]


def test_duplicate_label_ids_collapse():
    suite = parse_suite(make_suite_doc([make_case("a", ["1", "1", "2"])]))
    assert suite.cases[0].expected_ids == ["1", "2"]


def test_dataset_mismatch_is_fatal(tmp_path):
    doc = make_suite_doc([make_case("a", ["1"], dataset="large")], dataset="large")
    with pytest.raises(SuiteValidationError, match="Suite dataset mismatch"):
        load_suite(write_suite(tmp_path, doc), expected_dataset=DatasetName.SMALL)


def test_case_dataset_must_match_suite():
    doc = make_suite_doc([make_case("a", ["1"], dataset="large")])
    with pytest.raises(SuiteValidationError, match="targets dataset 'large'"):
        parse_suite(doc)


def test_expected_and_false_positive_must_be_disjoint():
    doc = make_suite_doc([make_case("a", ["1", "2"], ["2"])])
    with pytest.raises(SuiteValidationError, match="both expected and false positive"):
        parse_suite(doc)


def test_duplicate_case_ids_rejected():
    doc = make_suite_doc([make_case("a", ["1"]), make_case("a", ["2"])])
    with pytest.raises(SuiteValidationError, match="duplicate case ids"):
        parse_suite(doc)


def test_unknown_dataset_rejected():
    doc = make_suite_doc([], dataset="medium")
    with pytest.raises(SuiteValidationError):
        parse_suite(doc)


def test_missing_query_rejected():
    case = make_case("a", ["1"])
    del case["query"]
    with pytest.raises(SuiteValidationError):
        parse_suite(make_suite_doc([case]))


def test_invalid_json_is_fatal(tmp_path):
    path = tmp_path / "suite.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SuiteValidationError, match="Error parsing suite"):
        load_suite(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_suite(tmp_path / "absent.json")


def test_case_without_expected_ids_warns(tmp_path, caplog):
    doc = make_suite_doc([make_case("negative", [], ["3"])])
    with caplog.at_level("WARNING"):
        suite = load_suite(write_suite(tmp_path, doc))
    assert suite.cases[0].expected_ids == []
    assert "has 0 expected ids" in caplog.text


def test_undecodable_file_is_a_suite_error(tmp_path):
    path = tmp_path / "suite.json"
    path.write_bytes(b'{"name": "\xff\xfe"}')
    with pytest.raises(SuiteValidationError, match="Cannot read suite"):
        load_suite(path)


def test_directory_is_a_suite_error(tmp_path):
    path = tmp_path / "suite.json"
    path.mkdir()
    with pytest.raises(SuiteValidationError, match="Cannot read suite"):
        load_suite(path)


@pytest.mark.parametrize("label", [None, "", "   "])
@pytest.mark.parametrize("field", ["expectedIds", "falsePositiveIds"])
def test_blank_label_ids_rejected(field, label):
    case = make_case("c1", ["1"])
    case[field] = [label]
    with pytest.raises(SuiteValidationError, match="label ids must be non-empty"):
        parse_suite(make_suite_doc([case]))
