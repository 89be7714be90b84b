"""
Tests for io module.
"""
import csv
import json

import numpy as np
import pytest

from patternrec.io import (
    format_clusters,
    load_patterns_csv,
    save_clusters_csv,
    save_json,
    save_patterns_csv,
    save_rows_csv,
    write_summary_text,
)
from patternrec.pattern import Centroid, Pattern

IRIS_SAMPLE = """5.1,3.5,1.4,0.2,Iris-setosa
4.9,3.0,1.4,0.2,Iris-setosa
7.0,3.2,4.7,1.4,Iris-versicolor

6.3,3.3,6.0,2.5,Iris-virginica
"""


def test_load_patterns_csv(tmp_path):
    path = tmp_path / "iris.csv"
    path.write_text(IRIS_SAMPLE)
    patterns = load_patterns_csv(str(path))

    assert len(patterns) == 4
    assert [p.label for p in patterns] == ["Iris-setosa", "Iris-setosa", "Iris-versicolor", "Iris-virginica"]
    np.testing.assert_array_equal(patterns[0].vector, [5.1, 3.5, 1.4, 0.2])


def test_load_patterns_csv_bad_number(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("1.0,abc,A\n")
    with pytest.raises(ValueError, match=":1:"):
        load_patterns_csv(str(path))


def test_load_patterns_csv_missing_features(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("1.0,2.0,A\nB\n")
    with pytest.raises(ValueError, match=":2:"):
        load_patterns_csv(str(path))


def test_save_and_load_patterns(tmp_path):
    path = tmp_path / "out.csv"
    patterns = [Pattern("A", [1.0, 2.5]), Pattern("B", [3.0, -1.0])]
    save_patterns_csv(patterns, str(path))
    loaded = load_patterns_csv(str(path))
    assert [p.label for p in loaded] == ["A", "B"]
    np.testing.assert_array_equal(loaded[1].vector, [3.0, -1.0])


def test_save_rows_csv(tmp_path):
    path = tmp_path / "rows.csv"
    save_rows_csv([{"a": 1, "b": "x"}, {"a": 2, "b": "y"}], str(path))
    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))
    assert rows == [{"a": "1", "b": "x"}, {"a": "2", "b": "y"}]

    with pytest.raises(ValueError):
        save_rows_csv([], str(path))


def test_save_json(tmp_path):
    path = tmp_path / "r.json"
    save_json({"accuracy": 0.5}, str(path))
    assert json.loads(path.read_text()) == {"accuracy": 0.5}


def _clusters():
    return {
        Centroid(0, [0.0, 0.5]): [Pattern("a", [0.0, 0.0]), Pattern("a", [0.0, 1.0])],
        Centroid(1, [10.0, 10.5]): [Pattern(None, [10.0, 10.0])],
    }


def test_format_clusters():
    text = format_clusters(_clusters())
    assert "Centroid 1 {0, 0.5}, 2 patterns" in text
    assert "Centroid 2 {10, 10.5}, 1 patterns" in text
    assert text.count("CLUSTER") == 2


def test_save_clusters_csv(tmp_path):
    path = tmp_path / "clusters.csv"
    save_clusters_csv(_clusters(), str(path))
    with open(path, newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["1", "0.0", "0.0", "a"]
    assert rows[2] == ["2", "10.0", "10.0", ""]


def test_write_summary_text(tmp_path):
    path = tmp_path / "summary.txt"
    write_summary_text(str(path), {"One": "body\n", "Two": "more"})
    assert path.read_text() == "=== One ===\nbody\n\n=== Two ===\nmore\n\n"
