"""Tests for the catalog-query CLI."""

from __future__ import annotations

import json

import pandas as pd
import pytest
import yaml

from catalog_query.interfaces.cli.main import build_parser, main

RECORDS = [
    {"title": "The Call of Cthulhu", "catalog-status": "draft", "word-count": 1000, "year": 1928,
     "authors": ["[[Lovecraft, H. P.]]"]},
    {"title": "The Dunwich Horror", "catalog-status": "draft", "word-count": 2000, "year": 1929,
     "authors": ["[[Lovecraft, H. P.]]", "[[Smith, Clark Ashton]]"]},
    {"title": "The Colour Out of Space", "catalog-status": "final", "year": 1927},
]


@pytest.fixture
def records_file(tmp_path):
    """Records YAML using the default library preset's keys."""
    path = tmp_path / "works.yaml"
    path.write_text(yaml.safe_dump(RECORDS), encoding="utf-8")
    return path


def _run(capsys, argv):
    code = main(argv)
    return code, capsys.readouterr().out


class TestStats:
    """stats subcommand."""

    def test_stats_json(self, records_file, capsys):
        """Statistics print as JSON with the status distribution by default."""
        code, out = _run(capsys, ["stats", "--records", str(records_file)])
        data = json.loads(out)
        assert code == 0
        assert data["count"] == 3
        assert data["total_value"] == 3000
        assert data["date_range"] == {"min": 1927, "max": 1929}
        assert data["distributions"]["catalog-status"] == {"draft": 2, "final": 1}
        assert data["valid_value_count"] == 2

    def test_missing_records_file(self, tmp_path):
        """A missing records file is an input error."""
        assert main(["stats", "--records", str(tmp_path / "none.yaml")]) == 2

    def test_bad_schema_file(self, records_file, tmp_path):
        """A broken schema is a configuration error."""
        schema = tmp_path / "schema.yaml"
        schema.write_text("fields:\n  - key: a\n    type: select\n", encoding="utf-8")
        assert main(["stats", "--records", str(records_file), "--schema", str(schema)]) == 3

    def test_non_integer_sort_order_is_config_error(self, records_file, tmp_path):
        """A list sort_order exits with the configuration code, not a traceback."""
        schema = tmp_path / "schema.yaml"
        schema.write_text("fields:\n  - key: title\n    type: string\n    sort_order: [1]\n", encoding="utf-8")
        assert main(["stats", "--records", str(records_file), "--schema", str(schema)]) == 3

    def test_empty_records(self, tmp_path):
        """No records means no data."""
        path = tmp_path / "empty.yaml"
        path.write_text("[]\n", encoding="utf-8")
        assert main(["stats", "--records", str(path)]) == 1


class TestQuery:
    """query subcommand."""

    def test_where_range_and_sort(self, records_file, capsys):
        """Criteria combine with AND; sorting and paging apply afterwards."""
        code, out = _run(
            capsys,
            [
                "query", "--records", str(records_file),
                "--where", "catalog-status=draft",
                "--range", "word-count=1500:",
                "--sort", "word-count", "--desc",
            ],
        )
        data = json.loads(out)
        assert code == 0
        assert data["total_items"] == 1
        assert data["items"][0]["title"] == "The Dunwich Horror"
        assert "synopsis" in data["items"][0]

    def test_sort_puts_missing_last(self, records_file, capsys):
        """Ascending sort pushes the record without a word count to the end."""
        _, out = _run(capsys, ["query", "--records", str(records_file), "--sort", "word-count"])
        titles = [row["title"] for row in json.loads(out)["items"]]
        assert titles[-1] == "The Colour Out of Space"

    def test_paging(self, records_file, capsys):
        """--limit and 1-based --page slice the results."""
        _, out = _run(capsys, ["query", "--records", str(records_file), "--sort", "year", "--limit", "2", "--page", "2"])
        data = json.loads(out)
        assert data["page"] == 2
        assert data["total_pages"] == 2
        assert [row["year"] for row in data["items"]] == [1929]

    def test_csv_output(self, records_file, capsys, tmp_path):
        """CSV cells are display text: wikilink labels, ungrouped numbers, blank when unset."""
        code, out = _run(capsys, ["query", "--records", str(records_file), "--contains", "title=horror", "--format", "csv"])
        csv_path = tmp_path / "out.csv"
        csv_path.write_text(out, encoding="utf-8")
        frame = pd.read_csv(csv_path)
        assert code == 0
        assert len(frame) == 1
        assert frame.loc[0, "authors"] == "Lovecraft, H. P., Smith, Clark Ashton"
        assert frame.loc[0, "word-count"] == 2000
        assert frame.loc[0, "year"] == 1929
        assert pd.isna(frame.loc[0, "synopsis"])

    def test_malformed_criterion(self, records_file):
        """Criteria without '=' are usage errors."""
        assert main(["query", "--records", str(records_file), "--where", "oops"]) == 2


def test_group_command(records_file, capsys):
    """group prints per-group statistics in the requested order."""
    code, out = _run(capsys, ["group", "--records", str(records_file), "--field", "authors", "--order", "alphabetical"])
    data = json.loads(out)
    assert code == 0
    assert [g["key"] for g in data["groups"]] == ["[[Lovecraft, H. P.]]", "[[Smith, Clark Ashton]]", "(unset)"]
    assert data["groups"][0]["stats"]["total_value"] == 3000


class TestValidate:
    """validate subcommand."""

    def test_clean_records_pass(self, records_file, capsys):
        """Valid records exit 0."""
        code, out = _run(capsys, ["validate", "--records", str(records_file)])
        assert code == 0
        assert "Validation Summary:" in out

    def test_strict_fails_on_warnings(self, tmp_path, capsys):
        """Warnings fail only under --strict; the JSON report is written."""
        path = tmp_path / "works.yaml"
        path.write_text(yaml.safe_dump([{"title": "A", "word-count": "many"}]), encoding="utf-8")
        assert main(["validate", "--records", str(path)]) == 0
        assert main(["validate", "--records", str(path), "--strict", "--report-json"]) == 1
        report = json.loads((tmp_path / "works_validation.json").read_text(encoding="utf-8"))
        assert report["summary"]["warnings"] == 1

    def test_required_field_error(self, tmp_path):
        """Missing required fields are errors."""
        path = tmp_path / "works.yaml"
        path.write_text(yaml.safe_dump([{"catalog-status": "raw"}]), encoding="utf-8")
        assert main(["validate", "--records", str(path)]) == 1


def test_parser_requires_subcommand():
    """Running without a subcommand is a usage error."""
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args([])
    assert exc.value.code == 2
