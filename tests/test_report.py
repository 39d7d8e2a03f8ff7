# tests/test_report.py

import csv
import json

import pytest

import family_views.report as report
from family_views.core.diagnostics import Diagnostics
from family_views.pipeline import generate_views
from family_views.report import CSV_HEADERS, export_run_manifest, result_to_dict


def test_export_writes_json_and_csv(scenario_doc, tmp_path):
    diag = Diagnostics()
    result = generate_views(None, scenario_doc, diag=diag)
    out = tmp_path / "out"

    info = export_run_manifest(result, str(out), diag)

    assert info["rows_exported"] == 3
    with open(info["manifest_csv_path"], newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == CSV_HEADERS
    assert [r[1] for r in rows[1:]] == list(result.mapping)
    assert [r[0] for r in rows[1:]] == ["2", "3", "4"]
    assert all(r[7] == "2" for r in rows[1:])

    with open(info["manifest_json_path"], encoding="utf-8") as f:
        payload = json.load(f)
    assert payload["summary"]["success"] is True
    assert len(payload["views"]) == 3
    assert diag.count(level="INFO", phase="export_manifest") == 1


def test_result_to_dict_on_failure_is_json_safe(tmp_path):
    from family_views.host.document import Document

    result = generate_views(None, Document.new_family_document(working_dir=str(tmp_path)))
    d = result_to_dict(result)
    json.dumps(d)
    assert d["summary"]["failure"].startswith("WrongDocumentKindError")
    assert d["views"] == []


def test_write_failure_is_recorded_and_raised(scenario_doc, tmp_path, monkeypatch):
    diag = Diagnostics()
    result = generate_views(None, scenario_doc, diag=diag)

    def broken(path, headers, rows):
        raise OSError("disk full")

    monkeypatch.setattr(report, "_write_csv", broken)

    with pytest.raises(OSError):
        export_run_manifest(result, str(tmp_path), diag)

    errors = diag.events_for(level="ERROR", phase="export_manifest")
    assert len(errors) == 1
    assert errors[0]["exc_type"] == "OSError"
