"""
Run manifest export.

Writes what a run produced (labels, instance/view/filter ids, layout) as
JSON and CSV next to the output document, so a Design Automation work item
can return it alongside the .rvt.
"""

import csv
import json
import os

from .core.ids import ElementId

MANIFEST_JSON = "views_manifest.json"
MANIFEST_CSV = "views_manifest.csv"

CSV_HEADERS = ["Ordinal", "Label", "Symbol", "InstanceId", "TypeId", "ViewId", "FilterId", "HiddenCount", "X"]

PHASE = "export_manifest"


def _id_or_none(eid):
    if eid is None:
        return None
    if isinstance(eid, ElementId):
        return eid.value
    return int(eid)


def result_to_dict(result):
    """JSON-safe view of a RunResult (ids as ints, no host objects)."""
    diag = result.diagnostics
    return {
        "summary": result.summary(),
        "mapping": [{"label": label, "instance_id": _id_or_none(iid)} for label, iid in result.mapping.items()],
        "placements": [p.to_dict() for p in result.placements],
        "views": [v.to_dict() for v in result.views],
        "skipped_symbols": list(result.skipped_symbols),
        "overlaps": [list(pair) for pair in result.overlaps],
        "deleted_view_id": _id_or_none(result.deleted_view_id),
        "diagnostics": diag.to_dict() if diag is not None else None,
    }


def manifest_rows(result):
    """One CSV row per generated view, in label order."""
    placements = {p.label: p for p in result.placements}
    rows = []
    for v in result.views:
        p = placements.get(v.label)
        rows.append([
            p.ordinal if p else "",
            v.label,
            p.symbol_name if p else "",
            _id_or_none(v.instance_id),
            _id_or_none(p.type_id) if p else "",
            _id_or_none(v.view_id),
            _id_or_none(v.filter_id),
            len(v.hidden_ids),
            "{0:.4f}".format(p.x) if p else "",
        ])
    return rows


def _write_csv(path, headers, rows):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        for r in rows:
            writer.writerow(r)


def _write_json(path, payload):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def export_run_manifest(result, output_dir, diag=None):
    """Write views_manifest.json / views_manifest.csv into output_dir.

    Returns:
        dict with manifest_json_path, manifest_csv_path, rows_exported

    Raises:
        OSError (and anything the writers raise) after recording an ERROR
        diagnostic in phase 'export_manifest'.
    """
    json_path = os.path.join(output_dir, MANIFEST_JSON)
    csv_path = os.path.join(output_dir, MANIFEST_CSV)

    try:
        os.makedirs(output_dir, exist_ok=True)
        rows = manifest_rows(result)
        _write_json(json_path, result_to_dict(result))
        _write_csv(csv_path, CSV_HEADERS, rows)
    except Exception as e:
        if diag is not None:
            diag.error(
                phase=PHASE,
                callsite="export_run_manifest",
                message="Manifest export failed",
                exc=e,
                extra={"output_dir": str(output_dir)},
            )
        raise

    if diag is not None:
        diag.info(
            phase=PHASE,
            callsite="export_run_manifest",
            message="Manifest written",
            extra={"json": json_path, "csv": csv_path, "rows": len(rows)},
        )
    return {"manifest_json_path": json_path, "manifest_csv_path": csv_path, "rows_exported": len(rows)}
