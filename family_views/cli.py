"""
Command line runner against the in-memory host.

    python -m family_views family.json --output-dir out/ --verbose

Builds a fresh project document (default 3D view + 3D template), runs the
pipeline with the given family definition and prints a summary block.
Exit code 0 on success, 1 on failure.
"""

import argparse
import json
import os
import sys

from .config import Config
from .core.diagnostics import Diagnostics
from .host.document import Document
from .pipeline import generate_views
from .report import export_run_manifest


def _build_parser():
    p = argparse.ArgumentParser(
        prog="family_views",
        description="Generate one isolated 3D view per type of a family definition.",
    )
    p.add_argument("family", nargs="?", default=None, help="Family definition file (default: config family_file)")
    p.add_argument("--working-dir", default=None, help="Directory relative family paths resolve against")
    p.add_argument("--output-dir", default=None, help="Write views_manifest.json/.csv here")
    p.add_argument("--config", default=None, help="JSON file with Config keys")
    p.add_argument("--keep-default-view", action="store_true", help="Do not delete the default 3D view")
    p.add_argument("--verbose", action="store_true", help="Echo diagnostics while running")
    return p


def load_config(args):
    data = {}
    if args.config:
        with open(args.config, "r", encoding="utf-8") as f:
            data = json.load(f)
    if args.family:
        data["family_file"] = args.family
    if args.working_dir:
        data["working_dir"] = args.working_dir
    if args.output_dir:
        data["output_dir"] = args.output_dir
    if args.keep_default_view:
        data["delete_default_view"] = False
    if args.verbose:
        data["verbose"] = True
    # Host failures are reported through the exit code here
    data.setdefault("raise_on_host_error", False)
    return Config.from_dict(data)


def format_summary(result):
    lines = []
    lines.append("=" * 60)
    lines.append("FAMILY VIEWS GENERATOR")
    lines.append("=" * 60)
    lines.append("")
    lines.append(f"Instances created: {len(result.mapping)}")
    lines.append(f"Views created: {len(result.views)}")
    for v in result.views:
        lines.append(f"  {v.label}  (view {v.view_id}, hides {len(v.hidden_ids)})")
    if result.skipped_symbols:
        lines.append(f"Skipped symbols: {', '.join(result.skipped_symbols)}")
    if result.overlaps:
        lines.append(f"Layout overlaps: {len(result.overlaps)}")
    lines.append("")
    lines.append("=" * 60)
    if result.success:
        lines.append("STATUS: SUCCESS")
    else:
        lines.append("STATUS: FAILED")
        if result.failure is not None:
            lines.append(f"{type(result.failure).__name__}: {result.failure}")
    lines.append("=" * 60)
    return "\n".join(lines)


def main(argv=None):
    args = _build_parser().parse_args(argv)
    try:
        cfg = load_config(args)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    diag = Diagnostics(max_events=cfg.max_diag_events, echo=cfg.verbose)
    doc = Document.new_project(working_dir=cfg.working_dir or os.getcwd())
    result = generate_views(None, doc, cfg, diag)

    if result.success and cfg.output_dir:
        info = export_run_manifest(result, cfg.output_dir, diag)
        print(f"Manifest: {info['manifest_json_path']}")

    print(format_summary(result))
    return 0 if result.success else 1
