"""
Dynamo entry point for the family views generator.

Compatible with both IronPython (Dynamo 2.x) and CPython3 (Dynamo 3.3+).

Usage in a Dynamo CPython3 node:
    import sys
    sys.path.append(r'C:\\path\\to\\family_views_repo')

    from family_views.entry_dynamo import run_from_dynamo
    from family_views.config import Config

    cfg = Config(family_file=IN[0], working_dir=IN[1])
    OUT = run_from_dynamo(config=cfg, output_dir=r'C:\\temp\\family_views')

The run needs a project document with a default 3D view and a 3D view
template. Dynamo already holds a transaction open for the node, so run this
from a pyRevit button or a Design Automation add-in when possible.
"""

try:
    from .config import Config
    from .core.diagnostics import Diagnostics
    from .pipeline import generate_views
    from .report import result_to_dict, export_run_manifest
    from .revit.adapter import RevitDocument
except ImportError:
    # Dynamo sometimes imports modules without package context; fall back to absolute.
    from family_views.config import Config
    from family_views.core.diagnostics import Diagnostics
    from family_views.pipeline import generate_views
    from family_views.report import result_to_dict, export_run_manifest
    from family_views.revit.adapter import RevitDocument


def get_current_document():
    """Get current Revit document (works in both IronPython and CPython3).

    Raises:
        RuntimeError: If not running in Revit/Dynamo context
    """
    # CPython3 (Dynamo 3.3+)
    try:
        from RevitServices.Persistence import DocumentManager

        doc = DocumentManager.Instance.CurrentDBDocument
        if doc is not None:
            return doc
    except ImportError:
        pass

    # IronPython (Dynamo 2.x / pyRevit)
    try:
        return __revit__.ActiveUIDocument.Document
    except NameError:
        pass

    raise RuntimeError(
        "Not running in Revit/Dynamo context. "
        "Pass the Document directly to run_from_dynamo()."
    )


def run_from_dynamo(doc=None, config=None, output_dir=None, app=None):
    """Run the pipeline on a Revit document and return a JSON-safe dict.

    Args:
        doc: Autodesk.Revit.DB.Document (default: current document)
        config: Config (default: Config())
        output_dir: optional manifest output directory (overrides config.output_dir)
        app: optional application handle passed through to generate_views

    Returns:
        dict with 'summary', 'views', 'placements', 'diagnostics' and, when
        exported, 'manifest_json_path' / 'manifest_csv_path'
    """
    cfg = config or Config()
    diag = Diagnostics(max_events=cfg.max_diag_events, echo=cfg.verbose)
    if doc is None:
        doc = get_current_document()

    host_doc = RevitDocument(doc, diag=diag)
    result = generate_views(app, host_doc, cfg, diag)
    payload = result_to_dict(result)

    out_dir = output_dir or cfg.output_dir
    if out_dir and result.success:
        payload.update(export_run_manifest(result, out_dir, diag))
        payload["diagnostics"] = diag.to_dict()
    return payload
