"""
Family Views Pipeline - run orchestration.

Stages, strictly forward:
    preconditions -> [txn 1] load family -> generate + layout -> synthesize
                  -> [txn 2] delete default 3D view

Transaction semantics:
- Preconditions (document kind, reference views) are checked before any
  transaction opens, so a failed check leaves the document untouched.
- A failed family load raises inside txn 1; txn 1 rolls back.
- A host failure inside either transaction rolls that transaction back and
  propagates (unless cfg.raise_on_host_error is False). A failure in txn 2
  leaves txn 1's views in place and the default view undeleted.
"""

from .config import Config
from .core.diagnostics import Diagnostics
from .core.errors import (
    FamilyLoadError,
    PreconditionError,
    WrongDocumentKindError,
)
from .generator import generate_instances, refresh_bounding_boxes
from .layout import find_x_overlaps
from .references import resolve_reference_views
from .synthesizer import synthesize_views


class RunResult(object):
    """Outcome of generate_views(). Truthy when the run succeeded.

    Attributes:
        success: bool
        mapping: OrderedDict label -> instance id (empty on failure)
        instance_ids: OrderedIdSet of generated instances
        placements: list of generator.Placement
        views: list of synthesizer.ViewRecord
        skipped_symbols: symbol names skipped by the dedupe rule
        overlaps: (label, label) pairs whose X intervals intersect
        deleted_view_id: id of the removed default 3D view, or None
        failure: the exception that ended the run, or None
        diagnostics: Diagnostics used for the run
    """

    def __init__(self, diagnostics):
        self.success = False
        self.mapping = {}
        self.instance_ids = []
        self.placements = []
        self.views = []
        self.skipped_symbols = []
        self.overlaps = []
        self.deleted_view_id = None
        self.failure = None
        self.diagnostics = diagnostics

    def __bool__(self):
        return bool(self.success)

    def summary(self):
        return {
            "success": self.success,
            "num_instances": len(self.mapping),
            "num_views": len(self.views),
            "num_skipped_symbols": len(self.skipped_symbols),
            "num_overlaps": len(self.overlaps),
            "default_view_deleted": self.deleted_view_id is not None,
            "failure": "{0}: {1}".format(type(self.failure).__name__, self.failure) if self.failure else None,
        }


def check_preconditions(doc):
    """Validate the document before any transaction. Returns (default_view, template)."""
    if doc.is_family_document:
        raise WrongDocumentKindError("Document must be a project")
    return resolve_reference_views(doc)


def _record_failure(result, diag, phase, callsite, exc):
    result.success = False
    result.failure = exc
    diag.error(phase=phase, callsite=callsite, message=str(exc) or type(exc).__name__, exc=exc)


def generate_views(app, doc, cfg=None, diag=None):
    """Load the configured family and build one isolated 3D view per type.

    Args:
        app: host application handle (unused by the arena host; kept for the
            ready-event signature)
        doc: HostDocument (arena Document or revit.RevitDocument)
        cfg: Config (default Config())
        diag: Diagnostics (default: new recorder sized from cfg)

    Returns:
        RunResult

    Raises:
        HostOperationError (or the host's own exception): only when
            cfg.raise_on_host_error is True; precondition failures never raise

    Example:
        >>> doc = Document.new_project(working_dir=project_dir)
        >>> result = generate_views(None, doc, Config(family_file="family.rfa"))
        >>> result.success
        True
    """
    cfg = cfg or Config()
    if diag is None:
        diag = Diagnostics(max_events=cfg.max_diag_events, echo=cfg.verbose)
    result = RunResult(diag)

    # Preconditions: nothing opened yet
    try:
        reference_view, template = check_preconditions(doc)
    except PreconditionError as e:
        _record_failure(result, diag, "preconditions", "check_preconditions", e)
        return result

    # Without a configured working dir the host resolves the name itself
    family_path = cfg.resolve_family_path() if cfg.working_dir else cfg.family_file

    # Transaction 1: load + generate + views
    try:
        with doc.transaction(cfg.load_transaction_name):
            ok, family = doc.load_family(family_path)
            if not ok or family is None:
                raise FamilyLoadError(family_path)
            diag.info(
                phase="load_family",
                callsite="doc.load_family",
                message="Family loaded",
                elem_id=family.id,
                extra={"path": family_path, "family": family.name},
            )

            generation = generate_instances(doc, family, cfg, diag)
            result.mapping = generation.mapping
            result.instance_ids = generation.instance_ids
            result.placements = generation.placements
            result.skipped_symbols = list(generation.skipped_symbols)

            if cfg.verify_layout:
                refresh_bounding_boxes(doc, generation)
                result.overlaps = find_x_overlaps(generation.placements)
                for a, b in result.overlaps:
                    diag.warn(
                        phase="layout",
                        callsite="find_x_overlaps",
                        message="Generated instances overlap along X",
                        extra={"labels": [a, b]},
                    )

            if not generation.mapping:
                diag.warn(phase="generate", callsite="generate_instances", message="Family produced no instances")

            result.views = synthesize_views(
                doc, generation.mapping, generation.instance_ids, reference_view, template, diag
            )
    except PreconditionError as e:
        _reset_generation(result)
        _record_failure(result, diag, "load_family", "doc.load_family", e)
        return result
    except Exception as e:
        _reset_generation(result)
        _record_failure(result, diag, "generate", cfg.load_transaction_name, e)
        if cfg.raise_on_host_error:
            raise
        return result

    # Transaction 2: cleanup
    if cfg.delete_default_view:
        try:
            with doc.transaction(cfg.cleanup_transaction_name):
                doc.delete_element(reference_view.id)
        except Exception as e:
            _record_failure(result, diag, "cleanup", cfg.cleanup_transaction_name, e)
            if cfg.raise_on_host_error:
                raise
            return result
        result.deleted_view_id = reference_view.id

    result.success = True
    diag.info(
        phase="cleanup",
        callsite="generate_views",
        message="Run complete",
        extra={"views": len(result.views), "instances": len(result.mapping)},
    )
    return result


def _reset_generation(result):
    # Rolled back: nothing generated is observable any more
    result.mapping = {}
    result.instance_ids = []
    result.placements = []
    result.views = []
    result.overlaps = []
    result.skipped_symbols = []


__all__ = ["RunResult", "generate_views", "check_preconditions"]
