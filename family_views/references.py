"""
Reference view lookups.

Generated views take their view family type from the document's default
(non-template) 3D view and get the first 3D view template applied. Both
lookups return None when absent; resolve_reference_views() turns absence
into a precondition failure before any transaction starts.
"""

from .core.errors import MissingReferenceViewError, MissingViewTemplateError


def _is_template(view):
    try:
        return bool(getattr(view, "is_template", False))
    except Exception:
        # Unreadable flag: not usable as either kind of reference
        return None


def find_default_3d_view(doc):
    """First non-template 3D view in host order, or None."""
    for v in doc.collect_3d_views():
        if _is_template(v) is False:
            return v
    return None


def find_3d_view_template(doc):
    """First 3D view template in host order, or None."""
    for v in doc.collect_3d_views():
        if _is_template(v) is True:
            return v
    return None


def resolve_reference_views(doc):
    """Return (default_view, template) or raise a PreconditionError."""
    view = find_default_3d_view(doc)
    if view is None:
        raise MissingReferenceViewError("Document has no non-template 3D view")
    template = find_3d_view_template(doc)
    if template is None:
        raise MissingViewTemplateError("Document has no 3D view template")
    return view, template
