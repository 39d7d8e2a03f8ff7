"""
Host document contract consumed by the pipeline.

The pipeline never touches a host API directly; it talks to an object that
implements HostDocument. Two implementations ship with the package:

- family_views.host.document.Document: in-memory element arena (tests, CLI)
- family_views.revit.adapter.RevitDocument: wraps an Autodesk Revit Document

Element capabilities (duck-typed, both implementations provide them):

    Family:    id, name, get_symbol_ids() -> OrderedIdSet
    Symbol:    id, name, is_active, activate(), get_type_id() -> ElementId
    Instance:  id, name, get_type_id(), get_valid_type_ids() -> OrderedIdSet,
               change_type_id(type_id), get_bounding_box(view) -> bbox | None
    View3D:    id, name (settable), is_template, get_type_id(),
               set_template(template_id), add_filter(filter_id),
               set_filter_visibility(filter_id, visible)
    Filter:    id, name, set_element_ids(ids)

Bounding boxes expose Min/Max points with X/Y/Z attributes.
"""


class HostDocument(object):
    """Capabilities the pipeline needs from a host document."""

    @property
    def is_family_document(self):
        raise NotImplementedError

    @property
    def active_view(self):
        """View used for bounding box queries (may be None)."""
        raise NotImplementedError

    def load_family(self, path):
        """Load a family definition. Returns (ok, family_or_None)."""
        raise NotImplementedError

    def get_element(self, element_id):
        raise NotImplementedError

    def create_instance(self, position, symbol, structural_type="NonStructural"):
        raise NotImplementedError

    def regenerate(self):
        raise NotImplementedError

    def delete_element(self, element_id):
        raise NotImplementedError

    def transaction(self, name):
        """Context manager: commit on clean exit, roll back and re-raise on error."""
        raise NotImplementedError

    def create_isometric_view(self, view_family_type_id):
        raise NotImplementedError

    def create_selection_filter(self, name):
        raise NotImplementedError

    def collect_3d_views(self):
        """All 3D views (templates included) in host enumeration order."""
        raise NotImplementedError
