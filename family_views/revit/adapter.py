"""
Revit implementation of the HostDocument contract.

Wraps an Autodesk.Revit.DB.Document so the pipeline can run unchanged inside
Revit (Dynamo CPython3, pyRevit, or a Design Automation add-in hosted through
pythonnet). Autodesk modules are imported lazily so the package and its unit
tests import without Revit.

Ids crossing the boundary are converted to family_views ElementId; Revit
ElementIds never leak into pipeline code.
"""

import sys
from contextlib import contextmanager

from ..core.errors import HostOperationError
from ..core.ids import ElementId, OrderedIdSet
from ..host.contract import HostDocument
from .safe_api import safe_attr, safe_call

PHASE = "revit"


def _db():
    import Autodesk.Revit.DB as DB
    return DB


def _out_params_by_reference():
    """True under IronPython, where out-parameters are passed as clr.Reference."""
    return sys.implementation.name == "ironpython"


def id_value(revit_id):
    """Integer value of a Revit ElementId (Value on 2024+, IntegerValue before)."""
    value = getattr(revit_id, "Value", None)
    if value is None:
        value = revit_id.IntegerValue
    return int(value)


def from_revit_id(revit_id):
    return ElementId(id_value(revit_id))


def to_revit_id(element_id):
    return _db().ElementId(int(element_id))


def _id_list(ids):
    from System.Collections.Generic import List
    DB = _db()
    out = List[DB.ElementId]()
    for eid in ids:
        out.Add(to_revit_id(eid))
    return out


# ============================================================
# ELEMENT WRAPPERS
# ============================================================


class RevitElement(object):
    def __init__(self, owner, elem):
        self.owner = owner
        self.raw = elem
        self.id = from_revit_id(elem.Id)

    @property
    def name(self):
        return safe_attr(self.owner.diag, self.raw, "Name", "", phase=PHASE, elem_id=self.id)

    def get_type_id(self):
        return from_revit_id(self.raw.GetTypeId())

    def __repr__(self):
        return "{0}(id={1})".format(type(self).__name__, self.id)


class RevitFamily(RevitElement):
    def get_symbol_ids(self):
        return OrderedIdSet(from_revit_id(i) for i in self.raw.GetFamilySymbolIds())


class RevitFamilySymbol(RevitElement):
    @property
    def is_active(self):
        return bool(safe_attr(self.owner.diag, self.raw, "IsActive", False, phase=PHASE, elem_id=self.id))

    def activate(self):
        if not self.raw.IsActive:
            self.raw.Activate()

    def get_type_id(self):
        # A FamilySymbol is itself the default type of its instances.
        return self.id


class RevitFamilyInstance(RevitElement):
    def get_valid_type_ids(self):
        return OrderedIdSet(from_revit_id(i) for i in self.raw.GetValidTypes())

    def change_type_id(self, type_id):
        self.raw.ChangeTypeId(to_revit_id(type_id))

    def get_bounding_box(self, view=None):
        raw_view = getattr(view, "raw", None)
        return safe_call(
            self.owner.diag,
            phase=PHASE,
            callsite="elem.get_BoundingBox(view)",
            fn=lambda: self.raw.get_BoundingBox(raw_view),
            default=None,
            context={"elem_id": self.id},
        )


class RevitView3D(RevitElement):
    @property
    def name(self):
        return self.raw.Name

    @name.setter
    def name(self, value):
        self.raw.Name = value

    @property
    def is_template(self):
        return bool(safe_attr(self.owner.diag, self.raw, "IsTemplate", False, phase=PHASE, elem_id=self.id))

    def set_template(self, template_id):
        self.raw.ViewTemplateId = to_revit_id(template_id)

    def add_filter(self, filter_id):
        self.raw.AddFilter(to_revit_id(filter_id))

    def set_filter_visibility(self, filter_id, visible):
        self.raw.SetFilterVisibility(to_revit_id(filter_id), bool(visible))


class RevitSelectionFilter(RevitElement):
    def set_element_ids(self, ids):
        self.raw.SetElementIds(_id_list(ids))


# ============================================================
# DOCUMENT
# ============================================================


class RevitDocument(HostDocument):
    """HostDocument over a live Revit document."""

    def __init__(self, revit_doc, diag=None):
        if revit_doc is None:
            raise ValueError("revit_doc is required")
        self.raw = revit_doc
        self.diag = diag

    def wrap(self, elem):
        """Wrap a Revit element in the matching contract class (None passes through)."""
        if elem is None:
            return None
        DB = _db()
        if isinstance(elem, DB.FamilyInstance):
            return RevitFamilyInstance(self, elem)
        if isinstance(elem, DB.FamilySymbol):
            return RevitFamilySymbol(self, elem)
        if isinstance(elem, DB.Family):
            return RevitFamily(self, elem)
        if isinstance(elem, DB.View3D):
            return RevitView3D(self, elem)
        if isinstance(elem, DB.SelectionFilterElement):
            return RevitSelectionFilter(self, elem)
        return RevitElement(self, elem)

    @property
    def is_family_document(self):
        return bool(self.raw.IsFamilyDocument)

    @property
    def active_view(self):
        view = safe_call(
            self.diag,
            phase=PHASE,
            callsite="doc.ActiveView",
            fn=lambda: self.raw.ActiveView,
            default=None,
        )
        return self.wrap(view)

    def get_element(self, element_id):
        return self.wrap(self.raw.GetElement(to_revit_id(element_id)))

    def load_family(self, path):
        by_reference = _out_params_by_reference()

        def _load():
            if by_reference:
                import clr
                ref = clr.Reference[_db().Family]()
                ok = self.raw.LoadFamily(path, ref)
                return bool(ok), ref.Value
            # pythonnet hands out-parameters back as a tuple
            res = self.raw.LoadFamily(path, None)
            if not isinstance(res, tuple) or len(res) != 2:
                raise HostOperationError("LoadFamily returned {0!r}, expected (ok, family)".format(res))
            return bool(res[0]), res[1]

        ok, family = safe_call(
            self.diag,
            phase="load_family",
            callsite="doc.LoadFamily",
            fn=_load,
            default=(False, None),
            context={"path": path},
        )
        if not ok or family is None:
            return False, None
        return True, self.wrap(family)

    def create_instance(self, position, symbol, structural_type="NonStructural"):
        DB = _db()
        from Autodesk.Revit.DB.Structure import StructuralType

        raw_symbol = getattr(symbol, "raw", symbol)
        point = DB.XYZ(position.X, position.Y, position.Z)
        inst = self.raw.Create.NewFamilyInstance(point, raw_symbol, getattr(StructuralType, structural_type))
        if inst is None:
            raise HostOperationError("NewFamilyInstance returned None")
        return self.wrap(inst)

    def regenerate(self):
        self.raw.Regenerate()

    def delete_element(self, element_id):
        deleted = self.raw.Delete(to_revit_id(element_id))
        return [from_revit_id(i) for i in deleted] if deleted is not None else []

    @contextmanager
    def transaction(self, name):
        DB = _db()
        txn = DB.Transaction(self.raw, name)
        txn.Start()
        committed = False
        try:
            yield txn
            txn.Commit()
            committed = True
        finally:
            if not committed and txn.HasStarted() and not txn.HasEnded():
                txn.RollBack()

    def create_isometric_view(self, view_family_type_id):
        DB = _db()
        return self.wrap(DB.View3D.CreateIsometric(self.raw, to_revit_id(view_family_type_id)))

    def create_selection_filter(self, name):
        DB = _db()
        return self.wrap(DB.SelectionFilterElement.Create(self.raw, name))

    def collect_3d_views(self):
        DB = _db()
        return [self.wrap(v) for v in DB.FilteredElementCollector(self.raw).OfClass(DB.View3D)]
