"""
In-memory host document: an arena of elements keyed by ElementId.

Mirrors the parts of a Revit project the generator needs: families, symbols,
types, placed instances, 3D views, view templates and selection filters.
Every mutation goes through the Document and requires an open transaction;
a transaction that exits with an exception restores the arena to its state
at start.

Example:
    >>> doc = Document.new_project()
    >>> with doc.transaction("Load"):
    ...     ok, fam = doc.load_family("family.rfa")
"""

import os
from collections import OrderedDict
from contextlib import contextmanager

from ..core.errors import HostOperationError
from ..core.geometry import XYZ, BoundingBoxXYZ
from ..core.ids import ElementId, INVALID_ELEMENT_ID, OrderedIdSet
from .contract import HostDocument
from .family_definition import FamilyDefinition


VIEW_FAMILY_THREE_D = "ThreeDimensional"

TXN_STARTED = "Started"
TXN_COMMITTED = "Committed"
TXN_ROLLED_BACK = "RolledBack"


# ============================================================
# ELEMENTS
# ============================================================


class Element(object):
    def __init__(self, doc, element_id, name=""):
        self.document = doc
        self.id = element_id
        self._name = name

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, value):
        self.document._require_transaction("rename element")
        self._name = str(value)

    def get_type_id(self):
        return INVALID_ELEMENT_ID

    def __repr__(self):
        return "{0}(id={1}, name={2!r})".format(type(self).__name__, self.id, self.name)


class ViewFamilyType(Element):
    def __init__(self, doc, element_id, name, view_family=VIEW_FAMILY_THREE_D):
        super(ViewFamilyType, self).__init__(doc, element_id, name)
        self.view_family = view_family


class View3D(Element):
    """Isometric 3D view. Templates are View3D elements with is_template=True."""

    def __init__(self, doc, element_id, name, view_family_type_id, is_template=False):
        super(View3D, self).__init__(doc, element_id, name)
        self.view_family_type_id = view_family_type_id
        self.is_template = bool(is_template)
        self.view_template_id = INVALID_ELEMENT_ID
        self._filters = OrderedDict()  # filter id -> visible

    @property
    def name(self):
        return self._name

    @name.setter
    def name(self, value):
        value = str(value)
        self.document._require_transaction("rename view")
        if not value:
            raise HostOperationError("View name must be non-empty")
        for v in self.document.collect_3d_views():
            if v.id != self.id and v.name == value:
                raise HostOperationError("View name '{0}' is already in use".format(value))
        self._name = value

    def get_type_id(self):
        return self.view_family_type_id

    def set_template(self, template_id):
        self.document._require_transaction("set view template")
        if self.is_template:
            raise HostOperationError("A view template cannot have a template")
        tmpl = self.document.get_element(template_id)
        if not isinstance(tmpl, View3D) or not tmpl.is_template:
            raise HostOperationError("Element {0} is not a 3D view template".format(template_id))
        self.view_template_id = template_id

    def add_filter(self, filter_id):
        self.document._require_transaction("add view filter")
        if not isinstance(self.document.get_element(filter_id), SelectionFilterElement):
            raise HostOperationError("Element {0} is not a filter".format(filter_id))
        if filter_id in self._filters:
            raise HostOperationError("Filter {0} is already applied to view {1}".format(filter_id, self.id))
        self._filters[filter_id] = True

    def set_filter_visibility(self, filter_id, visible):
        self.document._require_transaction("set filter visibility")
        if filter_id not in self._filters:
            raise HostOperationError("Filter {0} is not applied to view {1}".format(filter_id, self.id))
        self._filters[filter_id] = bool(visible)

    def get_filters(self):
        return OrderedIdSet(self._filters)

    def get_filter_visibility(self, filter_id):
        if filter_id not in self._filters:
            raise HostOperationError("Filter {0} is not applied to view {1}".format(filter_id, self.id))
        return self._filters[filter_id]

    def is_element_visible(self, element_id):
        """False when a hiding filter on this view contains element_id."""
        if self.document.get_element(element_id) is None:
            return False
        for fid, visible in self._filters.items():
            if visible:
                continue
            flt = self.document.get_element(fid)
            if flt is not None and element_id in flt.get_element_ids():
                return False
        return True


class SelectionFilterElement(Element):
    def __init__(self, doc, element_id, name):
        super(SelectionFilterElement, self).__init__(doc, element_id, name)
        self._element_ids = OrderedIdSet()

    def set_element_ids(self, ids):
        self.document._require_transaction("set filter element ids")
        new_ids = OrderedIdSet(ids)
        for eid in new_ids:
            if self.document.get_element(eid) is None:
                raise HostOperationError("Filter '{0}' references missing element {1}".format(self.name, eid))
        self._element_ids = new_ids

    def get_element_ids(self):
        return self._element_ids.copy()


class Family(Element):
    def __init__(self, doc, element_id, name):
        super(Family, self).__init__(doc, element_id, name)
        self._symbol_ids = []

    def get_symbol_ids(self):
        return OrderedIdSet(self._symbol_ids)


class FamilyType(Element):
    """Concrete type. Extents are relative to the instance insertion point."""

    def __init__(self, doc, element_id, name, family_id, extent_min, extent_max):
        super(FamilyType, self).__init__(doc, element_id, name)
        self.family_id = family_id
        self.extent_min = extent_min
        self.extent_max = extent_max


class FamilySymbol(Element):
    def __init__(self, doc, element_id, name, family_id, type_ids):
        super(FamilySymbol, self).__init__(doc, element_id, name)
        self.family_id = family_id
        self.type_ids = list(type_ids)
        self.is_active = False

    def activate(self):
        self.document._require_transaction("activate symbol")
        self.is_active = True

    def get_type_id(self):
        """Default type of this symbol."""
        return self.type_ids[0]

    def get_type_ids(self):
        return OrderedIdSet(self.type_ids)


class FamilyInstance(Element):
    def __init__(self, doc, element_id, symbol_id, type_id, location, structural_type):
        super(FamilyInstance, self).__init__(doc, element_id, "")
        self.symbol_id = symbol_id
        self.type_id = type_id
        self.location = location
        self.structural_type = structural_type

    @property
    def name(self):
        # Instance name is its type name, as in the host.
        t = self.document.get_element(self.type_id)
        return t.name if t is not None else ""

    @name.setter
    def name(self, value):
        raise HostOperationError("Instance name is read-only (it follows the type name)")

    def get_type_id(self):
        return self.type_id

    def get_valid_type_ids(self):
        """Types this instance can be switched to: every type of its symbol."""
        symbol = self.document.get_element(self.symbol_id)
        return symbol.get_type_ids() if symbol is not None else OrderedIdSet()

    def change_type_id(self, type_id):
        self.document._require_transaction("change instance type")
        if type_id not in self.get_valid_type_ids():
            raise HostOperationError("Type {0} is not valid for instance {1}".format(type_id, self.id))
        self.type_id = type_id
        self.document._mark_dirty(self.id)

    def get_bounding_box(self, view=None):
        """Model-space bbox, or None while geometry awaits regeneration."""
        if self.document._is_dirty(self.id):
            return None
        t = self.document.get_element(self.type_id)
        if t is None:
            return None
        return BoundingBoxXYZ(self.location + t.extent_min, self.location + t.extent_max)


# ============================================================
# TRANSACTIONS
# ============================================================


class Transaction(object):
    def __init__(self, name):
        self.name = str(name)
        self.status = TXN_STARTED
        self._snapshot = None


def _capture_state(elem):
    state = {}
    for k, v in vars(elem).items():
        if isinstance(v, (list, dict, set, OrderedDict, OrderedIdSet)):
            v = v.copy()
        state[k] = v
    return state


# ============================================================
# DOCUMENT
# ============================================================


class Document(HostDocument):
    """Element arena implementing the HostDocument contract."""

    def __init__(self, title="Project1", is_family_document=False, working_dir=None):
        self.title = title
        self._is_family_document = bool(is_family_document)
        self.working_dir = working_dir

        self._elements = OrderedDict()
        self._next_id = 1
        self._dirty = set()
        self._family_library = {}
        self._txn = None
        self._active_view_id = None

        # (transaction name, final status, deleted element ids)
        self.history = []
        self._deleted_in_txn = []

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def new_project(cls, title="Project1", working_dir=None, with_default_view=True, with_template=True):
        """Project with a 3D view family type, a default '{3D}' view and a 3D template."""
        doc = cls(title=title, is_family_document=False, working_dir=working_dir)
        vft = doc._add(ViewFamilyType(doc, doc._allocate_id(), "3D View"))
        if with_default_view:
            view = doc._add(View3D(doc, doc._allocate_id(), "{3D}", vft.id))
            doc._active_view_id = view.id
        if with_template:
            doc._add(View3D(doc, doc._allocate_id(), "3D Template", vft.id, is_template=True))
        return doc

    @classmethod
    def new_family_document(cls, title="Family1", working_dir=None):
        return cls(title=title, is_family_document=True, working_dir=working_dir)

    # ------------------------------------------------------------------
    # Arena internals
    # ------------------------------------------------------------------

    def _allocate_id(self):
        eid = ElementId(self._next_id)
        self._next_id += 1
        return eid

    def _add(self, elem):
        self._elements[elem.id] = elem
        return elem

    def _require_transaction(self, what):
        if self._txn is None:
            raise HostOperationError("Cannot {0} outside of a transaction".format(what))

    def _mark_dirty(self, element_id):
        self._dirty.add(element_id)

    def _is_dirty(self, element_id):
        return element_id in self._dirty

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_family_document(self):
        return self._is_family_document

    @property
    def active_view(self):
        if self._active_view_id is None:
            return None
        return self._elements.get(self._active_view_id)

    def get_element(self, element_id):
        return self._elements.get(element_id)

    def elements_of_type(self, cls):
        return [e for e in self._elements.values() if isinstance(e, cls)]

    def collect_3d_views(self):
        return self.elements_of_type(View3D)

    def __contains__(self, element_id):
        return element_id in self._elements

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @property
    def in_transaction(self):
        return self._txn is not None

    def start_transaction(self, name):
        if self._txn is not None:
            raise HostOperationError(
                "Transaction '{0}' is already open; cannot start '{1}'".format(self._txn.name, name)
            )
        txn = Transaction(name)
        txn._snapshot = (
            OrderedDict(self._elements),
            {eid: _capture_state(e) for eid, e in self._elements.items()},
            set(self._dirty),
            self._active_view_id,
        )
        self._txn = txn
        self._deleted_in_txn = []
        return txn

    def commit_transaction(self):
        txn = self._require_open_txn()
        txn.status = TXN_COMMITTED
        txn._snapshot = None
        self.history.append((txn.name, txn.status, list(self._deleted_in_txn)))
        self._txn = None

    def rollback_transaction(self):
        txn = self._require_open_txn()
        elements, states, dirty, active_view_id = txn._snapshot
        for eid, state in states.items():
            elem = elements[eid]
            elem.__dict__.clear()
            elem.__dict__.update(state)
        self._elements = elements
        self._dirty = dirty
        self._active_view_id = active_view_id
        txn.status = TXN_ROLLED_BACK
        txn._snapshot = None
        self.history.append((txn.name, txn.status, []))
        self._txn = None

    def _require_open_txn(self):
        if self._txn is None:
            raise HostOperationError("No open transaction")
        return self._txn

    @contextmanager
    def transaction(self, name):
        txn = self.start_transaction(name)
        committed = False
        try:
            yield txn
            self.commit_transaction()
            committed = True
        finally:
            if not committed and self._txn is txn:
                self.rollback_transaction()

    # ------------------------------------------------------------------
    # Family loading
    # ------------------------------------------------------------------

    def _resolve_path(self, path):
        path = str(path)
        if not os.path.isabs(path):
            path = os.path.join(self.working_dir or os.getcwd(), path)
        return os.path.normcase(os.path.normpath(path))

    def register_family(self, path, definition):
        """Make a FamilyDefinition loadable under path without touching disk."""
        if isinstance(definition, dict):
            definition = FamilyDefinition.from_dict(definition)
        self._family_library[self._resolve_path(path)] = definition

    def load_family(self, path):
        self._require_transaction("load family")
        if self._is_family_document:
            return False, None

        resolved = self._resolve_path(path)
        definition = self._family_library.get(resolved)
        if definition is None:
            if not os.path.isfile(resolved):
                return False, None
            try:
                definition = FamilyDefinition.from_file(resolved)
            except (OSError, ValueError):
                return False, None

        if any(f.name == definition.name for f in self.elements_of_type(Family)):
            return False, None

        return True, self._realize_family(definition)

    def _realize_family(self, definition):
        family = self._add(Family(self, self._allocate_id(), definition.name))
        types_by_name = {}
        for sdef in definition.symbols:
            type_ids = []
            for tdef in sdef.types:
                ftype = types_by_name.get(tdef.name)
                if ftype is None:
                    half_w = tdef.width / 2.0
                    half_d = tdef.depth / 2.0
                    ftype = self._add(FamilyType(
                        self,
                        self._allocate_id(),
                        tdef.name,
                        family.id,
                        XYZ(-half_w, -half_d, 0.0),
                        XYZ(half_w, half_d, tdef.height),
                    ))
                    types_by_name[tdef.name] = ftype
                type_ids.append(ftype.id)
            symbol = self._add(FamilySymbol(self, self._allocate_id(), sdef.name, family.id, type_ids))
            family._symbol_ids.append(symbol.id)
        return family

    # ------------------------------------------------------------------
    # Creation / deletion
    # ------------------------------------------------------------------

    def create_instance(self, position, symbol, structural_type="NonStructural"):
        self._require_transaction("create instance")
        if not isinstance(symbol, FamilySymbol) or symbol.id not in self._elements:
            raise HostOperationError("Instances can only be created from a loaded FamilySymbol")
        if not symbol.is_active:
            raise HostOperationError("Symbol '{0}' must be activated before use".format(symbol.name))
        inst = self._add(FamilyInstance(
            self, self._allocate_id(), symbol.id, symbol.get_type_id(), position, structural_type
        ))
        self._mark_dirty(inst.id)
        return inst

    def regenerate(self):
        self._dirty.clear()

    def create_isometric_view(self, view_family_type_id):
        self._require_transaction("create view")
        vft = self.get_element(view_family_type_id)
        if not isinstance(vft, ViewFamilyType) or vft.view_family != VIEW_FAMILY_THREE_D:
            raise HostOperationError("Element {0} is not a 3D view family type".format(view_family_type_id))
        taken = set(v.name for v in self.collect_3d_views())
        n = 1
        while "{{3D}} Copy {0}".format(n) in taken:
            n += 1
        return self._add(View3D(self, self._allocate_id(), "{{3D}} Copy {0}".format(n), vft.id))

    def create_selection_filter(self, name):
        self._require_transaction("create filter")
        name = str(name)
        if not name:
            raise HostOperationError("Filter name must be non-empty")
        for f in self.elements_of_type(SelectionFilterElement):
            if f.name == name:
                raise HostOperationError("Filter name '{0}' is already in use".format(name))
        return self._add(SelectionFilterElement(self, self._allocate_id(), name))

    def delete_element(self, element_id):
        self._require_transaction("delete element")
        elem = self._elements.get(element_id)
        if elem is None:
            raise HostOperationError("Element {0} does not exist".format(element_id))

        del self._elements[element_id]
        self._dirty.discard(element_id)
        self._deleted_in_txn.append(element_id)

        if element_id == self._active_view_id:
            self._active_view_id = None

        # Cascade the references the host would clean up.
        for other in self._elements.values():
            if isinstance(other, SelectionFilterElement) and element_id in other._element_ids:
                other._element_ids.discard(element_id)
            elif isinstance(other, View3D):
                other._filters.pop(element_id, None)
                if other.view_template_id == element_id:
                    other.view_template_id = INVALID_ELEMENT_ID
        return [element_id]
