import pytest

from family_views.core.errors import HostOperationError
from family_views.core.geometry import XYZ
from family_views.core.ids import ElementId
from family_views.host.document import (
    Document,
    FamilyInstance,
    FamilySymbol,
    FamilyType,
    SelectionFilterElement,
    View3D,
    TXN_COMMITTED,
    TXN_ROLLED_BACK,
)
from family_views.host.family_definition import FamilyDefinition


def _load(doc, path="family.rfa"):
    ok, fam = doc.load_family(path)
    assert ok
    return fam


def test_new_project_has_default_view_and_template():
    doc = Document.new_project()
    views = doc.collect_3d_views()
    assert [v.name for v in views] == ["{3D}", "3D Template"]
    assert views[0].is_template is False
    assert views[1].is_template is True
    assert doc.active_view is views[0]
    assert not doc.is_family_document


def test_mutation_outside_transaction_is_rejected(scenario_doc):
    with pytest.raises(HostOperationError):
        scenario_doc.load_family("family.rfa")
    with pytest.raises(HostOperationError):
        scenario_doc.delete_element(scenario_doc.active_view.id)


def test_nested_transaction_is_rejected(scenario_doc):
    with scenario_doc.transaction("outer"):
        with pytest.raises(HostOperationError):
            scenario_doc.start_transaction("inner")


def test_load_family_creates_symbols_and_types(scenario_doc):
    with scenario_doc.transaction("load"):
        fam = _load(scenario_doc)
    symbols = [scenario_doc.get_element(i) for i in fam.get_symbol_ids()]
    assert [s.name for s in symbols] == ["A", "B"]
    assert all(isinstance(s, FamilySymbol) for s in symbols)
    a_types = [scenario_doc.get_element(t).name for t in symbols[0].get_type_ids()]
    assert a_types == ["A1", "A2"]
    assert scenario_doc.get_element(symbols[0].get_type_id()).name == "A1"
    assert scenario_doc.history == [("load", TXN_COMMITTED, [])]


def test_shared_type_name_is_one_element(make_doc):
    doc = make_doc({
        "name": "F",
        "symbols": [
            {"name": "S1", "types": [{"name": "T1", "width": 1}, {"name": "T2", "width": 1}]},
            {"name": "S2", "types": [{"name": "T2", "width": 1}]},
        ],
    })
    with doc.transaction("load"):
        fam = _load(doc)
    s1, s2 = [doc.get_element(i) for i in fam.get_symbol_ids()]
    assert s2.get_type_id() == list(s1.get_type_ids())[1]
    assert len(doc.elements_of_type(FamilyType)) == 2


def test_load_family_failures_return_false(make_doc, tmp_path):
    doc = make_doc()
    with doc.transaction("load"):
        assert doc.load_family("missing.rfa") == (False, None)
        (tmp_path / "broken.rfa").write_text("{", encoding="utf-8")
        assert doc.load_family("broken.rfa") == (False, None)


@pytest.mark.parametrize("content", [
    '{"name": "F", "symbols": [{"name": "S", "types": [{"name": "T", "width": null}]}]}',
    '{"name": "F", "symbols": ["S"]}',
    '{"name": "F", "symbols": [{"name": "S", "types": ["T"]}]}',
])
def test_load_family_wrong_shape_json_returns_false(make_doc, tmp_path, content):
    (tmp_path / "family.rfa").write_text(content, encoding="utf-8")
    doc = make_doc()
    with doc.transaction("load"):
        assert doc.load_family("family.rfa") == (False, None)


def test_load_family_reads_json_from_disk(make_doc, tmp_path, scenario_family):
    FamilyDefinition.from_dict(scenario_family).write(str(tmp_path / "family.rfa"))
    doc = make_doc()
    with doc.transaction("load"):
        fam = _load(doc)
        # same family twice is refused, as the host does
        assert doc.load_family("family.rfa") == (False, None)
    assert fam.name == "Desk"


def test_family_document_cannot_load_families(tmp_path, scenario_family):
    doc = Document.new_family_document(working_dir=str(tmp_path))
    doc.register_family("family.rfa", scenario_family)
    with doc.transaction("load"):
        assert doc.load_family("family.rfa") == (False, None)


def test_instance_requires_active_symbol_and_regeneration(scenario_doc):
    with scenario_doc.transaction("t"):
        fam = _load(scenario_doc)
        symbol = scenario_doc.get_element(list(fam.get_symbol_ids())[0])
        with pytest.raises(HostOperationError):
            scenario_doc.create_instance(XYZ(), symbol)
        symbol.activate()
        inst = scenario_doc.create_instance(XYZ(10, 0, 0), symbol)
        assert isinstance(inst, FamilyInstance)
        assert inst.get_bounding_box(scenario_doc.active_view) is None
        scenario_doc.regenerate()
        bbox = inst.get_bounding_box(scenario_doc.active_view)
        assert (bbox.Min.X, bbox.Max.X) == (9.0, 11.0)
        assert inst.name == "A1"


def test_change_type_id_renames_instance_and_needs_valid_type(scenario_doc):
    with scenario_doc.transaction("t"):
        fam = _load(scenario_doc)
        sym_a, sym_b = [scenario_doc.get_element(i) for i in fam.get_symbol_ids()]
        sym_a.activate()
        inst = scenario_doc.create_instance(XYZ(), sym_a)
        a2 = list(inst.get_valid_type_ids())[1]
        inst.change_type_id(a2)
        assert inst.name == "A2"
        assert inst.get_type_id() == a2
        with pytest.raises(HostOperationError):
            inst.change_type_id(sym_b.get_type_id())


def test_rollback_restores_arena(scenario_doc):
    default_view = scenario_doc.active_view
    before = len(scenario_doc.collect_3d_views())

    with pytest.raises(RuntimeError):
        with scenario_doc.transaction("doomed"):
            fam = _load(scenario_doc)
            view = scenario_doc.create_isometric_view(default_view.get_type_id())
            view.name = "temp"
            scenario_doc.delete_element(default_view.id)
            raise RuntimeError("host fault")

    assert len(scenario_doc.collect_3d_views()) == before
    assert scenario_doc.get_element(default_view.id) is default_view
    assert scenario_doc.active_view is default_view
    assert scenario_doc.get_element(fam.id) is None
    assert scenario_doc.history[-1][:2] == ("doomed", TXN_ROLLED_BACK)
    assert not scenario_doc.in_transaction


def test_rollback_restores_element_state(scenario_doc):
    with scenario_doc.transaction("setup"):
        view = scenario_doc.create_isometric_view(scenario_doc.active_view.get_type_id())
        view.name = "kept"
    with pytest.raises(HostOperationError):
        with scenario_doc.transaction("rename"):
            view.name = "changed"
            view.name = "{3D}"
    assert view.name == "kept"


def test_ids_are_not_reused_after_rollback(scenario_doc):
    with pytest.raises(RuntimeError):
        with scenario_doc.transaction("a"):
            first = scenario_doc.create_selection_filter("f")
            raise RuntimeError
    with scenario_doc.transaction("b"):
        second = scenario_doc.create_selection_filter("f")
    assert second.id != first.id


def test_view_and_filter_names_must_be_unique(scenario_doc):
    vft = scenario_doc.active_view.get_type_id()
    with scenario_doc.transaction("t"):
        v1 = scenario_doc.create_isometric_view(vft)
        v2 = scenario_doc.create_isometric_view(vft)
        assert v1.name != v2.name
        v1.name = "2 - Symbol A Type A1"
        with pytest.raises(HostOperationError):
            v2.name = "2 - Symbol A Type A1"
        scenario_doc.create_selection_filter("2 - Symbol A Type A1")
        with pytest.raises(HostOperationError):
            scenario_doc.create_selection_filter("2 - Symbol A Type A1")


def test_template_must_be_a_template(scenario_doc):
    default_view, template = scenario_doc.collect_3d_views()
    with scenario_doc.transaction("t"):
        v = scenario_doc.create_isometric_view(default_view.get_type_id())
        v.set_template(template.id)
        assert v.view_template_id == template.id
        with pytest.raises(HostOperationError):
            v.set_template(default_view.id)


def test_hiding_filter_controls_visibility(scenario_doc):
    with scenario_doc.transaction("t"):
        fam = _load(scenario_doc)
        sym = scenario_doc.get_element(list(fam.get_symbol_ids())[0])
        sym.activate()
        a = scenario_doc.create_instance(XYZ(), sym)
        b = scenario_doc.create_instance(XYZ(5, 0, 0), sym)
        view = scenario_doc.create_isometric_view(scenario_doc.active_view.get_type_id())
        flt = scenario_doc.create_selection_filter("hide b")
        flt.set_element_ids([b.id])
        view.add_filter(flt.id)
        assert view.is_element_visible(b.id)
        view.set_filter_visibility(flt.id, False)
        assert view.is_element_visible(a.id)
        assert not view.is_element_visible(b.id)
        assert view.get_filter_visibility(flt.id) is False
        with pytest.raises(HostOperationError):
            view.add_filter(flt.id)
        with pytest.raises(HostOperationError):
            flt.set_element_ids([ElementId(99999)])


def test_delete_cascades_into_filters_and_views(scenario_doc):
    with scenario_doc.transaction("t"):
        view = scenario_doc.create_isometric_view(scenario_doc.active_view.get_type_id())
        target = scenario_doc.create_isometric_view(scenario_doc.active_view.get_type_id())
        flt = scenario_doc.create_selection_filter("f")
        flt.set_element_ids([target.id])
        view.add_filter(flt.id)
        scenario_doc.delete_element(target.id)
        assert len(flt.get_element_ids()) == 0
        scenario_doc.delete_element(flt.id)
        assert len(view.get_filters()) == 0
        with pytest.raises(HostOperationError):
            scenario_doc.delete_element(flt.id)
    assert scenario_doc.history[-1][2] == [target.id, flt.id]
    assert isinstance(scenario_doc.get_element(view.id), View3D)
    assert not scenario_doc.elements_of_type(SelectionFilterElement)
