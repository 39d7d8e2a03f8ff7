# tests/conftest.py

import os
from pathlib import Path

import pytest

from family_views.host.document import Document
from family_views.host.family_definition import FamilyDefinition


def pytest_ignore_collect(collection_path: Path, config):
    """
    Prevent collection of Revit integration tests unless explicitly enabled.

    Enable by setting:
        FV_RUN_REVIT_TESTS=1
    """
    run_revit = os.environ.get("FV_RUN_REVIT_TESTS", "").strip() == "1"
    if run_revit:
        return False

    p = str(collection_path).replace("\\", "/")
    return "/tests/revit/" in p


# Symbol A: default A1 + alternate A2; symbol B: only B1.
SCENARIO_FAMILY = {
    "name": "Desk",
    "symbols": [
        {"name": "A", "types": [{"name": "A1", "width": 2.0}, {"name": "A2", "width": 3.0}]},
        {"name": "B", "types": [{"name": "B1", "width": 1.5}]},
    ],
}


def make_project(tmp_path, family=None, path="family.rfa", **kwargs):
    """Project document whose working dir is tmp_path, with family registered under path."""
    doc = Document.new_project(working_dir=str(tmp_path), **kwargs)
    if family is not None:
        doc.register_family(path, FamilyDefinition.from_dict(family))
    return doc


@pytest.fixture
def make_doc(tmp_path):
    def _make(family=None, path="family.rfa", **kwargs):
        return make_project(tmp_path, family, path, **kwargs)
    return _make


@pytest.fixture
def scenario_doc(tmp_path):
    return make_project(tmp_path, SCENARIO_FAMILY)


@pytest.fixture
def scenario_family():
    return dict(SCENARIO_FAMILY)
