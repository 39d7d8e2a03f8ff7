# tests/test_no_bare_except.py

import re
from pathlib import Path

PACKAGE = Path(__file__).resolve().parents[1] / "family_views"

BARE_EXCEPT = re.compile(r"^\s*except\s*:", re.MULTILINE)


def test_no_bare_except_in_package():
    offenders = []
    for py in sorted(PACKAGE.rglob("*.py")):
        text = py.read_text(encoding="utf-8")
        for m in BARE_EXCEPT.finditer(text):
            line = text.count("\n", 0, m.start()) + 1
            offenders.append(f"{py.relative_to(PACKAGE)}:{line}")
    assert offenders == []


def test_package_imports_without_revit():
    import family_views
    import family_views.entry_dynamo
    import family_views.revit.bridge

    assert family_views.__version__
