"""
Family definition files for the in-memory host.

A family definition is the arena equivalent of an .rfa file: a JSON object
naming the family, its symbols and the types under each symbol. The first
type listed under a symbol is the symbol's default type. A type name that
appears under several symbols denotes one shared type.

Example file:

    {
      "name": "Desk",
      "symbols": [
        {"name": "A", "types": [{"name": "A1", "width": 2.0},
                                {"name": "A2", "width": 3.0}]},
        {"name": "B", "types": [{"name": "B1", "width": 1.5}]}
      ]
    }
"""

import json


def _require_dict(d, what):
    if not isinstance(d, dict):
        raise ValueError("{0} must be a JSON object, got {1!r}".format(what, d))
    return d


def _require_list(value, what):
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("{0} must be a JSON array, got {1!r}".format(what, value))
    return value


def _dimension(value, what):
    if isinstance(value, bool):
        raise ValueError("{0} must be a number, got {1!r}".format(what, value))
    try:
        return float(value)
    except TypeError:
        raise ValueError("{0} must be a number, got {1!r}".format(what, value))


class TypeDefinition(object):
    """One concrete parameter variant. Dimensions in feet."""

    def __init__(self, name, width, depth=1.0, height=1.0):
        self.name = str(name or "")
        if not self.name:
            raise ValueError("type name must be non-empty")

        self.width = _dimension(width, "type '{0}' width".format(self.name))
        self.depth = _dimension(depth, "type '{0}' depth".format(self.name))
        self.height = _dimension(height, "type '{0}' height".format(self.name))
        if not (self.width > 0 and self.depth > 0 and self.height > 0):
            raise ValueError("type '{0}' dimensions must be positive".format(self.name))

    @classmethod
    def from_dict(cls, d):
        d = _require_dict(d, "type entry")
        if "width" not in d:
            raise ValueError("type '{0}' is missing 'width'".format(d.get("name")))
        return cls(d.get("name"), d["width"], d.get("depth", 1.0), d.get("height", 1.0))

    def to_dict(self):
        return {"name": self.name, "width": self.width, "depth": self.depth, "height": self.height}


class SymbolDefinition(object):
    def __init__(self, name, types):
        self.name = str(name or "")
        self.types = list(types)

        if not self.name:
            raise ValueError("symbol name must be non-empty")
        if not self.types:
            raise ValueError("symbol '{0}' must define at least one type".format(self.name))

    @classmethod
    def from_dict(cls, d):
        d = _require_dict(d, "symbol entry")
        types = _require_list(d.get("types"), "symbol '{0}' types".format(d.get("name")))
        return cls(d.get("name"), [TypeDefinition.from_dict(t) for t in types])

    def to_dict(self):
        return {"name": self.name, "types": [t.to_dict() for t in self.types]}


class FamilyDefinition(object):
    """Parsed family definition.

    Raises:
        ValueError: on structurally invalid input (missing names, no types,
            non-positive dimensions, duplicate symbol names)
    """

    def __init__(self, name, symbols):
        self.name = str(name or "")
        self.symbols = list(symbols)

        if not self.name:
            raise ValueError("family name must be non-empty")
        seen = set()
        for s in self.symbols:
            if s.name in seen:
                raise ValueError("duplicate symbol name '{0}'".format(s.name))
            seen.add(s.name)

    @classmethod
    def from_dict(cls, d):
        d = _require_dict(d, "family definition")
        symbols = _require_list(d.get("symbols"), "family symbols")
        return cls(d.get("name"), [SymbolDefinition.from_dict(s) for s in symbols])

    @classmethod
    def from_file(cls, path):
        """Read a JSON family definition. OSError / ValueError propagate."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def to_dict(self):
        return {"name": self.name, "symbols": [s.to_dict() for s in self.symbols]}

    def write(self, path):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    def distinct_type_names(self):
        """Type names in first-seen order across all symbols."""
        names = []
        for s in self.symbols:
            for t in s.types:
                if t.name not in names:
                    names.append(t.name)
        return names
