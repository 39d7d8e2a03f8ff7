"""
Geometric primitives for instance placement.

Only the X axis varies during layout, but points and boxes are kept 3D so
they mirror what the host reports (XYZ / BoundingBoxXYZ).
"""


class XYZ(object):
    """Immutable 3D point in model space (feet).

    Example:
        >>> p = XYZ(1.0, 0.0, 0.0)
        >>> (p + XYZ(0.5, 2.0, 0.0)).X
        1.5
    """

    __slots__ = ("X", "Y", "Z")

    def __init__(self, x=0.0, y=0.0, z=0.0):
        object.__setattr__(self, "X", float(x))
        object.__setattr__(self, "Y", float(y))
        object.__setattr__(self, "Z", float(z))

    def __setattr__(self, name, value):
        raise AttributeError("XYZ is immutable")

    def __add__(self, other):
        return XYZ(self.X + other.X, self.Y + other.Y, self.Z + other.Z)

    def __eq__(self, other):
        if not isinstance(other, XYZ):
            return NotImplemented
        return (self.X, self.Y, self.Z) == (other.X, other.Y, other.Z)

    def __hash__(self):
        return hash((self.X, self.Y, self.Z))

    def to_tuple(self):
        return (self.X, self.Y, self.Z)

    def __repr__(self):
        return f"XYZ({self.X:.3f}, {self.Y:.3f}, {self.Z:.3f})"


class BoundingBoxXYZ(object):
    """Axis-aligned bounding box with Min/Max corners.

    Attributes:
        Min, Max: XYZ corners (Min <= Max on every axis)

    Example:
        >>> x_extent(BoundingBoxXYZ(XYZ(-1, -1, 0), XYZ(1, 1, 2)))
        2.0
    """

    def __init__(self, min_pt, max_pt):
        if min_pt.X > max_pt.X or min_pt.Y > max_pt.Y or min_pt.Z > max_pt.Z:
            raise ValueError("BoundingBoxXYZ Min must not exceed Max: {0} > {1}".format(min_pt, max_pt))
        self.Min = min_pt
        self.Max = max_pt

    def to_dict(self):
        return {"min": list(self.Min.to_tuple()), "max": list(self.Max.to_tuple())}

    def __repr__(self):
        return f"BoundingBoxXYZ(min={self.Min!r}, max={self.Max!r})"


def x_extent(bbox):
    """Return max.X - min.X for any bbox-like object exposing Min/Max."""
    return float(bbox.Max.X) - float(bbox.Min.X)
