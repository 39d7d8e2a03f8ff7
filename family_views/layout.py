"""
Instance layout along the X axis.

Each symbol's primary instance is measured once after regeneration; the
cursor then advances by that width times spacing_factor for the primary and
for every alternate type placed under the same symbol. With the default
factor of 2.0 every instance starts one full width past the previous one.

Alternates wider than their primary are not re-measured, so they can end up
touching a neighbour. find_x_overlaps() reports such pairs after the fact.
"""

from .core.geometry import XYZ, x_extent


class LayoutCursor(object):
    """Running placement position.

    Example:
        >>> c = LayoutCursor(spacing_factor=2.0)
        >>> c.position()
        XYZ(0.000, 0.000, 0.000)
        >>> c.advance(1.5)
        3.0
    """

    def __init__(self, spacing_factor=2.0, start_x=0.0):
        if spacing_factor <= 0:
            raise ValueError("spacing_factor must be positive")
        self.spacing_factor = float(spacing_factor)
        self.x = float(start_x)

    def position(self):
        return XYZ(self.x, 0.0, 0.0)

    @staticmethod
    def measure(bbox):
        """X displacement of a placed instance (bbox width along X)."""
        return x_extent(bbox)

    def advance(self, displacement):
        self.x += float(displacement) * self.spacing_factor
        return self.x


def x_interval(bbox):
    return (float(bbox.Min.X), float(bbox.Max.X))


def find_x_overlaps(placements):
    """Return (label_a, label_b) for every pair whose X intervals intersect.

    Args:
        placements: iterable of objects with .label and .bbox (bbox may be None;
            such entries are skipped)

    Sweeps intervals sorted by min X, so cost is O(n log n + overlaps).
    """
    items = []
    for p in placements:
        if p.bbox is None:
            continue
        lo, hi = x_interval(p.bbox)
        items.append((lo, hi, p.label))
    items.sort(key=lambda t: (t[0], t[1]))

    overlaps = []
    active = []
    for lo, hi, label in items:
        active = [a for a in active if a[1] >= lo]
        for a in active:
            overlaps.append((a[2], label))
        active.append((lo, hi, label))
    return overlaps
