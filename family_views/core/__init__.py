"""
Core data structures for the family views pipeline.

Modules:
- ids: ElementId newtype and insertion-ordered OrderedIdSet
- geometry: XYZ points and BoundingBoxXYZ boxes
- diagnostics: bounded structured event recorder
- errors: precondition and host operation exceptions
"""

from .ids import ElementId, OrderedIdSet, INVALID_ELEMENT_ID
from .geometry import XYZ, BoundingBoxXYZ
from .diagnostics import Diagnostics

__all__ = [
    "ElementId",
    "OrderedIdSet",
    "INVALID_ELEMENT_ID",
    "XYZ",
    "BoundingBoxXYZ",
    "Diagnostics",
]
