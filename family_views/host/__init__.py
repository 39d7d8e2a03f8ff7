"""
Host document model.

Modules:
- contract: HostDocument capabilities the pipeline relies on
- document: in-memory element arena with transactions
- family_definition: JSON family definitions loaded by the arena host
"""

from .contract import HostDocument
from .document import (
    Document,
    Family,
    FamilyInstance,
    FamilySymbol,
    FamilyType,
    SelectionFilterElement,
    View3D,
    ViewFamilyType,
)
from .family_definition import FamilyDefinition, SymbolDefinition, TypeDefinition

__all__ = [
    "HostDocument",
    "Document",
    "Family",
    "FamilyInstance",
    "FamilySymbol",
    "FamilyType",
    "SelectionFilterElement",
    "View3D",
    "ViewFamilyType",
    "FamilyDefinition",
    "SymbolDefinition",
    "TypeDefinition",
]
