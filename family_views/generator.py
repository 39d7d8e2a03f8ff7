"""
Instance generation: one placed instance per distinct type of a family.

Walks the family's symbols in host order. For each symbol the default type is
placed first and measured; every further valid type of that symbol is placed
next to it by creating another instance of the symbol and retyping it. A type
id is materialized at most once per run.

Skip rule (kept as found in production): when a symbol's default type was
already materialized, the whole symbol is skipped, alternates included.
"""

from collections import OrderedDict

from .config import Config
from .core.errors import HostOperationError
from .core.ids import OrderedIdSet
from .layout import LayoutCursor

PHASE = "generate"


class Placement(object):
    """Where one generated instance went and which label names it."""

    def __init__(self, label, ordinal, symbol_name, instance_id, type_id, x, bbox=None, is_primary=True):
        self.label = label
        self.ordinal = ordinal
        self.symbol_name = symbol_name
        self.instance_id = instance_id
        self.type_id = type_id
        self.x = x
        self.bbox = bbox
        self.is_primary = is_primary

    def to_dict(self):
        return {
            "label": self.label,
            "ordinal": self.ordinal,
            "symbol": self.symbol_name,
            "instance_id": int(self.instance_id),
            "type_id": int(self.type_id),
            "x": self.x,
            "bbox": self.bbox.to_dict() if hasattr(self.bbox, "to_dict") else None,
            "is_primary": self.is_primary,
        }


class GenerationResult(object):
    """Output of generate_instances().

    Attributes:
        mapping: OrderedDict label -> instance ElementId (creation order)
        instance_ids: OrderedIdSet of every generated instance
        materialized_type_ids: OrderedIdSet of every type placed
        placements: list of Placement, same order as mapping
        skipped_symbols: names of symbols skipped because their default type was seen
    """

    def __init__(self):
        self.mapping = OrderedDict()
        self.instance_ids = OrderedIdSet()
        self.materialized_type_ids = OrderedIdSet()
        self.placements = []
        self.skipped_symbols = []

    def record(self, placement):
        if placement.label in self.mapping:
            raise HostOperationError("Duplicate view label '{0}'".format(placement.label))
        self.mapping[placement.label] = placement.instance_id
        self.instance_ids.add(placement.instance_id)
        self.materialized_type_ids.add(placement.type_id)
        self.placements.append(placement)

    def __len__(self):
        return len(self.mapping)


def _measure_primary(doc, instance, cursor):
    doc.regenerate()
    bbox = instance.get_bounding_box(doc.active_view)
    if bbox is None:
        raise HostOperationError("Instance {0} has no bounding box after regeneration".format(instance.id))
    return cursor.measure(bbox), bbox


def generate_instances(doc, family, cfg=None, diag=None):
    """Create one instance per distinct type reachable from family's symbols.

    Args:
        doc: HostDocument with an open transaction
        family: loaded family handle (get_symbol_ids())
        cfg: Config (spacing_factor, first_ordinal, label_format, structural_type)
        diag: optional Diagnostics

    Returns:
        GenerationResult

    Raises:
        HostOperationError: any host failure; the caller's transaction rolls back
    """
    cfg = cfg or Config()
    result = GenerationResult()
    cursor = LayoutCursor(cfg.spacing_factor)
    ordinal = cfg.first_ordinal

    for symbol_id in family.get_symbol_ids():
        symbol = doc.get_element(symbol_id)
        if symbol is None:
            raise HostOperationError("Family symbol {0} not found in document".format(symbol_id))
        symbol.activate()

        default_type_id = symbol.get_type_id()
        if default_type_id in result.materialized_type_ids:
            result.skipped_symbols.append(symbol.name)
            if diag is not None:
                diag.debug(
                    phase=PHASE,
                    callsite="generate_instances.skip_symbol",
                    message="Default type already materialized; symbol skipped",
                    elem_id=symbol_id,
                    extra={"symbol": symbol.name, "type_id": int(default_type_id)},
                )
            continue

        x = cursor.x
        primary = doc.create_instance(cursor.position(), symbol, cfg.structural_type)
        displacement, bbox = _measure_primary(doc, primary, cursor)
        cursor.advance(displacement)

        label = cfg.make_label(ordinal, symbol.name, primary.name)
        result.record(Placement(label, ordinal, symbol.name, primary.id, primary.get_type_id(), x, bbox, True))
        ordinal += 1

        for type_id in primary.get_valid_type_ids():
            if type_id in result.materialized_type_ids:
                continue
            x = cursor.x
            alternate = doc.create_instance(cursor.position(), symbol, cfg.structural_type)
            cursor.advance(displacement)
            alternate.change_type_id(type_id)

            label = cfg.make_label(ordinal, symbol.name, alternate.name)
            result.record(Placement(label, ordinal, symbol.name, alternate.id, type_id, x, None, False))
            ordinal += 1

        if diag is not None:
            diag.debug(
                phase=PHASE,
                callsite="generate_instances.symbol_done",
                message="Symbol placed",
                elem_id=symbol_id,
                extra={"symbol": symbol.name, "displacement": displacement, "cursor_x": cursor.x},
            )

    return result


def refresh_bounding_boxes(doc, result):
    """Regenerate and re-read every placement's bbox (alternates are unmeasured until now)."""
    doc.regenerate()
    view = doc.active_view
    for p in result.placements:
        inst = doc.get_element(p.instance_id)
        p.bbox = inst.get_bounding_box(view) if inst is not None else None
    return result.placements
