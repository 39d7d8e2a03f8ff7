"""
View synthesis: one isolated isometric view per generated instance.

For N generated instances the synthesizer builds N selection filters; the
filter for instance k holds the other N-1 instance ids and is attached to
view k with visibility off. Each view therefore shows exactly one generated
instance. Elements outside the generated set are never filtered.
"""

from collections import OrderedDict

from .core.ids import OrderedIdSet

PHASE = "synthesize"


class ViewRecord(object):
    """One synthesized view and the filter that isolates its instance."""

    def __init__(self, label, instance_id, view_id, filter_id, hidden_ids):
        self.label = label
        self.instance_id = instance_id
        self.view_id = view_id
        self.filter_id = filter_id
        self.hidden_ids = hidden_ids

    def to_dict(self):
        return {
            "label": self.label,
            "instance_id": int(self.instance_id),
            "view_id": int(self.view_id),
            "filter_id": int(self.filter_id),
            "hidden_ids": [int(x) for x in self.hidden_ids],
        }

    def __repr__(self):
        return "ViewRecord({0!r}, instance={1}, view={2}, filter={3}, hidden={4})".format(
            self.label, self.instance_id, self.view_id, self.filter_id, len(self.hidden_ids)
        )


def build_exclusion_sets(mapping, all_ids):
    """label -> ids to hide in that label's view (all_ids minus its own instance).

    Example:
        >>> from family_views.core.ids import ElementId, OrderedIdSet
        >>> a, b = ElementId(1), ElementId(2)
        >>> sets = build_exclusion_sets({"2 - x": a, "3 - y": b}, OrderedIdSet([a, b]))
        >>> list(sets["2 - x"])
        [ElementId(2)]
    """
    all_ids = all_ids if isinstance(all_ids, OrderedIdSet) else OrderedIdSet(all_ids)
    return OrderedDict((label, all_ids.without(instance_id)) for label, instance_id in mapping.items())


def synthesize_views(doc, mapping, all_ids, reference_view, template, diag=None):
    """Create and isolate one view per (label, instance id) pair, in mapping order.

    Args:
        doc: HostDocument with an open transaction
        mapping: ordered label -> instance id
        all_ids: every generated instance id
        reference_view: view whose view family type the new views use
        template: 3D view template applied to every new view
        diag: optional Diagnostics

    Returns:
        list of ViewRecord

    Raises:
        HostOperationError: name collisions or invalid ids (transaction rolls back)
    """
    view_family_type_id = reference_view.get_type_id()
    template_id = template.id
    records = []

    for label, hidden_ids in build_exclusion_sets(mapping, all_ids).items():
        instance_id = mapping[label]

        view = doc.create_isometric_view(view_family_type_id)
        view.set_template(template_id)
        view.name = label
        doc.regenerate()

        flt = doc.create_selection_filter(label)
        flt.set_element_ids(hidden_ids)
        view.add_filter(flt.id)
        view.set_filter_visibility(flt.id, False)

        records.append(ViewRecord(label, instance_id, view.id, flt.id, hidden_ids))

        if diag is not None:
            diag.debug(
                phase=PHASE,
                callsite="synthesize_views",
                message="View created",
                elem_id=instance_id,
                view_id=view.id,
                label=label,
                extra={"hidden_count": len(hidden_ids)},
            )

    return records
