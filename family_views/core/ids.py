"""
Strongly-typed element identifiers and an insertion-ordered id set.

Host ids are opaque integers. Wrapping them keeps type ids, instance ids and
view ids from being compared against bare ints by accident: an ElementId only
equals another ElementId.
"""


class ElementId(object):
    """Immutable identifier of an element in a host document.

    Example:
        >>> ElementId(5) == ElementId(5)
        True
        >>> ElementId(5) == 5
        False
        >>> sorted([ElementId(3), ElementId(1)])
        [ElementId(1), ElementId(3)]
    """

    __slots__ = ("_value",)

    def __init__(self, value):
        if isinstance(value, ElementId):
            value = value.value
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("ElementId value must be an int, got {0!r}".format(value))
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name, value):
        raise AttributeError("ElementId is immutable")

    @property
    def value(self):
        return self._value

    # Revit spelling, so adapters and fakes can read either.
    @property
    def IntegerValue(self):
        return self._value

    def is_valid(self):
        return self._value >= 0

    def __eq__(self, other):
        if not isinstance(other, ElementId):
            return NotImplemented
        return self._value == other._value

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        if not isinstance(other, ElementId):
            return NotImplemented
        return self._value < other._value

    def __hash__(self):
        return hash(("ElementId", self._value))

    def __int__(self):
        return self._value

    def __repr__(self):
        return "ElementId({0})".format(self._value)

    def __str__(self):
        return str(self._value)


INVALID_ELEMENT_ID = ElementId(-1)


class OrderedIdSet(object):
    """Set of ElementIds that iterates in insertion order.

    Backed by a dict (ordered since 3.7), so membership stays O(1).

    Example:
        >>> s = OrderedIdSet([ElementId(3), ElementId(1), ElementId(3)])
        >>> list(s)
        [ElementId(3), ElementId(1)]
        >>> list(s.without(ElementId(3)))
        [ElementId(1)]
    """

    def __init__(self, ids=None):
        self._items = {}
        for eid in ids or ():
            self.add(eid)

    def add(self, eid):
        """Add eid; returns True if it was not present yet."""
        if not isinstance(eid, ElementId):
            raise TypeError("OrderedIdSet only holds ElementId, got {0!r}".format(eid))
        if eid in self._items:
            return False
        self._items[eid] = None
        return True

    def discard(self, eid):
        self._items.pop(eid, None)

    def without(self, eid):
        """Return a new set with every id except eid."""
        return OrderedIdSet(x for x in self._items if x != eid)

    def copy(self):
        return OrderedIdSet(self._items)

    def __contains__(self, eid):
        return eid in self._items

    def __iter__(self):
        return iter(list(self._items))

    def __len__(self):
        return len(self._items)

    def __eq__(self, other):
        if isinstance(other, OrderedIdSet):
            return set(self._items) == set(other._items)
        return NotImplemented

    def __repr__(self):
        return "OrderedIdSet([{0}])".format(", ".join(str(x) for x in self._items))
