# family_views/core/diagnostics.py

def _exc_to_str(e):
    try:
        return str(e)
    except Exception:
        return "<unstringifiable exception>"


def _id_to_json(eid):
    if eid is None:
        return None
    try:
        return int(eid)
    except (TypeError, ValueError):
        return str(eid)


LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


class Diagnostics(object):
    """
    Structured run recorder for the view generation pipeline.

    - Bounded event storage (counts keep growing after the cap)
    - Aggregated counts per level|phase|callsite|exc_type
    - JSON-safe output (element ids are stored as ints)
    - Optional echo: one trace line per event on stdout
    """

    def __init__(self, max_events=200, echo=False):
        self.max_events = max_events
        self.echo = bool(echo)

        self.events = []
        self.counts = {}
        self.dropped_events = 0

    def _count_key(self, level, phase, callsite, exc_type):
        return "{}|{}|{}|{}".format(level, phase, callsite, exc_type or "")

    def _record(self, payload):
        key = self._count_key(
            payload.get("level"),
            payload.get("phase"),
            payload.get("callsite"),
            payload.get("exc_type"),
        )
        self.counts[key] = self.counts.get(key, 0) + 1

        if self.echo:
            print(self.format_event(payload))

        if len(self.events) >= self.max_events:
            self.dropped_events += 1
            return None

        self.events.append(payload)
        return len(self.events) - 1

    def _payload(self, level, phase, callsite, message, exc=None, elem_id=None, view_id=None, label=None, extra=None):
        return {
            "level": level,
            "phase": phase,
            "callsite": callsite,
            "message": message,
            "exc_type": type(exc).__name__ if exc is not None else None,
            "exc_message": _exc_to_str(exc) if exc is not None else None,
            "elem_id": _id_to_json(elem_id),
            "view_id": _id_to_json(view_id),
            "label": label,
            "extra": extra or {},
        }

    def debug(self, phase, callsite, message, elem_id=None, view_id=None, label=None, extra=None):
        self._record(self._payload("DEBUG", phase, callsite, message, None, elem_id, view_id, label, extra))

    def info(self, phase, callsite, message, elem_id=None, view_id=None, label=None, extra=None):
        self._record(self._payload("INFO", phase, callsite, message, None, elem_id, view_id, label, extra))

    def warn(self, phase, callsite, message, elem_id=None, view_id=None, label=None, extra=None):
        self._record(self._payload("WARN", phase, callsite, message, None, elem_id, view_id, label, extra))

    def error(self, phase, callsite, message, exc=None, elem_id=None, view_id=None, label=None, extra=None):
        self._record(self._payload("ERROR", phase, callsite, message, exc, elem_id, view_id, label, extra))

    @staticmethod
    def format_event(ev):
        """Single trace line, e.g. '[ERROR] preconditions/load_family: Cannot load family'."""
        line = "[{0}] {1}/{2}: {3}".format(ev.get("level"), ev.get("phase"), ev.get("callsite"), ev.get("message"))
        if ev.get("label"):
            line += " <{0}>".format(ev["label"])
        if ev.get("exc_type"):
            line += " ({0}: {1})".format(ev["exc_type"], ev.get("exc_message"))
        return line

    def count(self, level=None, phase=None):
        """Total recorded events (including dropped ones) matching level/phase."""
        total = 0
        for key, n in self.counts.items():
            lvl, ph = key.split("|")[:2]
            if level is not None and lvl != level:
                continue
            if phase is not None and ph != phase:
                continue
            total += n
        return total

    def has_errors(self):
        return self.count(level="ERROR") > 0

    def events_for(self, level=None, phase=None):
        return [
            e for e in self.events
            if (level is None or e.get("level") == level) and (phase is None or e.get("phase") == phase)
        ]

    def to_dict(self):
        return {
            "max_events": self.max_events,
            "num_events": len(self.events),
            "dropped_events": self.dropped_events,
            "counts": dict(self.counts),
            "events": list(self.events),
        }
