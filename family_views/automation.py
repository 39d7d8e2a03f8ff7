"""
Automation-ready event wiring.

The host raises a "ready" notification carrying an application and a
document; the handler answers with a success flag. Registration is explicit:
register_ready_handler() returns a teardown callable, and
GenerateViewsApplication keeps that teardown for on_shutdown(). No module
level subscription happens on import.
"""

from .config import Config
from .core.diagnostics import Diagnostics
from .pipeline import generate_views

STARTUP_SUCCEEDED = "Succeeded"
STARTUP_FAILED = "Failed"


class ReadyEventArgs(object):
    """Payload of one ready notification. Handlers set .succeeded."""

    def __init__(self, app, document):
        self.app = app
        self.document = document
        self.succeeded = False


class AutomationBridge(object):
    """Explicit ready-event source.

    Example:
        >>> bridge = AutomationBridge()
        >>> teardown = register_ready_handler(bridge, lambda s, e: setattr(e, "succeeded", True))
        >>> bridge.notify(None, None).succeeded
        True
        >>> teardown()
        >>> bridge.handler_count()
        0
    """

    def __init__(self):
        self._handlers = []

    def subscribe(self, handler):
        if not callable(handler):
            raise TypeError("handler must be callable")
        self._handlers.append(handler)

    def unsubscribe(self, handler):
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def handler_count(self):
        return len(self._handlers)

    def notify(self, app, document):
        """Deliver one ready notification to every subscriber, in subscription order."""
        args = ReadyEventArgs(app, document)
        for handler in list(self._handlers):
            handler(self, args)
        return args


def register_ready_handler(bridge, callback):
    """Subscribe callback(sender, args) on bridge; returns a teardown()."""
    bridge.subscribe(callback)
    state = {"done": False}

    def teardown():
        if state["done"]:
            return
        state["done"] = True
        bridge.unsubscribe(callback)

    return teardown


class GenerateViewsApplication(object):
    """Startup/shutdown lifecycle around generate_views().

    Host failures never escape the handler: they are recorded in diag and
    reported as succeeded=False, since the host only reads the flag.
    """

    def __init__(self, config=None, diag=None):
        self.config = config or Config()
        self.diag = diag or Diagnostics(max_events=self.config.max_diag_events, echo=self.config.verbose)
        self.last_result = None
        self._teardown = None

    def on_startup(self, bridge):
        if self._teardown is not None:
            return STARTUP_FAILED
        self._teardown = register_ready_handler(bridge, self.handle_ready)
        return STARTUP_SUCCEEDED

    def handle_ready(self, sender, args):
        try:
            self.last_result = generate_views(args.app, args.document, self.config, self.diag)
            args.succeeded = bool(self.last_result)
        except Exception as e:
            self.diag.error(
                phase="automation",
                callsite="handle_ready",
                message="Run aborted by host failure",
                exc=e,
            )
            self.last_result = None
            args.succeeded = False

    def on_shutdown(self):
        if self._teardown is not None:
            self._teardown()
            self._teardown = None
        return STARTUP_SUCCEEDED
