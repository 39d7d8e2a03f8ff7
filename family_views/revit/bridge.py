"""
Design Automation bridge for Revit.

Forwards DesignAutomationBridge.DesignAutomationReadyEvent to an
AutomationBridge, so the same GenerateViewsApplication runs in the cloud
engine and against the in-memory host.

Usage (pythonnet add-in startup):
    from family_views.automation import GenerateViewsApplication
    from family_views.revit.bridge import RevitAutomationBridge

    bridge = RevitAutomationBridge()
    bridge.attach()
    app = GenerateViewsApplication()
    app.on_startup(bridge)
    ...
    app.on_shutdown()
    bridge.detach()
"""

from ..automation import AutomationBridge
from .adapter import RevitDocument


class RevitAutomationBridge(AutomationBridge):
    def __init__(self, diag=None):
        super(RevitAutomationBridge, self).__init__()
        self.diag = diag
        self._attached = False

    def attach(self):
        if self._attached:
            return
        from DesignAutomationFramework import DesignAutomationBridge
        DesignAutomationBridge.DesignAutomationReadyEvent += self._on_ready
        self._attached = True

    def detach(self):
        if not self._attached:
            return
        from DesignAutomationFramework import DesignAutomationBridge
        DesignAutomationBridge.DesignAutomationReadyEvent -= self._on_ready
        self._attached = False

    def _on_ready(self, sender, e):
        data = e.DesignAutomationData
        args = self.notify(data.RevitApp, RevitDocument(data.RevitDoc, diag=self.diag))
        e.Succeeded = bool(args.succeeded)
