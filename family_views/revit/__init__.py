"""
Revit-specific integrations.

Modules:
- adapter: RevitDocument, the HostDocument contract over Autodesk.Revit.DB
- bridge: Design Automation ready-event forwarding
- safe_api: best-effort host reads with diagnostics

Autodesk / DesignAutomationFramework are only imported when used.
"""

from .adapter import RevitDocument
from .safe_api import safe_call

__all__ = ["RevitDocument", "safe_call"]
