"""
Family Views: isolated 3D views for every type of a loaded family.

Given a project document and a family definition, the pipeline loads the
family, places one instance per distinct type along X without overlap, and
creates one isometric view per instance whose selection filter hides every
other generated instance. The document's default 3D view is removed last.

Modules:
- config: Config for family path, spacing, labels and transaction names
- core.ids: ElementId newtype and OrderedIdSet
- core.geometry: XYZ and BoundingBoxXYZ
- core.diagnostics: bounded structured run recorder
- host: HostDocument contract and the in-memory element arena
- generator / layout: instance creation and X placement
- synthesizer: views and exclusion filters
- references: default 3D view and 3D template lookup
- pipeline: generate_views(), the full two-transaction run
- automation: ready-event registration with explicit teardown
- revit: Revit adapter, Design Automation bridge, safe_call
- report: JSON/CSV run manifest
- entry_dynamo / cli: Dynamo and command line entry points
"""

__version__ = "1.0.0"

from .config import Config
from .pipeline import generate_views, RunResult

__all__ = ["Config", "generate_views", "RunResult"]
