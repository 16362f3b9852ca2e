"""Processing unit renderers.

Renderers execute one processing unit into a pipeline-owned namespace.

Renderers:
- ScriptRenderer: Python scripts (.py) executed with runpy
"""

from datapackager.render.base import RenderOutcome, UnitRenderer
from datapackager.render.script import ScriptRenderer

__all__ = [
    "RenderOutcome",
    "ScriptRenderer",
    "UnitRenderer",
]
