"""Python script renderer.

Runs a ``.py`` processing unit with runpy. The script sees the objects merged
from earlier units as the read-only mapping ``ENVS``; every top-level name it
defines (other than dunder names and imported modules) ends up in the unit's
namespace.
"""

import contextlib
import logging
import runpy
import types
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from datapackager.render.base import RenderOutcome, UnitRenderer

logger = logging.getLogger(__name__)

MERGED_VIEW_NAME = "ENVS"


class ScriptRenderer(UnitRenderer):
    """Executes Python processing scripts."""

    name = "python"
    suffixes = (".py",)

    def execute(
        self,
        unit_path: Path,
        namespace: dict[str, Any],
        working_directory: Path,
        merged: Mapping[str, Any],
    ) -> RenderOutcome:
        """Run a Python script into namespace."""
        init_globals = {MERGED_VIEW_NAME: merged}

        try:
            with contextlib.chdir(working_directory):
                result = runpy.run_path(
                    str(unit_path),
                    init_globals=init_globals,
                    run_name="__datapackager__",
                )
        except SystemExit as e:
            # A unit that exits never finished defining its objects
            return RenderOutcome.failed(e, f"{unit_path.name} called sys.exit({e.code})")
        except Exception as e:
            logger.debug("Unit %s raised", unit_path.name, exc_info=True)
            return RenderOutcome.failed(e)

        for key, value in result.items():
            if key.startswith("__") or key == MERGED_VIEW_NAME:
                continue
            if isinstance(value, types.ModuleType):
                continue
            namespace[key] = value

        return RenderOutcome.ok()
