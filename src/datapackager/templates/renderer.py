"""Documentation stub rendering.

Renders stub documentation for data objects and for the package itself with
Jinja2 templates shipped in this package. Output is deterministic: the same
object always produces the same stub text.
"""

import logging
from collections.abc import Iterable
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape

from datapackager.renderers.filters import FILTERS

logger = logging.getLogger(__name__)

OBJECT_TEMPLATE = "object_stub.md.j2"
PACKAGE_TEMPLATE = "package_stub.md.j2"


class StubRenderer:
    """Renders documentation stubs from templates.

    Usage:
        renderer = StubRenderer()
        text = renderer.render_object("tbl", tbl, package_name="mypkg")
    """

    def __init__(self) -> None:
        self._env = Environment(
            loader=PackageLoader("datapackager", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters.update(FILTERS)

    def _render(self, template_name: str, **context: Any) -> str:
        try:
            template = self._env.get_template(template_name)
        except Exception as e:
            logger.error("Failed to load template %s: %s", template_name, e)
            raise ValueError(f"Template not found: {template_name}") from e

        return template.render(**context).strip() + "\n"

    def render_object(
        self,
        name: str,
        value: Any,
        package_name: str | None = None,
    ) -> str:
        """Render the stub for one data object.

        Args:
            name: Object name
            value: Object value (inspected for type, size and fields)
            package_name: Package the object belongs to

        Returns:
            Stub text
        """
        return self._render(OBJECT_TEMPLATE, name=name, value=value, package_name=package_name)

    def render_package(self, package_name: str, names: Iterable[str]) -> str:
        """Render the package-level stub listing its data sets."""
        return self._render(PACKAGE_TEMPLATE, package_name=package_name, names=sorted(names))
