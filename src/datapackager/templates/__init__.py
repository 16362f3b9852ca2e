"""Datapackager stub templates (deterministic output).

This module provides Jinja2-based rendering of documentation stubs.
Templates produce identical output for identical input.
"""

from datapackager.templates.renderer import StubRenderer

__all__ = ["StubRenderer"]
