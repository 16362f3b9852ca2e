"""Jinja2 filters used by the stub templates."""
