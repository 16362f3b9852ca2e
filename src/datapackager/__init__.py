"""Datapackager - Reproducible data package builder.

Datapackager runs a configured sequence of processing scripts against raw
data, keeps the data objects they create, fingerprints those objects, and
tracks a data version that is bumped automatically when the data change.
Documentation stubs are generated for new objects without touching
documentation that has already been written.

Core principles:
- Reproducibility: Same inputs produce the same fingerprints and version
- No partial builds: A failed build writes nothing
- Human documentation persists: Generated stubs never replace edited ones
"""

__version__ = "0.1.0"
__author__ = "Datapackager Contributors"
