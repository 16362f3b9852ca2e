"""Datapackager utility modules.

- logging: Standardized logging with human/verbose/JSON modes
- preflight: Package validation before a build
"""

from datapackager.utils.logging import get_logger, setup_logging
from datapackager.utils.preflight import PreflightChecker, PreflightResult

__all__ = [
    "get_logger",
    "setup_logging",
    "PreflightChecker",
    "PreflightResult",
]
