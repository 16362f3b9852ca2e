"""Abstract base class for processing unit renderers.

A renderer executes one processing unit into a namespace that the pipeline
owns. The pipeline only sees the outcome and the names left in the namespace;
how the unit runs is up to the renderer.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass
class RenderOutcome:
    """Result of executing a processing unit.

    Attributes:
        success: Whether the unit ran to completion
        error: Exception raised by the unit, if any
        message: Human-readable failure context
    """

    success: bool
    error: BaseException | None = None
    message: str = ""

    @classmethod
    def ok(cls) -> "RenderOutcome":
        return cls(success=True)

    @classmethod
    def failed(cls, error: BaseException | None = None, message: str = "") -> "RenderOutcome":
        return cls(success=False, error=error, message=message or str(error or ""))


class UnitRenderer(ABC):
    """Interface for executing processing units.

    Attributes:
        name: Renderer identifier
        suffixes: File suffixes this renderer can execute
    """

    name: str = "base"
    suffixes: tuple[str, ...] = ()

    def supports(self, unit_path: Path) -> bool:
        """Return True if this renderer can execute the given file."""
        return unit_path.suffix.lower() in self.suffixes

    @abstractmethod
    def execute(
        self,
        unit_path: Path,
        namespace: dict[str, Any],
        working_directory: Path,
        merged: Mapping[str, Any],
    ) -> RenderOutcome:
        """Run a processing unit.

        This method MUST:
        1. Execute the unit with working_directory as the current directory
        2. Leave every name the unit defined in namespace
        3. Report failure through the outcome rather than raising

        Args:
            unit_path: Absolute path to the unit file
            namespace: Fresh namespace owned by the pipeline for this unit
            working_directory: Directory the unit runs in
            merged: Read-only view of objects produced by earlier units

        Returns:
            RenderOutcome describing success or failure
        """
        pass
