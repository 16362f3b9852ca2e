"""Test fixtures for datapackager.

Provides a helper that lays out a complete data package on disk so unit and
integration tests can build it.

Sample processing scripts:
- TABLE_SCRIPT: creates `tbl`
- SUMMARY_SCRIPT: reads `tbl` from earlier units (ENVS) and creates `summary`
- FAILING_SCRIPT: raises before defining anything
"""

from pathlib import Path
from typing import Any

import yaml

TABLE_SCRIPT = """\
import random

rng = random.Random(42)
tbl = {"value": [rng.randint(1, 10) for _ in range(20)], "label": "sample"}
scratch = "not kept"
"""

SUMMARY_SCRIPT = """\
values = ENVS["tbl"]["value"]
summary = {"n": len(values), "total": sum(values)}
"""

FAILING_SCRIPT = """\
raise RuntimeError("raw data unreadable")
"""


def write_package(
    root: Path,
    scripts: dict[str, str],
    objects: list[str],
    name: str = "testpkg",
    data_version: str = "0.1.0",
    disabled: list[str] | None = None,
    build: dict[str, Any] | None = None,
    render_root: str | None = None,
) -> Path:
    """Write a data package source tree.

    Args:
        root: Directory to create the package in
        scripts: File name to script source, in execution order
        objects: Allowlisted object names
        name: Package name
        data_version: Initial data version in the manifest
        disabled: Scripts to mark as disabled
        build: Optional build: section of the config
        render_root: Optional render_root

    Returns:
        Path to the package root
    """
    package_path = root / name
    for d in ("data-raw", "data", "docs", "inst/extdata"):
        (package_path / d).mkdir(parents=True, exist_ok=True)

    for file_name, source in scripts.items():
        (package_path / "data-raw" / file_name).write_text(source, encoding="utf-8")

    disabled = disabled or []
    configuration: dict[str, Any] = {
        "files": {f: {"enabled": f not in disabled} for f in scripts},
        "objects": objects,
    }
    if render_root is not None:
        configuration["render_root"] = render_root

    config: dict[str, Any] = {"configuration": configuration}
    if build is not None:
        config["build"] = build

    (package_path / "datapackager.yml").write_text(
        yaml.safe_dump(config, sort_keys=False), encoding="utf-8"
    )
    (package_path / "DESCRIPTION.yml").write_text(
        yaml.safe_dump({"package": name, "data_version": data_version, "title": "Test data"}, sort_keys=False),
        encoding="utf-8",
    )
    return package_path


def snapshot(path: Path) -> dict[str, bytes]:
    """Map every file under path (relative name) to its bytes."""
    return {
        str(p.relative_to(path)): p.read_bytes()
        for p in sorted(path.rglob("*"))
        if p.is_file()
    }
