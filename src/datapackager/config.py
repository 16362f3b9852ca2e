"""Datapackager configuration system.

Configuration is YAML-based (datapackager.yml at the package root) with
minimal CLI overrides (--strict-objects, --lenient-version).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. <package>/datapackager.yml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from datapackager.errors import ConfigurationError
from datapackager.models import ProcessingUnit
from datapackager.models.package import CONFIG_FILE

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class BuildConfig:
    """What to build.

    Attributes:
        units: Processing units in declaration order
        objects: Allowlisted object names to keep from the units
        render_root: Working directory for unit execution (relative to the
            package root unless absolute)
    """

    units: list[ProcessingUnit] = field(default_factory=list)
    objects: list[str] = field(default_factory=list)
    render_root: str | None = None

    @property
    def enabled_units(self) -> list[ProcessingUnit]:
        """Enabled units in execution order."""
        return sorted((u for u in self.units if u.enabled), key=lambda u: u.position)

    def validate(self) -> None:
        """Validate the build configuration.

        Raises:
            ConfigurationError: If no unit is enabled or no object is listed
        """
        if not self.enabled_units:
            raise ConfigurationError("No files enabled for processing!")
        if not self.objects:
            raise ConfigurationError("You must specify at least one data object.")


@dataclass
class BuildSettings:
    """How strictly to build.

    Attributes:
        strict_objects: Fail when an allowlisted object is never produced
        strict_version: Fail when data changed and the data version was also
            bumped by hand (otherwise keep the hand-set version)
    """

    strict_objects: bool = False
    strict_version: bool = True


@dataclass
class DataPackagerConfig:
    """Top-level datapackager configuration.

    Attributes:
        configuration: Units, objects and render root
        build: Strictness settings
    """

    configuration: BuildConfig = field(default_factory=BuildConfig)
    build: BuildSettings = field(default_factory=BuildSettings)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${RAW_DATA_ROOT} -> value of RAW_DATA_ROOT

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        # Pattern: ${VAR_NAME}
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(package_path: Path | None = None) -> Path | None:
    """Find the configuration file of a package.

    Args:
        package_path: Package root (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if package_path is None:
        package_path = Path.cwd()

    candidate = package_path.resolve() / CONFIG_FILE
    if candidate.exists():
        return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _parse_units(files: Any) -> list[ProcessingUnit]:
    """Parse the files: mapping into processing units.

    Accepts either a mapping of file name to {enabled: bool} or a plain list
    of file names (all enabled).
    """
    if isinstance(files, list):
        files = {name: {"enabled": True} for name in files}

    if not isinstance(files, dict) or not files:
        raise ConfigurationError("YAML 'files:' entry must list at least one file")

    units: list[ProcessingUnit] = []
    for position, (identifier, options) in enumerate(files.items()):
        if options is None:
            options = {}
        if not isinstance(options, dict):
            raise ConfigurationError(f"Invalid options for file {identifier!r}")
        enabled = options.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ConfigurationError(f"'enabled' for file {identifier!r} must be true or false")
        units.append(ProcessingUnit(identifier=str(identifier), enabled=enabled, position=position))

    return units


def _parse_objects(objects: Any) -> list[str]:
    if isinstance(objects, str):
        objects = [objects]
    if not isinstance(objects, list):
        raise ConfigurationError("YAML 'objects:' entry must be a list of names")

    names: list[str] = []
    for name in objects:
        name = str(name)
        if not name.isidentifier():
            raise ConfigurationError(f"Invalid object name: {name!r}")
        if name not in names:
            names.append(name)
    return names


def _parse_build_settings(build_data: Any) -> BuildSettings:
    if build_data is None:
        build_data = {}
    if not isinstance(build_data, dict):
        raise ConfigurationError("YAML 'build:' entry must be a mapping")

    flags: dict[str, bool] = {}
    for key, default in (("strict_objects", False), ("strict_version", True)):
        value = build_data.get(key, default)
        if not isinstance(value, bool):
            raise ConfigurationError(f"'build.{key}' must be true or false")
        flags[key] = value
    return BuildSettings(**flags)


def load_config_from_dict(data: dict[str, Any]) -> DataPackagerConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        DataPackagerConfig instance

    Raises:
        ConfigurationError: If required entries are missing or malformed
    """
    # Apply environment variable substitution
    try:
        data = substitute_env_vars(data)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    if not isinstance(data, dict) or "configuration" not in data:
        raise ConfigurationError("YAML is missing 'configuration:' entry")

    conf_data = data["configuration"]
    if not isinstance(conf_data, dict) or not {"files", "objects"} <= conf_data.keys():
        raise ConfigurationError("YAML is missing files: and objects: entries")

    config = DataPackagerConfig()
    config.configuration = BuildConfig(
        units=_parse_units(conf_data["files"]),
        objects=_parse_objects(conf_data["objects"]),
        render_root=conf_data.get("render_root"),
    )

    # Build settings
    if "build" in data:
        config.build = _parse_build_settings(data["build"])

    config.configuration.validate()
    return config


def load_config(
    config_path: Path | None = None,
    package_path: Path | None = None,
) -> DataPackagerConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        package_path: Package root to search when config_path is not given

    Returns:
        DataPackagerConfig instance

    Raises:
        ConfigurationError: If no config file is found or it is invalid
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")
        found_path = config_path
    else:
        found_path = find_config_file(package_path)
        if found_path is None:
            raise ConfigurationError(
                f"Yaml configuration file not found at {package_path or Path.cwd()}"
            )

    try:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed YAML in {found_path}: {e}") from e

    config = load_config_from_dict(data)
    config._config_path = found_path
    return config


def create_default_config(
    code_files: list[str] | None = None,
    objects: list[str] | None = None,
) -> str:
    """Create default configuration YAML content.

    Args:
        code_files: Processing unit file names (relative to data-raw)
        objects: Object names the units create

    Returns:
        YAML string with configuration and comments
    """
    body = yaml.safe_dump(
        {
            "configuration": {
                "files": {name: {"enabled": True} for name in code_files or []},
                "objects": list(objects or []),
                "render_root": ".",
            }
        },
        default_flow_style=False,
        sort_keys=False,
    )

    return f'''# Datapackager build configuration
# files: processing scripts under data-raw/, run in the order listed
# objects: names created by those scripts to keep, fingerprint and document
{body}
# Build strictness
build:
  strict_objects: false  # fail if a listed object is never created
  strict_version: true   # fail if data changed AND data_version was bumped by hand
'''
