"""
YAML Property Source.

Loads ``application.yaml`` and, for an active profile,
``application-<profile>.yaml`` on top of it, flattening nested mappings
into dotted keys.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import structlog
import yaml

from .exceptions import PropertySourceError

logger = structlog.get_logger(__name__)

FILE_PREFIX = "application"
EXTENSIONS = (".yaml", ".yml")


def flatten_properties(data: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """
    Flatten nested mappings into dotted keys.

    Args:
        data: Possibly nested mapping.
        prefix: Key prefix for recursion.

    Returns:
        Flat mapping sorted by key.
    """
    result: Dict[str, Any] = {}

    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            result.update(flatten_properties(value, full_key))
        else:
            result[full_key] = value

    return dict(sorted(result.items()))


def _find_file(directory: Path, stem: str) -> Optional[Path]:
    for ext in EXTENSIONS:
        path = directory / f"{stem}{ext}"
        if path.is_file():
            return path
    return None


def _read_file(path: Path) -> Dict[str, Any]:
    """Read one YAML property file into a flat mapping."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PropertySourceError(
            f"Invalid YAML in {path}: {e}",
            context={"path": str(path)},
        ) from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise PropertySourceError(
            f"Property file {path} must contain a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )

    return flatten_properties(data)


def load_properties(directory: Union[str, Path], profile: str = "") -> Dict[str, Any]:
    """
    Load properties for a profile.

    Args:
        directory: Directory holding the application files.
        profile: Active profile; its file overrides the base file.

    Returns:
        Flat property mapping. Missing files contribute nothing.

    Raises:
        PropertySourceError: If a file is not valid YAML or not a mapping.
    """
    directory = Path(directory)
    stems = [FILE_PREFIX]
    if profile:
        stems.append(f"{FILE_PREFIX}-{profile}")

    result: Dict[str, Any] = {}

    for stem in stems:
        path = _find_file(directory, stem)
        if path is None:
            continue

        logger.info(f"Loading properties from {path}")
        result.update(_read_file(path))

    return dict(sorted(result.items()))
