"""
Version information for the SmartWallet SDK.

Installed copies report the distribution metadata; a source checkout falls
back to the ``[project]`` table of its pyproject.toml.
"""
import importlib.metadata
import pathlib
from typing import Optional

import tomli

DISTRIBUTION = "smartwallet-sdk"
UNKNOWN_VERSION = "0.0.0+unknown"
PYPROJECT = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"


def version_from_pyproject(path: pathlib.Path) -> Optional[str]:
    """Project version declared in a pyproject.toml, or None if unavailable."""
    try:
        with path.open("rb") as f:
            project = tomli.load(f).get("project", {})
    except (OSError, tomli.TOMLDecodeError):
        return None
    version = project.get("version")
    return version if isinstance(version, str) else None


def get_version(pyproject: pathlib.Path = PYPROJECT) -> str:
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return version_from_pyproject(pyproject) or UNKNOWN_VERSION


__version__ = get_version()
