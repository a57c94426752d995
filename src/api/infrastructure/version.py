"""Version of the Security Groups API.

Installed distributions report their package metadata; a source checkout
without an install reads ``pyproject.toml`` at the repository root.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "security-groups-api"

# src/api/infrastructure/version.py -> repository root
_PYPROJECT = Path(__file__).resolve().parents[3] / "pyproject.toml"


def get_version() -> str:
    """Return the application version, e.g. ``"0.1.0"``."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        with _PYPROJECT.open("rb") as f:
            return tomllib.load(f)["project"]["version"]


__version__ = get_version()
