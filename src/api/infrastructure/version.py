"""Application version reported in startup logs and the OpenAPI document.

An installed distribution answers from its metadata. A source checkout
without an install reads ``[project].version`` from the root pyproject.toml.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "aethex-api"

# src/api/infrastructure/version.py -> repository root
PYPROJECT_PATH = Path(__file__).resolve().parents[3] / "pyproject.toml"


def _version_from_pyproject(path: Path = PYPROJECT_PATH) -> str:
    with path.open("rb") as f:
        return tomllib.load(f)["project"]["version"]


def get_version() -> str:
    """Return the running aethex-api version, e.g. ``"0.1.0"``."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return _version_from_pyproject()


__version__ = get_version()
