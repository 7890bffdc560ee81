from __future__ import annotations

from functools import lru_cache
from importlib import metadata
from importlib.metadata import PackageNotFoundError
from pathlib import Path
import re
from typing import Optional

import tomllib


@lru_cache(maxsize=1)
def get_version() -> str:
    """Return the installed annoview version string."""
    version = _version_from_metadata() or _version_from_pyproject()
    return version or "Unknown"


def _version_from_metadata() -> Optional[str]:
    try:
        return metadata.version("annoview")
    except PackageNotFoundError:
        return None


def _version_from_pyproject() -> Optional[str]:
    current = Path(__file__).resolve()
    for ancestor in current.parents:
        candidate = ancestor / "pyproject.toml"
        if candidate.exists():
            return _read_version_from_pyproject(candidate)
    return None


def _read_version_from_pyproject(pyproject_path: Path) -> Optional[str]:
    try:
        with pyproject_path.open("rb") as fh:
            data = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError):
        data = None
    if isinstance(data, dict):
        version = data.get("project", {}).get("version")
        if isinstance(version, str):
            return version

    try:
        contents = pyproject_path.read_text(encoding="utf-8")
    except OSError:
        return None
    match = re.search(r'(?m)^\s*version\s*=\s*"([^"]+)"', contents)
    return match.group(1) if match else None
