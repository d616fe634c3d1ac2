# src/webforge/core/utils/path_utils.py
from typing import Optional

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and project paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_package_root() -> Path:
        """Returns the directory of the installed 'webforge' package."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        """Default configuration bundled with the package."""
        return PathUtils.get_package_root() / "settings.json"

    # --- Project specific paths ---

    @staticmethod
    def resolve_project_root(root: Optional[str] = None) -> Path:
        """
        Returns the absolute root of the analyzed project: the given directory,
        or the current working directory.
        """
        return Path(root).expanduser().resolve() if root else Path.cwd().resolve()

    @staticmethod
    def get_project_overrides_file(project_root: Path) -> Path:
        """
        Returns the per-project configuration file.
        (e.g., /path/to/site/.webforge.json)
        """
        return Path(project_root) / ".webforge.json"

    @staticmethod
    def get_export_path(filename: str, project_root: Path) -> Path:
        """Relative export names land in the project root."""
        path = Path(filename).expanduser()
        return path if path.is_absolute() else Path(project_root) / path
