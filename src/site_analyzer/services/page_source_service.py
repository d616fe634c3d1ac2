# src/site_analyzer/services/page_source_service.py
import logging
import os
from pathlib import Path
from typing import List, Optional

from ..model import SourceDocument
from .route_table_service import route_for_path

logger = logging.getLogger(__name__)


class PageSourceError(Exception):
    """Raised when an existing source directory cannot be enumerated."""


class PageSourceService:
    """
    Discovers and reads page (or component) source files below one directory.

    Files are matched on extension; files whose name starts with the
    exclusion prefix (private partials such as `_layout.astro`) are skipped.
    """

    def __init__(self, root: Path, extension: str = ".astro", exclude_prefix: str = "_",
                 index_name: str = "index", as_pages: bool = True):
        self.root = Path(root)
        self.extension = extension
        self.exclude_prefix = exclude_prefix
        self.index_name = index_name
        # Components have no route of their own
        self.as_pages = as_pages

    def find_files(self) -> List[Path]:
        """
        Recursively lists matching files as absolute paths, sorted for a stable order.
        A missing root yields an empty list and a warning. An unreadable root
        raises PageSourceError; unreadable subdirectories are skipped.
        """
        if not self.root.is_dir():
            logger.warning(f"Source directory not found: {self.root}. Nothing to analyze.")
            return []

        root = self.root.resolve()

        def on_error(err: OSError):
            if err.filename is None or Path(err.filename).resolve() == root:
                raise PageSourceError(f"Could not enumerate {err.filename or self.root}: {err.strerror}") from err
            logger.warning(f"Skipping unreadable directory {err.filename}: {err.strerror}")

        files = []
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=on_error):
            dirnames.sort()
            for name in filenames:
                if not name.endswith(self.extension):
                    continue
                if self.exclude_prefix and name.startswith(self.exclude_prefix):
                    continue
                files.append((Path(dirpath) / name).resolve())
        return sorted(files)

    def relative_path(self, path: Path) -> str:
        """Path relative to the source root, always with forward slashes."""
        try:
            return Path(path).resolve().relative_to(self.root.resolve()).as_posix()
        except ValueError:
            return Path(path).as_posix()

    def read_file(self, path: Path) -> Optional[str]:
        """Reads a file as UTF-8. Returns None (and logs) when it cannot be read."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Error reading file {path}: {e}")
            return None

    def load_documents(self) -> List[SourceDocument]:
        """Loads every discovered file. Unreadable files are skipped."""
        documents = []
        for path in self.find_files():
            text = self.read_file(path)
            if text is None:
                continue

            relative = self.relative_path(path)
            route = route_for_path(relative, self.extension, self.index_name) if self.as_pages else None
            documents.append(SourceDocument(path=path, relative_path=relative, text=text, route=route))

        logger.debug(f"Loaded {len(documents)} source documents from {self.root}")
        return documents
