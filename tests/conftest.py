# tests/conftest.py
import pytest

from site_analyzer.core import AnalysisContext
from site_analyzer.dom.builder import DOMBuilder
from site_analyzer.services.route_table_service import RouteTableService
from site_analyzer.settings import AnalyzerSettings


@pytest.fixture
def parse():
    """Parses a markup string into a ParsedDocument: parse(text, file=..., route=...)."""
    builder = DOMBuilder()

    def _parse(text, file="page.astro", route="/page"):
        return builder.parse_markup(text, file=file, route=route)

    return _parse


@pytest.fixture
def settings(tmp_path):
    return AnalyzerSettings(project_root=tmp_path)


@pytest.fixture
def make_context(settings):
    """Builds an AnalysisContext from page file paths (relative to the pages dir)."""
    def _make(page_paths=(), components=None):
        route_table = RouteTableService().build(page_paths)
        return AnalysisContext(settings, route_table, components or [])

    return _make


@pytest.fixture
def site(tmp_path):
    """
    Writes files below <tmp>/src/pages (or any other relative dir) and
    returns the project root.
    """
    def _write(files, base="src/pages"):
        for rel, content in files.items():
            path = tmp_path / base / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _write
