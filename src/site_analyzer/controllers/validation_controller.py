import logging
import time
from typing import Callable, Dict, List, Optional

from site_analyzer.core import AnalysisContext, AnalyzerDefinition
from site_analyzer.dom.builder import DOMBuilder
from site_analyzer.dom.models import ParsedDocument
from site_analyzer.managers.report_manager import ReportManager
from site_analyzer.model import AnalyzerOutcome, AnalyzerReport, SourceDocument, ValidationRunResult
from site_analyzer.registry import AnalyzerRegistry
from site_analyzer.services.page_source_service import PageSourceService
from site_analyzer.services.route_table_service import RouteTable, RouteTableService
from site_analyzer.settings import AnalyzerSettings

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class ValidationController:
    """
    Orchestrates an analysis run: loads and parses the sources once, builds
    the route table, runs the analyzers one after another and persists one
    JSON report per analyzer.
    """

    def __init__(self, settings: AnalyzerSettings, report_manager: Optional[ReportManager] = None,
                 write_reports: bool = True):
        self.settings = settings
        self.builder = DOMBuilder()
        self.report_manager = report_manager or ReportManager(settings.project_root)
        self.write_reports = write_reports

        self.page_sources = PageSourceService(
            settings.pages_path, settings.page_extension, settings.exclude_prefix, settings.index_name
        )
        self.component_sources = PageSourceService(
            settings.components_path, settings.page_extension, exclude_prefix="", as_pages=False
        )
        self.route_service = RouteTableService(settings.page_extension, settings.index_name)

        # Parse cache, filled by load()
        self.pages: List[ParsedDocument] = []
        self.components: List[ParsedDocument] = []
        self.route_table: RouteTable = RouteTable([])
        self._loaded = False

    def load(self, progress_callback: Optional[ProgressCallback] = None) -> None:
        """Reads and parses every page and component file exactly once."""
        page_docs = self.page_sources.load_documents()
        component_docs = self.component_sources.load_documents()

        self.route_table = self.route_service.build(d.relative_path for d in page_docs)
        logger.info(f"Mapped {len(self.route_table)} routes from {self.settings.pages_dir}")

        total = len(page_docs) + len(component_docs)
        parsed = self._parse_all(page_docs + component_docs, total, progress_callback)
        self.pages = parsed[:len(page_docs)]
        self.components = parsed[len(page_docs):]
        self._loaded = True

    def _parse_all(self, sources: List[SourceDocument], total: int,
                   progress_callback: Optional[ProgressCallback]) -> List[ParsedDocument]:
        parsed = []
        for i, source in enumerate(sources):
            parsed.append(self.builder.parse_doc(source))
            if progress_callback:
                progress_callback(i + 1, total)
        return parsed

    @property
    def context(self) -> AnalysisContext:
        return AnalysisContext(self.settings, self.route_table, self.components)

    def run_analyzer(self, defn: AnalyzerDefinition) -> AnalyzerOutcome:
        """
        Runs one analyzer over the cached documents. A crash is contained and
        turned into a failed outcome so the remaining analyzers still run.
        """
        if not self._loaded:
            self.load()

        try:
            report: AnalyzerReport = defn.analyze(self.pages, self.context)
        except Exception as e:
            logger.error(f"Analyzer '{defn.key}' failed: {e}", exc_info=True)
            return AnalyzerOutcome(
                analyzer=defn.key, label=defn.label, critical=defn.critical, exit_code=1, error=str(e)
            )

        report_path = None
        if self.write_reports:
            path = self.settings.report_path(defn.key, defn.report_file)
            report_path = self.report_manager.save_report(report, path)

        return AnalyzerOutcome(
            analyzer=defn.key,
            label=defn.label,
            critical=defn.critical,
            exit_code=defn.exit_code_for(report),
            report=report,
            report_path=report_path,
        )

    def run(self, keys: Optional[List[str]] = None,
            on_outcome: Optional[Callable[[AnalyzerOutcome], None]] = None) -> ValidationRunResult:
        """
        Runs the analyzers (all of them, or the given keys) in their fixed order.
        `on_outcome` is called after each analyzer, e.g. to print its report.
        """
        definitions = self.select(keys)
        result = ValidationRunResult()
        start = time.perf_counter()

        for defn in definitions:
            outcome = self.run_analyzer(defn)
            result.outcomes.append(outcome)
            if on_outcome:
                on_outcome(outcome)

        result.duration = time.perf_counter() - start
        return result

    @staticmethod
    def select(keys: Optional[List[str]] = None) -> List[AnalyzerDefinition]:
        definitions = AnalyzerRegistry.get_all()
        if not keys:
            return definitions

        by_key: Dict[str, AnalyzerDefinition] = {d.key: d for d in definitions}
        unknown = [k for k in keys if k not in by_key]
        if unknown:
            raise KeyError(f"Unknown analyzer(s): {', '.join(unknown)}")
        return [d for d in definitions if d.key in keys]
