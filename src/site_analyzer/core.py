from typing import Callable, List, Optional, Set

from .dom.models import ParsedDocument
from .model import AnalyzerReport
from .services.route_table_service import RouteTable
from .settings import AnalyzerSettings


def audit_spec(codes: List[str]):
    """
    Decorator to declare which issue codes an analyze function can emit.
    Facilitates auto-discovery by the AnalyzerRegistry.
    """
    def decorator(func):
        func.defined_codes = codes
        return func
    return decorator


class AnalysisContext:
    """
    Read-only inputs shared by all analyzers of one run.
    """

    def __init__(
            self,
            settings: AnalyzerSettings,
            route_table: Optional[RouteTable] = None,
            components: Optional[List[ParsedDocument]] = None
    ):
        self.settings = settings
        self.route_table = route_table or RouteTable([])
        self.components = components or []


AnalyzeFunc = Callable[[List[ParsedDocument], AnalysisContext], AnalyzerReport]


class AnalyzerDefinition:
    """
    Configuration object binding an analyzer key to its analyze function,
    run order, report file and exit-code behaviour.
    """

    def __init__(
            self,
            key: str,
            label: str,
            order: int,
            analyze: AnalyzeFunc,
            report_file: str,
            critical: bool = False,
            fails_on_issues: bool = False,
            possible_codes: Optional[List[str]] = None
    ):
        self.key = key
        self.label = label
        self.order = order
        self.analyze = analyze
        self.report_file = report_file
        # A failing critical analyzer fails the whole validation run
        self.critical = critical
        # Convention: only these analyzers exit non-zero when they report issues
        self.fails_on_issues = fails_on_issues

        # --- Auto-Discovery of Issue Codes ---
        final_codes: Set[str] = set(possible_codes or [])
        if hasattr(analyze, 'defined_codes'):
            final_codes.update(analyze.defined_codes)
        self.codes = sorted(list(final_codes))

    def exit_code_for(self, report: AnalyzerReport) -> int:
        return 1 if self.fails_on_issues and report.issues else 0

    def __repr__(self) -> str:
        return f"AnalyzerDefinition({self.key!r}, order={self.order}, critical={self.critical})"
