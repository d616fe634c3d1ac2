import logging
from collections import defaultdict
from typing import Dict, List

from site_analyzer.model import AnalyzerOutcome, AnalyzerReport, Issue, ValidationRunResult, SEVERITY_ORDER

logger = logging.getLogger(__name__)

WIDTH = 70
SEVERITY_ICONS = {"CRITICAL": "❌", "WARNING": "⚠️ ", "INFO": "💡"}
STATUS_ICONS = {"pass": "✅", "warn": "⚠️ ", "fail": "❌"}


class ReportController:
    """
    Renders analyzer reports and the validation summary to the console.
    """

    def __init__(self, limit: int = 10):
        # Max. issues printed per (severity, code) group
        self.limit = limit

    @staticmethod
    def _group(issues: List[Issue]) -> Dict[str, Dict[str, List[Issue]]]:
        grouped: Dict[str, Dict[str, List[Issue]]] = defaultdict(lambda: defaultdict(list))
        for issue in issues:
            grouped[issue.severity][issue.code].append(issue)
        return grouped

    def print_report(self, report: AnalyzerReport) -> None:
        """Prints one report: header, summary counters, then issues by severity and code."""
        print("\n" + "=" * WIDTH)
        print(f"📊 {report.label.upper()} RESULTS")
        print("=" * WIDTH)

        for key, value in report.summary.items():
            print(f"  {key.replace('_', ' ').capitalize():<30} {value}")

        if not report.issues:
            print(f"\n✅ No {report.label.lower()} issues found.")
            return

        grouped = self._group(report.issues)
        for severity in SEVERITY_ORDER:
            codes = grouped.get(severity)
            if not codes:
                continue
            icon = SEVERITY_ICONS[severity]
            for code in sorted(codes):
                items = codes[code]
                print(f"\n{icon} {severity}: {code} ({len(items)})")
                print("─" * WIDTH)
                for issue in items[:self.limit]:
                    print(f"  📄 {issue.file or issue.route}")
                    print(f"     {issue.message}")
                if len(items) > self.limit:
                    print(f"  ... and {len(items) - self.limit} more")

    @staticmethod
    def print_outcome_line(outcome: AnalyzerOutcome) -> None:
        icon = STATUS_ICONS[outcome.status]
        if outcome.status == "pass":
            print(f"{icon} {outcome.label} Check Passed")
        elif outcome.status == "warn":
            print(f"{icon} {outcome.label} Check returned warnings (Non-critical)")
        else:
            print(f"{icon} {outcome.label} Check Failed!")
        if outcome.error:
            print(f"   Error: {outcome.error}")

    def print_run_summary(self, result: ValidationRunResult) -> None:
        print("\n" + "=" * WIDTH)
        print("🛡️  VALIDATION SUMMARY")
        print("=" * WIDTH)
        print(f"{'ANALYZER':<22} | {'CRITICAL':<8} | {'ISSUES':>6} | STATUS")
        print("-" * WIDTH)
        for outcome in result.outcomes:
            issues = len(outcome.report.issues) if outcome.report else "-"
            critical = "yes" if outcome.critical else "no"
            print(f"{outcome.label:<22} | {critical:<8} | {issues:>6} | {outcome.status.upper()}")
        print("-" * WIDTH)
        print(f"Duration: {result.duration:.2f} seconds")

        if result.passed:
            print("✅ All Critical Structure Checks Passed!")
        else:
            print(f"❌ Validation Failed with {len(result.critical_failures)} critical errors.")
        print("=" * WIDTH + "\n")
