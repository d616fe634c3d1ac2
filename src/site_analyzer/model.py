from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field, field_validator
import json

# Severity labels, ordered from most to least important
SEVERITY_ORDER = ["CRITICAL", "WARNING", "INFO"]


class SourceDocument(BaseModel):
    """
    A single page (or component) source file as read from disk.
    Identity is the path relative to the directory it was discovered in.
    """
    model_config = ConfigDict(frozen=True)

    path: Path
    relative_path: str
    text: str
    route: Optional[str] = None  # None for component files


class Issue(BaseModel):
    """
    Data model representing a single finding of one analyzer.
    """
    model_config = ConfigDict(frozen=True)

    analyzer: str  # e.g. 'headings', 'links'
    code: str  # e.g. 'missing-h1', 'broken-link'
    severity: str  # 'CRITICAL', 'WARNING', 'INFO'

    message: str  # Human-readable description of the issue
    file: str = ""
    route: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('severity', mode='before')
    @classmethod
    def normalize_severity(cls, v: Any) -> str:
        """Accepts lowercase labels and rejects anything outside SEVERITY_ORDER."""
        value = str(v).upper()
        if value not in SEVERITY_ORDER:
            raise ValueError(f"Unknown severity '{v}'")
        return value

    @field_validator('details', mode='before')
    @classmethod
    def parse_details(cls, v: Any) -> Dict[str, Any]:
        """
        Ensures the 'details' field is a dictionary.
        Automatically parses JSON strings (e.g. when re-loading an exported report).
        """
        if isinstance(v, str):
            try:
                return json.loads(v)
            except (json.JSONDecodeError, TypeError):
                return {}
        return v or {}


class AnalyzerReport(BaseModel):
    """
    Result of one analyzer over the whole corpus: summary counters,
    ordered issues and analyzer-specific metrics.
    """
    analyzer: str
    label: str
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    summary: Dict[str, Any] = Field(default_factory=dict)
    issues: List[Issue] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)

    def issues_with_code(self, code: str) -> List[Issue]:
        return [issue for issue in self.issues if issue.code == code]

    @property
    def pages_with_issues(self) -> int:
        return len({issue.file for issue in self.issues})


class AnalyzerOutcome(BaseModel):
    """Process-level outcome of a single analyzer inside a validation run."""
    analyzer: str
    label: str
    critical: bool
    exit_code: int
    report: Optional[AnalyzerReport] = None
    report_path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.exit_code != 0

    @property
    def status(self) -> str:
        """'pass', 'warn' (non-critical failure) or 'fail' (critical failure)."""
        if not self.failed:
            return "pass"
        return "fail" if self.critical else "warn"


class ValidationRunResult(BaseModel):
    """Aggregate of all analyzer outcomes of one pipeline run."""
    outcomes: List[AnalyzerOutcome] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration: float = 0.0

    @property
    def critical_failures(self) -> List[AnalyzerOutcome]:
        return [o for o in self.outcomes if o.critical and o.failed]

    @property
    def warnings(self) -> List[AnalyzerOutcome]:
        return [o for o in self.outcomes if not o.critical and o.failed]

    @property
    def passed(self) -> bool:
        return not self.critical_failures

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def report_for(self, analyzer: str) -> Optional[AnalyzerReport]:
        for outcome in self.outcomes:
            if outcome.analyzer == analyzer:
                return outcome.report
        return None
