import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from site_analyzer.model import AnalyzerReport

logger = logging.getLogger(__name__)


class ReportManager:
    """
    Manages storage/retrieval of analyzer reports as JSON files in the project root.
    """

    def __init__(self, project_root: Path):
        self.project_root = Path(project_root)

    @staticmethod
    def to_payload(report: AnalyzerReport) -> Dict[str, Any]:
        return report.model_dump(mode="json")

    def save_report(self, report: AnalyzerReport, path: Optional[Path] = None) -> Optional[Path]:
        """
        Writes the report. Returns the written path, or None when the file
        could not be written (the error is logged).
        """
        target = Path(path) if path else self.project_root / f"analysis-{report.analyzer}.json"
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding="utf-8") as f:
                json.dump(self.to_payload(report), f, indent=2, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save report '{report.analyzer}' to {target}: {e}")
            return None
        return target

    def load_report(self, path: Path) -> Optional[AnalyzerReport]:
        """Loads a previously written report, None if missing or unreadable."""
        path = Path(path)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return AnalyzerReport.model_validate(json.load(f))
        except Exception as e:
            logger.warning(f"Could not read report {path}: {e}")
            return None
