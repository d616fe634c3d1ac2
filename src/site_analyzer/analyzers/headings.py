from typing import List

from ..core import AnalysisContext, AnalyzerDefinition, audit_spec
from ..dom.models import ParsedDocument
from ..model import AnalyzerReport, Issue
from .base import per_document, excerpt

ANALYZER = "headings"
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")


def heading_level(tag: str) -> int:
    """Extract level from tag name (e.g., 'h1' -> 1)."""
    try:
        return int(tag[1])
    except (ValueError, IndexError, TypeError):
        return 0


def check_headings(doc: ParsedDocument) -> List[Issue]:
    """
    Rules:
    - exactly one H1 (missing-h1 / multiple-h1)
    - no forward skip in the hierarchy (H2 -> H4). Going back up is fine,
      and nothing is flagged before the first heading has been seen.
    """
    issues = []

    def add(code: str, severity: str, message: str, **details):
        issues.append(Issue(
            analyzer=ANALYZER, code=code, severity=severity, message=message,
            file=doc.file, route=doc.route, details=details
        ))

    h1_count = len(doc.root.find_all("h1"))
    if h1_count == 0:
        add("missing-h1", "CRITICAL", "Page is missing an H1 heading")
    elif h1_count > 1:
        add("multiple-h1", "CRITICAL", f"Page has {h1_count} H1 headings (should have exactly 1)", count=h1_count)

    current_level = 0
    for heading in doc.root.iter(*HEADING_TAGS):
        level = heading_level(heading.tag)
        if current_level and level > current_level + 1:
            text = excerpt(heading.text)
            add(
                "skipped-level", "WARNING",
                f'Skipped heading level: H{current_level} -> H{level} ("{text}...")',
                from_level=current_level, to_level=level, text=text
            )
        current_level = level

    return issues


@audit_spec(codes=["missing-h1", "multiple-h1", "skipped-level"])
def analyze_headings(documents: List[ParsedDocument], ctx: AnalysisContext) -> AnalyzerReport:
    """Checks the heading outline of every page."""
    issues: List[Issue] = []
    pages = []

    for doc, page_issues in per_document(documents, check_headings, ANALYZER):
        issues.extend(page_issues)
        pages.append({
            "file": doc.file,
            "route": doc.route,
            "heading_count": len(doc.root.find_all(*HEADING_TAGS)),
            "issues": len(page_issues),
        })

    return AnalyzerReport(
        analyzer=ANALYZER,
        label=DEFINITION.label,
        summary={
            "pages_analyzed": len(pages),
            "pages_with_issues": len({i.file for i in issues}),
            "total_issues": len(issues),
            "missing_h1": sum(1 for i in issues if i.code == "missing-h1"),
            "multiple_h1": sum(1 for i in issues if i.code == "multiple-h1"),
            "skipped_levels": sum(1 for i in issues if i.code == "skipped-level"),
        },
        issues=issues,
        details={"pages": pages},
    )


# --- ANALYZER DEFINITION ---
DEFINITION = AnalyzerDefinition(
    key=ANALYZER,
    label="Headings",
    order=10,
    analyze=analyze_headings,
    report_file="analysis-heading-structure.json",
    critical=True,
    fails_on_issues=True,
)
