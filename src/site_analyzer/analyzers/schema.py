from collections import defaultdict
from typing import List

from ..core import AnalysisContext, AnalyzerDefinition, audit_spec
from ..dom.models import ParsedDocument
from ..model import AnalyzerReport, Issue
from ..services.route_table_service import is_dynamic_route
from .base import per_document

ANALYZER = "schema"
ISSUE_TYPES = ["missing-telephone", "missing-faq-schema", "missing-breadcrumb", "missing-rating"]

# At least this many FAQ-like <details> before an FAQPage schema is expected
MIN_FAQ_ITEMS = 2


def count_faq_items(doc: ParsedDocument) -> int:
    """Counts collapsible <details> elements that have a <summary> or mention 'faq'."""
    return sum(
        1 for d in doc.root.iter("details")
        if d.find("summary") is not None or "faq" in d.text.lower()
    )


def check_schema(doc: ParsedDocument) -> List[Issue]:
    """
    Substring checks over the concatenated JSON-LD of one page. Each check is
    independent of the others.
    """
    issues = []
    schema_text = doc.schema_text()

    def add(code: str, severity: str, message: str, **details):
        issues.append(Issue(
            analyzer=ANALYZER, code=code, severity=severity, message=message,
            file=doc.file, route=doc.route, details=details
        ))

    has_local_business = "LocalBusiness" in schema_text

    if has_local_business and "telephone" not in schema_text:
        add("missing-telephone", "CRITICAL", "LocalBusiness schema missing telephone field")

    faq_count = count_faq_items(doc)
    if faq_count >= MIN_FAQ_ITEMS and "FAQPage" not in schema_text:
        add(
            "missing-faq-schema", "WARNING",
            f"Found {faq_count} FAQ-like items (<details>) but no FAQPage schema",
            faq_count=faq_count
        )

    route = doc.route or "/"
    if route != "/" and not is_dynamic_route(route) and "BreadcrumbList" not in schema_text:
        add("missing-breadcrumb", "INFO", "Page could benefit from BreadcrumbList schema")

    if has_local_business and "aggregateRating" not in schema_text and "AggregateRating" not in schema_text:
        add(
            "missing-rating", "INFO",
            "LocalBusiness could include aggregateRating for star snippets (optional)"
        )

    return issues


@audit_spec(codes=ISSUE_TYPES)
def analyze_schema(documents: List[ParsedDocument], ctx: AnalysisContext) -> AnalyzerReport:
    """Checks structured data completeness (LocalBusiness, FAQPage, BreadcrumbList)."""
    issues: List[Issue] = []
    results = []
    issues_by_type = defaultdict(list)

    for doc, page_issues in per_document(documents, check_schema, ANALYZER):
        issues.extend(page_issues)
        for issue in page_issues:
            issues_by_type[issue.code].append(doc.file)
        results.append({
            "file": doc.file,
            "route": doc.route,
            "schema_blocks": len(doc.structured_data),
            "invalid_blocks": sum(1 for b in doc.structured_data if not b.is_valid),
            "has_local_business": "LocalBusiness" in doc.schema_text(),
            "issues": [i.code for i in page_issues],
        })

    return AnalyzerReport(
        analyzer=ANALYZER,
        label=DEFINITION.label,
        summary={
            "pages_analyzed": len(results),
            "pages_with_issues": len({i.file for i in issues}),
            "total_issues": len(issues),
            **{code.replace("-", "_"): len(issues_by_type[code]) for code in ISSUE_TYPES},
        },
        issues=issues,
        details={
            "issues_by_type": {code: issues_by_type[code] for code in ISSUE_TYPES},
            "pages": results,
        },
    )


# --- ANALYZER DEFINITION ---
DEFINITION = AnalyzerDefinition(
    key=ANALYZER,
    label="Schema",
    order=30,
    analyze=analyze_schema,
    report_file="schema-issues-report.json",
)
