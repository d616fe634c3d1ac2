from typing import List

from ..core import AnalysisContext, AnalyzerDefinition, audit_spec
from ..dom.models import ParsedDocument
from ..model import AnalyzerReport, Issue
from ..services.route_table_service import RouteTable, normalize_link_target
from .base import per_document

ANALYZER = "links"


def is_internal_href(href: str) -> bool:
    """
    Only root-relative links are checked. External and scheme-relative
    URLs, fragments, mailto/tel and relative paths are skipped.
    """
    return href.startswith("/") and not href.startswith("//")


def check_links(doc: ParsedDocument, route_table: RouteTable) -> List[Issue]:
    """Validates every root-relative <a href> of one page against the route table."""
    issues = []
    for anchor in doc.root.iter("a"):
        href = (anchor.get("href") or "").strip()
        if not href or not is_internal_href(href):
            continue

        target = normalize_link_target(href)
        if route_table.resolve(target) is None:
            issues.append(Issue(
                analyzer=ANALYZER,
                code="broken-link",
                severity="CRITICAL",
                message=f'Broken link to "{href}" (resolved: "{target}")',
                file=doc.file,
                route=doc.route,
                details={"href": href, "target": target, "text": anchor.text[:50]},
            ))
    return issues


@audit_spec(codes=["broken-link"])
def analyze_links(documents: List[ParsedDocument], ctx: AnalysisContext) -> AnalyzerReport:
    """Statically resolves internal links against the routes derived from the pages directory."""
    route_table = ctx.route_table
    issues: List[Issue] = []
    pages = []

    for doc, page_issues in per_document(documents, lambda d: check_links(d, route_table), ANALYZER):
        issues.extend(page_issues)
        pages.append({
            "file": doc.file,
            "route": doc.route,
            "link_count": len(doc.root.find_all("a")),
            "broken": len(page_issues),
        })

    return AnalyzerReport(
        analyzer=ANALYZER,
        label=DEFINITION.label,
        summary={
            "routes": len(route_table),
            "pages_analyzed": len(pages),
            "links_checked": sum(p["link_count"] for p in pages),
            "pages_with_issues": len({i.file for i in issues}),
            "broken_links": len(issues),
        },
        issues=issues,
        details={"routes": route_table.to_list(), "pages": pages},
    )


# --- ANALYZER DEFINITION ---
DEFINITION = AnalyzerDefinition(
    key=ANALYZER,
    label="Internal Links",
    order=20,
    analyze=analyze_links,
    report_file="analysis-internal-links.json",
    critical=True,
    fails_on_issues=True,
)
