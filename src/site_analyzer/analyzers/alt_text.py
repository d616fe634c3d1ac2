import re
from typing import List, Optional

from pydantic import BaseModel

from ..core import AnalysisContext, AnalyzerDefinition, audit_spec
from ..dom.core import ElementNode
from ..dom.models import ParsedDocument
from ..model import AnalyzerReport, Issue
from .base import per_document, percentage

ANALYZER = "alt-text"

IMAGE_EXT_RE = re.compile(r"\.(jpg|jpeg|png|gif|svg|webp|avif)$", re.IGNORECASE)


class ImageFinding(BaseModel):
    """One image-bearing element and how its alt text was classified."""
    file: str
    route: Optional[str] = None
    tag: str
    src: Optional[str] = None
    alt: Optional[str] = None
    is_generic: bool = False
    suggestion: Optional[str] = None

    @property
    def has_alt(self) -> bool:
        return self.alt is not None

    @property
    def status(self) -> str:
        if not self.has_alt:
            return "missing"
        return "generic" if self.is_generic else "good"


def is_generic_alt(alt: Optional[str], generic_words) -> bool:
    """
    Explicit alt strings from the generic list ('' included) are generic.
    Dynamic values such as '{post.title}' cannot be judged statically.
    """
    if alt is None:
        return False
    clean = alt.lower().strip()
    if clean.startswith("{"):
        return False
    return clean in generic_words


def _title_case(text: str) -> str:
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def generate_alt_suggestion(src: Optional[str]) -> str:
    """Derives an alt text proposal from the image source file name."""
    if not src:
        return "Add descriptive alt text"

    clean_src = re.sub(r"[{}]", "", src)
    filename = IMAGE_EXT_RE.sub("", clean_src.split("/")[-1])
    label = _title_case(re.sub(r"[-_]", " ", filename)).strip()

    if "logo" in clean_src:
        return "Brand logo"
    if "icon" in clean_src:
        return label or "Icon"
    return label or "Descriptive image related to content"


def _is_picture_wrapper(el: ElementNode) -> bool:
    # Native <picture> around an <img>: the <img> is audited on its own
    return el.tag == "picture" and el.find("img") is not None


def collect_images(doc: ParsedDocument, settings) -> List[ImageFinding]:
    """Finds <img> tags and known image components in one document."""
    generic_words = {w.lower() for w in settings.generic_alt_words}
    tags = ["img"] + [t.lower() for t in settings.image_components if t.lower() != "img"]

    findings = []
    for el in doc.root.iter(*tags):
        if _is_picture_wrapper(el):
            continue

        src = el.get("src")
        alt = el.get("alt")  # None when missing, "" when empty
        finding = ImageFinding(
            file=doc.file, route=doc.route, tag=el.tag, src=src, alt=alt,
            is_generic=is_generic_alt(alt, generic_words),
        )
        if finding.status != "good":
            finding.suggestion = generate_alt_suggestion(src)
        findings.append(finding)
    return findings


def _to_issue(finding: ImageFinding) -> Issue:
    src_label = finding.src or "N/A"
    if finding.status == "missing":
        return Issue(
            analyzer=ANALYZER, code="missing-alt", severity="CRITICAL",
            message=f"Image missing alt attribute: {src_label} (suggestion: \"{finding.suggestion}\")",
            file=finding.file, route=finding.route,
            details={"tag": finding.tag, "src": finding.src, "suggestion": finding.suggestion},
        )
    return Issue(
        analyzer=ANALYZER, code="generic-alt", severity="WARNING",
        message=f"Generic alt text \"{finding.alt}\": {src_label} (suggestion: \"{finding.suggestion}\")",
        file=finding.file, route=finding.route,
        details={"tag": finding.tag, "src": finding.src, "current": finding.alt, "suggestion": finding.suggestion},
    )


@audit_spec(codes=["missing-alt", "generic-alt"])
def analyze_alt_text(documents: List[ParsedDocument], ctx: AnalysisContext) -> AnalyzerReport:
    """Audits alt text of images in pages and in shared components."""
    all_docs = list(documents) + list(ctx.components)
    images: List[ImageFinding] = []

    for _, found in per_document(all_docs, lambda d: collect_images(d, ctx.settings), ANALYZER):
        images.extend(found)

    missing = [img for img in images if img.status == "missing"]
    generic = [img for img in images if img.status == "generic"]
    good = [img for img in images if img.status == "good"]
    total = len(images)

    return AnalyzerReport(
        analyzer=ANALYZER,
        label=DEFINITION.label,
        summary={
            "files_analyzed": len(all_docs),
            "pages": len(documents),
            "components": len(ctx.components),
            "total_images": total,
            "good_alt": len(good),
            "generic_alt": len(generic),
            "missing_alt": len(missing),
            "good_alt_pct": percentage(len(good), total),
            "generic_alt_pct": percentage(len(generic), total),
            "missing_alt_pct": percentage(len(missing), total),
        },
        issues=[_to_issue(img) for img in missing + generic],
        details={
            "missing_alt": [
                {"file": img.file, "src": img.src, "suggestion": img.suggestion} for img in missing
            ],
            "generic_alt": [
                {"file": img.file, "src": img.src, "current": img.alt, "suggestion": img.suggestion}
                for img in generic
            ],
        },
    )


# --- ANALYZER DEFINITION ---
DEFINITION = AnalyzerDefinition(
    key=ANALYZER,
    label="Alt Text",
    order=40,
    analyze=analyze_alt_text,
    report_file="analysis-image-alt-text.json",
)
