import re
from typing import Callable, List, Optional, Pattern, Tuple

from ..core import AnalysisContext, AnalyzerDefinition, audit_spec
from ..dom.models import ParsedDocument
from ..model import AnalyzerReport, Issue
from ..utils.stopwords import QUESTION_WORDS
from .base import per_document, percentage

ANALYZER = "questions"


def is_question(text: str) -> bool:
    lower = text.lower().strip()
    first_word = lower.split(" ", 1)[0] if lower else ""
    return first_word in QUESTION_WORDS or lower.endswith("?")


def capitalize_words(text: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


# (pattern, builder) pairs, first match wins
REWRITES: List[Tuple[Pattern, Callable[[re.Match], str]]] = [
    (re.compile(r"^routes?\s+from\s+(.+)$"), lambda m: f"What Routes Are Available from {capitalize_words(m[1])}?"),
    (re.compile(r"^routes?\s+to\s+(.+)$"), lambda m: f"What Routes Are Available to {capitalize_words(m[1])}?"),
    (re.compile(r"^popular\s+(.+)$"), lambda m: f"What Are the Popular {capitalize_words(m[1])}?"),
    (re.compile(r"^(.+)\s+guide$"), lambda m: f"What Is the {capitalize_words(m[1])} Guide?"),
    (re.compile(r"^pricing$"), lambda m: "How Much Does It Cost?"),
    (re.compile(r"^(.+)\s+pricing$"), lambda m: f"How Much Does {capitalize_words(m[1])} Cost?"),
    (re.compile(r"^benefits?$"), lambda m: "What Are the Benefits?"),
    (re.compile(r"^(.+)\s+benefits?$"), lambda m: f"What Are the Benefits of {capitalize_words(m[1])}?"),
    (re.compile(r"^(.+)\s+options?$"), lambda m: f"What Are {capitalize_words(m[1])} Options?"),
    (re.compile(r"^(.+)\s+process$"), lambda m: f"How Does the {capitalize_words(m[1])} Process Work?"),
    (re.compile(r"^(?:(.+)\s+)?coverage$"), lambda m: "What Areas Do You Cover?"),
    (re.compile(r"^(.+)\s+services?$"), lambda m: f"What {capitalize_words(m[1])} Services Do You Offer?"),
]


def suggest_question(text: str) -> Optional[str]:
    """Proposes a question-form rewrite of a statement heading, None if it already is one."""
    original = text.strip()
    if not original or is_question(original):
        return None

    lower = original.lower()
    for pattern, build in REWRITES:
        match = pattern.match(lower)
        if match:
            return build(match)

    if len(original.split(" ")) <= 2 and len(original) < 25:
        return f"What Is {capitalize_words(original)}?"
    return f"How Does {capitalize_words(original)} Work?"


def check_question_headings(doc: ParsedDocument) -> dict:
    """Classifies the H2/H3 headings of one page."""
    analysis = {
        "file": doc.file,
        "route": doc.route,
        "total_headings": 0,
        "question_headings": 0,
        "statement_headings": 0,
        "suggestions": [],
    }

    for heading in doc.root.iter("h2", "h3"):
        text = heading.text.strip()
        if not text:
            continue
        analysis["total_headings"] += 1
        if is_question(text):
            analysis["question_headings"] += 1
            continue

        analysis["statement_headings"] += 1
        suggestion = suggest_question(text)
        if suggestion:
            analysis["suggestions"].append({
                "original": text,
                "suggested": suggestion,
                "level": int(heading.tag[1]),
            })
    return analysis


@audit_spec(codes=["statement-heading"])
def analyze_question_headings(documents: List[ParsedDocument], ctx: AnalysisContext) -> AnalyzerReport:
    """Finds H2/H3 headings that could be phrased as questions."""
    issues: List[Issue] = []
    pages = []

    for doc, analysis in per_document(documents, check_question_headings, ANALYZER):
        if not analysis["total_headings"]:
            continue
        pages.append(analysis)
        for s in analysis["suggestions"]:
            issues.append(Issue(
                analyzer=ANALYZER,
                code="statement-heading",
                severity="INFO",
                message=f'"{s["original"]}" -> "{s["suggested"]}" (H{s["level"]})',
                file=doc.file,
                route=doc.route,
                details=s,
            ))

    total = sum(p["total_headings"] for p in pages)
    questions = sum(p["question_headings"] for p in pages)
    statements = sum(p["statement_headings"] for p in pages)

    return AnalyzerReport(
        analyzer=ANALYZER,
        label=DEFINITION.label,
        summary={
            "pages_analyzed": len(documents),
            "total_headings": total,
            "question_headings": questions,
            "statement_headings": statements,
            "question_pct": percentage(questions, total),
            "pages_with_suggestions": sum(1 for p in pages if p["suggestions"]),
        },
        issues=issues,
        details={"pages": pages},
    )


# --- ANALYZER DEFINITION ---
DEFINITION = AnalyzerDefinition(
    key=ANALYZER,
    label="Question Headings",
    order=50,
    analyze=analyze_question_headings,
    report_file="analysis-question-headings.json",
)
