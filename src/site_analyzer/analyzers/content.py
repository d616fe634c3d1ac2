"""
Content uniqueness and quality analysis.

Pages are compared pairwise on their visible-text vocabulary (Jaccard
similarity over distinct, stop-word filtered words). The comparison is
O(n^2) in the number of pages, which is fine for sites of tens to a few
hundred pages. Pairs whose vocabulary sizes alone cap the similarity at or
below the noise floor are skipped without computing the intersection.
"""
import re
from collections import Counter
from typing import Dict, Iterator, List, Optional, Set

from ..core import AnalysisContext, AnalyzerDefinition, audit_spec
from ..dom.core import ElementNode
from ..dom.models import ParsedDocument
from ..model import AnalyzerReport, Issue
from ..settings import ContentSettings
from ..utils.stopwords import combine_stopwords
from .base import per_document

ANALYZER = "content"

# Page chrome, removed before looking for prose
NOISE_TAGS = ("nav", "header", "footer", "script", "style")
CONTENT_TAGS = ("p", "h1", "h2", "h3", "li", "article", "main")

TITLE_RES = [
    re.compile(r"""title\s*=\s*["']([^"']+)["']"""),
    re.compile(r"title\s*=\s*\{`([^`]+)`\}"),
    re.compile(r"^title:\s*[\"']?(.+?)[\"']?\s*$", re.M),
]
DESCRIPTION_RES = [
    re.compile(r"""description\s*=\s*["']([^"']+)["']"""),
    re.compile(r"description\s*=\s*\{`([^`]+)`\}"),
    re.compile(r"^description:\s*[\"']?(.+?)[\"']?\s*$", re.M),
]


def _iter_content_elements(node: ElementNode) -> Iterator[ElementNode]:
    for child in node.elements:
        if child.tag in NOISE_TAGS:
            continue
        if child.tag in CONTENT_TAGS:
            yield child
        yield from _iter_content_elements(child)


def extract_visible_content(doc: ParsedDocument, min_section_length: int = 20) -> str:
    """
    Approximates reader-visible prose: text of paragraph, heading, list item,
    article and main elements outside nav/header/footer, keeping only
    sections longer than `min_section_length` characters.
    """
    sections = []
    for el in _iter_content_elements(doc.root):
        text = el.text_content(exclude=NOISE_TAGS)
        if len(text) > min_section_length:
            sections.append(text)
    return " ".join(sections)


def word_count(text: str) -> int:
    return len(text.split())


def classify_word_count(count: int, settings: ContentSettings) -> str:
    if count < settings.thin_words:
        return "thin"
    if count < settings.substantial_words:
        return "adequate"
    return "substantial"


@combine_stopwords
def vocabulary(text: str, stopwords: Set[str], min_length: int = 4) -> Set[str]:
    """Distinct lower-cased words of at least `min_length` characters, stop words removed."""
    words = {w for w in text.lower().split() if len(w) >= min_length}
    return words - stopwords


def jaccard(words1: Set[str], words2: Set[str]) -> float:
    if not words1 or not words2:
        return 0.0
    return len(words1 & words2) / len(words1 | words2)


def calculate_similarity(text1: str, text2: str, stopwords: Optional[Set[str]] = None,
                         min_length: int = 4) -> float:
    """Jaccard similarity of the filtered vocabularies of two texts (0.0 - 1.0)."""
    return jaccard(vocabulary(text1, stopwords, min_length), vocabulary(text2, stopwords, min_length))


@combine_stopwords
def extract_key_phrases(text: str, stopwords: Set[str], n: int = 3, top_n: int = 10) -> Dict[str, int]:
    """
    Most frequent n-word phrases of the text after stop-word filtering.
    Phrases without any letter (numbers, times) are dropped.
    """
    if not text:
        return {}

    words = re.findall(r'\b[a-zA-ZÀ-ÖØ-öø-ÿ0-9]+\b', text.lower())
    filtered_words = [w for w in words if w not in stopwords and len(w) > 2]
    if len(filtered_words) < n:
        return {}

    grams = Counter(zip(*(filtered_words[i:] for i in range(n))))

    result = {}
    for item, count in grams.most_common(top_n * 3):
        key = " ".join(item)
        if not re.search(r'[a-zA-ZÀ-ÖØ-öø-ÿ]', key):
            continue
        result[key] = count
        if len(result) >= top_n:
            break
    return result


def _first_match(patterns, text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return None


def analyze_page(doc: ParsedDocument, settings: ContentSettings, stopwords: Optional[Set[str]]) -> dict:
    visible_text = extract_visible_content(doc, settings.min_section_length)
    visible_words = word_count(visible_text)
    return {
        "file": doc.file,
        "route": doc.route,
        "word_count": visible_words,
        "total_word_count": word_count(doc.root.text),
        "category": classify_word_count(visible_words, settings),
        "title": _first_match(TITLE_RES, doc.raw_text),
        "description": _first_match(DESCRIPTION_RES, doc.raw_text),
        "key_phrases": extract_key_phrases(visible_text, stopwords, top_n=settings.key_phrase_count),
        "vocabulary": vocabulary(visible_text, stopwords, settings.min_token_length),
    }


def find_similar_pairs(pages: List[dict], noise_floor: float) -> List[dict]:
    """
    Compares every pair of pages once. Only pairs above the noise floor are
    returned, most similar first.
    """
    pairs = []
    for i in range(len(pages)):
        words1 = pages[i]["vocabulary"]
        for j in range(i + 1, len(pages)):
            words2 = pages[j]["vocabulary"]
            if not words1 or not words2:
                continue
            # |A & B| / |A | B| can never exceed min/max of the set sizes
            if min(len(words1), len(words2)) / max(len(words1), len(words2)) <= noise_floor:
                continue

            similarity = jaccard(words1, words2)
            if similarity > noise_floor:
                pairs.append({
                    "page1": pages[i]["file"],
                    "page2": pages[j]["file"],
                    "route1": pages[i]["route"],
                    "route2": pages[j]["route"],
                    "similarity": similarity,
                    "similarity_pct": round(similarity * 100),
                    "word_count1": pages[i]["word_count"],
                    "word_count2": pages[j]["word_count"],
                })

    pairs.sort(key=lambda p: (-p["similarity"], p["page1"], p["page2"]))
    return pairs


@audit_spec(codes=["near-duplicate-pair", "similar-content-pair", "thin-content"])
def analyze_content(documents: List[ParsedDocument], ctx: AnalysisContext) -> AnalyzerReport:
    """Flags thin pages and near-duplicate page pairs."""
    settings = ctx.settings.content
    stopwords = set(ctx.settings.stopwords) if ctx.settings.stopwords is not None else None

    pages = [
        page for _, page in per_document(documents, lambda d: analyze_page(d, settings, stopwords), ANALYZER)
    ]
    pairs = find_similar_pairs(pages, settings.noise_floor)

    high = [p for p in pairs if p["similarity"] >= settings.duplicate_threshold]
    medium = [p for p in pairs if settings.medium_threshold <= p["similarity"] < settings.duplicate_threshold]
    thin = sorted((p for p in pages if p["category"] == "thin"), key=lambda p: p["word_count"])

    issues: List[Issue] = []
    for pair in high:
        issues.append(Issue(
            analyzer=ANALYZER, code="near-duplicate-pair", severity="CRITICAL",
            message=f"{pair['page1']} <-> {pair['page2']} ({pair['similarity_pct']}% similar)",
            file=pair["page1"], route=pair["route1"], details=pair,
        ))
    for pair in medium:
        issues.append(Issue(
            analyzer=ANALYZER, code="similar-content-pair", severity="WARNING",
            message=f"{pair['page1']} <-> {pair['page2']} ({pair['similarity_pct']}% similar)",
            file=pair["page1"], route=pair["route1"], details=pair,
        ))
    for page in thin:
        issues.append(Issue(
            analyzer=ANALYZER, code="thin-content", severity="WARNING",
            message=f"Thin content: {page['word_count']} words (< {settings.thin_words})",
            file=page["file"], route=page["route"], details={"word_count": page["word_count"]},
        ))

    total_words = sum(p["word_count"] for p in pages)
    return AnalyzerReport(
        analyzer=ANALYZER,
        label=DEFINITION.label,
        summary={
            "total_pages": len(pages),
            "thin_content": len(thin),
            "adequate_content": sum(1 for p in pages if p["category"] == "adequate"),
            "substantial_content": sum(1 for p in pages if p["category"] == "substantial"),
            "high_similarity_pairs": len(high),
            "medium_similarity_pairs": len(medium),
            "average_word_count": round(total_words / (len(pages) or 1)),
        },
        issues=issues,
        details={
            "thin_content": [{"file": p["file"], "word_count": p["word_count"]} for p in thin],
            "high_similarity": high,
            "medium_similarity": medium,
            "pages": [{k: v for k, v in p.items() if k != "vocabulary"} for p in pages],
        },
    )


# --- ANALYZER DEFINITION ---
DEFINITION = AnalyzerDefinition(
    key=ANALYZER,
    label="Content Uniqueness",
    order=60,
    analyze=analyze_content,
    report_file="analysis-content-uniqueness.json",
)
