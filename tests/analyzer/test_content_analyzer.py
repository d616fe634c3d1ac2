# tests/analyzer/test_content_analyzer.py
import pytest

from site_analyzer.analyzers.content import (
    DEFINITION, analyze_content, calculate_similarity, classify_word_count, extract_key_phrases,
    extract_visible_content, find_similar_pairs, vocabulary, word_count
)
from site_analyzer.settings import ContentSettings


def paragraphs(words, per_paragraph=20):
    """Wraps a word list in <p> blocks."""
    chunks = [words[i:i + per_paragraph] for i in range(0, len(words), per_paragraph)]
    return "\n".join(f"<p>{' '.join(chunk)}</p>" for chunk in chunks)


@pytest.mark.parametrize("count, category", [
    (0, "thin"),
    (299, "thin"),
    (300, "adequate"),
    (999, "adequate"),
    (1000, "substantial"),
])
def test_classify_word_count(count, category):
    assert classify_word_count(count, ContentSettings()) == category


def test_extract_visible_content_skips_chrome_and_short_sections(parse):
    doc = parse(
        "<header><p>Header tagline that is long enough</p></header>"
        "<nav><ul><li>Navigation entry that is long enough</li></ul></nav>"
        "<div><p>Too short</p><p>This paragraph is certainly long enough.</p></div>"
        "<footer><p>Copyright notice that is long enough</p></footer>"
    )
    text = extract_visible_content(doc)
    assert text == "This paragraph is certainly long enough."
    assert word_count(text) == 6


def test_inline_links_do_not_inflate_word_count(parse):
    doc = parse('<p>Call <a href="/c">our team</a>, or <strong>email</strong>. We reply fast always.</p>')
    text = extract_visible_content(doc)
    assert text == "Call our team, or email. We reply fast always."
    assert word_count(text) == 9


def test_vocabulary_filters_stopwords_and_short_tokens():
    words = vocabulary("The quick plumber fixed THE leaking pipe with their tools")
    assert words == {"quick", "plumber", "fixed", "leaking", "pipe", "tools"}


def test_vocabulary_with_custom_stopwords():
    assert vocabulary("plumber pipe their", {"pipe"}) == {"plumber", "their"}


def test_calculate_similarity():
    assert calculate_similarity("plumber leaking pipe", "pipe leaking plumber") == 1.0
    assert calculate_similarity("plumber leaking pipe", "garden fence paint") == 0.0
    assert calculate_similarity("", "garden fence paint") == 0.0
    # 2 shared out of 4 distinct words
    assert calculate_similarity("plumber leaking pipe", "plumber leaking boiler") == 0.5


def test_extract_key_phrases():
    text = "Emergency plumbing service available. Emergency plumbing service today at 10 00 22."
    phrases = extract_key_phrases(text)
    assert next(iter(phrases)) == "emergency plumbing service"
    assert phrases["emergency plumbing service"] == 2
    assert extract_key_phrases("") == {}


def test_find_similar_pairs_respects_noise_floor():
    pages = [
        {"file": "a.astro", "route": "/a", "word_count": 10, "vocabulary": {"w1", "w2", "w3", "w4"}},
        {"file": "b.astro", "route": "/b", "word_count": 10, "vocabulary": {"w1", "w2", "w3", "w5"}},
        {"file": "c.astro", "route": "/c", "word_count": 10, "vocabulary": {"w1", "x2", "x3", "x4"}},
        {"file": "d.astro", "route": "/d", "word_count": 1, "vocabulary": {"w1"}},
        {"file": "e.astro", "route": "/e", "word_count": 0, "vocabulary": set()},
    ]
    pairs = find_similar_pairs(pages, noise_floor=0.30)

    # a/b: 3 of 5, everything involving c, d or e stays below the floor
    assert [(p["page1"], p["page2"]) for p in pairs] == [("a.astro", "b.astro")]
    assert pairs[0]["similarity"] == pytest.approx(0.6)
    assert pairs[0]["similarity_pct"] == 60


def test_analyze_content_classifies_pairs(parse, make_context):
    shared = [f"shared{i}" for i in range(6)]
    docs = [
        parse(paragraphs(shared + ["uniquea0", "uniquea1"]), file="a.astro", route="/a"),
        parse(paragraphs(shared + ["uniqueb0", "uniqueb1"]), file="b.astro", route="/b"),
        parse(paragraphs(shared + ["uniquea0", "uniquea1"]), file="c.astro", route="/c"),
    ]
    report = analyze_content(docs, make_context())

    near = report.issues_with_code("near-duplicate-pair")
    medium = report.issues_with_code("similar-content-pair")
    assert [(i.details["page1"], i.details["page2"]) for i in near] == [("a.astro", "c.astro")]
    assert near[0].severity == "CRITICAL"
    assert len(medium) == 2
    assert all(i.severity == "WARNING" for i in medium)
    assert report.summary["thin_content"] == 3
    assert report.summary["high_similarity_pairs"] == 1
    assert report.summary["medium_similarity_pairs"] == 2
    assert DEFINITION.exit_code_for(report) == 0


def test_analyze_content_page_details(parse, make_context):
    words = [f"topic{i}" for i in range(320)]
    doc = parse(
        '---\ntitle: "Drain cleaning"\n---\n'
        '<Layout description="Fast drain cleaning"><nav><p>Skip this navigation text</p></nav>\n'
        + paragraphs(words) + "</Layout>",
        file="drains.astro", route="/drains",
    )
    report = analyze_content([doc], make_context())
    page = report.details["pages"][0]

    assert page["word_count"] == 320
    assert page["total_word_count"] == 324
    assert page["category"] == "adequate"
    assert page["title"] == "Drain cleaning"
    assert page["description"] == "Fast drain cleaning"
    assert "vocabulary" not in page
    assert report.summary["average_word_count"] == 320
    assert report.issues == []


def test_similarity_is_symmetric():
    a = "Emergency plumbing service across Utrecht and Amsterdam"
    b = "Plumbing service for Utrecht homes and offices"
    assert calculate_similarity(a, b) == calculate_similarity(b, a)
    assert calculate_similarity(a, a) == 1.0
