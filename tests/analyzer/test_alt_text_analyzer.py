# tests/analyzer/test_alt_text_analyzer.py
import pytest

from site_analyzer.analyzers.alt_text import (
    DEFINITION, analyze_alt_text, collect_images, generate_alt_suggestion, is_generic_alt
)
from site_analyzer.utils.stopwords import GENERIC_ALT_WORDS


@pytest.mark.parametrize("alt, expected", [
    (None, False),
    ("", True),
    ("image", True),
    (" Photo ", True),
    ("logo", True),
    ("{post.title}", False),
    ("A plumber repairing a sink", False),
    ("Company Logo", False),
])
def test_is_generic_alt(alt, expected):
    assert is_generic_alt(alt, GENERIC_ALT_WORDS) is expected


@pytest.mark.parametrize("src, suggestion", [
    (None, "Add descriptive alt text"),
    ("/images/team-photo.jpg", "Team Photo"),
    ("/images/kitchen_renovation.webp", "Kitchen Renovation"),
    ("/img/company-logo.png", "Brand logo"),
    ("/icons/arrow-right.svg", "Arrow Right"),
    ("/img/", "Descriptive image related to content"),
])
def test_generate_alt_suggestion(src, suggestion):
    assert generate_alt_suggestion(src) == suggestion


def test_collect_images_classifies(parse, settings):
    doc = parse(
        '<img src="/a/team-photo.jpg">'
        '<img src="/a/empty.png" alt="">'
        '<Image src="/a/brand-logo.svg" alt="Logo" />'
        '<OptimizedImage src={hero} alt={post.title} />'
        '<img src="/a/van.jpg" alt="Our service van in Utrecht">'
    )
    findings = {f.src: f for f in collect_images(doc, settings)}

    assert findings["/a/team-photo.jpg"].status == "missing"
    assert findings["/a/team-photo.jpg"].suggestion == "Team Photo"
    assert findings["/a/empty.png"].status == "generic"
    assert findings["/a/brand-logo.svg"].status == "generic"
    assert findings["/a/brand-logo.svg"].suggestion == "Brand logo"
    assert findings["{hero}"].status == "good"
    assert findings["/a/van.jpg"].status == "good"
    assert findings["/a/van.jpg"].suggestion is None


def test_picture_wrapper_is_not_audited_twice(parse, settings):
    doc = parse(
        '<picture><source srcset="/a/sea.avif"><img src="/a/sea.jpg" alt="Sunset over the bay"></picture>'
        '<Picture src="/a/beach.jpg" />'
    )
    findings = collect_images(doc, settings)
    assert [(f.tag, f.status) for f in findings] == [("img", "good"), ("picture", "missing")]


def test_configured_generic_words(parse, tmp_path):
    from site_analyzer.settings import AnalyzerSettings

    settings = AnalyzerSettings(project_root=tmp_path, generic_alt_words=["afbeelding"])
    doc = parse('<img src="/x.jpg" alt="Afbeelding"><img src="/y.jpg" alt="image">')
    assert [f.status for f in collect_images(doc, settings)] == ["generic", "good"]


def test_analyze_alt_text_covers_components(parse, make_context):
    page = parse('<img src="/a/one.jpg" alt="A red bicycle"><img src="/a/two.jpg" alt="photo">', file="index.astro")
    component = parse('<img src="/a/header-icon.svg">', file="Header.astro", route=None)
    report = analyze_alt_text([page], make_context(["index.astro"], components=[component]))

    assert report.summary["files_analyzed"] == 2
    assert report.summary["total_images"] == 3
    assert report.summary["missing_alt"] == 1
    assert report.summary["generic_alt"] == 1
    assert report.summary["good_alt_pct"] == 33
    assert report.issues[0].code == "missing-alt"
    assert report.issues[0].severity == "CRITICAL"
    assert report.issues[0].file == "Header.astro"
    assert report.issues[1].code == "generic-alt"
    assert report.issues[1].severity == "WARNING"
    assert report.details["missing_alt"][0]["suggestion"] == "Header Icon"
    # advisory analyzer
    assert DEFINITION.exit_code_for(report) == 0
