# tests/analyzer/test_link_analyzer.py
import pytest

from site_analyzer.analyzers.links import DEFINITION, analyze_links, check_links, is_internal_href

PAGES = ["index.astro", "about.astro", "contact.astro", "blog/[slug].astro", "docs/[...path].astro"]


@pytest.mark.parametrize("href, expected", [
    ("/about", True),
    ("/", True),
    ("https://example.com/about", False),
    ("//cdn.example.com/lib.js", False),
    ("#top", False),
    ("mailto:info@example.com", False),
    ("tel:+31201234567", False),
    ("relative/page", False),
])
def test_is_internal_href(href, expected):
    assert is_internal_href(href) is expected


def test_valid_links_resolve(parse, make_context):
    ctx = make_context(PAGES)
    doc = parse(
        '<a href="/">Home</a><a href="/about/">About</a><a href="/contact?ref=footer#form">Contact</a>'
        '<a href="/blog/first-post">Post</a><a href="/docs/setup/install">Docs</a>'
        '<a href="https://external.example.com/missing">External</a><a>No href</a>'
    )
    assert check_links(doc, ctx.route_table) == []


def test_broken_link_is_critical(parse, make_context):
    ctx = make_context(PAGES)
    issues = check_links(parse('<a href="/servics/">Our services</a>'), ctx.route_table)

    assert len(issues) == 1
    issue = issues[0]
    assert issue.code == "broken-link"
    assert issue.severity == "CRITICAL"
    assert issue.details["href"] == "/servics/"
    assert issue.details["target"] == "/servics"
    assert issue.details["text"] == "Our services"


@pytest.mark.parametrize("href", ["/about/extra", "/contact/form", "/blog", "/blog/a/b"])
def test_extra_or_missing_segments_are_broken(parse, make_context, href):
    ctx = make_context(PAGES)
    issues = check_links(parse(f'<a href="{href}">Link</a>'), ctx.route_table)
    assert [i.code for i in issues] == ["broken-link"]


def test_links_inside_components(parse, make_context):
    ctx = make_context(PAGES)
    doc = parse('<Header><Nav><a href="/pricing">Pricing</a></Nav></Header>')
    assert [i.details["target"] for i in check_links(doc, ctx.route_table)] == ["/pricing"]


def test_analyze_links_report(parse, make_context):
    ctx = make_context(PAGES)
    docs = [
        parse('<a href="/about">About</a>', file="index.astro", route="/"),
        parse('<a href="/nope">Nope</a><a href="/">Home</a>', file="about.astro", route="/about"),
    ]
    report = analyze_links(docs, ctx)

    assert report.summary["routes"] == 5
    assert report.summary["links_checked"] == 3
    assert report.summary["broken_links"] == 1
    assert "/blog/[slug]" in report.details["routes"]
    assert [p["link_count"] for p in report.details["pages"]] == [1, 2]
    assert DEFINITION.exit_code_for(report) == 1
