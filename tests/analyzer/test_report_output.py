# tests/analyzer/test_report_output.py
from site_analyzer.controllers.report_controller import ReportController
from site_analyzer.managers.report_manager import ReportManager
from site_analyzer.model import AnalyzerOutcome, AnalyzerReport, Issue, ValidationRunResult


def make_report(n_broken=3):
    issues = [
        Issue(analyzer="links", code="broken-link", severity="critical",
              message=f"Broken link to /missing-{i}", file=f"page{i}.astro", route=f"/page{i}")
        for i in range(n_broken)
    ]
    issues.append(Issue(analyzer="links", code="note", severity="INFO", message="Just a note", file="x.astro"))
    return AnalyzerReport(analyzer="links", label="Internal Links", summary={"broken_links": n_broken}, issues=issues)


def test_severity_is_normalized():
    assert make_report().issues[0].severity == "CRITICAL"


def test_save_and_load_report(tmp_path):
    manager = ReportManager(tmp_path)
    path = manager.save_report(make_report(), tmp_path / "analysis-internal-links.json")

    assert path == tmp_path / "analysis-internal-links.json"
    loaded = manager.load_report(path)
    assert loaded.analyzer == "links"
    assert len(loaded.issues_with_code("broken-link")) == 3
    assert loaded.issues[0].route == "/page0"


def test_save_report_failure_is_logged(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    path = ReportManager(tmp_path).save_report(make_report(), blocker / "report.json")

    assert path is None
    assert "Failed to save report" in caplog.text


def test_load_missing_report(tmp_path):
    assert ReportManager(tmp_path).load_report(tmp_path / "nope.json") is None


def test_print_report_groups_and_truncates(capsys):
    ReportController(limit=2).print_report(make_report(3))
    out = capsys.readouterr().out

    assert "INTERNAL LINKS RESULTS" in out
    assert "CRITICAL: broken-link (3)" in out
    assert "... and 1 more" in out
    assert "page2.astro" not in out
    # critical group comes before info
    assert out.index("broken-link") < out.index("INFO: note")


def test_print_report_without_issues(capsys):
    ReportController().print_report(AnalyzerReport(analyzer="headings", label="Headings"))
    assert "No headings issues found." in capsys.readouterr().out


def test_print_run_summary(capsys):
    result = ValidationRunResult(outcomes=[
        AnalyzerOutcome(analyzer="headings", label="Headings", critical=True, exit_code=1, report=make_report()),
        AnalyzerOutcome(analyzer="schema", label="Schema", critical=False, exit_code=0),
    ])
    printer = ReportController()
    for outcome in result.outcomes:
        printer.print_outcome_line(outcome)
    printer.print_run_summary(result)
    out = capsys.readouterr().out

    assert "❌ Headings Check Failed!" in out
    assert "✅ Schema Check Passed" in out
    assert "Validation Failed with 1 critical errors." in out
    assert result.exit_code == 1
