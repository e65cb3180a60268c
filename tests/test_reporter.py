from mstyle_linter.models import FileReport, Severity, Violation
from mstyle_linter.reporter import Reporter, format_text


def _violation(path, line, rule_id, column=None, severity=Severity.WARNING, message="msg"):
    return Violation(
        file_path=path, line=line, rule_id=rule_id, message=message, severity=severity, column=column
    )


def test_violations_are_sorted_across_files():
    reporter = Reporter()
    reporter.add(FileReport(path="b.m", violations=(_violation("b.m", 1, "lineLength"),)))
    reporter.add(
        FileReport(
            path="a.m",
            violations=(
                _violation("a.m", 3, "whitespace.trailing", column=4),
                _violation("a.m", 3, "lineLength", column=81),
                _violation("a.m", 3, "indentation.width", column=1),
                _violation("a.m", 1, "naming.length", column=5),
            ),
        )
    )
    report = reporter.build()
    assert [(v.file_path, v.line, v.column) for v in report.violations] == [
        ("a.m", 1, 5),
        ("a.m", 3, 1),
        ("a.m", 3, 4),
        ("a.m", 3, 81),
        ("b.m", 1, None),
    ]


def test_summary_and_exit_code():
    report = Reporter().build(
        [
            FileReport(
                path="a.m",
                violations=(
                    _violation("a.m", 1, "lineLength"),
                    _violation("a.m", 2, "errors.malformedId", severity=Severity.ERROR),
                ),
                checks_run=10,
                passed_checks=8,
            ),
            FileReport(path="b.m", checks_run=10, passed_checks=10),
        ]
    )
    assert report.files_checked == 2
    assert report.summary() == "18 passed checks, 1 warnings, 1 errors"
    assert report.exit_code == 1


def test_clean_report_exits_zero():
    report = Reporter().build([FileReport(path="a.m", checks_run=3, passed_checks=3)])
    assert report.exit_code == 0
    assert format_text(report) == "3 passed checks, 0 warnings, 0 errors\n"


def test_text_format():
    report = Reporter().build(
        [
            FileReport(
                path="a.m",
                violations=(
                    _violation("a.m", 1, "whitespace.operatorSpacing", column=2, message="Missing space"),
                ),
            )
        ]
    )
    assert format_text(report).splitlines()[0] == (
        "a.m:1:2: WARNING [whitespace.operatorSpacing] Missing space"
    )
