from dataclasses import dataclass
from typing import Iterable

from .models import FileReport, Severity, Violation


@dataclass(frozen=True)
class Report:
    """Merged, sorted results of one run"""

    violations: tuple[Violation, ...] = ()
    files_checked: int = 0
    checks_run: int = 0
    passed_checks: int = 0

    @property
    def warnings(self) -> int:
        return sum(1 for v in self.violations if v.severity == Severity.WARNING)

    @property
    def errors(self) -> int:
        return sum(1 for v in self.violations if v.severity == Severity.ERROR)

    @property
    def exit_code(self) -> int:
        return 1 if self.errors else 0

    def summary(self) -> str:
        return f"{self.passed_checks} passed checks, {self.warnings} warnings, {self.errors} errors"


class Reporter:
    """Collects per-file reports and merges them in a deterministic order"""

    def __init__(self):
        self._files: list[FileReport] = []

    def add(self, file_report: FileReport) -> None:
        self._files.append(file_report)

    def build(self, file_reports: Iterable[FileReport] | None = None) -> Report:
        files = list(self._files)
        if file_reports is not None:
            files.extend(file_reports)
        violations = sorted((v for f in files for v in f.violations), key=Violation.sort_key)
        return Report(
            violations=tuple(violations),
            files_checked=len(files),
            checks_run=sum(f.checks_run for f in files),
            passed_checks=sum(f.passed_checks for f in files),
        )


def format_violation(violation: Violation) -> str:
    column = violation.column if violation.column is not None else 0
    return (
        f"{violation.file_path}:{violation.line}:{column}: "
        f"{violation.severity.value.upper()} [{violation.rule_id}] {violation.message}"
    )


def format_text(report: Report) -> str:
    lines = [format_violation(v) for v in report.violations]
    lines.append(report.summary())
    return "\n".join(lines) + "\n"
