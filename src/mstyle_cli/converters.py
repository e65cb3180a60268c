from mstyle_linter.models import Violation
from mstyle_linter.reporter import Report

from .models import LintRecord


def violation_to_record(violation: Violation) -> LintRecord:
    """Convert an internal dataclass violation to an external Pydantic record"""
    return LintRecord(
        file=violation.file_path,
        line=violation.line,
        column=violation.column,
        rule_id=violation.rule_id,
        severity=violation.severity,
        message=violation.message,
        kind=violation.kind,
    )


def report_to_jsonl(report: Report) -> str:
    return "".join(
        violation_to_record(v).model_dump_json(by_alias=True) + "\n" for v in report.violations
    )
