"""Rules that surface problems found by the scanner itself.

The scanner records malformed nesting and comment structure while it builds
the block table; these rules only translate those records into violations so
they can be selected, ignored and re-graded like any other rule.
"""

from mstyle_scanner import ScanResult

from ..models import Severity, Violation, ViolationKind
from .base import BaseRule


class _ScannerIssueRule(BaseRule):
    @property
    def kind(self) -> ViolationKind:
        return ViolationKind.STRUCTURAL

    def check(self, scan: ScanResult) -> list[Violation]:
        return [
            self._create_issue(scan, issue.line, issue.message, column=issue.column)
            for issue in scan.structural_issues
            if issue.rule_id == self.rule_id
        ]


class UnbalancedBlockRule(_ScannerIssueRule):
    @property
    def rule_id(self) -> str:
        return "structural.unbalancedBlock"

    @property
    def name(self) -> str:
        return "unbalanced-block"

    @property
    def severity(self) -> Severity:
        return Severity.ERROR

    @property
    def description(self) -> str:
        return "Every block opener needs a matching 'end' and every 'end' an opener."


class UnterminatedBlockCommentRule(_ScannerIssueRule):
    @property
    def rule_id(self) -> str:
        return "structural.unterminatedBlockComment"

    @property
    def name(self) -> str:
        return "unterminated-block-comment"

    @property
    def severity(self) -> Severity:
        return Severity.ERROR


class MalformedSectionBreakRule(_ScannerIssueRule):
    @property
    def rule_id(self) -> str:
        return "structural.malformedSectionBreak"

    @property
    def name(self) -> str:
        return "malformed-section-break"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING


class MaxDepthRule(_ScannerIssueRule):
    @property
    def rule_id(self) -> str:
        return "structural.maxDepth"

    @property
    def name(self) -> str:
        return "max-depth"

    @property
    def severity(self) -> Severity:
        return Severity.ERROR

    @property
    def description(self) -> str:
        return f"Block nesting deeper than {self.settings.max_depth} levels is not analysed."
