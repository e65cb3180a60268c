from abc import ABC, abstractmethod

from mstyle_scanner import ScanResult

from ..models import RuleScope, Severity, Violation, ViolationKind
from ..settings import LintSettings


class BaseRule(ABC):
    """Abstract base class for all style rules."""

    def __init__(self, settings: LintSettings | None = None):
        self.settings = settings or LintSettings()

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique rule identifier (e.g., 'naming.length')."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable rule name (e.g., 'short-name')."""
        pass

    @property
    @abstractmethod
    def severity(self) -> Severity:
        """Default severity for this rule."""
        pass

    @property
    def scope(self) -> RuleScope:
        """Which files the rule applies to."""
        return RuleScope.ALL

    @property
    def kind(self) -> ViolationKind:
        return ViolationKind.RULE

    @property
    def description(self) -> str:
        """Detailed description of what this rule checks."""
        return ""

    @abstractmethod
    def check(self, scan: ScanResult) -> list[Violation]:
        """Run the check and return found violations."""
        pass

    # Helper method for consistent violation creation
    def _create_issue(
        self,
        scan: ScanResult,
        line: int,
        message: str,
        column: int | None = None,
    ) -> Violation:
        """Helper to create a violation with rule defaults."""
        return Violation(
            file_path=scan.path,
            line=line,
            rule_id=self.rule_id,
            message=message,
            severity=self.severity,
            column=column,
            kind=self.kind,
        )
