import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from mstyle_scanner import MScanner, ScanResult

from .errors import RuleInternalError
from .models import FileReport, RuleScope, Severity, Violation, ViolationKind
from .registry import RuleRegistry
from .rules.base import BaseRule
from .settings import LintSettings
from .suppression import apply_suppressions, collect_suppressions

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "internal.ruleError"
UNREADABLE = "io.unreadable"
FILE_TOO_LARGE = "io.fileTooLarge"


def io_violation(path: str, rule_id: str, message: str) -> Violation:
    return Violation(
        file_path=path,
        line=0,
        rule_id=rule_id,
        message=message,
        severity=Severity.ERROR,
        kind=ViolationKind.IO,
    )


class LinterEngine:
    """Core engine for style checking: scans a file and runs the enabled rules on it"""

    def __init__(
        self,
        settings: LintSettings | None = None,
        registry: RuleRegistry | None = None,
        rules: Sequence[BaseRule] | None = None,
    ):
        self.settings = settings or LintSettings()
        self.registry = registry or RuleRegistry(self.settings)
        self.rules: list[BaseRule] = list(rules) if rules is not None else self.registry.configure(self.settings)
        self.scanner = MScanner(max_depth=self.settings.max_depth)
        self.severity_overrides: dict[str, Severity] = self.settings.severity_overrides()

    def rules_for(self, is_test: bool) -> list[BaseRule]:
        skipped = RuleScope.SOURCE if is_test else RuleScope.TEST
        return [rule for rule in self.rules if rule.scope != skipped]

    def run_all(self, scan: ScanResult, rules: Sequence[BaseRule] | None = None) -> list[Violation]:
        """Run ``rules`` (default: every enabled rule) in order and concatenate their violations"""
        return [v for found in self._evaluate(scan, self.rules if rules is None else rules) for v in found]

    def check_string(self, text: str, path: str = "", is_test: bool = False) -> list[Violation]:
        scan = self.scanner.scan_string(text, path)
        return self.run_all(scan, self.rules_for(is_test))

    def analyze_file(self, file_path: Path, is_test: bool = False) -> FileReport:
        """Run all lint checks on a file; IO failures become ``io.*`` violations"""
        path = str(file_path)
        try:
            size = Path(file_path).stat().st_size
            if size > self.settings.max_file_size:
                logger.warning("Skipping %s: %d bytes exceeds limit", path, size)
                return FileReport(
                    path=path,
                    violations=(
                        io_violation(
                            path,
                            FILE_TOO_LARGE,
                            f"File is {size} bytes, larger than the {self.settings.max_file_size} byte limit",
                        ),
                    ),
                    is_test=is_test,
                )
            started = time.perf_counter()
            scan = self.scanner.scan_file(Path(file_path))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            return FileReport(
                path=path,
                violations=(io_violation(path, UNREADABLE, f"Cannot read file: {e}"),),
                is_test=is_test,
            )

        rules = self.rules_for(is_test)
        results = self._evaluate(scan, rules)
        violations = [v for found in results for v in found]
        passed = sum(1 for found in results if not found)

        logger.debug(
            "Checked %s in %.1f ms: %d violation(s)",
            path,
            (time.perf_counter() - started) * 1000,
            len(violations),
        )
        return FileReport(
            path=path,
            violations=tuple(violations),
            checks_run=len(rules),
            passed_checks=passed,
            is_test=is_test,
        )

    def _evaluate(self, scan: ScanResult, rules: Sequence[BaseRule]) -> list[list[Violation]]:
        """Per-rule violations after suppression and severity overrides"""
        suppressions = collect_suppressions(scan)
        return [
            [self._override(v) for v in apply_suppressions(self._run_rule(rule, scan), suppressions)]
            for rule in rules
        ]

    def _run_rule(self, rule: BaseRule, scan: ScanResult) -> list[Violation]:
        try:
            return list(rule.check(scan))
        except Exception as e:
            error = RuleInternalError(rule.rule_id, e)
            logger.warning("%s in %s", error, scan.path, exc_info=True)
            return [
                Violation(
                    file_path=scan.path,
                    line=1 if scan.lines else 0,
                    rule_id=INTERNAL_ERROR,
                    message=str(error),
                    severity=Severity.ERROR,
                    kind=ViolationKind.INTERNAL,
                )
            ]

    def _override(self, violation: Violation) -> Violation:
        severity = self.severity_overrides.get(violation.rule_id)
        if severity is None or severity == violation.severity:
            return violation
        return replace(violation, severity=severity)
