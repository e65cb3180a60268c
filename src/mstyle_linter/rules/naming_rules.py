from typing import Callable

from mstyle_scanner import IdentifierRole, ScanResult

from ..models import Severity, Violation
from ..naming import (
    Declaration,
    SmallScopePredicate,
    body_length_small_scope,
    collect_declarations,
    is_lower_camel_case,
    is_upper_camel_case,
    is_upper_snake_case,
    role_label,
)
from ..settings import LintSettings
from .base import BaseRule


class _CaseRule(BaseRule):
    roles: frozenset[IdentifierRole] = frozenset()
    style = ""
    matches: Callable[[str], bool]

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, scan: ScanResult) -> list[Violation]:
        return [
            self._create_issue(
                scan,
                declaration.line,
                f"{role_label(declaration.role).capitalize()} '{declaration.name}' should be {self.style}",
                column=declaration.column,
            )
            for declaration in collect_declarations(scan)
            if declaration.role in self.roles and not self.matches(declaration.name)
        ]


class LowerCamelCaseRule(_CaseRule):
    roles = frozenset(
        {
            IdentifierRole.VARIABLE,
            IdentifierRole.FUNCTION,
            IdentifierRole.METHOD,
            IdentifierRole.STRUCTURE_FIELD,
            IdentifierRole.LOOP_COUNTER,
        }
    )
    style = "lowerCamelCase"
    matches = staticmethod(is_lower_camel_case)

    @property
    def rule_id(self) -> str:
        return "naming.lowerCamelCase"

    @property
    def name(self) -> str:
        return "lower-camel-case"

    @property
    def description(self) -> str:
        return (
            "Variables, functions, methods, fields and loop counters start lowercase and "
            "use no underscores except before a digit."
        )


class UpperCamelCaseRule(_CaseRule):
    roles = frozenset({IdentifierRole.CLASS, IdentifierRole.STRUCTURE})
    style = "UpperCamelCase"
    matches = staticmethod(is_upper_camel_case)

    @property
    def rule_id(self) -> str:
        return "naming.upperCamelCase"

    @property
    def name(self) -> str:
        return "upper-camel-case"


class ConstantCaseRule(_CaseRule):
    roles = frozenset({IdentifierRole.CONSTANT})
    style = "UPPER_SNAKE_CASE"
    matches = staticmethod(is_upper_snake_case)

    @property
    def rule_id(self) -> str:
        return "naming.constantCase"

    @property
    def name(self) -> str:
        return "constant-case"


class NameLengthRule(BaseRule):
    """Names must be descriptive; short names are tolerated only in small scopes."""

    def __init__(
        self,
        settings: LintSettings | None = None,
        small_scope: SmallScopePredicate | None = None,
    ):
        super().__init__(settings)
        self.small_scope = small_scope or body_length_small_scope(self.settings.small_scope_lines)

    @property
    def rule_id(self) -> str:
        return "naming.length"

    @property
    def name(self) -> str:
        return "short-name"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def description(self) -> str:
        return f"Names must be at least {self.settings.min_name_length} characters outside small scopes."

    def check(self, scan: ScanResult) -> list[Violation]:
        minimum = self.settings.min_name_length
        issues = []
        for declaration in collect_declarations(scan):
            if declaration.role == IdentifierRole.LOOP_COUNTER or len(declaration.name) >= minimum:
                continue
            if self._in_small_scope(scan, declaration):
                continue
            issues.append(
                self._create_issue(
                    scan,
                    declaration.line,
                    f"Name '{declaration.name}' is shorter than {minimum} characters",
                    column=declaration.column,
                )
            )
        return issues

    def _in_small_scope(self, scan: ScanResult, declaration: Declaration) -> bool:
        # a function's own name is judged by where it is declared, not by its body
        if declaration.role in (IdentifierRole.FUNCTION, IdentifierRole.METHOD):
            return False
        return self.small_scope(scan, declaration.scope)


class LoopCounterRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "naming.loopCounter"

    @property
    def name(self) -> str:
        return "imaginary-loop-counter"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def description(self) -> str:
        return "Do not use 'i' or 'j' as loop counters; they shadow the imaginary unit."

    def check(self, scan: ScanResult) -> list[Violation]:
        # every loop is checked, even when the name was already declared
        return [
            self._create_issue(
                scan,
                token.line,
                f"Loop counter '{token.text}' shadows the imaginary unit",
                column=token.start + 1,
            )
            for token in scan.tokens
            if token.role == IdentifierRole.LOOP_COUNTER and token.text in ("i", "j")
        ]
