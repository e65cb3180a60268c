from typing import Iterator

from mstyle_scanner import ScanResult, Token, TokenKind

from ..models import Severity, Violation
from .base import BaseRule

SPACED_OPERATORS = frozenset(
    {"=", "==", "~=", "<", "<=", ">", ">=", "&&", "||", "&", "|", "+", "-", "*", "/", "\\", ".*", "./", ".\\"}
)

Neighbours = tuple[Token | None, Token, Token | None]


def _with_neighbours(scan: ScanResult) -> Iterator[Neighbours]:
    """Yield each token with its neighbours on the same physical line"""
    for line in scan.lines:
        tokens = line.tokens
        for i, token in enumerate(tokens):
            prev = tokens[i - 1] if i > 0 else None
            nxt = tokens[i + 1] if i + 1 < len(tokens) else None
            yield prev, token, nxt


def _is_unary(prev: Token, token: Token, nxt: Token | None) -> bool:
    if prev.kind in (TokenKind.COMMA, TokenKind.SEMICOLON) or prev.is_open():
        return True
    if prev.kind == TokenKind.OPERATOR and prev.text not in ("'", ".'"):
        return True
    if prev.kind == TokenKind.KEYWORD and prev.text != "end":
        return True
    # [1 -2] separates elements rather than subtracting
    spaced_before = token.start > prev.end
    tight_after = nxt is not None and nxt.start == token.end
    return token.enclosure in ("[", "{") and spaced_before and tight_after


class OperatorSpacingRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "whitespace.operatorSpacing"

    @property
    def name(self) -> str:
        return "operator-spacing"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def description(self) -> str:
        return "Surround binary operators with exactly one space."

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        for prev, token, nxt in _with_neighbours(scan):
            if token.kind != TokenKind.OPERATOR or token.text not in SPACED_OPERATORS:
                continue
            if prev is None:
                continue
            if token.text == "=" and token.depth > 0:
                continue
            if token.text in ("+", "-") and _is_unary(prev, token, nxt):
                continue

            gaps = [token.start - prev.end]
            if nxt is not None:
                gaps.append(nxt.start - token.end)
            if 0 in gaps:
                message = f"Missing space around operator '{token.text}'"
            elif any(gap > 1 for gap in gaps):
                message = f"Extra space around operator '{token.text}'"
            else:
                continue
            issues.append(self._create_issue(scan, token.line, message, column=token.start + 1))
        return issues


class CommaSpacingRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "whitespace.commaSpacing"

    @property
    def name(self) -> str:
        return "comma-spacing"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def description(self) -> str:
        return "No space before a comma and exactly one space after it."

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        for prev, token, nxt in _with_neighbours(scan):
            if token.kind != TokenKind.COMMA:
                continue
            if prev is not None and token.start > prev.end:
                message = "Unexpected space before comma"
            elif nxt is not None and nxt.start == token.end:
                message = "Missing space after comma"
            elif nxt is not None and nxt.start - token.end > 1:
                message = "Extra space after comma"
            else:
                continue
            issues.append(self._create_issue(scan, token.line, message, column=token.start + 1))
        return issues


class ParenPaddingRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "whitespace.parenPadding"

    @property
    def name(self) -> str:
        return "paren-padding"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        for prev, token, nxt in _with_neighbours(scan):
            if token.is_open() and nxt is not None and nxt.start > token.end:
                issues.append(
                    self._create_issue(
                        scan, token.line, f"Unexpected space after '{token.text}'", column=token.start + 1
                    )
                )
            elif token.is_close() and prev is not None and token.start > prev.end and not prev.is_open():
                issues.append(
                    self._create_issue(
                        scan, token.line, f"Unexpected space before '{token.text}'", column=token.start + 1
                    )
                )
        return issues


class PunctuationSpacingRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "whitespace.beforePunctuation"

    @property
    def name(self) -> str:
        return "space-before-punctuation"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        for prev, token, _ in _with_neighbours(scan):
            is_colon = token.kind == TokenKind.OPERATOR and token.text == ":"
            if not (is_colon or token.kind == TokenKind.SEMICOLON):
                continue
            if prev is None or token.start == prev.end:
                continue
            if prev.kind in (TokenKind.COMMA, TokenKind.SEMICOLON, TokenKind.OPERATOR) or prev.is_open():
                continue
            issues.append(
                self._create_issue(
                    scan, token.line, f"Unexpected space before '{token.text}'", column=token.start + 1
                )
            )
        return issues


class TrailingWhitespaceRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "whitespace.trailing"

    @property
    def name(self) -> str:
        return "trailing-whitespace"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        for line in scan.lines:
            stripped = line.text.rstrip(" \t")
            if stripped != line.text:
                issues.append(
                    self._create_issue(scan, line.number, "Trailing whitespace", column=len(stripped) + 1)
                )
        return issues
