import re
from abc import abstractmethod
from enum import Enum
from typing import Iterator, Sequence

from mstyle_scanner import ScanResult, Token, TokenKind

from ..models import Severity, Violation
from .base import BaseRule

MESSAGE_ID = re.compile(r"[A-Za-z]\w*(?::[A-Za-z]\w*)+")

# warning('off', id) and friends change warning state rather than raise
_WARNING_STATES = frozenset({"on", "off", "query", "error", "backtrace", "verbose", "once", "always"})


class IdProblem(str, Enum):
    MISSING = "missing"
    MALFORMED = "malformed"


def _arguments(tokens: Sequence[Token], open_index: int) -> list[list[Token]]:
    """Split the argument list that opens at ``open_index``"""
    open_paren = tokens[open_index]
    args: list[list[Token]] = [[]]
    for token in tokens[open_index + 1 :]:
        if token.is_close() and token.depth == open_paren.depth:
            break
        if token.kind == TokenKind.COMMA and token.depth == open_paren.depth + 1:
            args.append([])
            continue
        args[-1].append(token)
    return [arg for arg in args if arg]


def _literal(token: Token) -> str:
    text = token.text[1:]
    if text.endswith(token.text[0]):
        text = text[:-1]
    return text


def find_message_calls(scan: ScanResult) -> Iterator[tuple[Token, list[list[Token]]]]:
    """Yield ``error(...)``/``warning(...)`` call tokens with their arguments"""
    for statement in scan.statements:
        tokens = statement.tokens
        for i, token in enumerate(tokens[:-1]):
            if token.kind != TokenKind.IDENTIFIER or token.text not in ("error", "warning"):
                continue
            if i > 0 and tokens[i - 1].text == ".":
                continue
            if tokens[i + 1].text != "(":
                continue
            yield token, _arguments(tokens, i + 1)


def classify_call(name: str, args: list[list[Token]]) -> IdProblem | None:
    if not args:
        return None
    first = args[0]
    if len(first) != 1 or first[0].kind != TokenKind.STRING:
        return None
    value = _literal(first[0])
    if name == "warning" and value.lower() in _WARNING_STATES:
        return None
    if len(args) == 1:
        return IdProblem.MISSING
    if MESSAGE_ID.fullmatch(value):
        return None
    if re.search(r"\s", value) or ":" not in value:
        return IdProblem.MISSING
    return IdProblem.MALFORMED


class _MessageIdRule(BaseRule):
    problem: IdProblem

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        for call, args in find_message_calls(scan):
            if classify_call(call.text, args) is self.problem:
                issues.append(
                    self._create_issue(scan, call.line, self._message(call, args), column=call.start + 1)
                )
        return issues

    @abstractmethod
    def _message(self, call: Token, args: list[list[Token]]) -> str:
        pass


class MissingMessageIdRule(_MessageIdRule):
    problem = IdProblem.MISSING

    @property
    def rule_id(self) -> str:
        return "errors.missingId"

    @property
    def name(self) -> str:
        return "missing-message-id"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def description(self) -> str:
        return "Pass a 'component:mnemonic' identifier as the first argument of error() and warning()."

    def _message(self, call: Token, args: list[list[Token]]) -> str:
        return f"{call.text}() call has no message identifier"


class MalformedMessageIdRule(_MessageIdRule):
    problem = IdProblem.MALFORMED

    @property
    def rule_id(self) -> str:
        return "errors.malformedId"

    @property
    def name(self) -> str:
        return "malformed-message-id"

    @property
    def severity(self) -> Severity:
        return Severity.ERROR

    def _message(self, call: Token, args: list[list[Token]]) -> str:
        return (
            f"Message identifier '{_literal(args[0][0])}' does not match "
            "'component:mnemonic[:mnemonic]'"
        )
