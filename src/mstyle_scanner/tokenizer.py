"""Line tokenizer.

Splits the code part of a physical line into tokens and separates any trailing
comment or ``...`` continuation. Bracket nesting is carried across lines in a
``TokenizerState`` so that multi-line matrix literals keep their depth.
"""

import re
from dataclasses import dataclass, field

from .node_types import Token, TokenKind

KEYWORDS = frozenset(
    {
        "break",
        "case",
        "catch",
        "classdef",
        "continue",
        "else",
        "elseif",
        "end",
        "for",
        "function",
        "global",
        "if",
        "otherwise",
        "parfor",
        "persistent",
        "return",
        "spmd",
        "switch",
        "try",
        "while",
    }
)

# Only keywords at the start of a statement in the right enclosing block
CONTEXTUAL_KEYWORDS = frozenset({"methods", "properties", "events", "enumeration", "arguments"})

# Longest first
OPERATORS = (
    ".^",
    ".*",
    "./",
    ".\\",
    ".'",
    "==",
    "~=",
    "<=",
    ">=",
    "&&",
    "||",
    "+",
    "-",
    "*",
    "/",
    "\\",
    "^",
    "<",
    ">",
    "&",
    "|",
    "~",
    "=",
    ":",
    ".",
    "@",
    "?",
    "!",
)

_IDENTIFIER = re.compile(r"[A-Za-z]\w*")
_NUMBER = re.compile(
    r"0[xX][0-9a-fA-F]+|(?:\d+(?:\.(?![*/\\^'])\d*)?|\.\d+)(?:[eEdD][+-]?\d+)?[ij]?"
)
_OPENERS = "([{"
_CLOSERS = ")]}"


@dataclass
class TokenizerState:
    """Bracket nesting carried from one line to the next"""

    brackets: list[str] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return len(self.brackets)

    @property
    def enclosure(self) -> str:
        return self.brackets[-1] if self.brackets else ""


@dataclass
class LineTokens:
    tokens: list[Token]
    code: str
    comment: str | None = None
    continues: bool = False


def _scan_string(text: str, pos: int, quote: str) -> int:
    """Return the end offset of the string literal opened at ``pos``"""
    i = pos + 1
    while i < len(text):
        if text[i] == quote:
            if i + 1 < len(text) and text[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return len(text)


def _is_transpose(tokens: list[Token], pos: int) -> bool:
    if not tokens:
        return False
    prev = tokens[-1]
    if prev.end != pos:
        return False
    if prev.kind in (TokenKind.IDENTIFIER, TokenKind.NUMBER):
        return True
    if prev.is_close():
        return True
    if prev.kind == TokenKind.OPERATOR and prev.text in ("'", ".'"):
        return True
    return prev.kind == TokenKind.KEYWORD and prev.text == "end"


def tokenize_line(text: str, line_number: int, state: TokenizerState) -> LineTokens:
    """Tokenize one physical line of code, updating ``state`` in place"""
    tokens: list[Token] = []
    comment = None
    continues = False
    code_end = len(text)
    pos = 0

    def emit(kind: TokenKind, start: int, end: int) -> None:
        tokens.append(
            Token(
                kind=kind,
                text=text[start:end],
                line=line_number,
                start=start,
                end=end,
                depth=state.depth,
                enclosure=state.enclosure,
            )
        )

    while pos < len(text):
        ch = text[pos]

        if ch in " \t":
            pos += 1
            continue

        if ch == "%":
            comment = text[pos:]
            code_end = pos
            break

        if text.startswith("...", pos):
            comment = text[pos:]
            code_end = pos
            continues = True
            break

        if ch == '"':
            end = _scan_string(text, pos, '"')
            emit(TokenKind.STRING, pos, end)
            pos = end
            continue

        if ch == "'":
            if _is_transpose(tokens, pos):
                emit(TokenKind.OPERATOR, pos, pos + 1)
                pos += 1
            else:
                end = _scan_string(text, pos, "'")
                emit(TokenKind.STRING, pos, end)
                pos = end
            continue

        match = _IDENTIFIER.match(text, pos)
        if match:
            word = match.group()
            kind = TokenKind.KEYWORD if word in KEYWORDS else TokenKind.IDENTIFIER
            emit(kind, pos, match.end())
            pos = match.end()
            continue

        match = _NUMBER.match(text, pos)
        if match and match.end() > pos:
            emit(TokenKind.NUMBER, pos, match.end())
            pos = match.end()
            continue

        if ch in _OPENERS:
            emit(TokenKind.PAREN, pos, pos + 1)
            state.brackets.append(ch)
            pos += 1
            continue

        if ch in _CLOSERS:
            if state.brackets:
                state.brackets.pop()
            emit(TokenKind.PAREN, pos, pos + 1)
            pos += 1
            continue

        if ch == ",":
            emit(TokenKind.COMMA, pos, pos + 1)
            pos += 1
            continue

        if ch == ";":
            emit(TokenKind.SEMICOLON, pos, pos + 1)
            pos += 1
            continue

        for op in OPERATORS:
            if text.startswith(op, pos):
                emit(TokenKind.OPERATOR, pos, pos + len(op))
                pos += len(op)
                break
        else:
            emit(TokenKind.OPERATOR, pos, pos + 1)
            pos += 1

    if state.depth > 0:
        continues = True

    return LineTokens(tokens=tokens, code=text[:code_end].rstrip(), comment=comment, continues=continues)
