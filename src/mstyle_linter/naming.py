"""Identifier case classification and declaration collection.

Declarations come from the roles the scanner attaches to identifier tokens.
Each name is reported once per enclosing function (or once at script level),
at its first declaration in source order.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from mstyle_scanner import BlockKind, IdentifierRole, ScanResult, Statement, Token, TokenKind

_LOWER_CAMEL = re.compile(r"[a-z][a-zA-Z0-9]*(?:_[0-9][a-zA-Z0-9]*)*")
_UPPER_CAMEL = re.compile(r"[A-Z][a-zA-Z0-9]*")
_UPPER_SNAKE = re.compile(r"[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*")


class CaseStyle(str, Enum):
    LOWER_CAMEL = "lowerCamelCase"
    UPPER_CAMEL = "UpperCamelCase"
    UPPER_SNAKE = "UPPER_SNAKE_CASE"
    OTHER = "other"


def is_lower_camel_case(name: str) -> bool:
    return _LOWER_CAMEL.fullmatch(name) is not None


def is_upper_camel_case(name: str) -> bool:
    return _UPPER_CAMEL.fullmatch(name) is not None


def is_upper_snake_case(name: str) -> bool:
    return _UPPER_SNAKE.fullmatch(name) is not None


def classify_case(name: str) -> CaseStyle:
    """Return the most specific case style ``name`` conforms to.

    All-capital names without underscores (``MAX``) match both UpperCamelCase
    and UPPER_SNAKE_CASE; they classify as UPPER_SNAKE_CASE.
    """
    if is_lower_camel_case(name):
        return CaseStyle.LOWER_CAMEL
    if is_upper_snake_case(name) and not any(c.islower() for c in name):
        return CaseStyle.UPPER_SNAKE
    if is_upper_camel_case(name):
        return CaseStyle.UPPER_CAMEL
    return CaseStyle.OTHER


@dataclass(frozen=True)
class Declaration:
    name: str
    role: IdentifierRole
    line: int
    column: int
    scope: int | None
    token: Token


def _opened_function(scan: ScanResult, statement: Statement) -> int | None:
    # in files without `end` the signature still belongs to the previous function
    for index, block in enumerate(scan.blocks):
        if block.kind == BlockKind.FUNCTION and block.start_line == statement.line:
            return index
    return None


def collect_declarations(scan: ScanResult) -> list[Declaration]:
    declarations: list[Declaration] = []
    seen: set = set()

    for statement in scan.statements:
        outer = scan.enclosing_function(statement.block)
        first = statement.tokens[0]
        inner = outer
        if first.kind == TokenKind.KEYWORD and first.text == "function":
            opened = _opened_function(scan, statement)
            if opened is not None:
                inner = opened
                outer = scan.enclosing_function(scan.blocks[opened].parent)

        for token in statement.tokens:
            if token.role is None:
                continue
            # a function's own name lives in the outer scope, its arguments inside it
            scope = outer if token.role in (IdentifierRole.FUNCTION, IdentifierRole.METHOD) else inner
            namespace = "field" if token.role == IdentifierRole.STRUCTURE_FIELD else "name"
            key = (scope, namespace, token.text)
            if key in seen:
                continue
            seen.add(key)
            declarations.append(
                Declaration(
                    name=token.text,
                    role=token.role,
                    line=token.line,
                    column=token.start + 1,
                    scope=scope,
                    token=token,
                )
            )
    return declarations


SmallScopePredicate = Callable[[ScanResult, int | None], bool]


def is_primary_function(scan: ScanResult, index: int) -> bool:
    """The first function of a function file, i.e. the file's entry point"""
    if not scan.statements:
        return False
    first = scan.statements[0]
    return (
        first.tokens[0].kind == TokenKind.KEYWORD
        and first.tokens[0].text == "function"
        and scan.blocks[index].start_line == first.line
    )


def body_length_small_scope(max_lines: int = 10) -> SmallScopePredicate:
    """Build a predicate accepting short local and nested functions.

    This is an approximation: the body length is measured in physical lines
    between the signature and the closing ``end`` (or the next function when
    the file omits ``end``), so comments and blank lines count. The primary
    function of a file, class methods and script code never qualify.
    """

    def predicate(scan: ScanResult, function_block: int | None) -> bool:
        if function_block is None:
            return False
        block = scan.blocks[function_block]
        if block.kind != BlockKind.FUNCTION or block.end_line is None:
            return False
        if block.parent is not None and scan.blocks[block.parent].kind != BlockKind.FUNCTION:
            return False
        if block.parent is None and is_primary_function(scan, function_block):
            return False
        body = block.end_line - block.start_line - (0 if block.implicit_end else 1)
        return body <= max_lines

    return predicate


def role_label(role: IdentifierRole) -> str:
    return role.value.replace("_", " ")
