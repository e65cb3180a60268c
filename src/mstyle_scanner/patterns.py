"""Syntactic pattern recognition on statements."""

import re
from dataclasses import dataclass
from typing import Sequence

from .node_types import Block, BlockKind, IdentifierRole, Statement, Token, TokenKind

_CONSTANT_LIKE = re.compile(r"[A-Z][A-Z0-9_]*")

RoleMap = dict[tuple[int, int], IdentifierRole]


@dataclass(frozen=True)
class FunctionSignature:
    """Parsed ``function [outputs] = name(params)`` line"""

    name: str | None
    name_token: Token | None
    params: tuple[Token, ...] = ()
    outputs: tuple[Token, ...] = ()


def is_section_header(tokens: Sequence[Token]) -> bool:
    """Check for a bare keyword or ``keyword (Attr, ...)`` rather than a call.

    Attributes are always capitalized (``Static``, ``Constant``, ``Test``), which
    tells ``methods (Static)`` apart from ``methods(obj)``.
    """
    if len(tokens) == 1:
        return True
    if tokens[1].text != "(" or len(tokens) < 3:
        return False
    attr = tokens[2]
    return attr.kind == TokenKind.IDENTIFIER and attr.text[:1].isupper()


def parse_function_signature(tokens: Sequence[Token]) -> FunctionSignature:
    body = list(tokens[1:])
    eq = next(
        (i for i, t in enumerate(body) if t.kind == TokenKind.OPERATOR and t.text == "=" and t.depth == 0),
        None,
    )
    outputs: tuple[Token, ...] = ()
    rest = body
    if eq is not None:
        outputs = tuple(t for t in body[:eq] if t.kind == TokenKind.IDENTIFIER)
        rest = body[eq + 1 :]

    if not rest or rest[0].kind != TokenKind.IDENTIFIER:
        return FunctionSignature(name=None, name_token=None, outputs=outputs)

    name_token: Token | None = rest[0]
    name = rest[0].text
    i = 1
    # get.Prop / set.Prop accessors and dotted names carry no role
    while i + 1 < len(rest) and rest[i].text == "." and rest[i + 1].kind == TokenKind.IDENTIFIER:
        name += "." + rest[i + 1].text
        name_token = None
        i += 2

    params = []
    if i < len(rest) and rest[i].text == "(":
        open_depth = rest[i].depth
        for t in rest[i + 1 :]:
            if t.is_close() and t.depth == open_depth:
                break
            if t.kind == TokenKind.IDENTIFIER:
                params.append(t)

    return FunctionSignature(name=name, name_token=name_token, params=tuple(params), outputs=outputs)


def enclosing_function(blocks: Sequence[Block], index: int | None) -> int | None:
    while index is not None:
        if blocks[index].kind == BlockKind.FUNCTION:
            return index
        index = blocks[index].parent
    return None


def inside_class(blocks: Sequence[Block], index: int | None) -> bool:
    while index is not None:
        if blocks[index].kind == BlockKind.CLASSDEF:
            return True
        index = blocks[index].parent
    return False


def infer_roles(statements: Sequence[Statement], blocks: Sequence[Block]) -> RoleMap:
    """Map ``(line, start column)`` of declaring identifiers to their role"""
    roles: RoleMap = {}

    def assign(token: Token, role: IdentifierRole) -> None:
        roles[(token.line, token.start)] = role

    for statement in statements:
        tokens = statement.tokens
        first = tokens[0]
        inner = blocks[statement.block] if statement.block is not None else None

        if first.kind == TokenKind.KEYWORD:
            if first.text == "function":
                signature = parse_function_signature(tokens)
                for token in signature.outputs + signature.params:
                    assign(token, IdentifierRole.VARIABLE)
                if signature.name_token is not None:
                    in_methods = inner is not None and inner.kind == BlockKind.METHODS
                    assign(signature.name_token, IdentifierRole.METHOD if in_methods else IdentifierRole.FUNCTION)
            elif first.text == "classdef":
                name = next((t for t in tokens[1:] if t.kind == TokenKind.IDENTIFIER and t.depth == 0), None)
                if name is not None:
                    assign(name, IdentifierRole.CLASS)
            elif first.text in ("for", "parfor"):
                counter = next((t for t in tokens[1:3] if t.kind == TokenKind.IDENTIFIER), None)
                if counter is not None:
                    assign(counter, IdentifierRole.LOOP_COUNTER)
            elif first.text == "persistent":
                for token in tokens[1:]:
                    if token.kind == TokenKind.IDENTIFIER:
                        assign(token, IdentifierRole.VARIABLE)
            continue

        if inner is not None and inner.kind == BlockKind.PROPERTIES:
            if first.kind == TokenKind.IDENTIFIER and "Constant" in inner.attributes:
                assign(first, IdentifierRole.CONSTANT)
            continue
        if inner is not None and inner.kind in (BlockKind.ARGUMENTS, BlockKind.EVENTS, BlockKind.ENUMERATION):
            continue

        _infer_assignment(statement, blocks, assign)

    return roles


def _infer_assignment(statement: Statement, blocks: Sequence[Block], assign) -> None:
    tokens = statement.tokens
    eq = next(
        (i for i, t in enumerate(tokens) if t.kind == TokenKind.OPERATOR and t.text == "=" and t.depth == 0),
        None,
    )
    if not eq:
        return
    lhs, rhs = tokens[:eq], tokens[eq + 1 :]
    first = lhs[0]

    if first.text == "[":
        for prev, token, nxt in zip(lhs, lhs[1:], list(lhs[2:]) + [None]):
            if token.kind != TokenKind.IDENTIFIER or token.depth != first.depth + 1:
                continue
            if prev.text == "." or (nxt is not None and nxt.text in (".", "(", "{")):
                continue
            assign(token, IdentifierRole.VARIABLE)
        return

    if first.kind != TokenKind.IDENTIFIER:
        return

    function_index = enclosing_function(blocks, statement.block)

    if len(lhs) == 1:
        role = IdentifierRole.VARIABLE
        if function_index is None and not inside_class(blocks, statement.block) and _CONSTANT_LIKE.fullmatch(first.text):
            role = IdentifierRole.CONSTANT
        elif len(rhs) > 1 and rhs[0].text == "struct" and rhs[1].text == "(":
            role = IdentifierRole.STRUCTURE
        assign(first, role)
        return

    second = lhs[1]
    if second.kind == TokenKind.OPERATOR and second.text == ".":
        if function_index is not None:
            owner = blocks[function_index]
            if first.text in owner.params or first.text in owner.outputs:
                return
        assign(first, IdentifierRole.STRUCTURE)
        for prev, token in zip(lhs, lhs[1:]):
            if prev.text == "." and token.kind == TokenKind.IDENTIFIER and token.depth == first.depth:
                assign(token, IdentifierRole.STRUCTURE_FIELD)
        return

    if second.is_open():
        assign(first, IdentifierRole.VARIABLE)
