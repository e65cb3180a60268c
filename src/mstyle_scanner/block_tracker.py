"""Keyword-stack state machine for block nesting.

Blocks are tracked with an explicit stack of frames rather than by recursive
descent, so adversarial nesting is bounded by ``max_depth`` instead of the
interpreter's call stack.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from .node_types import Block, BlockKind, StructuralIssue, Token, TokenKind
from .patterns import is_section_header

BLOCK_OPENERS: dict[str, BlockKind] = {
    "for": BlockKind.FOR,
    "parfor": BlockKind.PARFOR,
    "while": BlockKind.WHILE,
    "if": BlockKind.IF,
    "switch": BlockKind.SWITCH,
    "try": BlockKind.TRY,
    "spmd": BlockKind.SPMD,
    "function": BlockKind.FUNCTION,
    "classdef": BlockKind.CLASSDEF,
}

CLASS_SECTIONS: dict[str, BlockKind] = {
    "methods": BlockKind.METHODS,
    "properties": BlockKind.PROPERTIES,
    "events": BlockKind.EVENTS,
    "enumeration": BlockKind.ENUMERATION,
}

UNBALANCED = "structural.unbalancedBlock"
MAX_DEPTH = "structural.maxDepth"


class ScopeState(str, Enum):
    TOP_LEVEL = "top_level"
    IN_FUNCTION = "in_function"
    IN_CLASS = "in_class"
    IN_LOOP = "in_loop"
    IN_CONDITIONAL = "in_conditional"
    IN_BLOCK = "in_block"


_SCOPE_OF_KIND = {
    BlockKind.FUNCTION: ScopeState.IN_FUNCTION,
    BlockKind.CLASSDEF: ScopeState.IN_CLASS,
    BlockKind.METHODS: ScopeState.IN_CLASS,
    BlockKind.PROPERTIES: ScopeState.IN_CLASS,
    BlockKind.EVENTS: ScopeState.IN_CLASS,
    BlockKind.ENUMERATION: ScopeState.IN_CLASS,
    BlockKind.FOR: ScopeState.IN_LOOP,
    BlockKind.PARFOR: ScopeState.IN_LOOP,
    BlockKind.WHILE: ScopeState.IN_LOOP,
    BlockKind.IF: ScopeState.IN_CONDITIONAL,
    BlockKind.SWITCH: ScopeState.IN_CONDITIONAL,
    BlockKind.CASE: ScopeState.IN_CONDITIONAL,
}


@dataclass
class _OpenBlock:
    kind: BlockKind
    start_line: int
    parent: int | None
    attributes: str = ""
    end_line: int | None = None
    name: str | None = None
    params: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    implicit_end: bool = False

    def freeze(self) -> Block:
        return Block(
            kind=self.kind,
            start_line=self.start_line,
            end_line=self.end_line,
            parent=self.parent,
            attributes=self.attributes,
            name=self.name,
            params=self.params,
            outputs=self.outputs,
            implicit_end=self.implicit_end,
        )


@dataclass
class _Frame:
    kind: BlockKind
    index: int
    indents: bool = True


def _is_keyword(token: Token, *words: str) -> bool:
    return token.kind == TokenKind.KEYWORD and token.depth == 0 and token.text in words


def _depth_zero_ends(tokens: Sequence[Token]) -> list[Token]:
    return [t for t in tokens if _is_keyword(t, "end")]


def detect_endless_functions(statements: Sequence[Sequence[Token]]) -> bool:
    """True when the file's functions are not terminated by ``end``.

    Either every function in a file ends with ``end`` or none does. When the
    depth-0 ``end`` count does not exceed the non-function openers, the
    functions must be the unterminated kind.
    """
    functions = openers = ends = 0
    for tokens in statements:
        first = tokens[0]
        if _is_keyword(first, "classdef"):
            return False
        if _is_keyword(first, "function"):
            functions += 1
        elif first.kind == TokenKind.KEYWORD and first.depth == 0 and first.text in BLOCK_OPENERS:
            openers += 1
        elif first.kind == TokenKind.IDENTIFIER and first.text == "arguments" and is_section_header(tokens):
            openers += 1
        ends += len(_depth_zero_ends(tokens))
    return functions > 0 and ends <= openers


@dataclass
class BlockTracker:
    """Tracks open blocks statement by statement"""

    max_depth: int = 100
    endless_functions: bool = False
    blocks: list[_OpenBlock] = field(default_factory=list)
    issues: list[StructuralIssue] = field(default_factory=list)
    halted: bool = False
    _stack: list[_Frame] = field(default_factory=list)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def level(self) -> int:
        """Number of open frames that indent their body"""
        return sum(1 for frame in self._stack if frame.indents)

    @property
    def current_block(self) -> int | None:
        return self._stack[-1].index if self._stack else None

    @property
    def state(self) -> ScopeState:
        if not self._stack:
            return ScopeState.TOP_LEVEL
        return _SCOPE_OF_KIND.get(self._stack[-1].kind, ScopeState.IN_BLOCK)

    def expected_indent(self, first: Token | None) -> int | None:
        """Expected indent level of a line whose first token is ``first``"""
        if self.halted:
            return None
        level = self.level
        if first is None or first.kind != TokenKind.KEYWORD or first.depth != 0:
            return level
        top = self._stack[-1] if self._stack else None
        if first.text == "end":
            if top is None:
                return 0
            drop = 1 if top.indents else 0
            if top.kind == BlockKind.CASE and len(self._stack) > 1 and self._stack[-2].indents:
                drop += 1
            return max(level - drop, 0)
        if first.text in ("else", "elseif", "catch"):
            return max(level - 1, 0)
        if first.text in ("case", "otherwise"):
            if top is not None and top.kind == BlockKind.CASE:
                return max(level - 1, 0)
            return level
        if first.text == "function" and self.endless_functions:
            return 0
        return level

    def process_statement(self, tokens: Sequence[Token], line: int) -> int | None:
        """Apply one statement; returns the index of a function block it opened"""
        if self.halted or not tokens:
            return None
        opened = None
        first = tokens[0]
        top = self._stack[-1] if self._stack else None

        if _is_keyword(first, "function"):
            if self.endless_functions:
                self._close_endless(line)
                opened = self._push(BlockKind.FUNCTION, line, indents=False)
            else:
                opened = self._push(BlockKind.FUNCTION, line)
        elif first.kind == TokenKind.KEYWORD and first.depth == 0 and first.text in BLOCK_OPENERS:
            self._push(BLOCK_OPENERS[first.text], line)
        elif _is_keyword(first, "case", "otherwise"):
            if top is not None and top.kind == BlockKind.CASE:
                self._pop(line - 1)
                self._push(BlockKind.CASE, line)
            elif top is not None and top.kind == BlockKind.SWITCH:
                self._push(BlockKind.CASE, line)
        elif first.kind == TokenKind.IDENTIFIER and first.depth == 0 and is_section_header(tokens):
            attributes = "".join(t.text for t in tokens[1:])
            if first.text in CLASS_SECTIONS and top is not None and top.kind == BlockKind.CLASSDEF:
                self._push(CLASS_SECTIONS[first.text], line, attributes=attributes)
            elif first.text == "arguments" and top is not None and top.kind == BlockKind.FUNCTION:
                self._push(BlockKind.ARGUMENTS, line, attributes=attributes)

        if self.halted:
            return opened
        for token in _depth_zero_ends(tokens):
            self._close(token, line)
        return opened

    def describe_function(self, index: int, name: str | None, params, outputs) -> None:
        block = self.blocks[index]
        block.name = name
        block.params = tuple(params)
        block.outputs = tuple(outputs)

    def finish(self, last_line: int) -> list[Block]:
        """Close out the file and return the frozen blocks"""
        if not self.halted:
            if self.endless_functions:
                self._close_endless(last_line + 1, at_eof=True)
            elif self._stack:
                outer = self.blocks[self._stack[0].index]
                self.issues.append(
                    StructuralIssue(
                        rule_id=UNBALANCED,
                        line=outer.start_line,
                        message=(
                            f"'{outer.kind.value}' block opened here is never closed "
                            f"({len(self._stack)} open block(s) at end of file)"
                        ),
                    )
                )
                self._stack.clear()
        return [block.freeze() for block in self.blocks]

    def _push(self, kind: BlockKind, line: int, indents: bool = True, attributes: str = "") -> int | None:
        if len(self._stack) >= self.max_depth:
            self.issues.append(
                StructuralIssue(
                    rule_id=MAX_DEPTH,
                    line=line,
                    message=f"Block nesting exceeds maximum depth of {self.max_depth}; file not fully parsed",
                )
            )
            self.halted = True
            return None
        index = len(self.blocks)
        self.blocks.append(_OpenBlock(kind=kind, start_line=line, parent=self.current_block, attributes=attributes))
        self._stack.append(_Frame(kind=kind, index=index, indents=indents))
        return index

    def _pop(self, end_line: int, implicit: bool = False) -> None:
        frame = self._stack.pop()
        block = self.blocks[frame.index]
        block.end_line = end_line
        block.implicit_end = implicit

    def _close(self, token: Token, line: int) -> None:
        top = self._stack[-1] if self._stack else None
        if top is None or (self.endless_functions and top.kind == BlockKind.FUNCTION):
            self.issues.append(
                StructuralIssue(
                    rule_id=UNBALANCED,
                    line=line,
                    column=token.start + 1,
                    message="Unexpected 'end' with no open block",
                )
            )
            return
        if top.kind == BlockKind.CASE:
            self._pop(line)
        self._pop(line)

    def _close_endless(self, next_line: int, at_eof: bool = False) -> None:
        """Close everything before a new unterminated function starts"""
        open_blocks = [f for f in self._stack if f.kind != BlockKind.FUNCTION]
        if open_blocks:
            outer = self.blocks[open_blocks[0].index]
            where = "end of file" if at_eof else f"line {next_line}"
            self.issues.append(
                StructuralIssue(
                    rule_id=UNBALANCED,
                    line=outer.start_line,
                    message=f"'{outer.kind.value}' block opened here is not closed before {where}",
                )
            )
        while self._stack:
            implicit = self._stack[-1].kind == BlockKind.FUNCTION
            self._pop(next_line - 1, implicit=implicit)
