from dataclasses import dataclass
from enum import Enum


class LineKind(str, Enum):
    CODE = "code"
    COMMENT = "comment"
    BLANK = "blank"
    SECTION_BREAK = "section_break"
    BLOCK_COMMENT = "block_comment"


class TokenKind(str, Enum):
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    NUMBER = "number"
    STRING = "string"
    OPERATOR = "operator"
    COMMA = "comma"
    SEMICOLON = "semicolon"
    PAREN = "paren"


class IdentifierRole(str, Enum):
    VARIABLE = "variable"
    FUNCTION = "function"
    METHOD = "method"
    CONSTANT = "constant"
    STRUCTURE = "structure"
    STRUCTURE_FIELD = "structure_field"
    CLASS = "class"
    LOOP_COUNTER = "loop_counter"


class BlockKind(str, Enum):
    FUNCTION = "function"
    CLASSDEF = "classdef"
    FOR = "for"
    PARFOR = "parfor"
    WHILE = "while"
    IF = "if"
    SWITCH = "switch"
    CASE = "case"
    TRY = "try"
    SPMD = "spmd"
    METHODS = "methods"
    PROPERTIES = "properties"
    EVENTS = "events"
    ENUMERATION = "enumeration"
    ARGUMENTS = "arguments"


@dataclass(frozen=True)
class SourceFile:
    """Raw source of one file, split into physical lines"""

    path: str
    text: str
    lines: tuple[str, ...]


@dataclass(frozen=True)
class Token:
    """A lexical unit on a single line; columns are 0-based, end-exclusive"""

    kind: TokenKind
    text: str
    line: int
    start: int
    end: int
    depth: int = 0
    enclosure: str = ""
    role: IdentifierRole | None = None

    def is_open(self) -> bool:
        return self.kind == TokenKind.PAREN and self.text in "([{"

    def is_close(self) -> bool:
        return self.kind == TokenKind.PAREN and self.text in ")]}"


@dataclass(frozen=True)
class Line:
    """A classified physical line"""

    number: int
    text: str
    kind: LineKind
    code: str = ""
    comment: str | None = None
    tokens: tuple[Token, ...] = ()
    continues: bool = False
    is_continuation: bool = False
    indent_level: int | None = None
    block: int | None = None

    @property
    def first_token(self) -> Token | None:
        return self.tokens[0] if self.tokens else None


@dataclass(frozen=True)
class Statement:
    """Tokens of one logical statement, possibly spanning continuation lines"""

    tokens: tuple[Token, ...]
    line: int
    block: int | None = None


@dataclass(frozen=True)
class Block:
    """A keyword-delimited block such as ``for ... end``"""

    kind: BlockKind
    start_line: int
    end_line: int | None = None
    parent: int | None = None
    attributes: str = ""
    name: str | None = None
    params: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    implicit_end: bool = False


@dataclass(frozen=True)
class StructuralIssue:
    """Malformed nesting or comment structure found while scanning"""

    rule_id: str
    line: int
    message: str
    column: int | None = None


@dataclass(frozen=True)
class ScanResult:
    """Result of scanning a source file"""

    source: SourceFile
    lines: tuple[Line, ...]
    tokens: tuple[Token, ...]
    statements: tuple[Statement, ...]
    blocks: tuple[Block, ...]
    structural_issues: tuple[StructuralIssue, ...] = ()
    parse_failed: bool = False
    endless_functions: bool = False

    @property
    def path(self) -> str:
        return self.source.path

    def line(self, number: int) -> Line:
        """Return the 1-based line ``number``"""
        return self.lines[number - 1]

    def enclosing_function(self, block_index: int | None) -> int | None:
        """Walk up from ``block_index`` to the nearest function block"""
        current = block_index
        while current is not None:
            block = self.blocks[current]
            if block.kind == BlockKind.FUNCTION:
                return current
            current = block.parent
        return None
