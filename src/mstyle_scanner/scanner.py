import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from .block_tracker import BlockTracker, detect_endless_functions
from .node_types import Line, LineKind, ScanResult, SourceFile, Statement, StructuralIssue, Token, TokenKind
from .patterns import infer_roles, parse_function_signature
from .tokenizer import TokenizerState, tokenize_line

logger = logging.getLogger(__name__)

MALFORMED_SECTION = "structural.malformedSectionBreak"
UNTERMINATED_COMMENT = "structural.unterminatedBlockComment"


@dataclass
class _Draft:
    number: int
    text: str
    kind: LineKind
    code: str = ""
    comment: str | None = None
    tokens: list[Token] = field(default_factory=list)
    continues: bool = False
    is_continuation: bool = False
    indent_level: int | None = None
    block: int | None = None


@dataclass
class _PendingStatement:
    tokens: list[Token]
    line: int
    end_line: int


class MScanner:
    """Scans source text into classified lines, tokens, statements and blocks"""

    def __init__(self, max_depth: int = 100):
        self.max_depth = max_depth

    def scan_file(self, file_path: Path) -> ScanResult:
        """Read and scan a file; OSError and UnicodeDecodeError propagate"""
        text = Path(file_path).read_text(encoding="utf-8")
        return self.scan_string(text, str(file_path))

    def scan_string(self, text: str, path: str = "") -> ScanResult:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        raw_lines = text.split("\n")
        if raw_lines and raw_lines[-1] == "":
            raw_lines.pop()
        source = SourceFile(path=path, text=text, lines=tuple(raw_lines))

        issues: list[StructuralIssue] = []
        drafts = self._classify(raw_lines, issues)
        pending = self._split_statements(drafts)

        tracker = BlockTracker(
            max_depth=self.max_depth,
            endless_functions=detect_endless_functions([p.tokens for p in pending]),
        )
        statements = self._track_blocks(drafts, pending, tracker)
        blocks = tracker.finish(len(drafts))
        issues.extend(tracker.issues)

        roles = infer_roles(statements, blocks)

        def with_role(token: Token) -> Token:
            role = roles.get((token.line, token.start))
            return replace(token, role=role) if role is not None else token

        lines = tuple(
            Line(
                number=d.number,
                text=d.text,
                kind=d.kind,
                code=d.code,
                comment=d.comment,
                tokens=tuple(with_role(t) for t in d.tokens),
                continues=d.continues,
                is_continuation=d.is_continuation,
                indent_level=d.indent_level,
                block=d.block,
            )
            for d in drafts
        )
        statements = tuple(
            replace(s, tokens=tuple(with_role(t) for t in s.tokens)) for s in statements
        )
        tokens = tuple(t for line in lines for t in line.tokens)

        if tracker.halted:
            logger.debug("Block tracking halted for %s at depth %d", path, self.max_depth)

        return ScanResult(
            source=source,
            lines=lines,
            tokens=tokens,
            statements=statements,
            blocks=tuple(blocks),
            structural_issues=tuple(sorted(issues, key=lambda i: (i.line, i.rule_id))),
            parse_failed=tracker.halted,
            endless_functions=tracker.endless_functions,
        )

    def _classify(self, raw_lines: list[str], issues: list[StructuralIssue]) -> list[_Draft]:
        drafts: list[_Draft] = []
        state = TokenizerState()
        comment_depth = 0
        comment_opener = 0
        prev_continues = False

        for number, text in enumerate(raw_lines, start=1):
            stripped = text.strip()
            draft = _Draft(number=number, text=text, kind=LineKind.CODE, is_continuation=prev_continues)

            if comment_depth:
                if stripped == "%{":
                    comment_depth += 1
                elif stripped == "%}":
                    comment_depth -= 1
                draft.kind = LineKind.BLOCK_COMMENT
                draft.comment = stripped
            elif stripped == "%{":
                comment_depth = 1
                comment_opener = number
                draft.kind = LineKind.BLOCK_COMMENT
                draft.comment = stripped
            elif not stripped:
                draft.kind = LineKind.BLANK
            elif stripped.startswith("%%%"):
                draft.kind = LineKind.COMMENT
                draft.comment = stripped
                issues.append(
                    StructuralIssue(
                        rule_id=MALFORMED_SECTION,
                        line=number,
                        column=text.index("%") + 1,
                        message="Section break uses more than two '%' symbols",
                    )
                )
            elif stripped.startswith("%%"):
                draft.kind = LineKind.SECTION_BREAK
                draft.comment = stripped
            elif stripped.startswith("%"):
                draft.kind = LineKind.COMMENT
                draft.comment = stripped
            else:
                result = tokenize_line(text, number, state)
                draft.code = result.code
                draft.comment = result.comment
                draft.tokens = result.tokens
                draft.continues = result.continues
                if not result.tokens:
                    # only a continuation marker
                    draft.kind = LineKind.COMMENT

            if draft.kind != LineKind.CODE:
                draft.continues = draft.continues or state.depth > 0
            prev_continues = draft.continues
            drafts.append(draft)

        if comment_depth:
            issues.append(
                StructuralIssue(
                    rule_id=UNTERMINATED_COMMENT,
                    line=comment_opener,
                    column=raw_lines[comment_opener - 1].index("%") + 1,
                    message="Block comment opened here is never closed",
                )
            )
        return drafts

    def _split_statements(self, drafts: list[_Draft]) -> list[_PendingStatement]:
        pending: list[_PendingStatement] = []
        current: list[Token] = []

        def flush(end_line: int) -> None:
            if current:
                pending.append(_PendingStatement(tokens=list(current), line=current[0].line, end_line=end_line))
                current.clear()

        for draft in drafts:
            if draft.kind != LineKind.CODE:
                continue
            for token in draft.tokens:
                if token.kind in (TokenKind.COMMA, TokenKind.SEMICOLON) and token.depth == 0:
                    flush(draft.number)
                    continue
                current.append(token)
            if not draft.continues:
                flush(draft.number)
        if current:
            flush(current[-1].line)
        return pending

    def _track_blocks(
        self, drafts: list[_Draft], pending: list[_PendingStatement], tracker: BlockTracker
    ) -> list[Statement]:
        statements: list[Statement] = []
        cursor = 0
        for draft in drafts:
            draft.block = tracker.current_block
            if draft.kind == LineKind.CODE:
                draft.indent_level = tracker.expected_indent(draft.tokens[0] if draft.tokens else None)
            elif draft.kind != LineKind.BLANK and not tracker.halted:
                draft.indent_level = tracker.level

            while cursor < len(pending) and pending[cursor].end_line == draft.number:
                item = pending[cursor]
                cursor += 1
                block = tracker.current_block
                opened = tracker.process_statement(item.tokens, item.line)
                if opened is not None:
                    signature = parse_function_signature(item.tokens)
                    tracker.describe_function(
                        opened,
                        signature.name,
                        [t.text for t in signature.params],
                        [t.text for t in signature.outputs],
                    )
                statements.append(Statement(tokens=tuple(item.tokens), line=item.line, block=block))
        return statements


def scan_string(text: str, path: str = "", max_depth: int = 100) -> ScanResult:
    """Convenience wrapper around ``MScanner.scan_string``"""
    return MScanner(max_depth=max_depth).scan_string(text, path)

