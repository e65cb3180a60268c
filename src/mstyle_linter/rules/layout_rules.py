import re

from mstyle_scanner import LineKind, ScanResult, TokenKind
from mstyle_scanner.block_tracker import BLOCK_OPENERS
from mstyle_scanner.tokenizer import CONTEXTUAL_KEYWORDS

from ..models import Severity, Violation
from .base import BaseRule

_LEADING_WS = re.compile(r"^[ \t]*")

# First tokens of lines that open a block, after which no blank line is expected
_OPENER_WORDS = frozenset(BLOCK_OPENERS) | CONTEXTUAL_KEYWORDS


def _leading_whitespace(text: str) -> str:
    return _LEADING_WS.match(text).group()


class LineLengthRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "lineLength"

    @property
    def name(self) -> str:
        return "line-too-long"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def description(self) -> str:
        return f"Lines must not exceed {self.settings.max_line_length} characters."

    def check(self, scan: ScanResult) -> list[Violation]:
        limit = self.settings.max_line_length
        return [
            self._create_issue(
                scan,
                line.number,
                f"Line is {len(line.text)} characters long (limit {limit})",
                column=limit + 1,
            )
            for line in scan.lines
            if len(line.text) > limit
        ]


class IndentationWidthRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "indentation.width"

    @property
    def name(self) -> str:
        return "indentation-width"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def description(self) -> str:
        return f"Indent with spaces in multiples of {self.settings.indent_size}."

    def check(self, scan: ScanResult) -> list[Violation]:
        size = self.settings.indent_size
        issues = []
        for line in scan.lines:
            if line.kind in (LineKind.BLANK, LineKind.BLOCK_COMMENT) or line.is_continuation:
                continue
            indent = _leading_whitespace(line.text)
            if "\t" in indent:
                issues.append(self._create_issue(scan, line.number, "Indentation uses tab characters", column=1))
            elif len(indent) % size:
                issues.append(
                    self._create_issue(
                        scan,
                        line.number,
                        f"Indentation of {len(indent)} spaces is not a multiple of {size}",
                        column=1,
                    )
                )
        return issues


class IndentationDepthRule(BaseRule):
    """Compares each line's indentation to the depth of its enclosing blocks."""

    @property
    def rule_id(self) -> str:
        return "indentation.depth"

    @property
    def name(self) -> str:
        return "indentation-depth"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, scan: ScanResult) -> list[Violation]:
        size = self.settings.indent_size
        issues = []
        for line in scan.lines:
            if line.kind in (LineKind.BLANK, LineKind.BLOCK_COMMENT) or line.is_continuation:
                continue
            if line.indent_level is None:
                continue
            indent = _leading_whitespace(line.text)
            if "\t" in indent:
                continue
            expected = line.indent_level * size
            if len(indent) == expected:
                continue
            # comments may also sit one level out, e.g. above a case label
            if line.kind != LineKind.CODE and line.indent_level and len(indent) == expected - size:
                continue
            issues.append(
                self._create_issue(
                    scan,
                    line.number,
                    f"Expected indentation of {expected} spaces, found {len(indent)}",
                    column=1,
                )
            )
        return issues


class BlankLineGroupingRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "blankLines.grouping"

    @property
    def name(self) -> str:
        return "missing-blank-line"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def description(self) -> str:
        return "Separate function definitions and sections from preceding code with a blank line."

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        lines = scan.lines
        for index, line in enumerate(lines):
            if line.kind == LineKind.SECTION_BREAK:
                what = "Section break"
            elif self._starts_function(line):
                what = "Function definition"
            else:
                continue

            # comments directly above belong to the group
            above = index - 1
            while above >= 0 and lines[above].kind in (LineKind.COMMENT, LineKind.BLOCK_COMMENT):
                above -= 1
            if above < 0:
                continue
            prev = lines[above]
            if prev.kind != LineKind.CODE or self._opens_block(prev):
                continue
            issues.append(
                self._create_issue(
                    scan,
                    line.number,
                    f"{what} should be separated from preceding code by a blank line",
                )
            )
        return issues

    @staticmethod
    def _starts_function(line) -> bool:
        first = line.first_token
        return (
            line.kind == LineKind.CODE
            and not line.is_continuation
            and first is not None
            and first.kind == TokenKind.KEYWORD
            and first.text == "function"
        )

    @staticmethod
    def _opens_block(line) -> bool:
        first = line.first_token
        return first is not None and first.depth == 0 and first.text in _OPENER_WORDS


class ExcessiveBlankLinesRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "blankLines.excessive"

    @property
    def name(self) -> str:
        return "too-many-blank-lines"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        run = 0
        for line in scan.lines:
            if line.kind != LineKind.BLANK:
                run = 0
                continue
            run += 1
            if run == 3:
                issues.append(
                    self._create_issue(scan, line.number, "More than two consecutive blank lines")
                )
        return issues
