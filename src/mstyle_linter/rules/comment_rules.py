from mstyle_scanner import BlockKind, IdentifierRole, LineKind, ScanResult

from ..models import RuleScope, Severity, Violation
from .base import BaseRule

# %#ok, %#codegen and friends are pragmas, not prose
_PRAGMA_CHARS = "#{}!%"


class NoBlockCommentsRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "comments.noBlocks"

    @property
    def name(self) -> str:
        return "block-comment"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def description(self) -> str:
        return "Use consecutive '%' lines instead of '%{ ... %}' block comments."

    def check(self, scan: ScanResult) -> list[Violation]:
        return [
            self._create_issue(
                scan,
                line.number,
                "Block comments are discouraged; use '%' on each line",
                column=line.text.index("%") + 1,
            )
            for line in scan.lines
            if line.kind == LineKind.BLOCK_COMMENT and line.text.strip() == "%{"
        ]


class SectionTitleRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "comments.sectionTitle"

    @property
    def name(self) -> str:
        return "section-title"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        for line in scan.lines:
            if line.kind != LineKind.SECTION_BREAK:
                continue
            title = line.text.strip()[2:]
            column = line.text.index("%") + 1
            if not title.startswith(" ") or not title.strip():
                message = "Section break should be '%% ' followed by a title"
            elif not title.strip()[0].isupper():
                message = "Section title should start with a capital letter"
            else:
                continue
            issues.append(self._create_issue(scan, line.number, message, column=column))
        return issues


class CommentLeadingSpaceRule(BaseRule):
    @property
    def rule_id(self) -> str:
        return "comments.leadingSpace"

    @property
    def name(self) -> str:
        return "comment-leading-space"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        for line in scan.lines:
            if line.kind not in (LineKind.COMMENT, LineKind.CODE) or not line.comment:
                continue
            comment = line.comment
            if not comment.startswith("%"):
                continue
            body = comment[1:]
            if not body or body[0] in " \t" or body[0] in _PRAGMA_CHARS:
                continue
            column = len(line.text) - len(line.text.lstrip()) + 1
            if line.kind == LineKind.CODE:
                column = len(line.text) - len(comment) + 1
            issues.append(
                self._create_issue(
                    scan, line.number, "Comment text should be separated from '%' by a space", column=column
                )
            )
        return issues


class DocumentationHeaderRule(BaseRule):
    """Functions and classes need a header comment right below the signature.

    The first header line is the one-line summary shown by ``help`` and
    ``lookfor``, so it must read as a sentence.
    """

    @property
    def rule_id(self) -> str:
        return "documentation.header"

    @property
    def name(self) -> str:
        return "missing-header"

    @property
    def severity(self) -> Severity:
        return Severity.WARNING

    @property
    def scope(self) -> RuleScope:
        return RuleScope.SOURCE

    def check(self, scan: ScanResult) -> list[Violation]:
        issues = []
        for block in scan.blocks:
            if block.kind not in (BlockKind.FUNCTION, BlockKind.CLASSDEF):
                continue
            label = self._label(scan, block)

            # skip continuation lines of a multi-line signature
            last = block.start_line
            while last < len(scan.lines) and scan.line(last).continues:
                last += 1
            below = scan.line(last + 1) if last < len(scan.lines) else None

            if below is None or below.kind not in (LineKind.COMMENT, LineKind.BLANK):
                message = f"{label} has no header comment"
            elif below.kind == LineKind.BLANK:
                message = f"Header comment of {label} must follow the signature without a blank line"
            else:
                text = below.text.strip().lstrip("%").strip()
                if text and text[0].isupper() and text.endswith("."):
                    continue
                message = (
                    f"First header line of {label} should start with a capital letter "
                    "and end with a period"
                )
                issues.append(self._create_issue(scan, below.number, message))
                continue
            issues.append(self._create_issue(scan, block.start_line, message))
        return issues

    @staticmethod
    def _label(scan: ScanResult, block) -> str:
        if block.kind == BlockKind.FUNCTION:
            return f"Function '{block.name}'" if block.name else "Function"
        for token in scan.line(block.start_line).tokens:
            if token.role == IdentifierRole.CLASS:
                return f"Class '{token.text}'"
        return "Class"
