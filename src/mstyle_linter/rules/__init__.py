from .base import BaseRule
from .comment_rules import CommentLeadingSpaceRule, DocumentationHeaderRule, NoBlockCommentsRule, SectionTitleRule
from .error_rules import MalformedMessageIdRule, MissingMessageIdRule
from .layout_rules import (
    BlankLineGroupingRule,
    ExcessiveBlankLinesRule,
    IndentationDepthRule,
    IndentationWidthRule,
    LineLengthRule,
)
from .naming_rules import ConstantCaseRule, LoopCounterRule, LowerCamelCaseRule, NameLengthRule, UpperCamelCaseRule
from .structural_rules import (
    MalformedSectionBreakRule,
    MaxDepthRule,
    UnbalancedBlockRule,
    UnterminatedBlockCommentRule,
)
from .test_rules import TestStructureRule
from .whitespace_rules import (
    CommaSpacingRule,
    OperatorSpacingRule,
    ParenPaddingRule,
    PunctuationSpacingRule,
    TrailingWhitespaceRule,
)

# Registration order; also the order rules run in
BUILTIN_RULES = (
    LineLengthRule,
    OperatorSpacingRule,
    CommaSpacingRule,
    ParenPaddingRule,
    PunctuationSpacingRule,
    TrailingWhitespaceRule,
    IndentationWidthRule,
    IndentationDepthRule,
    BlankLineGroupingRule,
    ExcessiveBlankLinesRule,
    NoBlockCommentsRule,
    SectionTitleRule,
    CommentLeadingSpaceRule,
    DocumentationHeaderRule,
    MissingMessageIdRule,
    MalformedMessageIdRule,
    LowerCamelCaseRule,
    UpperCamelCaseRule,
    ConstantCaseRule,
    NameLengthRule,
    LoopCounterRule,
    UnbalancedBlockRule,
    UnterminatedBlockCommentRule,
    MalformedSectionBreakRule,
    MaxDepthRule,
    TestStructureRule,
)

__all__ = [
    "BUILTIN_RULES",
    "BaseRule",
    "BlankLineGroupingRule",
    "CommaSpacingRule",
    "CommentLeadingSpaceRule",
    "ConstantCaseRule",
    "DocumentationHeaderRule",
    "ExcessiveBlankLinesRule",
    "IndentationDepthRule",
    "IndentationWidthRule",
    "LineLengthRule",
    "LoopCounterRule",
    "LowerCamelCaseRule",
    "MalformedMessageIdRule",
    "MalformedSectionBreakRule",
    "MaxDepthRule",
    "MissingMessageIdRule",
    "NameLengthRule",
    "NoBlockCommentsRule",
    "OperatorSpacingRule",
    "ParenPaddingRule",
    "PunctuationSpacingRule",
    "SectionTitleRule",
    "TestStructureRule",
    "TrailingWhitespaceRule",
    "UnbalancedBlockRule",
    "UnterminatedBlockCommentRule",
    "UpperCamelCaseRule",
]
