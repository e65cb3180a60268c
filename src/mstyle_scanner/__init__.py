from .block_tracker import BlockTracker, ScopeState, detect_endless_functions
from .node_types import (
    Block,
    BlockKind,
    IdentifierRole,
    Line,
    LineKind,
    ScanResult,
    SourceFile,
    Statement,
    StructuralIssue,
    Token,
    TokenKind,
)
from .patterns import FunctionSignature, infer_roles, is_section_header, parse_function_signature
from .scanner import MScanner, scan_string
from .tokenizer import KEYWORDS, TokenizerState, tokenize_line

__all__ = [
    "Block",
    "BlockKind",
    "BlockTracker",
    "FunctionSignature",
    "IdentifierRole",
    "KEYWORDS",
    "Line",
    "LineKind",
    "MScanner",
    "ScanResult",
    "ScopeState",
    "SourceFile",
    "Statement",
    "StructuralIssue",
    "Token",
    "TokenKind",
    "TokenizerState",
    "detect_endless_functions",
    "infer_roles",
    "is_section_header",
    "parse_function_signature",
    "scan_string",
    "tokenize_line",
]
