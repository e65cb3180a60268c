from mstyle_scanner import (
    BlockKind,
    BlockTracker,
    IdentifierRole,
    LineKind,
    MScanner,
    ScopeState,
    TokenizerState,
    scan_string,
    tokenize_line,
)


def _roles(scan):
    return {t.text: t.role for t in scan.tokens if t.role is not None}


def test_line_classification():
    source = "\n".join(
        [
            "%% Setup",
            "% plain comment",
            "",
            "%{",
            "block text",
            "%}",
            "x = 1;",
        ]
    )
    scan = scan_string(source)
    assert [line.kind for line in scan.lines] == [
        LineKind.SECTION_BREAK,
        LineKind.COMMENT,
        LineKind.BLANK,
        LineKind.BLOCK_COMMENT,
        LineKind.BLOCK_COMMENT,
        LineKind.BLOCK_COMMENT,
        LineKind.CODE,
    ]
    assert scan.structural_issues == ()


def test_crlf_line_endings():
    scan = scan_string("x = 1;\r\ny = 2;\r\n")
    assert len(scan.lines) == 2
    assert scan.lines[1].text == "y = 2;"


def test_statements_split_on_depth_zero_separators():
    scan = scan_string("a = 1, b = f(2, 3); c = 4;")
    assert [s.tokens[0].text for s in scan.statements] == ["a", "b", "c"]


def test_continued_statement_spans_lines():
    source = "values = [1, 2, ...\n    3];\nnext = 1;"
    scan = scan_string(source)
    assert len(scan.statements) == 2
    assert scan.statements[0].line == 1
    assert scan.lines[1].is_continuation is True
    assert scan.statements[1].line == 3


def test_blocks_and_indent_levels():
    source = "\n".join(
        [
            "function result = classify(value)",
            "    switch value",
            "        case 1",
            "            result = 1;",
            "        otherwise",
            "            result = 2;",
            "    end",
            "end",
        ]
    )
    scan = scan_string(source)
    kinds = [b.kind for b in scan.blocks]
    assert kinds == [BlockKind.FUNCTION, BlockKind.SWITCH, BlockKind.CASE, BlockKind.CASE]
    assert [line.indent_level for line in scan.lines] == [0, 1, 2, 3, 2, 3, 1, 0]
    assert scan.blocks[0].end_line == 8
    assert scan.blocks[0].name == "classify"
    assert scan.blocks[0].params == ("value",)
    assert scan.blocks[0].outputs == ("result",)
    assert scan.structural_issues == ()


def test_functions_without_end():
    source = "\n".join(
        [
            "function mainFunction",
            "value = 1;",
            "",
            "function helperFunction",
            "other = 2;",
        ]
    )
    scan = scan_string(source)
    assert scan.endless_functions is True
    first, second = scan.blocks
    assert first.implicit_end and second.implicit_end
    assert first.end_line == 3
    assert second.end_line == 5
    assert second.parent is None
    assert all(line.indent_level in (0, None) for line in scan.lines)
    assert scan.structural_issues == ()


def test_extra_end_is_reported_once():
    scan = scan_string("value = 1;\nend\nother = 2;")
    assert len(scan.structural_issues) == 1
    issue = scan.structural_issues[0]
    assert issue.rule_id == "structural.unbalancedBlock"
    assert issue.line == 2
    assert issue.column == 1
    assert len(scan.statements) == 3


def test_missing_end_is_reported_at_opener():
    scan = scan_string("if ready\n    go();\n")
    assert [(i.rule_id, i.line) for i in scan.structural_issues] == [("structural.unbalancedBlock", 1)]


def test_max_depth_halts_tracking():
    source = "\n".join(["if a", "if b", "if c", "end", "end", "end", "x = 1;"])
    scan = MScanner(max_depth=2).scan_string(source)
    assert scan.parse_failed is True
    assert [i.rule_id for i in scan.structural_issues] == ["structural.maxDepth"]
    assert scan.lines[-1].indent_level is None


def test_comment_structure_issues():
    scan = scan_string("%%% Bad\n%{\nnever closed\n")
    assert [i.rule_id for i in scan.structural_issues] == [
        "structural.malformedSectionBreak",
        "structural.unterminatedBlockComment",
    ]


def test_roles_in_function_file():
    source = "\n".join(
        [
            "function [total, count] = sumValues(values)",
            "    MAX_ITEMS = 10;",
            "    for k = 1:numel(values)",
            "        total = total + values(k);",
            "    end",
            "    settings.limit = MAX_ITEMS;",
            "    point = struct('x', 1);",
            "end",
        ]
    )
    roles = _roles(scan_string(source))
    assert roles["sumValues"] == IdentifierRole.FUNCTION
    assert roles["total"] == IdentifierRole.VARIABLE
    assert roles["values"] == IdentifierRole.VARIABLE
    # constants exist only at script level; inside a function this is a variable
    assert roles["MAX_ITEMS"] == IdentifierRole.VARIABLE
    assert roles["k"] == IdentifierRole.LOOP_COUNTER
    assert roles["settings"] == IdentifierRole.STRUCTURE
    assert roles["limit"] == IdentifierRole.STRUCTURE_FIELD
    assert roles["point"] == IdentifierRole.STRUCTURE


def test_roles_in_script_and_class():
    roles = _roles(scan_string("MAX_SIZE = 10;\n[first, ~] = size(data);\n"))
    assert roles["MAX_SIZE"] == IdentifierRole.CONSTANT
    assert roles["first"] == IdentifierRole.VARIABLE

    source = "\n".join(
        [
            "classdef Account < handle",
            "    properties (Constant)",
            "        RATE = 0.1",
            "    end",
            "    methods",
            "        function deposit(obj, amount)",
            "        end",
            "        function value = get.Balance(obj)",
            "        end",
            "    end",
            "end",
        ]
    )
    scan = scan_string(source)
    roles = _roles(scan)
    assert roles["Account"] == IdentifierRole.CLASS
    assert roles["RATE"] == IdentifierRole.CONSTANT
    assert roles["deposit"] == IdentifierRole.METHOD
    assert "Balance" not in roles
    assert scan.endless_functions is False
    assert scan.structural_issues == ()


def test_tracker_scope_state():
    tracker = BlockTracker()
    assert tracker.state == ScopeState.TOP_LEVEL

    tracker.process_statement(tokenize_line("function run()", 1, TokenizerState()).tokens, 1)
    tracker.process_statement(tokenize_line("for k = 1:3", 2, TokenizerState()).tokens, 2)
    assert tracker.state == ScopeState.IN_LOOP
    assert tracker.depth == 2

    tracker.process_statement(tokenize_line("end", 3, TokenizerState()).tokens, 3)
    assert tracker.state == ScopeState.IN_FUNCTION
    assert tracker.depth == 1
