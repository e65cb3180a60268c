import pytest
from mstyle_linter.naming import (
    CaseStyle,
    body_length_small_scope,
    classify_case,
    collect_declarations,
    is_lower_camel_case,
    is_upper_snake_case,
)
from mstyle_linter.rules.naming_rules import (
    ConstantCaseRule,
    LoopCounterRule,
    LowerCamelCaseRule,
    NameLengthRule,
    UpperCamelCaseRule,
)
from mstyle_scanner import IdentifierRole, scan_string


def _check(rule, source):
    return rule.check(scan_string(source, "sample.m"))


@pytest.mark.parametrize(
    "name, style",
    [
        ("maxValue", CaseStyle.LOWER_CAMEL),
        ("value_2", CaseStyle.LOWER_CAMEL),
        ("DataPoint", CaseStyle.UPPER_CAMEL),
        ("MAX_SIZE", CaseStyle.UPPER_SNAKE),
        ("max_value", CaseStyle.OTHER),
        ("MAX__SIZE", CaseStyle.OTHER),
    ],
)
def test_classify_case(name, style):
    assert classify_case(name) == style


def test_case_predicates():
    assert is_lower_camel_case("x1_2")
    assert not is_lower_camel_case("x_y")
    assert is_upper_snake_case("LIMIT")
    assert not is_upper_snake_case("LIMIT_")


def test_declarations_are_deduplicated_per_scope():
    source = "\n".join(
        [
            "function total = sumAll(values)",
            "% Sum all values.",
            "    total = 0;",
            "    total = total + sum(values);",
            "end",
        ]
    )
    declarations = collect_declarations(scan_string(source))
    names = [(d.name, d.role) for d in declarations]
    assert names == [
        ("total", IdentifierRole.VARIABLE),
        ("sumAll", IdentifierRole.FUNCTION),
        ("values", IdentifierRole.VARIABLE),
    ]
    assert declarations[0].scope == 0
    assert declarations[1].scope is None


def test_lower_camel_case():
    issues = _check(LowerCamelCaseRule(), "my_value = 1;\nvalue_2 = 2;\ngoodName = 3;")
    assert [(i.line, i.column) for i in issues] == [(1, 1)]
    assert "my_value" in issues[0].message


def test_upper_camel_case_for_structures_and_classes():
    issues = _check(UpperCamelCaseRule(), "point = struct('x', 1);\nSegment.start = 0;")
    assert [i.line for i in issues] == [1]

    issues = _check(UpperCamelCaseRule(), "classdef bank_account\nend")
    assert len(issues) == 1
    assert "bank_account" in issues[0].message


def test_constant_case():
    issues = _check(ConstantCaseRule(), "MAX_SIZE = 10;\nMAX__SIZE = 11;")
    assert [i.line for i in issues] == [2]


def test_name_length_in_primary_function():
    source = "function result = computeTotal(ab)\n% Compute.\n    result = ab;\nend"
    issues = _check(NameLengthRule(), source)
    assert [(i.line, i.column) for i in issues] == [(1, 32)]

    source = "function result = computeTotal(abc)\n% Compute.\n    result = abc;\nend"
    assert _check(NameLengthRule(), source) == []


def test_short_names_allowed_in_small_local_function():
    source = "\n".join(
        [
            "function result = mainFunction(value)",
            "% Compute the result.",
            "    result = helper(value);",
            "end",
            "",
            "function out = helper(in)",
            "% Help.",
            "    out = in * 2;",
            "end",
        ]
    )
    assert _check(NameLengthRule(), source) == []


def test_small_scope_predicate():
    source = "\n".join(
        [
            "function result = mainFunction(value)",
            "% Compute the result.",
            "    result = helper(value);",
            "end",
            "",
            "function out = helper(in)",
            "% Help.",
            "    out = in * 2;",
            "end",
        ]
    )
    scan = scan_string(source)
    predicate = body_length_small_scope(10)
    assert predicate(scan, 0) is False
    assert predicate(scan, 1) is True
    assert predicate(scan, None) is False
    assert body_length_small_scope(1)(scan, 1) is False


def test_small_scope_predicate_is_pluggable():
    rule = NameLengthRule(small_scope=lambda scan, block: True)
    assert _check(rule, "function result = computeTotal(ab)\n% Compute.\nend") == []


def test_loop_counters():
    issues = _check(LoopCounterRule(), "for i = 1:10\n    disp(i);\nend")
    assert len(issues) == 1
    assert issues[0].rule_id == "naming.loopCounter"

    assert _check(LoopCounterRule(), "for k = 1:10\n    disp(k);\nend") == []
    assert _check(NameLengthRule(), "for k = 1:10\n    disp(k);\nend") == []


ENDLESS_SOURCE = "\n".join(
    [
        "function result = mainFunction(value)",
        "% Compute the result.",
        "result = helper(value);",
        "",
        "function out = helper(x)",
        "% Help.",
        "out = x * 2;",
    ]
)


def test_local_function_scope_without_end():
    declarations = collect_declarations(scan_string(ENDLESS_SOURCE))
    scopes = {(d.name, d.line): d.scope for d in declarations}
    assert scopes[("helper", 5)] is None
    assert scopes[("out", 5)] == 1
    assert scopes[("x", 5)] == 1


def test_same_parameter_in_functions_without_end():
    source = ENDLESS_SOURCE.replace("helper(x)", "helper(value)").replace("x * 2", "value * 2")
    declarations = collect_declarations(scan_string(source))
    assert [d.scope for d in declarations if d.name == "value"] == [0, 1]


def test_short_names_allowed_in_local_function_without_end():
    assert _check(NameLengthRule(), ENDLESS_SOURCE) == []


def test_loop_counter_reported_after_earlier_assignment():
    issues = _check(LoopCounterRule(), "i = 0;\nfor i = 1:3\n    disp(i);\nend")
    assert [(i.line, i.column) for i in issues] == [(2, 5)]


def test_every_loop_counter_is_reported():
    source = "for i = 1:3\n    disp(i);\nend\nfor i = 1:2\n    disp(i);\nend"
    issues = _check(LoopCounterRule(), source)
    assert [i.line for i in issues] == [1, 4]
