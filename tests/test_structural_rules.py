from mstyle_linter.models import ViolationKind
from mstyle_linter.rules.structural_rules import (
    MalformedSectionBreakRule,
    MaxDepthRule,
    UnbalancedBlockRule,
    UnterminatedBlockCommentRule,
)
from mstyle_linter.rules.test_rules import TestStructureRule
from mstyle_scanner import MScanner, scan_string


def _check(rule, source, path="sample.m"):
    return rule.check(scan_string(source, path))


def test_unbalanced_block_violation():
    issues = _check(UnbalancedBlockRule(), "x = 1;\nend\ny = 2;")
    assert len(issues) == 1
    assert issues[0].line == 2
    assert issues[0].kind == ViolationKind.STRUCTURAL
    assert issues[0].severity.value == "error"


def test_each_rule_reports_only_its_own_issues():
    source = "%%% Bad\n%{\nopen"
    assert [i.line for i in _check(MalformedSectionBreakRule(), source)] == [1]
    assert [i.line for i in _check(UnterminatedBlockCommentRule(), source)] == [2]
    assert _check(UnbalancedBlockRule(), source) == []


def test_max_depth_violation():
    scan = MScanner(max_depth=1).scan_string("if a\n    if b\n    end\nend")
    issues = MaxDepthRule().check(scan)
    assert [i.line for i in issues] == [2]


def test_class_based_test_file():
    source = "\n".join(
        [
            "classdef TestSolver < matlab.unittest.TestCase",
            "    methods (Test)",
            "        function solvesLinearSystem(testCase)",
            "            testCase.verifyEqual(1 + 1, 2);",
            "        end",
            "    end",
            "end",
        ]
    )
    assert _check(TestStructureRule(), source, "TestSolver.m") == []


def test_class_based_test_needs_test_case_and_methods():
    source = "classdef TestSolver < handle\n    methods\n    end\nend"
    issues = _check(TestStructureRule(), source, "TestSolver.m")
    assert len(issues) == 2
    assert "TestCase" in issues[0].message
    assert "methods (Test)" in issues[1].message


def test_function_based_test_file():
    ok = "function tests = testSolver\ntests = functiontests(localfunctions);\nend"
    assert _check(TestStructureRule(), ok, "testSolver.m") == []

    bad = "function testSolver\nassert(true);\nend"
    assert len(_check(TestStructureRule(), bad, "testSolver.m")) == 1


def test_script_based_test_file():
    ok = "%% Test addition\nassert(1 + 1 == 2);"
    assert _check(TestStructureRule(), ok, "testMath.m") == []

    bad = "assert(1 + 1 == 2);"
    issues = _check(TestStructureRule(), bad, "testMath.m")
    assert [i.line for i in issues] == [1]
