import re
from typing import Iterable

from mstyle_scanner import ScanResult

from .models import Violation

# % mstyle:ignore                 -> everything on the line
# % mstyle:ignore naming.length   -> only the listed rules
_DIRECTIVE = re.compile(r"mstyle:ignore(?:\s+(?P<ids>[\w.]+(?:\s*,\s*[\w.]+)*))?")

ALL_RULES: frozenset[str] = frozenset()


def collect_suppressions(scan: ScanResult) -> dict[int, frozenset[str]]:
    """Map line numbers to suppressed rule IDs; an empty set suppresses every rule"""
    suppressions: dict[int, frozenset[str]] = {}
    for line in scan.lines:
        if not line.comment:
            continue
        match = _DIRECTIVE.search(line.comment)
        if match is None:
            continue
        ids = match.group("ids")
        suppressions[line.number] = (
            frozenset(part.strip() for part in ids.split(",")) if ids else ALL_RULES
        )
    return suppressions


def apply_suppressions(violations: Iterable[Violation], suppressions: dict[int, frozenset[str]]) -> list[Violation]:
    kept = []
    for violation in violations:
        ids = suppressions.get(violation.line)
        if ids is not None and (not ids or violation.rule_id in ids):
            continue
        kept.append(violation)
    return kept
