from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


class ViolationKind(str, Enum):
    RULE = "rule"
    STRUCTURAL = "structural"
    INTERNAL = "internal"
    IO = "io"


class RuleScope(str, Enum):
    """Which files a rule applies to"""

    ALL = "all"
    SOURCE = "source"
    TEST = "test"


@dataclass(frozen=True)
class Violation:
    """Internal representation of a style violation"""

    file_path: str
    line: int
    rule_id: str
    message: str
    severity: Severity
    column: int | None = None
    kind: ViolationKind = ViolationKind.RULE

    def sort_key(self) -> tuple[str, int, int, str, str]:
        return (self.file_path, self.line, self.column or 0, self.rule_id, self.message)


@dataclass(frozen=True)
class FileReport:
    """Violations and check counts for one file"""

    path: str
    violations: tuple[Violation, ...] = ()
    checks_run: int = 0
    passed_checks: int = 0
    is_test: bool = False
