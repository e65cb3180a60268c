from mstyle_linter.models import Severity, ViolationKind
from pydantic import BaseModel, ConfigDict, Field


class LintRecord(BaseModel):
    """One violation as written to JSON Lines output"""

    model_config = ConfigDict(populate_by_name=True)

    file: str
    line: int
    column: int | None = None
    rule_id: str = Field(alias="ruleId")
    severity: Severity
    message: str
    kind: ViolationKind = ViolationKind.RULE
