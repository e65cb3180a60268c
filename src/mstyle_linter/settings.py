from pydantic import BaseModel, ConfigDict, Field

from .models import Severity


class RuleSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    severity: Severity | None = None


class LintSettings(BaseModel):
    """Validated checker settings; keys use the hyphenated TOML spelling"""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    select: list[str] = Field(default_factory=list)
    ignore: list[str] = Field(default_factory=list)
    max_line_length: int = Field(80, alias="max-line-length", gt=0)
    indent_size: int = Field(4, alias="indent-size", gt=0)
    max_depth: int = Field(100, alias="max-depth", gt=0)
    max_file_size: int = Field(5_000_000, alias="max-file-size", gt=0)
    min_name_length: int = Field(3, alias="min-name-length", ge=1)
    small_scope_lines: int = Field(10, alias="small-scope-lines", ge=0)
    jobs: int | None = Field(None, gt=0)
    extension: str = ".m"
    test_prefix: str = Field("test", alias="test-prefix")
    exclude: list[str] = Field(default_factory=list)
    rules: dict[str, RuleSettings] = Field(default_factory=dict)

    def severity_overrides(self) -> dict[str, Severity]:
        return {rule_id: rs.severity for rule_id, rs in self.rules.items() if rs.severity is not None}

    def disabled_rules(self) -> list[str]:
        return [rule_id for rule_id, rs in self.rules.items() if not rs.enabled]
