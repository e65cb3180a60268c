import pytest
from mstyle_cli.config import LintConfig
from mstyle_linter.errors import ConfigurationError
from mstyle_linter.models import Severity
from mstyle_linter.registry import RuleRegistry


def test_defaults_without_config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = LintConfig()
    assert config.source is None
    assert config.settings.max_line_length == 80
    assert config.settings.indent_size == 4
    assert config.settings.max_depth == 100


def test_load_mstyle_toml(tmp_path, monkeypatch):
    (tmp_path / ".mstyle.toml").write_text(
        "\n".join(
            [
                "max-line-length = 100",
                'ignore = ["naming"]',
                "",
                '[rules."lineLength"]',
                'severity = "error"',
                "",
                '[rules."whitespace.trailing"]',
                "enabled = false",
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    config = LintConfig()
    assert config.settings.max_line_length == 100
    assert config.settings.severity_overrides() == {"lineLength": Severity.ERROR}

    enabled = {rule.rule_id for rule in config.apply_to_registry(RuleRegistry(config.settings))}
    assert "whitespace.trailing" not in enabled
    assert not any(rule_id.startswith("naming.") for rule_id in enabled)
    assert "lineLength" in enabled


def test_pyproject_tool_table(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n\n[tool.mstyle]\nindent-size = 2\n', encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    assert LintConfig().settings.indent_size == 2


def test_cli_overrides_replace_config(tmp_path):
    path = tmp_path / "custom.toml"
    path.write_text('select = ["naming"]\njobs = 2\n', encoding="utf-8")
    config = LintConfig(path, overrides={"select": ["whitespace"], "ignore": None, "jobs": None})
    assert config.settings.select == ["whitespace"]
    assert config.settings.jobs == 2


@pytest.mark.parametrize(
    "content",
    [
        "unknown-key = 1\n",
        'max-line-length = "long"\n',
        '[rules."lineLength"]\nseverity = "fatal"\n',
        "max-line-length = \n",
    ],
)
def test_invalid_config_raises(tmp_path, content):
    path = tmp_path / "bad.toml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        LintConfig(path)


def test_unknown_rule_in_config(tmp_path):
    path = tmp_path / "rules.toml"
    path.write_text('[rules."naming.nope"]\nenabled = false\n', encoding="utf-8")
    config = LintConfig(path)
    with pytest.raises(ConfigurationError):
        config.apply_to_registry(RuleRegistry(config.settings))


def test_explicit_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError):
        LintConfig(tmp_path / "absent.toml")
