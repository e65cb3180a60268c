import logging
import tomllib
from pathlib import Path
from typing import Any

from mstyle_linter.errors import ConfigurationError
from mstyle_linter.registry import RuleRegistry
from mstyle_linter.rules.base import BaseRule
from mstyle_linter.settings import LintSettings
from pydantic import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path(".mstyle.toml")
PYPROJECT = Path("pyproject.toml")


def _describe(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


class LintConfig:
    """Handles loading and validation of .mstyle.toml / [tool.mstyle] configuration"""

    def __init__(self, config_path: Path | None = None, overrides: dict[str, Any] | None = None):
        self.source: Path | None = None
        data: dict[str, Any] = {}

        if config_path is not None:
            if not config_path.is_file():
                raise ConfigurationError(f"Config file not found: {config_path}")
            data = self._load_from_file(config_path)
            self.source = config_path
        elif DEFAULT_CONFIG.is_file():
            data = self._load_from_file(DEFAULT_CONFIG)
            self.source = DEFAULT_CONFIG
        elif PYPROJECT.is_file():
            data = self._load_from_file(PYPROJECT)
            if data:
                self.source = PYPROJECT

        if self.source is not None:
            logger.info("Using configuration from %s", self.source)

        data.update({key: value for key, value in (overrides or {}).items() if value})
        try:
            self.settings = LintSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {_describe(e)}") from e

    @staticmethod
    def _load_from_file(path: Path) -> dict[str, Any]:
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Cannot parse {path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}") from e

        # pyproject.toml nests the table; .mstyle.toml may use either form
        if "tool" in data:
            return dict(data["tool"].get("mstyle", {}))
        return data

    def apply_to_registry(self, registry: RuleRegistry) -> list[BaseRule]:
        """Return list of enabled rules based on this config"""
        return registry.configure(self.settings)
