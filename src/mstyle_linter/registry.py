from typing import Iterable, Iterator

from .errors import ConfigurationError
from .rules.base import BaseRule
from .settings import LintSettings


def matches_prefix(rule_id: str, prefix: str) -> bool:
    """``naming`` matches ``naming.length``; ``naming.len`` matches nothing"""
    return rule_id == prefix or rule_id.startswith(prefix + ".")


class RuleRegistry:
    """Registry for managing and loading style rules, keyed by rule ID in registration order"""

    def __init__(self, settings: LintSettings | None = None, load_builtins: bool = True):
        self.settings = settings or LintSettings()
        self._rules: dict[str, BaseRule] = {}
        if load_builtins:
            self._load_builtin_rules()

    def register(self, rule: BaseRule) -> None:
        if rule.rule_id in self._rules:
            raise ValueError(f"Rule '{rule.rule_id}' is already registered")
        self._rules[rule.rule_id] = rule

    def get(self, rule_id: str) -> BaseRule:
        return self._rules[rule_id]

    def ids(self) -> list[str]:
        return list(self._rules)

    def get_all_rules(self) -> list[BaseRule]:
        return list(self._rules.values())

    def __contains__(self, rule_id: str) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[BaseRule]:
        return iter(self._rules.values())

    def get_enabled_rules(
        self, select: Iterable[str] | None = None, ignore: Iterable[str] | None = None
    ) -> list[BaseRule]:
        """Rules matching any ``select`` prefix (all when empty) and no ``ignore`` prefix"""
        select = list(select or [])
        ignore = list(ignore or [])
        enabled = []
        for rule_id, rule in self._rules.items():
            if select and not any(matches_prefix(rule_id, p) for p in select):
                continue
            if any(matches_prefix(rule_id, p) for p in ignore):
                continue
            enabled.append(rule)
        return enabled

    def configure(self, settings: LintSettings) -> list[BaseRule]:
        """Validate ``settings`` against the registered rules and return the enabled ones"""
        for rule_id in settings.rules:
            if rule_id not in self._rules:
                raise ConfigurationError(f"Unknown rule '{rule_id}' in rules table")
        for option, prefixes in (("select", settings.select), ("ignore", settings.ignore)):
            for prefix in prefixes:
                if not any(matches_prefix(rule_id, prefix) for rule_id in self._rules):
                    raise ConfigurationError(f"'{prefix}' in {option} matches no rule")

        disabled = set(settings.disabled_rules())
        return [
            rule
            for rule in self.get_enabled_rules(settings.select, settings.ignore)
            if rule.rule_id not in disabled
        ]

    def _load_builtin_rules(self) -> None:
        from .rules import BUILTIN_RULES

        for rule_class in BUILTIN_RULES:
            self.register(rule_class(self.settings))
