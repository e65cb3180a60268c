class MStyleError(Exception):
    """Base class for mstyle errors"""


class ConfigurationError(MStyleError):
    """Invalid configuration; aborts the run before any file is checked"""


class RuleInternalError(MStyleError):
    """A rule failed while evaluating a file"""

    def __init__(self, rule_id: str, original: BaseException):
        self.rule_id = rule_id
        self.original = original
        super().__init__(f"Rule '{rule_id}' failed: {type(original).__name__}: {original}")
