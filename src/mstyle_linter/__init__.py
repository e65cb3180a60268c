from .driver import LintDriver
from .engine import LinterEngine
from .errors import ConfigurationError, MStyleError, RuleInternalError
from .models import FileReport, RuleScope, Severity, Violation, ViolationKind
from .registry import RuleRegistry
from .reporter import Report, Reporter, format_text
from .settings import LintSettings, RuleSettings

__all__ = [
    "ConfigurationError",
    "FileReport",
    "LintDriver",
    "LintSettings",
    "LinterEngine",
    "MStyleError",
    "Report",
    "Reporter",
    "RuleInternalError",
    "RuleRegistry",
    "RuleScope",
    "RuleSettings",
    "Severity",
    "Violation",
    "ViolationKind",
    "format_text",
]
