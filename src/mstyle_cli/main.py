import logging
from enum import Enum
from pathlib import Path

import typer
from mstyle_linter.driver import LintDriver
from mstyle_linter.engine import LinterEngine
from mstyle_linter.errors import ConfigurationError
from mstyle_linter.registry import RuleRegistry
from mstyle_linter.reporter import format_text

from .config import LintConfig
from .converters import report_to_jsonl

app = typer.Typer(help="mstyle - Check MATLAB code against the style guide")


class OutputFormat(str, Enum):
    text = "text"
    jsonl = "jsonl"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def check(
    paths: list[Path] = typer.Argument(..., help="Files or directories to check"),
    config_file: Path | None = typer.Option(None, "--config", help="Path to config file"),
    output_format: OutputFormat = typer.Option(OutputFormat.text, "--format", help="Report format"),
    output: Path | None = typer.Option(None, "--output", help="Write the report to a file"),
    jobs: int | None = typer.Option(None, "--jobs", min=1, help="Number of worker threads"),
    select: list[str] | None = typer.Option(None, "--select", help="Only run rules with this ID prefix"),
    ignore: list[str] | None = typer.Option(None, "--ignore", help="Skip rules with this ID prefix"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Check MATLAB files for style violations"""
    _configure_logging(verbose)
    try:
        config = LintConfig(config_file, overrides={"select": select, "ignore": ignore, "jobs": jobs})
        registry = RuleRegistry(config.settings)
        engine = LinterEngine(config.settings, registry, rules=config.apply_to_registry(registry))
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)

    report = LintDriver(config.settings, engine).run(paths)

    if output_format == OutputFormat.jsonl:
        rendered = report_to_jsonl(report)
    else:
        rendered = format_text(report)

    if output is not None:
        output.write_text(rendered, encoding="utf-8")
    else:
        typer.echo(rendered, nl=False)

    if report.exit_code:
        raise typer.Exit(code=report.exit_code)


@app.command()
def rules():
    """List the built-in rules"""
    for rule in RuleRegistry():
        line = f"{rule.rule_id:<40} {rule.severity.value:<8} {rule.scope.value:<7}"
        if rule.description:
            line += f" {rule.description}"
        typer.echo(line.rstrip())


if __name__ == "__main__":
    app()
