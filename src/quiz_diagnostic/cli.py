"""CLI for quiz-diagnostic.

Provides direct terminal access to the quiz linter and the QTI package
validator without MCP.
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from quiz_diagnostic import __version__
from quiz_diagnostic.config import Config

# Exit codes
EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2

console = Console()
err_console = Console(stderr=True)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="quiz-diagnostic",
        description="Check Markdown quizzes and QTI packages before LMS import"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log progress to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # lint command
    lint_parser = subparsers.add_parser("lint", help="Lint a Markdown quiz file")
    lint_parser.add_argument("quiz_path", type=Path, help="Path to .md quiz file")
    lint_parser.add_argument(
        "--rule", action="append", dest="rules",
        help="Run only this rule (repeatable)"
    )
    lint_parser.add_argument(
        "--json", action="store_true",
        help="Print the report as JSON"
    )

    # validate command
    v = subparsers.add_parser("validate", help="Validate a QTI package (directory or .zip)")
    v.add_argument("package_path", type=Path, help="Package directory or .zip archive")
    v.add_argument(
        "--strict", action="store_true", default=None,
        help="Apply strict metadata/identifier rules"
    )
    v.add_argument(
        "--json", action="store_true",
        help="Print the report as JSON"
    )

    # rules command
    subparsers.add_parser("rules", help="List available lint rules")

    # check command
    subparsers.add_parser("check", help="Health check (config, work dir)")

    args = parser.parse_args(argv)

    config = Config.load()
    logging.basicConfig(
        level=config.log_level if args.verbose else "WARNING",
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    if args.command == "lint":
        return asyncio.run(lint_command(args, config))
    elif args.command == "validate":
        return asyncio.run(validate_command(args, config))
    elif args.command == "rules":
        return rules_command()
    elif args.command == "check":
        return check_command(config)
    return EXIT_USAGE


async def lint_command(args, config: Config) -> int:
    """Execute the lint command."""
    from quiz_diagnostic.core.linter import engine

    path = args.quiz_path.expanduser()
    if not path.is_file():
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        return EXIT_USAGE

    try:
        report = await engine.lint_file(
            path, rules=args.rules, context_width=config.context_width
        )
    except (OSError, UnicodeDecodeError) as e:
        err_console.print(f"[red]Error:[/red] Could not read {path}: {e}")
        return EXIT_USAGE

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_lint_report(report)

    return EXIT_FINDINGS if report.errors else EXIT_OK


def _print_lint_report(report) -> None:
    if not report.diagnostics:
        console.print(f"[green]✓[/green] {escape(report.source_path)}: no issues")
        return

    table = Table(title=escape(report.source_path))
    table.add_column("Line", justify="right", style="dim")
    table.add_column("Severity")
    table.add_column("Rule", style="cyan")
    table.add_column("Message")

    for d in report.diagnostics:
        style = "red" if d.severity.value == "error" else "yellow"
        message = escape(d.message)
        if d.context:
            message += f"\n[dim]{escape(d.context)}[/dim]"
        table.add_row(
            str(d.line) if d.line is not None else "-",
            f"[{style}]{d.severity.value}[/{style}]",
            d.rule,
            message,
        )

    console.print(table)
    console.print(f"{report.errors} errors, {report.warnings} warnings")


async def validate_command(args, config: Config) -> int:
    """Execute the validate command."""
    from quiz_diagnostic.core.validator import QtiValidator, ValidatorOptions

    path = args.package_path.expanduser()
    if not path.exists():
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        return EXIT_USAGE

    validator = QtiValidator(config=config)
    report = await validator.validate_package(path, ValidatorOptions(strict=args.strict))

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_validation_report(path, report)

    return EXIT_OK if report.is_valid else EXIT_FINDINGS


def _print_validation_report(path: Path, report) -> None:
    status = "[green]VALID[/green]" if report.is_valid else "[red]INVALID[/red]"
    console.print(f"{escape(str(path))}: {status}")

    details = report.details
    console.print(
        f"  manifest: {details.manifest_found}  resources: {details.resource_count}  "
        f"items: {details.item_count}  test: {details.test_found}",
        style="dim"
    )

    if report.errors or report.warnings:
        table = Table(show_header=True)
        table.add_column("Severity")
        table.add_column("Message")
        for message in report.errors:
            table.add_row("[red]error[/red]", escape(message))
        for message in report.warnings:
            table.add_row("[yellow]warning[/yellow]", escape(message))
        console.print(table)

    console.print(f"{len(report.errors)} errors, {len(report.warnings)} warnings")


def rules_command() -> int:
    """Execute the rules command."""
    from quiz_diagnostic.core.linter import get_available_rules

    table = Table(title="Lint rules")
    table.add_column("Rule", style="cyan")
    table.add_column("Description")
    for name, description in get_available_rules().items():
        table.add_row(name, escape(description))

    console.print(table)
    return EXIT_OK


def check_command(config: Config) -> int:
    """Execute the check command."""
    from quiz_diagnostic.core.linter import get_available_rules

    console.print(f"Quiz Diagnostic v{__version__}")
    console.print("=" * 40)

    console.print("\nConfiguration:")
    console.print(f"  Strict by default: {config.strict}")
    console.print(f"  Work directory: {config.work_dir or 'system temp'}")
    console.print(f"  Context width: {config.context_width}")
    console.print(f"  Log level: {config.log_level}")

    status = EXIT_OK
    if config.work_dir is not None:
        console.print("\nWork directory:")
        if config.work_dir.is_dir():
            console.print("  Status: exists")
        else:
            console.print("  Status: [red]MISSING[/red]")
            status = EXIT_USAGE

    console.print(f"\nLint rules: {len(get_available_rules())}")

    console.print("\nMCP tools:")
    for tool in ("lint_quiz", "lint_quiz_content", "get_lint_rules", "validate_qti_package"):
        console.print(f"  - {tool}")

    console.print("\n" + "=" * 40)
    console.print("Ready!" if status == EXIT_OK else "Problems found")
    return status


if __name__ == "__main__":
    sys.exit(main())
