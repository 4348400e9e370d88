"""
Command-line interface for translate-ai.

Provides commands for:
- Scanning a project for translatable strings
- Translating an extraction report into locale files
- Creating a project configuration
- Managing API keys

Usage:
    translate-ai scan --dir ./src --output translatable-strings.json
    translate-ai generate --languages fr,es --provider deepl
    translate-ai init
    translate-ai keys set openai
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from translate_ai import __version__
from translate_ai.config import (
    CONFIG_FILE,
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_REPORT,
    FRAMEWORK_PATTERNS,
    ProjectConfig,
    generate_file_patterns,
)
from translate_ai.extract.scanner import ProjectScanner, ScanReport
from translate_ai.keys import SERVICES, KeyManager, env_var_for
from translate_ai.pipeline import LocalizationPipeline, PipelineConfig
from translate_ai.translate.base import ConfigurationError
from translate_ai.translate.registry import build_default_registry
from translate_ai.utils import is_valid_language_code, parse_language_list

app = typer.Typer(
    name="translate-ai",
    help="translate-ai: AI-powered translation assistant for developers",
    add_completion=False,
)
console = Console()

PROVIDER_NOTES = {
    "openai": "OpenAI chat completions",
    "gemini": "Google Gemini generateContent",
    "deepl": "DeepL REST API (free and pro keys)",
    "dummy": "Offline test provider, no key needed",
}


def version_callback(value: bool):
    if value:
        console.print(f"translate-ai v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Show progress details in the log",
    ),
):
    """translate-ai: find user-facing strings and translate them."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
    )


def _print_summary(report: ScanReport) -> None:
    table = Table(title="Scan Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Files scanned", str(report.files_scanned))
    table.add_row("Files with strings", str(report.total_files))
    table.add_row("Strings found", str(report.total_strings))
    table.add_row("Failed files", str(len(report.failed_files)))
    console.print(table)

    kinds = Table(title="Strings by Type")
    kinds.add_column("Type", style="cyan")
    kinds.add_column("Count", style="green")
    for kind, count in report.by_kind().items():
        kinds.add_row(kind, str(count))
    console.print(kinds)

    for failed in report.failed_files:
        console.print(f"[yellow]⚠ Skipped {failed.file}:[/] {failed.error}")


@app.command()
def scan(
    directory: Path = typer.Option(
        Path("."), "--dir", "-d",
        help="Directory to scan",
    ),
    output: Path = typer.Option(
        Path(DEFAULT_REPORT), "--output", "-o",
        help="Where to write the extraction report",
    ),
    patterns: Optional[list[str]] = typer.Option(
        None, "--pattern", "-p",
        help="Include glob (repeatable, default from config or **/*.{js,jsx,ts,tsx})",
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-e",
        help="Exclude glob (repeatable, default from config)",
    ),
):
    """Scan a project for translatable strings."""
    project = ProjectConfig.load(CONFIG_FILE)
    include = patterns or project.file_patterns
    excluded = exclude or project.exclude_patterns

    if not directory.is_dir():
        console.print(f"[red]Error:[/] Not a directory: {directory}")
        raise typer.Exit(1)

    console.print(f"[dim]Scanning {directory.resolve()}...[/]")
    with _progress() as progress:
        task = progress.add_task("Scanning...", total=100)
        report = ProjectScanner().scan(
            directory,
            patterns=include,
            exclude=excluded,
            progress_callback=lambda msg, pct: progress.update(
                task, description=msg, completed=int(pct * 100)
            ),
        )
        progress.update(task, description="[green]Complete!", completed=100)

    _print_summary(report)
    report.save_json(output)
    console.print(f"\n[green]Saved report to:[/] {output}")


@app.command()
def generate(
    report_file: Path = typer.Option(
        Path(DEFAULT_REPORT), "--file", "-f",
        help="Extraction report written by `scan`",
    ),
    languages: Optional[str] = typer.Option(
        None, "--languages", "-l",
        help="Target languages, comma separated (default from config)",
    ),
    provider: Optional[str] = typer.Option(
        None, "--provider",
        help="Translation provider: openai, gemini, deepl, dummy (default from config)",
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o",
        help="Directory for locale files (default from config)",
    ),
    batch_size: Optional[int] = typer.Option(
        None, "--batch-size",
        help="Strings per batch request (default: all at once)",
    ),
    max_attempts: int = typer.Option(
        DEFAULT_MAX_ATTEMPTS, "--max-attempts",
        help="Attempts per string when a batch falls back",
    ),
    base_delay: float = typer.Option(
        DEFAULT_BASE_DELAY, "--base-delay",
        help="Initial retry delay in seconds",
    ),
):
    """Translate an extraction report and write locale files."""
    project = ProjectConfig.load(CONFIG_FILE)

    if not report_file.exists():
        console.print(f"[red]Error:[/] Report not found: {report_file}")
        console.print("Run [cyan]translate-ai scan[/] first")
        raise typer.Exit(1)

    target_languages = parse_language_list(languages) if languages else project.languages
    if not target_languages:
        console.print("[red]Error:[/] No target languages given")
        raise typer.Exit(1)
    for lang in target_languages:
        if not is_valid_language_code(lang):
            console.print(f"[yellow]Warning:[/] '{lang}' does not look like a language code")

    config = PipelineConfig.from_project(project)
    config.languages = target_languages
    config.provider = provider or project.provider
    config.output_dir = str(output_dir or project.output_dir)
    config.batch_size = batch_size
    config.max_attempts = max_attempts
    config.base_delay = base_delay
    config.report_path = None  # the report already exists

    report = ScanReport.load_json(report_file)
    strings = report.all_strings()
    console.print(
        f"[dim]Translating {len(strings)} strings to {', '.join(target_languages)} "
        f"using {config.provider}...[/]"
    )

    pipeline = LocalizationPipeline(config, registry=build_default_registry(KeyManager()))
    try:
        with _progress() as progress:
            task = progress.add_task("Translating...", total=100)
            pipeline.progress_callback = lambda msg, pct: progress.update(
                task, description=msg, completed=int(pct * 100)
            )
            translations = pipeline.translate(strings)
            written = pipeline.write_locales(translations, strings)
            progress.update(task, description="[green]Complete!", completed=100)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1)

    stats = pipeline.orchestrator.last_stats
    if stats is not None:
        table = Table(title="Translation Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Provider", stats.provider)
        table.add_row("Languages", ", ".join(stats.languages))
        table.add_row("Strings", str(stats.total_strings))
        table.add_row("Translated", str(stats.translated))
        table.add_row("Kept original", str(stats.degraded))
        table.add_row("Duration", f"{stats.duration:.1f}s")
        console.print(table)

    for path in written:
        console.print(f"[green]💾 Saved:[/] {path}")


@app.command()
def init(
    project_name: str = typer.Option(
        Path.cwd().name, "--name",
        prompt="Project name",
        help="Project name",
    ),
    frameworks: str = typer.Option(
        "react", "--frameworks",
        prompt=f"Frameworks ({', '.join(FRAMEWORK_PATTERNS)})",
        help="Comma separated frameworks",
    ),
    languages: str = typer.Option(
        "fr,es", "--languages",
        prompt="Target languages",
        help="Comma separated target languages",
    ),
    output_dir: str = typer.Option(
        "locales", "--output-dir",
        prompt="Output directory for locale files",
        help="Directory for locale files",
    ),
    provider: str = typer.Option(
        "openai", "--provider",
        prompt="Translation provider",
        help="Default translation provider",
    ),
    force: bool = typer.Option(
        False, "--force",
        help="Overwrite an existing configuration",
    ),
):
    """Create translate-ai.config.json in the current directory."""
    path = Path(CONFIG_FILE)
    if path.exists() and not force:
        console.print(f"[yellow]⚠ {CONFIG_FILE} already exists.[/] Use --force to overwrite")
        raise typer.Exit(1)

    selected = [f.lower() for f in parse_language_list(frameworks)]
    unknown = [f for f in selected if f not in FRAMEWORK_PATTERNS]
    if unknown:
        console.print(f"[yellow]Warning:[/] Unknown frameworks ignored: {', '.join(unknown)}")

    config = ProjectConfig(
        project_name=project_name,
        frameworks=[f for f in selected if f in FRAMEWORK_PATTERNS] or ["react"],
        languages=parse_language_list(languages),
        output_dir=output_dir,
        provider=provider.lower(),
    )
    config.file_patterns = generate_file_patterns(config.frameworks)
    config.save(path)

    console.print(f"[green]✓[/] Configuration saved to {path}")
    console.print("\nNext steps:")
    console.print("  1. [cyan]translate-ai scan[/]")
    console.print("  2. [cyan]translate-ai generate[/]")


@app.command()
def status():
    """Show the translation state of the current project."""
    project_path = Path(CONFIG_FILE)
    project = ProjectConfig.load(project_path)

    table = Table(title="Project Status")
    table.add_column("Item", style="cyan")
    table.add_column("Status")
    table.add_column("Details", style="dim")

    if project_path.exists():
        table.add_row("Configuration", "[green]✓ Found[/]", project.project_name)
    else:
        table.add_row("Configuration", "[yellow]⚠ Missing[/]", "run translate-ai init")

    report_path = Path(DEFAULT_REPORT)
    if report_path.exists():
        report = ScanReport.load_json(report_path)
        table.add_row(
            "Extraction report", "[green]✓ Found[/]",
            f"{report.total_strings} strings in {report.total_files} files",
        )
    else:
        table.add_row("Extraction report", "[yellow]⚠ Missing[/]", "run translate-ai scan")

    output_dir = Path(project.output_dir)
    for lang in project.languages:
        locale_file = output_dir / f"{lang}.json"
        if locale_file.exists():
            table.add_row(f"Locale {lang}", "[green]✓ Found[/]", str(locale_file))
        else:
            table.add_row(f"Locale {lang}", "[red]✗ Missing[/]", "run translate-ai generate")

    console.print(table)


@app.command()
def info():
    """Show available translation providers and their API keys."""
    km = KeyManager()
    registry = build_default_registry(km)

    console.print(f"[bold]translate-ai v{__version__}[/]\n")

    table = Table(title="Translation Providers")
    table.add_column("Provider", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Notes")

    for name in registry.available():
        if name in SERVICES:
            has_key = km.get_key(name) is not None
            status_text = "✓ Available" if has_key else f"⚠ No API key ({env_var_for(name)})"
        else:
            status_text = "✓ Available"
        table.add_row(name, status_text, PROVIDER_NOTES.get(name, ""))

    console.print(table)


@app.command()
def keys(
    action: str = typer.Argument(..., help="Action: list, set, get, delete, status"),
    service: Optional[str] = typer.Argument(None, help="Service name (openai, gemini, deepl)"),
    key: Optional[str] = typer.Option(
        None, "--key",
        help="Key value for `set` (prompted when omitted)",
    ),
):
    """Manage API keys.

    Examples:
        translate-ai keys list              # List all keys
        translate-ai keys set openai        # Set OpenAI key
        translate-ai keys status deepl      # Check DeepL key status
        translate-ai keys delete gemini     # Delete Gemini key
    """
    km = KeyManager()

    if action == "list":
        table = Table(title="API Keys Status")
        table.add_column("Service", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Source", style="yellow")
        table.add_column("Value", style="dim")

        for key_info in km.list_keys():
            status_text = "✓ Set" if key_info.is_set else "✗ Not set"
            status_color = "green" if key_info.is_set else "red"
            table.add_row(
                key_info.service,
                f"[{status_color}]{status_text}[/]",
                key_info.source,
                key_info.masked_value if key_info.is_set else "-",
            )

        console.print(table)
        console.print("\n[dim]Priority: env > keychain > config file[/]")
        return

    if action not in ("set", "get", "delete", "status"):
        console.print(f"[red]Error:[/] Unknown action '{action}'")
        console.print("Available actions: list, set, get, delete, status")
        raise typer.Exit(1)

    if not service:
        console.print("[red]Error:[/] Service name required")
        console.print(f"Available services: {', '.join(SERVICES)}")
        raise typer.Exit(1)

    if action == "set":
        value = key or typer.prompt(f"Enter API key for {service}", hide_input=True)
        if not value.strip():
            console.print("[red]Error:[/] Key cannot be empty")
            raise typer.Exit(1)

        storage = km.set_key(service, value.strip())
        console.print(f"[green]✓[/] API key for {service} saved to {storage}")
        if storage == "config":
            console.print(f"[yellow]Note:[/] Key stored in local file ({km.config_file})")
            console.print("       For better security, use environment variables")

    elif action == "get":
        value = km.get_key(service)
        if value:
            console.print(f"[green]✓[/] Key found: {km.mask_key(value)}")
        else:
            console.print(f"[red]✗[/] No key found for {service}")
            console.print(f"Set with: [cyan]translate-ai keys set {service}[/]")

    elif action == "status":
        key_info = km.get_key_info(service)
        if key_info.is_set:
            console.print(f"[green]✓[/] API key for {service} is set")
            console.print(f"    Source: {key_info.source}")
            console.print(f"    Value: {key_info.masked_value}")
        else:
            console.print(f"[red]✗[/] No API key found for {service}")
            console.print("\nTo set the key:")
            console.print(f"  Option 1: [cyan]translate-ai keys set {service}[/]")
            console.print(f"  Option 2: [cyan]export {env_var_for(service)}='your-key-here'[/]")

    else:
        if km.delete_key(service):
            console.print(f"[green]✓[/] API key for {service} deleted")
        else:
            console.print(f"[yellow]⚠[/] No key found to delete for {service}")


if __name__ == "__main__":
    app()
