from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..config import AppConfig, dump_config
from ..core import ConversionError, StyleConversionService
from ..models import ConversionOptions, ConversionResult
from ..rewriters.assets import summarize
from ..settings import load_effective_config

console = Console()

app = typer.Typer(help="Convert eXeLearning styles from v2.9 to v3.0")

TIER_COLORS = {"simple": "green", "moderate": "yellow", "complex": "red"}


def _load_config(path: Path | None, output: Path | None = None) -> AppConfig:
    config = load_effective_config(path)
    if output is not None:
        config.runtime.output_dir = output
    return config


def _print_result(result: ConversionResult) -> None:
    style = result.style
    analysis = style.script.analysis
    tier = analysis.tier.value
    table = Table(title=f"Style {style.name}", show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Complexity", f"[{TIER_COLORS[tier]}]{tier}[/{TIER_COLORS[tier]}]")
    table.add_row("Template", analysis.template_name)
    table.add_row("Lines of code", str(analysis.code_line_count))
    table.add_row("Features", ", ".join(analysis.flags.labels) or "-")
    table.add_row("Preserved", ", ".join(style.script.integrated) or "standard template, no custom code")
    if style.script.skipped:
        table.add_row("Not preserved", ", ".join(style.script.skipped))
    table.add_row("CSS changes", str(len(style.css_changes)))
    table.add_row("Config changes", str(len(style.config_changes)))
    assets = summarize(style.assets)
    table.add_row("Assets", ", ".join(f"{name}/: {count}" for name, count in sorted(assets.items())) or "-")
    console.print(table)

    validation = style.validation
    status = "[green]PASSED[/green]" if validation.is_valid else "[red]FAILED[/red]"
    console.print(f"Validation: {status} ({len(validation.errors)} errors, {len(validation.warnings)} warnings)")
    for issue in validation.errors:
        console.print(f"  [red]x[/red] {issue.message}")
    for issue in validation.warnings:
        console.print(f"  [yellow]![/yellow] {issue.message}")


@app.command()
def convert(
    source: Path = typer.Argument(..., help="Style folder or .zip"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Analyze and report without writing files"),
    create_zip: bool | None = typer.Option(None, "--zip/--no-zip", help="Package the result as <style>-3.0.zip"),
) -> None:
    cfg = _load_config(config, output)
    service = StyleConversionService(cfg)
    options = ConversionOptions(dry_run=dry_run, create_zip=create_zip)
    try:
        result = service.convert_style(source, options=options)
    except ConversionError as exc:
        console.print(f"[red]Conversion failed[/red]: {exc.code} - {exc}")
        raise typer.Exit(1) from exc
    _print_result(result)
    if dry_run:
        console.print("[yellow]Dry run: no files were written[/yellow]")
    console.print(f"[green]Success[/green]: {result.summary}")
    if result.report_path:
        console.print(f"Report: {result.report_path}")
    if result.zip_path:
        console.print(f"Output archive: {result.zip_path}")


@app.command()
def batch(
    path: list[Path] = typer.Argument(..., help="Style folders, zips, or directories holding them"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output directory"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    parallel: int | None = typer.Option(None, "--parallel", min=1, help="Parallel workers"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Analyze and report without writing files"),
    create_zip: bool | None = typer.Option(None, "--zip/--no-zip", help="Package each result as a zip"),
) -> None:
    cfg = _load_config(config, output)
    service = StyleConversionService(cfg)
    batch_result = service.batch_convert(
        path,
        parallelism=parallel,
        options=ConversionOptions(dry_run=dry_run, create_zip=create_zip),
    )
    table = Table(title="Batch summary")
    table.add_column("Style")
    table.add_column("Tier")
    table.add_column("Template")
    table.add_column("Warnings")
    for result in batch_result.runs:
        analysis = result.style.script.analysis
        table.add_row(
            result.style_name,
            analysis.tier.value,
            analysis.template_name,
            ", ".join(result.warnings) or "-",
        )
    console.print(table)
    summary = batch_result.summary
    console.print(
        f"Processed {summary.total} styles: "
        f"{summary.successes} succeeded, {summary.failures} failed."
    )
    for source, reason in sorted(summary.failed.items()):
        console.print(f"  [red]x[/red] {source}: {reason}")


@app.command()
def analyze(
    source: Path = typer.Argument(..., help="Style folder or .zip"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Show complexity, template choice and the custom code that would be preserved."""

    service = StyleConversionService(_load_config(config))
    try:
        package = service.load(source)
        conversion = service.analyze(package)
    except ConversionError as exc:
        console.print(f"[red]Analysis failed[/red]: {exc.code} - {exc}")
        raise typer.Exit(1) from exc
    analysis = conversion.analysis
    tier = analysis.tier.value
    console.print(f"Style: [bold]{package.name}[/bold]")
    console.print(f"Complexity: [{TIER_COLORS[tier]}]{tier}[/{TIER_COLORS[tier]}]")
    console.print(f"Template: {analysis.template_name}")
    console.print(f"Lines of code: {analysis.code_line_count}")
    table = Table(title="Custom code")
    table.add_column("Feature")
    table.add_column("Status")
    for label in analysis.flags.labels:
        if label in conversion.integrated:
            status = "[green]preserved[/green]"
        elif label in conversion.skipped:
            status = "[red]not extractable[/red]"
        else:
            status = "[blue]carried in another section[/blue]"
        table.add_row(label, status)
    console.print(table)
    if analysis.flags.custom_functions:
        console.print("Other top-level functions: " + ", ".join(analysis.flags.custom_functions))


@app.command()
def templates(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    service = StyleConversionService(_load_config(config))
    for name in service.templates.names():
        console.print(name)


@app.command("show-config")
def show_config(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    console.print_json(dump_config(_load_config(config)))


@app.command()
def serve(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", help="Bind port"),
) -> None:
    import uvicorn

    from ..api import create_app

    cfg = _load_config(config)
    try:
        api = create_app(config)
    except RuntimeError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    uvicorn.run(api, host=host or cfg.api.host, port=port or cfg.api.port)


if __name__ == "__main__":
    app()
