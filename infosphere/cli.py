"""
ⒸAngelaMos | 2026
cli.py
"""
from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console

from infosphere.core import ConfigError, configure_logging, get_logger, load_settings

console = Console()
logger = get_logger("cli")


@click.group(invoke_without_command = True)
@click.option("--debug", is_flag = True, help = "Enable debug logging")
@click.option("--log-json", is_flag = True, help = "Emit logs as JSON lines")
@click.pass_context
def cli(ctx: click.Context, debug: bool, log_json: bool) -> None:
    """
    Information Sphere - structural shape metrics for TypeScript codebases
    """
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["log_json"] = log_json
    configure_logging(json_mode = True if log_json else None, debug = debug)

    if ctx.invoked_subcommand is None:
        ctx.invoke(analyze)


@cli.command()
@click.option("--root", type = click.Path(file_okay = False, path_type = Path), default = None, help = "Working root of the corpus")
@click.option("--config", "config_path", type = click.Path(path_type = Path), default = None, help = "Config file (default: sphere.config.json in root)")
@click.option("--include", multiple = True, help = "Include glob, repeatable")
@click.option("--exclude", multiple = True, help = "Exclude glob, repeatable")
@click.option("--alpha", type = float, default = None, help = "Sphericity exponent")
@click.option("--json", "json_path", default = None, help = "JSON report destination")
@click.option("--markdown", "markdown_path", default = None, help = "Markdown report destination")
@click.option("--no-report", is_flag = True, help = "Print to the console only")
@click.pass_context
def analyze(
    ctx: click.Context,
    root: Path | None = None,
    config_path: Path | None = None,
    include: tuple[str, ...] = (),
    exclude: tuple[str, ...] = (),
    alpha: float | None = None,
    json_path: str | None = None,
    markdown_path: str | None = None,
    no_report: bool = False,
) -> None:
    """
    Analyze the corpus and rank modules by sphericity
    """
    from infosphere.analysis import ModuleParseError, SphereAnalyzer
    from infosphere.report import print_report, write_json_report, write_markdown_report

    overrides: dict = {}
    if ctx.obj and ctx.obj.get("debug"):
        overrides["debug"] = True
    if include:
        overrides["include"] = list(include)
    if exclude:
        overrides["exclude"] = list(exclude)
    if alpha is not None:
        overrides["alpha"] = alpha
    report_overrides = {}
    if json_path:
        report_overrides["json"] = json_path
    if markdown_path:
        report_overrides["markdown"] = markdown_path
    if report_overrides:
        overrides["report"] = report_overrides

    try:
        settings = load_settings(root = root, config_path = config_path, **overrides)
        if settings.debug and not overrides.get("debug"):
            configure_logging(json_mode = True if (ctx.obj or {}).get("log_json") else None, debug = True)
        result = SphereAnalyzer(settings).run()
    except (ConfigError, ModuleParseError, OSError) as e:
        logger.error("analysis_failed", error = str(e))
        console.print(f"[red]Analyzer error:[/red] {e}")
        ctx.exit(1)

    print_report(result, console)

    if not result.results or no_report:
        return

    report = settings.report
    if report.json_path:
        path = write_json_report(result, settings.root / report.json_path)
        console.print(f"Wrote JSON report: {report.json_path}")
        logger.debug("json_report_written", path = str(path))
    if report.markdown_path:
        path = write_markdown_report(result, settings.root / report.markdown_path, report.markdown_style)
        console.print(f"Wrote Markdown report: {report.markdown_path}")
        logger.debug("markdown_report_written", path = str(path))


@cli.command()
def version() -> None:
    """
    Show version information
    """
    from infosphere import __version__

    console.print(f"[bold]Information Sphere[/bold] v{__version__}")


def main() -> int:
    """
    CLI entry point
    """
    try:
        rv = cli(standalone_mode = False)
        return rv if isinstance(rv, int) else 0
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except (KeyboardInterrupt, click.Abort):
        console.print("\n[yellow]Interrupted[/yellow]")
        return 130
    except Exception as e:
        logger.exception("unexpected_error", error = str(e))
        console.print(f"[red]Error:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
