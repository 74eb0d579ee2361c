"""Provider Probe CLI."""

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from provider_probe import __version__
from provider_probe.config import build_provider_configs, get_settings
from provider_probe.models import ProbeReport, ProviderConfig
from provider_probe.presets import PRESETS, discovery_driven_config
from provider_probe.utils.security import mask_secret

app = typer.Typer(
    name="provider-probe",
    help="Provider Probe - check connectivity to generative-AI providers",
    no_args_is_help=True,
)
console = Console()


@app.command()
def run(
    providers: list[str] = typer.Argument(
        None, help=f"Presets to probe, in order (default: all of {', '.join(PRESETS)})"
    ),
    timeout: float = typer.Option(None, "--timeout", "-t", help="Per-attempt timeout (s)"),
    deadline: float = typer.Option(None, "--deadline", help="Time budget per provider (s)"),
    json_output: bool = typer.Option(False, "--json", help="Machine-readable JSON output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show every attempt"),
    report: bool = typer.Option(False, "--report", help="Print a markdown diagnostic report"),
    from_discovery: bool = typer.Option(
        False,
        "--from-discovery",
        help="Try models found by the vendor's discovery preset before the preset models",
    ),
):
    """Probe providers and report which candidate worked."""
    from provider_probe.logging_config import intercept_standard_logging, setup_logging

    setup_logging(level="DEBUG" if verbose else None)
    intercept_standard_logging()

    settings = get_settings()
    if timeout is None:
        timeout = settings.timeout
    if timeout <= 0:
        console.print(f"[red]--timeout must be positive, got {timeout:g}[/red]")
        raise typer.Exit(2)

    names = list(providers or PRESETS)
    if from_discovery:
        names = _with_discovery_presets(names)

    try:
        configs = build_provider_configs(settings, names)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2) from None

    reports = asyncio.run(
        _probe_all(
            configs,
            timeout=timeout,
            deadline=settings.deadline if deadline is None else deadline,
            from_discovery=from_discovery,
            verbose=verbose and not json_output,
        )
    )

    if json_output:
        print(json.dumps([r.to_dict() for r in reports], indent=2))
    else:
        console.print()
        _print_summary(reports)

    if report:
        from provider_probe.probe import generate_markdown_report

        print(generate_markdown_report(reports))

    if not all(r.succeeded for r in reports):
        raise typer.Exit(1)


@app.command(name="list")
def list_presets():
    """Show the built-in presets and whether their API key is configured."""
    settings = get_settings()

    table = Table(title="Provider Presets")
    table.add_column("Preset", style="cyan")
    table.add_column("Candidates", style="green")
    table.add_column("API Key", style="yellow")
    table.add_column("Description")

    for name, preset in PRESETS.items():
        table.add_row(
            name,
            ", ".join(c.label for c in preset.candidates),
            mask_secret(settings.credential_for(name)),
            preset.description,
        )

    console.print(table)


@app.command()
def version():
    """Show version information."""
    console.print(f"Provider Probe v{__version__}")


def _with_discovery_presets(names: list[str]) -> list[str]:
    """Insert each vendor's discovery preset ahead of its first generation preset."""
    ordered: list[str] = []
    for name in names:
        preset = PRESETS.get(name)
        discovery = f"{preset.vendor}-discovery" if preset else None
        if discovery in PRESETS and discovery not in names and discovery not in ordered:
            ordered.append(discovery)
        ordered.append(name)
    return ordered


async def _probe_all(
    configs: list[ProviderConfig],
    *,
    timeout: float,
    deadline: float | None,
    from_discovery: bool,
    verbose: bool,
) -> list[ProbeReport]:
    """Probe each provider in turn. Never runs two providers at once."""
    from provider_probe.probe import attempt_lines, probe, summary_line

    discoveries: dict[str, ProbeReport] = {}
    reports: list[ProbeReport] = []

    for config in configs:
        vendor = PRESETS[config.name].vendor
        if from_discovery and vendor in discoveries:
            config = discovery_driven_config(discoveries[vendor], config)

        report = await probe(config, timeout=timeout, deadline=deadline)
        reports.append(report)
        if config.name.endswith("-discovery") and report.succeeded:
            discoveries[vendor] = report

        if verbose:
            console.print(f"[bold]{summary_line(report)}[/bold]")
            for line in attempt_lines(report):
                console.print(f"  {line}", markup=False)

    return reports


def _print_summary(reports: list[ProbeReport]) -> None:
    """Print one colored summary line per provider."""
    from provider_probe.probe import summary_line

    for report in reports:
        color = "green" if report.succeeded else "red"
        console.print(f"[{color}]{summary_line(report)}[/{color}]", highlight=False)
