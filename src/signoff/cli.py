"""signoff CLI - initiative lifecycle commands and the MCP server entry point."""

import json
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from signoff import __version__
from signoff.config import SignoffConfig
from signoff.session import Session
from signoff.tools import dispatch

cli = typer.Typer(
    name="signoff",
    help="Signoff - multi-party approval workflow for planning artifacts",
    no_args_is_help=True,
)
governance_app = typer.Typer(help="Manage the project's governance file.")
cli.add_typer(governance_app, name="governance")

console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Send logs to stderr; stdout carries command output and the MCP transport."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _version_option_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    ctx: typer.Context,
    project: Path | None = typer.Option(
        None,
        "--project",
        "-p",
        help="Project root (defaults to SIGNOFF_PROJECT_ROOT / PROJECT_ROOT)",
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level (default: SIGNOFF_LOG_LEVEL or INFO)"),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show signoff version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Signoff workflow commands."""
    config = SignoffConfig.from_env()
    configure_logging((log_level or config.log_level).upper())
    session = Session(config)
    if project is not None:
        selected = session.select_project(str(project.expanduser().resolve()))
        if not selected.ok:
            err_console.print(f"[red]Project not found: {project}[/red]")
            raise typer.Exit(code=2)
    ctx.obj = session


def _emit(payload: dict[str, Any], *, as_json: bool) -> None:
    """Print a tool payload and exit 0 (ok), 2 (refused) or 1 (error)."""
    if as_json:
        typer.echo(json.dumps(payload, sort_keys=True, indent=2))
    else:
        marker = "[green]✓[/green]" if payload.get("ok") else "[red]✗[/red]"
        console.print(f"{marker} {payload.get('kind')}")
        for name, value in payload.items():
            if name in {"kind", "ok"}:
                continue
            if isinstance(value, (list, dict)):
                value = json.dumps(value, sort_keys=True)
            console.print(f"  {name}: {value}", markup=False, highlight=False)

    if payload.get("ok"):
        raise typer.Exit(code=0)
    raise typer.Exit(code=1 if payload.get("kind") == "error" else 2)


@cli.command()
def projects(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload"),
) -> None:
    """List local project checkouts."""
    _emit(dispatch(ctx.obj, "signoff_list_projects"), as_json=as_json)


@cli.command()
def status(
    ctx: typer.Context,
    key: str | None = typer.Argument(None, help="Initiative key"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload"),
) -> None:
    """Show governance status, or the stage of one initiative."""
    _emit(dispatch(ctx.obj, "signoff_status", {"initiative_key": key}), as_json=as_json)


@governance_app.command(name="setup")
def governance_setup(
    ctx: typer.Context,
    ba: list[str] = typer.Option(..., "--ba", help="BA lead GitHub user (repeatable)"),
    design: list[str] = typer.Option(..., "--design", help="Design lead GitHub user (repeatable)"),
    dev: list[str] = typer.Option(..., "--dev", help="Dev lead GitHub user (repeatable)"),
    jira_project: str = typer.Option(..., "--jira-project", help="Jira project key"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload"),
) -> None:
    """Write governance.yaml with the BA, Design and Dev leads."""
    payload = dispatch(
        ctx.obj,
        "signoff_setup_governance",
        {"ba_leads": ba, "design_leads": design, "dev_leads": dev, "jira_project_key": jira_project},
    )
    _emit(payload, as_json=as_json)


@cli.command(name="new")
def new_initiative(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Initiative key, e.g. INIT-1"),
    title: str = typer.Argument(..., help="Human-readable title"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload"),
) -> None:
    """Create an initiative at the first stage."""
    _emit(dispatch(ctx.obj, "signoff_new_initiative", {"key": key, "title": title}), as_json=as_json)


@cli.command()
def advance(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Initiative key"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload"),
) -> None:
    """Write the current stage's artifact and move to the next stage.

    Exit codes:
      0 - Stage advanced, or the initiative is already complete
      2 - Refused (not found, unknown stage, no project)
      1 - Tooling error
    """
    _emit(dispatch(ctx.obj, "signoff_advance", {"key": key}), as_json=as_json)


@cli.command()
def tickets(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Initiative key"),
    artifact: str = typer.Argument(..., help="Stage whose sign-off tickets to describe"),
    pr_url: str | None = typer.Option(None, "--pr-url", help="Pull request under review"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload"),
) -> None:
    """Describe the sign-off tickets to open for one stage."""
    payload = dispatch(ctx.obj, "signoff_create_jira_tickets", {"key": key, "artifact": artifact, "pr_url": pr_url})
    _emit(payload, as_json=as_json)


@cli.command()
def serve(ctx: typer.Context) -> None:
    """Run the MCP server over stdio."""
    from signoff.server import run_server

    run_server(ctx.obj)


def main() -> None:
    cli()
