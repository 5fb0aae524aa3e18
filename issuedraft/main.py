"""issuedraft CLI commands."""

import asyncio
import sys
from pathlib import Path
from typing import Annotated

import tomlkit
import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from issuedraft.errors import DraftError
from issuedraft.logging_utils import configure_logging
from issuedraft.models import CreationRequest
from issuedraft.pipeline import SubmissionState, build_directory, new_submission
from issuedraft.settings import CONFIG_PATH, _list_profiles, get_settings

app = typer.Typer(help="issuedraft: turn free-form notes into Linear issues with AI", no_args_is_help=True)
console = Console(stderr=True)

ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-p", help="Profile name from ~/.config/issuedraft/config.toml"),
]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Log resolution attempts at DEBUG level")]
LogJsonOpt = Annotated[bool, typer.Option("--log-json", help="Emit logs as JSON lines on stderr")]

_STATE_LABEL = {
    SubmissionState.EXTRACTING: "Analyzing with AI…",
    SubmissionState.TEAM_RESOLVING: "Resolving team…",
    SubmissionState.PARALLEL_RESOLVING: "Resolving project, cycle and assignee…",
    SubmissionState.SUBMITTING: "Creating issue…",
}


def _read_selection(selection: str | None, selection_file: Path | None) -> str:
    if selection_file is None:
        return selection or ""
    if str(selection_file) == "-":
        return sys.stdin.read()
    return selection_file.read_text()


def _request_table(request: CreationRequest) -> Table:
    table = Table(title="Issue request (dry run)")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("title", request.title)
    table.add_row("teamId", request.team_id)
    table.add_row("projectId", request.project_id or "[dim](omitted)[/dim]")
    table.add_row("cycleId", request.cycle_id or "[dim](omitted)[/dim]")
    table.add_row("assigneeId", request.assignee_id or "[dim](omitted)[/dim]")
    table.add_row("description", request.description or "[dim](empty)[/dim]")
    return table


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("create")
def create(
    selection: Annotated[str | None, typer.Argument(help="Selected text: logs, notes or a bug report")] = None,
    instructions: Annotated[
        str | None,
        typer.Option("--instructions", "-i", help="Reporter instructions: owner, team, project, cycle…"),
    ] = None,
    selection_file: Annotated[
        Path | None,
        typer.Option("--selection-file", "-f", help="Read the selection from a file, or '-' for stdin"),
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Resolve the request but do not create the issue")] = False,
    profile: ProfileOpt = None,
    verbose: VerboseOpt = False,
    log_json: LogJsonOpt = False,
) -> None:
    """Draft an issue with AI, resolve its team/project/cycle/assignee and create it."""
    settings = get_settings(profile=profile)
    configure_logging("DEBUG" if verbose else settings.log_level, log_json or settings.log_json)

    text = _read_selection(selection, selection_file)
    with console.status("Preparing…") as status:

        def on_state(state: SubmissionState) -> None:
            if state in _STATE_LABEL:
                status.update(_STATE_LABEL[state])

        try:
            submission = new_submission(text, instructions or "", settings, on_state=on_state)
            if dry_run:
                request = asyncio.run(submission.resolve(instructions or "", text))
            else:
                url = asyncio.run(submission.run(instructions or "", text))
        except DraftError as exc:
            status.stop()
            rprint(f"[red]Failed to create issue:[/red] {escape(str(exc))}")
            raise typer.Exit(1) from None

    if dry_run:
        rprint(_request_table(request))
        return

    rprint("[green]✓[/green] [bold]Issue created[/bold]")
    rprint(f"  {url}")


@app.command("list-teams")
def list_teams(profile: ProfileOpt = None) -> None:
    """List the tracker teams an issue can be filed under."""
    settings = get_settings(profile=profile)
    directory = build_directory(settings)
    try:
        teams = asyncio.run(directory.list_entities("teams"))
    except DraftError as exc:
        rprint(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from None

    table = Table(title="Teams")
    table.add_column("Name")
    table.add_column("ID", style="dim")

    for t in teams:
        table.add_row(t.name or "—", t.id)

    rprint(table)


@app.command("set-default")
def set_default(
    profile: Annotated[str, typer.Argument(help="Profile name to set as default")],
) -> None:
    """Set the default profile in ~/.config/issuedraft/config.toml."""
    if not CONFIG_PATH.exists():
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        doc = tomlkit.document()
        doc.add("default_profile", profile)
        CONFIG_PATH.write_text(tomlkit.dumps(doc))
        rprint(f'[green]✓[/green] Default profile set to "{profile}" in {CONFIG_PATH}')
        return

    doc = tomlkit.load(CONFIG_PATH.open())
    profiles = _list_profiles(doc)
    if profile not in profiles:
        rprint(f"[red]Profile '{profile}' not found in {CONFIG_PATH}. Available: {profiles or '(none)'}[/red]")
        raise typer.Exit(1)

    doc["default_profile"] = profile
    CONFIG_PATH.write_text(tomlkit.dumps(doc))
    rprint(f'[green]✓[/green] Default profile set to "{profile}" in {CONFIG_PATH}')


@app.command("config-show")
def config_show(profile: ProfileOpt = None) -> None:
    """Show resolved configuration (masks credentials)."""
    settings = get_settings(profile=profile)

    def mask(val: str | None, prefix: str = "") -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"{prefix}...{val[-5:]}"

    table = Table(title="issuedraft configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("default_profile", settings.default_profile or "[dim](not set)[/dim]")
    table.add_row(
        "linear_api_key",
        mask(
            settings.linear_api_key.get_secret_value() if settings.linear_api_key else None,
            prefix="lin_api_",
        ),
    )
    table.add_row("use_local_ai", str(settings.use_local_ai))
    if settings.use_local_ai:
        table.add_row("ai_host", settings.ai_host)
        table.add_row("ai_model", settings.ai_model)
        table.add_row("ai_creativity", str(settings.ai_creativity))
    table.add_row(
        "openai_api_key",
        mask(
            settings.openai_api_key.get_secret_value() if settings.openai_api_key else None,
            prefix="sk-",
        ),
    )
    table.add_row("openai_model", settings.openai_model)
    table.add_row("default_title", settings.default_title)
    table.add_row("description_limit", str(settings.description_limit))
    table.add_row("log_level", settings.log_level)

    rprint(table)
