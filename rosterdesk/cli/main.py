#!/usr/bin/env python3
"""CLI for RosterDesk.

Commands:
    serve           Launch the Streamlit console
    login           Log in and store the session
    logout          Forget the stored session
    whoami          Show the stored admin identity
    students        List the roster
    register-admin  Create an admin account
"""

import subprocess
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from rosterdesk import __version__
from rosterdesk.client import ApiError, RosterApiClient
from rosterdesk.config import ConsoleConfig
from rosterdesk.models import format_marks
from rosterdesk.session import JsonFileStorage, SessionStore

console = Console()

DEFAULT_APP_PATH = Path("streamlit-console") / "app.py"


def _load_config() -> ConsoleConfig:
    try:
        return ConsoleConfig.from_env()
    except ValueError as e:
        raise click.ClickException(str(e)) from None


@click.group()
@click.version_option(version=__version__, prog_name="rosterdesk")
@click.option("--api-url", envvar="ROSTER_API_URL", help="Roster API base URL")
@click.option(
    "--session-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="ROSTER_SESSION_FILE",
    help="Where the admin session is stored",
)
@click.pass_context
def cli(ctx: click.Context, api_url: str, session_file: Path):
    """RosterDesk - manage the student roster from the terminal."""
    load_dotenv()
    config = _load_config()
    if api_url:
        config.api_url = api_url.rstrip("/")
    if session_file:
        config.session_file = session_file.expanduser()

    store = SessionStore(JsonFileStorage(config.session_file))
    ctx.obj = {"config": config, "store": store}
    ctx.call_on_close(lambda: _close_client(ctx))


def _client(ctx: click.Context) -> RosterApiClient:
    if "client" not in ctx.obj:
        ctx.obj["client"] = RosterApiClient.from_config(ctx.obj["config"], ctx.obj["store"])
    return ctx.obj["client"]


def _close_client(ctx: click.Context) -> None:
    client = ctx.obj.pop("client", None)
    if client is not None:
        client.close()


@cli.command()
@click.option("--port", default=8501, show_default=True, help="Port for the console")
@click.option(
    "--app",
    "app_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=DEFAULT_APP_PATH,
    show_default=True,
    help="Path to the Streamlit app",
)
@click.option("--headless", is_flag=True, help="Do not open a browser")
def serve(port: int, app_path: Path, headless: bool):
    """Launch the Streamlit console."""
    command = [
        sys.executable, "-m", "streamlit", "run", str(app_path),
        "--server.port", str(port),
    ]
    if headless:
        command += ["--server.headless", "true"]

    console.print(f"[blue]Starting console on port {port}...[/blue]")
    sys.exit(subprocess.call(command))


@cli.command()
@click.option("--email", prompt=True, help="Admin email")
@click.option("--password", prompt=True, hide_input=True, help="Admin password")
@click.pass_context
def login(ctx: click.Context, email: str, password: str):
    """Log in and store the session."""
    try:
        session = _client(ctx).login(email, password)
    except ApiError as e:
        raise click.ClickException(e.message) from None

    ctx.obj["store"].save(session)
    console.print(f"[green]✓ Logged in as {session.admin_name or session.admin_email}[/green]")


@cli.command()
@click.pass_context
def logout(ctx: click.Context):
    """Forget the stored session."""
    ctx.obj["store"].clear()
    console.print("[green]✓ Logged out[/green]")


@cli.command()
@click.option("--verify", is_flag=True, help="Check the token with the server")
@click.pass_context
def whoami(ctx: click.Context, verify: bool):
    """Show the stored admin identity."""
    store: SessionStore = ctx.obj["store"]
    session = store.read()
    if session is None:
        raise click.ClickException("Not logged in. Run 'rosterdesk login' first.")

    if verify:
        try:
            session = _client(ctx).verify_token()
        except ApiError as e:
            if e.status_code is not None:
                store.clear()
            raise click.ClickException(e.message) from None

    console.print(f"[bold]{session.admin_name or 'Admin'}[/bold] <{session.admin_email or 'unknown'}>")


@cli.command()
@click.pass_context
def students(ctx: click.Context):
    """List the roster."""
    if ctx.obj["store"].read() is None:
        raise click.ClickException("Not logged in. Run 'rosterdesk login' first.")

    try:
        roster = _client(ctx).list_students()
    except ApiError as e:
        raise click.ClickException(e.message) from None

    if not roster:
        console.print("[yellow]No students found.[/yellow]")
        return

    table = Table(title="Students")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Email")
    table.add_column("Course")
    table.add_column("Marks", justify="right")

    for student in roster:
        table.add_row(
            student.id, student.name, student.email, student.course or "", format_marks(student.marks)
        )

    console.print(table)


@cli.command("register-admin")
@click.option("--name", prompt=True, help="Admin display name")
@click.option("--email", prompt=True, help="Admin email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_context
def register_admin(ctx: click.Context, name: str, email: str, password: str):
    """Create an admin account."""
    try:
        message = _client(ctx).register_admin(name, email, password)
    except ApiError as e:
        raise click.ClickException(e.message) from None

    console.print(f"[green]✓ {message or 'Admin registered'}[/green]")


def main():
    cli()


if __name__ == "__main__":
    main()
