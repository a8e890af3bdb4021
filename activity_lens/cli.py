import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.table import Table

from activity_lens.analyzers.profile import build_profile
from activity_lens.config import ConfigError, Settings, load_settings, save_settings, validate_offset
from activity_lens.formatter import NOT_AVAILABLE, NOT_FOUND, format_report
from activity_lens.platforms.github.fetcher import FetchResult, fetch_account, fetch_accounts, fetch_events, make_client
from activity_lens.platforms.github.parser import describe_event
from activity_lens.utils.time import timezone_label

load_dotenv()
app = typer.Typer(help="Behavioral profiles from a GitHub account's public activity.")
config_app = typer.Typer(help="Show or change stored settings.")
app.add_typer(config_app, name="config")
console = Console()

PROFILE_URL = "https://github.com/{username}"


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Log HTTP requests and config access")):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _settings(tz: int | None = None) -> Settings:
    try:
        settings = load_settings()
        if tz is not None:
            settings = settings.model_copy(update={"timezone_offset": validate_offset(tz)})
    except ConfigError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1)
    return settings


async def _recent_events(username: str, settings: Settings, limit: int) -> FetchResult:
    async with make_client(settings) as client:
        return await fetch_events(client, username, limit)


def _stored_settings() -> Settings:
    # Without env overrides, so GITHUB_TOKEN is never written to disk
    try:
        return load_settings(use_env=False)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1)


@app.command()
def analyze(
    username: str = typer.Argument(help="GitHub username, with or without @"),
    tz: Optional[int] = typer.Option(None, "--tz", help="Timezone offset in hours, -12..14 (default: configured)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save report to file instead of printing"),
    open_profile: bool = typer.Option(False, "--open", help="Open the GitHub profile in a browser"),
):
    settings = _settings(tz)
    username = username.lstrip("@")

    with console.status(f"[bold green]Fetching @{username} from GitHub..."):
        data = asyncio.run(fetch_account(username, settings))

    errors = [r.error for r in (data.events, data.repos) if r.error]
    if not data.events.ok and not data.repos.ok:
        console.print(f"[bold red]Error:[/] {data.events.error}")
        raise typer.Exit(1)

    profile = build_profile(data.events.items, data.repos.items, settings.timezone_offset)
    md = format_report(username, profile, data.events.items, errors=errors)

    if output:
        output.write_text(md)
        console.print(f"[bold green]✓[/] Report saved to [cyan]{output}[/]")
    else:
        console.print(Markdown(md))

    if open_profile:
        typer.launch(PROFILE_URL.format(username=username))


@app.command()
def activity(
    username: str = typer.Argument(help="GitHub username, with or without @"),
    limit: int = typer.Option(10, "--limit", "-n", min=1, max=100, help="Number of events to list"),
):
    """List the most recent public events of an account."""
    settings = _settings()
    username = username.lstrip("@")

    with console.status(f"[bold green]Fetching @{username} from GitHub..."):
        events = asyncio.run(_recent_events(username, settings, limit))

    if not events.ok:
        console.print(f"[bold red]Error:[/] {events.error}")
        raise typer.Exit(1)
    if not events.items:
        console.print(f"[dim]No recent public activity for @{username}.[/]")
        return
    for event in events.items:
        stamp = event.created_at.strftime("%Y-%m-%d %H:%M")
        console.print(f"[dim]{stamp}[/]  {describe_event(event)}")


@app.command()
def watch(
    tz: Optional[int] = typer.Option(None, "--tz", help="Timezone offset in hours, -12..14 (default: configured)"),
):
    """Profile every account on the watchlist in parallel."""
    settings = _settings(tz)
    if not settings.watchlist:
        console.print("[yellow]Watchlist is empty.[/] Add accounts with [cyan]config watch-add USER[/].")
        return

    with console.status(f"[bold green]Fetching {len(settings.watchlist)} accounts..."):
        accounts = asyncio.run(fetch_accounts(settings.watchlist, settings))

    table = Table(title=f"Watchlist ({timezone_label(settings.timezone_offset)})")
    for column in ("User", "Primary language", "Events/week", "Consistency", "Peak hour"):
        table.add_column(column)

    for data in accounts:
        if not data.events.ok and not data.repos.ok:
            table.add_row(f"@{data.username}", f"[red]{data.events.error}[/]", "", "", "")
            continue
        profile = build_profile(data.events.items, data.repos.items, settings.timezone_offset)
        s = profile.synopsis
        user = f"@{data.username}"
        if not (data.events.ok and data.repos.ok):
            user += " [yellow]partial[/]"
        table.add_row(
            user,
            profile.languages.primary or NOT_FOUND,
            f"{s.frequency:.1f}" if s.frequency is not None else NOT_AVAILABLE,
            f"{s.consistency.percent}%" if s.consistency is not None else NOT_AVAILABLE,
            f"{s.peak_hour.hour:02d}:00" if s.peak_hour is not None else NOT_AVAILABLE,
        )
    console.print(table)


@config_app.command("show")
def config_show():
    settings = _stored_settings()
    console.print(f"Timezone:  {timezone_label(settings.timezone_offset)}")
    console.print(f"Token:     {'set' if settings.token else 'not set'}")
    console.print(f"Events:    {settings.event_limit}")
    console.print(f"Repos:     {settings.repo_limit}")
    console.print(f"Watchlist: {', '.join('@' + u for u in settings.watchlist) or '(empty)'}")


@config_app.command("set-timezone")
def config_set_timezone(offset: int = typer.Argument(help="Whole hours from UTC, -12..14")):
    settings = _stored_settings()
    try:
        validate_offset(offset)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise typer.Exit(1)
    save_settings(settings.model_copy(update={"timezone_offset": offset}))
    console.print(f"[bold green]✓[/] Timezone set to [cyan]{timezone_label(offset)}[/]")


@config_app.command("set-token")
def config_set_token(token: str = typer.Argument(help="GitHub personal access token")):
    settings = _stored_settings()
    save_settings(settings.model_copy(update={"token": token.strip()}))
    console.print("[bold green]✓[/] Token saved")


@config_app.command("clear-token")
def config_clear_token():
    settings = _stored_settings()
    save_settings(settings.model_copy(update={"token": None}))
    console.print("[bold green]✓[/] Token removed")


@config_app.command("watch-add")
def config_watch_add(username: str = typer.Argument(help="GitHub username, with or without @")):
    settings = _stored_settings()
    username = username.lstrip("@")
    if username.lower() in (u.lower() for u in settings.watchlist):
        console.print(f"[dim]@{username} is already on the watchlist.[/]")
        return
    save_settings(settings.model_copy(update={"watchlist": [*settings.watchlist, username]}))
    console.print(f"[bold green]✓[/] Added [cyan]@{username}[/] to the watchlist")


@config_app.command("watch-remove")
def config_watch_remove(username: str = typer.Argument(help="GitHub username, with or without @")):
    settings = _stored_settings()
    username = username.lstrip("@")
    remaining = [u for u in settings.watchlist if u.lower() != username.lower()]
    if len(remaining) == len(settings.watchlist):
        console.print(f"[bold red]Error:[/] @{username} is not on the watchlist")
        raise typer.Exit(1)
    save_settings(settings.model_copy(update={"watchlist": remaining}))
    console.print(f"[bold green]✓[/] Removed [cyan]@{username}[/] from the watchlist")


if __name__ == "__main__":
    app()
