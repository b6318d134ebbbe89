"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.agify_schema import AgifyResponseSchema
from adapters.dispatcher import RateLimitedDispatcher
from core.config import AppSettings, load_settings, write_user_env_vars
from core.errors import AgifyClientError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_PROBE_NAME = "michael"


def _check_api(settings: AppSettings) -> tuple[bool, str]:
    """Run one real lookup through the rate-limited dispatcher."""

    try:
        with RateLimitedDispatcher(settings) as world:
            schema = AgifyResponseSchema(world)
            estimate = schema.lookup_single(_PROBE_NAME)
        return True, f"HTTP {schema.last_response.status_code} (age={estimate.age}, count={estimate.count})"
    except AgifyClientError as exc:
        return False, escape(f"{type(exc).__name__}: {exc}")


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = load_settings()

    table = Table(title="agify-bdd Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row("Timeout", "OK", f"{settings.timeout_ms} ms")
    table.add_row("Rate limit", "OK", f"{settings.min_request_interval_ms} ms between requests")
    if settings.api_key:
        table.add_row("API key", "OK", "x-api-key header will be sent")
    else:
        table.add_row("API key", "OPTIONAL", "No key set -> free tier daily limit applies")

    ok_api, detail_api = _check_api(settings)
    table.add_row("API lookup", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not ok_api:
        raise typer.Exit(code=1)


@app.command(name="setup-key")
def setup_key() -> None:
    """Store the API key in the user config .env (no manual editing)."""

    api_key = typer.prompt("Agify API key", hide_input=True, confirmation_prompt=False).strip()
    if not api_key:
        raise typer.BadParameter("API key cannot be empty")

    env_path = write_user_env_vars({"AGIFY_API_KEY": api_key})
    _console.print(f"[green]Saved API key to:[/green] {env_path}")
