"""CLI principal (Typer).

Por qué una CLI en una suite de pruebas:
- Permite verificar configuración y conectividad antes de lanzar los escenarios.
- Reutiliza el mismo dispatcher/accessor que los steps: si `estimate` funciona,
  el "world" de los escenarios también.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.agify_schema import AgifyResponseSchema
from adapters.dispatcher import RateLimitedDispatcher
from cli import doctor
from cli.ui_components import build_estimates_table, print_banner
from core.config import load_settings
from core.domain.models import AgeEstimate
from core.errors import AgifyClientError

app = typer.Typer(no_args_is_help=True, help="Checks and diagnostics for the Agify age-estimation API.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and rate-limit waits."),
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the welcome banner."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if banner:
        print_banner(_console)


@app.command()
def estimate(
    names: List[str] = typer.Argument(..., help="One or more names to estimate."),
    country: Optional[str] = typer.Option(None, "--country", "-c", help="ISO 3166-1 alpha-2 country code."),
) -> None:
    """Estimate ages for NAMES (batch request when more than one name)."""

    settings = load_settings()
    estimates: list[AgeEstimate]
    try:
        with RateLimitedDispatcher(settings) as world:
            schema = AgifyResponseSchema(world)
            if len(names) == 1 and country:
                estimates = [schema.lookup_localized(names[0], country)]
            elif len(names) == 1:
                estimates = [schema.lookup_single(names[0])]
            elif country:
                estimates = list(schema.lookup_batch_localized(names, country))
            else:
                estimates = list(schema.lookup_batch(names))
    except AgifyClientError as exc:
        _console.print(f"[red]{type(exc).__name__}:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    _console.print(build_estimates_table(estimates))


def run() -> None:
    app()
