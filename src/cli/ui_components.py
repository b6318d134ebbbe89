"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `estimate` y `doctor`.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import AgeEstimate, LocalizedAgeEstimate


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("agify-bdd", style="bold cyan")
    subtitle = Text("Age estimation API • BDD checks • Diagnostics", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_estimates_table(estimates: Iterable[AgeEstimate]) -> Table:
    """Tabla Rich con una fila por estimación (orden de la respuesta)."""

    table = Table(title="Age Estimates")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Age", style="green", justify="right")
    table.add_column("Count", style="white", justify="right")
    table.add_column("Country", style="magenta")
    for estimate in estimates:
        country = estimate.country_id if isinstance(estimate, LocalizedAgeEstimate) else "-"
        age = "n/a" if estimate.age is None else str(estimate.age)
        table.add_row(estimate.name, age, str(estimate.count), country)
    return table
