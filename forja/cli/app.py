"""
Aplicación CLI de forja.

Solo compone comandos; la lógica vive en core y providers.
"""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from forja import __version__
from forja.cli.loader import ManifestLoader
from forja.cli.runner import Runner
from forja.core.errors import ForjaError
from forja.core.resource import Options
from forja.core.runtime import site_root
from forja.providers import build_registry

# Proyecto raíz para .env
_ROOT = Path(__file__).resolve().parents[2]
_env = _ROOT / ".env"
if _env.exists():
    load_dotenv(_env)

app = typer.Typer(
    name="forja",
    help="forja - Reconciliación declarativa de recursos del sistema",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def _load(manifest: Path, registry) -> list:
    """Carga el manifiesto; errores de carga terminan el comando con código 1"""
    try:
        return ManifestLoader(registry, console).load(manifest)
    except ForjaError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]", soft_wrap=True)
        raise typer.Exit(code=1)


@app.command()
def plan(
    manifest: Path = typer.Argument(..., help="Manifiesto YAML con los recursos"),
    site_dir: Optional[Path] = typer.Option(None, "--site-dir", help="Directorio del sitio (default: FORJA_SITE_DIR)"),
):
    """Evalúa los recursos y muestra qué cambiaría (no modifica nada)"""
    registry = build_registry()
    resources = _load(manifest, registry)
    runner = Runner(console, Options(dry_run=True, site_dir=site_root(site_dir)))
    results = runner.plan(resources)
    runner.display(results, title="Plan")
    if not all(r.ok for r in results):
        raise typer.Exit(code=1)


@app.command()
def apply(
    manifest: Path = typer.Argument(..., help="Manifiesto YAML con los recursos"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Muestra las acciones sin ejecutarlas"),
    site_dir: Optional[Path] = typer.Option(None, "--site-dir", help="Directorio del sitio (default: FORJA_SITE_DIR)"),
):
    """Reconcilia cada recurso con su estado deseado, en el orden del manifiesto"""
    registry = build_registry()
    resources = _load(manifest, registry)
    runner = Runner(console, Options(dry_run=dry_run, site_dir=site_root(site_dir)))
    results = runner.apply(resources)
    runner.display(results, title="Apply (dry-run)" if dry_run else "Apply")
    if not all(r.ok for r in results):
        raise typer.Exit(code=1)


@app.command()
def types():
    """Lista los tipos de recurso registrados"""
    registry = build_registry()
    table = Table(title="Tipos de recurso", show_header=True, header_style="bold cyan")
    table.add_column("Tipo", style="cyan")
    table.add_column("Descripción", style="green")
    for item in registry.items():
        table.add_row(item.name, item.description)
    console.print(table)


@app.command()
def version():
    """Muestra la versión de forja"""
    console.print(Panel.fit(
        "[bold cyan]forja[/bold cyan]\n"
        "[dim]Reconciliación declarativa de recursos[/dim]\n\n"
        f"[bold]Versión:[/bold] {__version__}",
        border_style="cyan"
    ))


def main():
    app()
