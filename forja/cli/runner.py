"""
Ciclo de reconciliación por recurso (evaluate → acción → re-evaluate) y presentación de resultados.

Los recursos se procesan en el orden en que llegan; no hay grafo de dependencias.
"""

from dataclasses import dataclass
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from forja.core.errors import ForjaError, ResourceError
from forja.core.resource import Options, Resource, State


def reconcile(resource: Resource, console: Console, opts: Options) -> State:
    """
    Lleva un recurso a su estado deseado.

    Devuelve el State final: el re-evaluado tras la acción, o el inicial si no hubo
    nada que hacer o es dry-run.
    """
    state = resource.evaluate(console, opts)

    if state.needs_create:
        resource.create(console, opts)
    elif state.needs_delete:
        resource.delete(console, opts)
    elif state.needs_update:
        resource.update(console, opts)
    else:
        return state

    if opts.dry_run:
        return state

    return resource.evaluate(console, opts)


@dataclass
class RunResult:
    """Resultado de procesar un recurso"""
    resource: Resource
    state: Optional[State] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Runner:
    """Procesa una lista de recursos; un error aborta solo el recurso que lo produce"""

    def __init__(self, console: Optional[Console] = None, opts: Optional[Options] = None):
        self.console = console or Console()
        self.opts = opts or Options()

    def _run_one(self, resource: Resource, plan_only: bool) -> RunResult:
        try:
            if plan_only:
                state = resource.evaluate(self.console, self.opts)
            else:
                state = reconcile(resource, self.console, self.opts)
            return RunResult(resource, state=state)
        except (ForjaError, OSError) as e:
            # ResourceError ya incluye el id en su mensaje
            message = str(e) if isinstance(e, ResourceError) else f"{resource.resource_id}: {e}"
            self.console.print(f"[red]✘ {escape(message)}[/red]", soft_wrap=True)
            return RunResult(resource, state=getattr(e, "state", None), error=e)

    def plan(self, resources: List[Resource]) -> List[RunResult]:
        """Solo evaluate"""
        return [self._run_one(r, plan_only=True) for r in resources]

    def apply(self, resources: List[Resource]) -> List[RunResult]:
        """Reconciliación completa"""
        return [self._run_one(r, plan_only=False) for r in resources]

    def display(self, results: List[RunResult], title: str = "Estado de recursos") -> None:
        """Tabla con current/want/update y diferencias por atributo"""
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("Recurso", style="cyan")
        table.add_column("Actual")
        table.add_column("Deseado")
        table.add_column("Update")
        table.add_column("Diferencias", style="yellow")

        for result in results:
            state = result.state
            if state is None:
                table.add_row(escape(result.resource.resource_id), "-", "-", "-", "[red]error[/red]")
                continue
            diffs = "\n".join(
                f"{d.field}: {escape(str(d.actual))} → {escape(str(d.desired))}" for d in state.diffs
            )
            if not result.ok:
                diffs = "[red]error[/red]"
            table.add_row(
                escape(result.resource.resource_id),
                state.current.value,
                state.want.value,
                "sí" if state.update else "no",
                diffs,
            )

        self.console.print(table)

        failed = sum(1 for r in results if not r.ok)
        if failed:
            self.console.print(f"[red]✘ {failed} recurso(s) con error[/red]")
        else:
            self.console.print(f"[green]✔ {len(results)} recurso(s) procesados[/green]")
