"""
Contrato que deben implementar los tipos de recurso.

El core solo define la interfaz; las implementaciones viven en forja/providers/*.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Protocol

from rich.console import Console

from forja.core.resource.state import ResourceState, State


@dataclass
class Options:
    """
    Opciones que el driver pasa a cada operación del recurso.
    Son exactamente estas; no se infieren otras.
    """
    dry_run: bool = False  # create/update/delete muestran lo que harían sin tocar el sistema
    site_dir: Optional[Path] = None  # Raíz del sitio para resolver `source` (<site>/data/<source>)


class Resource(Protocol):
    """
    Ciclo de vida de un recurso: evaluate → create / update / delete.

    - evaluate es de solo lectura y puede llamarse cualquier número de veces.
    - create solo si current=absent y want=present.
    - update solo si current=present, want=present y update=True.
    - delete si current=present y want=absent.
    """
    @property
    def title(self) -> str:
        ...

    @property
    def type(self) -> str:
        ...

    @property
    def want(self) -> ResourceState:
        ...

    @property
    def resource_id(self) -> str:
        ...

    def evaluate(self, console: Console, opts: Options) -> State:
        """Compara estado deseado y real sin modificar nada."""
        ...

    def create(self, console: Console, opts: Options) -> None:
        """Crea el recurso aplicando todos sus atributos declarados."""
        ...

    def update(self, console: Console, opts: Options) -> None:
        """Corrige solo los atributos que difieren."""
        ...

    def delete(self, console: Console, opts: Options) -> None:
        """Elimina el recurso."""
        ...


# Firma del constructor de un tipo de recurso: (title, declaración) → Resource
ResourceConstructor = Callable[[str, Mapping[str, Any]], Resource]
