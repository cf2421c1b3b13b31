"""
Base para tipos de recurso: identidad (title, type, want) y salida de progreso.

Los tipos concretos heredan de aquí e implementan las cuatro operaciones del contrato.
"""

from abc import ABC, abstractmethod
from typing import Optional

from rich.console import Console
from rich.markup import escape

from forja.core.resource.contracts import Options
from forja.core.resource.state import ResourceState, State


class BaseResource(ABC):
    """Base abstracta de recursos"""

    def __init__(self, title: str, type: str, want: ResourceState = ResourceState.PRESENT):
        self._title = title
        self._type = type
        self._want = ResourceState(want)

    @property
    def title(self) -> str:
        """Título único del recurso; inmutable"""
        return self._title

    @property
    def type(self) -> str:
        """Nombre del tipo en el registro"""
        return self._type

    @property
    def want(self) -> ResourceState:
        return self._want

    @property
    def resource_id(self) -> str:
        return f"{self._type}[{self._title}]"

    def new_state(self) -> State:
        """State inicial antes de evaluar"""
        return State(current=ResourceState.UNKNOWN, want=self._want, update=False)

    def printf(self, console: Console, message: str, opts: Optional[Options] = None) -> None:
        """Una línea de progreso con el id del recurso; marca (dry-run) si aplica"""
        prefix = "[dim](dry-run)[/dim] " if opts is not None and opts.dry_run else ""
        console.print(f"{prefix}{escape(self.resource_id)} {escape(message)}", soft_wrap=True)

    @abstractmethod
    def evaluate(self, console: Console, opts: Options) -> State:
        pass

    @abstractmethod
    def create(self, console: Console, opts: Options) -> None:
        pass

    @abstractmethod
    def update(self, console: Console, opts: Options) -> None:
        pass

    @abstractmethod
    def delete(self, console: Console, opts: Options) -> None:
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.resource_id}>"
