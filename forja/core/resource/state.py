"""
Estado de un recurso: existencia (ResourceState), resultado de evaluate (State)
y diferencias por atributo (StateDiff).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List


class ResourceState(str, Enum):
    """Existencia de un recurso"""
    UNKNOWN = "unknown"  # Solo antes de evaluate; nunca se persiste
    PRESENT = "present"
    ABSENT = "absent"


class StateDiff:
    """Diferencia entre estado deseado y real de un atributo"""
    def __init__(
        self,
        resource_id: str,
        field: str,
        desired: Any,
        actual: Any,
        severity: str = "warning"
    ):
        self.resource_id = resource_id
        self.field = field
        self.desired = desired
        self.actual = actual
        self.severity = severity  # "error", "warning", "info"

    def __repr__(self) -> str:
        return (
            f"StateDiff({self.resource_id!r}, {self.field!r}, "
            f"desired={self.desired!r}, actual={self.actual!r})"
        )


@dataclass
class State:
    """
    Resultado de evaluate.

    current/want describen existencia. update=True indica que la existencia coincide
    pero al menos un atributo monitoreado difiere; es independiente de current/want.
    diffs es solo informativo (un StateDiff por atributo distinto).
    """
    current: ResourceState = ResourceState.UNKNOWN
    want: ResourceState = ResourceState.PRESENT
    update: bool = False
    diffs: List[StateDiff] = field(default_factory=list)

    @property
    def needs_create(self) -> bool:
        return self.current == ResourceState.ABSENT and self.want == ResourceState.PRESENT

    @property
    def needs_delete(self) -> bool:
        return self.current == ResourceState.PRESENT and self.want == ResourceState.ABSENT

    @property
    def needs_update(self) -> bool:
        return (
            self.current == ResourceState.PRESENT
            and self.want == ResourceState.PRESENT
            and self.update
        )

    @property
    def in_sync(self) -> bool:
        """True si no hace falta ninguna acción"""
        return self.current == self.want and not self.update
