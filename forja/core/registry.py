"""
Registro de tipos de recurso: nombre → constructor.

No hay registro global: el punto de entrada construye un Registry y cada módulo
de recurso se registra llamando explícitamente a su función register(registry).
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional

from forja.core.errors import ConfigError, DuplicateRegistrationError
from forja.core.resource.contracts import Resource, ResourceConstructor


@dataclass(frozen=True)
class RegistryItem:
    """Entrada del registro"""
    name: str
    description: str
    constructor: ResourceConstructor


class Registry:
    """Tabla de tipos de recurso disponibles"""

    def __init__(self):
        self._items: Dict[str, RegistryItem] = {}

    def register(self, item: RegistryItem) -> None:
        """
        Registra un tipo de recurso

        Raises:
            DuplicateRegistrationError: si ya existe un tipo con ese nombre
        """
        if item.name in self._items:
            raise DuplicateRegistrationError(f"Tipo de recurso ya registrado: {item.name}")
        self._items[item.name] = item

    def lookup(self, name: str) -> Optional[RegistryItem]:
        """Obtiene la entrada de un tipo; None si no existe"""
        return self._items.get(name)

    def build(self, type_name: str, title: str, declaration: Optional[Mapping[str, Any]]) -> Resource:
        """
        Instancia un recurso a partir de su declaración

        Raises:
            ConfigError: si el tipo no está registrado
        """
        item = self.lookup(type_name)
        if item is None:
            known = ", ".join(self.names()) or "(ninguno)"
            raise ConfigError(f"Tipo de recurso desconocido: {type_name!r} (disponibles: {known})")
        return item.constructor(title, declaration)

    def names(self) -> List[str]:
        return sorted(self._items)

    def items(self) -> List[RegistryItem]:
        return [self._items[name] for name in self.names()]

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[RegistryItem]:
        return iter(self.items())
