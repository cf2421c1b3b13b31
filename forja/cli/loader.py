"""
Loader del manifiesto declarativo (YAML) → recursos instanciados vía Registry.

Formato:
    resources:
      - type: file
        title: /etc/motd
        mode: 0644
        owner: root
        group: root
"""

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

from rich.console import Console

from forja.core.errors import ConfigError
from forja.core.registry import Registry
from forja.core.resource import Resource

RESERVED_KEYS = ("type", "title")


@dataclass
class ResourceEntry:
    """Una entrada del manifiesto antes de instanciar"""
    type: str
    title: str
    declaration: Dict[str, Any] = field(default_factory=dict)


def parse_entries(data: Any, origin: str = "<manifiesto>") -> List[ResourceEntry]:
    """
    Valida la estructura del manifiesto y separa type/title del resto de la declaración

    Raises:
        ConfigError: estructura inválida o títulos duplicados por tipo
    """
    if data is None:
        return []
    if not isinstance(data, dict) or "resources" not in data:
        raise ConfigError(f"{origin}: se esperaba una clave 'resources' en la raíz")

    items = data.get("resources") or []
    if not isinstance(items, list):
        raise ConfigError(f"{origin}: 'resources' debe ser una lista")

    entries: List[ResourceEntry] = []
    seen: Set[Tuple[str, str]] = set()
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ConfigError(f"{origin}: resources[{index}] debe ser un mapping")
        type_name = item.get("type")
        title = item.get("title")
        if not isinstance(type_name, str) or not type_name:
            raise ConfigError(f"{origin}: resources[{index}] sin 'type'")
        if not isinstance(title, str) or not title:
            raise ConfigError(f"{origin}: resources[{index}] sin 'title'")
        if (type_name, title) in seen:
            raise ConfigError(f"{origin}: recurso duplicado {type_name}[{title}]")
        seen.add((type_name, title))

        declaration = {k: v for k, v in item.items() if k not in RESERVED_KEYS}
        entries.append(ResourceEntry(type=type_name, title=title, declaration=declaration))

    return entries


class ManifestLoader:
    """Carga un manifiesto y construye sus recursos en el orden declarado"""

    def __init__(self, registry: Registry, console: Optional[Console] = None):
        self.registry = registry
        self.console = console or Console()

    def read(self, manifest: Path) -> List[ResourceEntry]:
        """Lee y valida el YAML"""
        if not manifest.exists():
            raise ConfigError(f"Manifiesto no encontrado: {manifest}")
        try:
            with open(manifest, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error al parsear {manifest}: {e}") from e
        return parse_entries(data, str(manifest))

    def load(self, manifest: Path) -> List[Resource]:
        """
        Instancia todos los recursos del manifiesto.
        El primer error de construcción (tipo desconocido, declaración inválida) aborta la carga.
        """
        return [
            self.registry.build(entry.type, entry.title, entry.declaration)
            for entry in self.read(manifest)
        ]
