"""
Tipos de recurso disponibles.

Cada módulo expone register(registry); build_registry() los llama explícitamente
en orden fijo, sin efectos al importar.
"""

from forja.core.registry import Registry
from forja.providers import file

PROVIDER_MODULES = [file]


def build_registry() -> Registry:
    """Registro con todos los tipos de recurso incluidos en forja"""
    registry = Registry()
    for module in PROVIDER_MODULES:
        module.register(registry)
    return registry


__all__ = ["build_registry", "PROVIDER_MODULES"]
