"""
Core: contrato de recursos, registro y errores.

ENFORCEMENT (arquitectura limpia):
- Este paquete NO debe importar: forja.cli ni forja.providers.*.
- Permitido: typing, pathlib, pydantic, rich.console (solo como sink de progreso), forja.core.*.
- Los providers y la CLI importan desde core; nunca al revés.
"""

from forja.core.errors import (
    ForjaError,
    ValidationError,
    ConfigError,
    RegistryError,
    DuplicateRegistrationError,
    ResourceError,
    TypeMismatchError,
    IdentityLookupError,
    ChecksumError,
)

__all__ = [
    "ForjaError",
    "ValidationError",
    "ConfigError",
    "RegistryError",
    "DuplicateRegistrationError",
    "ResourceError",
    "TypeMismatchError",
    "IdentityLookupError",
    "ChecksumError",
]
