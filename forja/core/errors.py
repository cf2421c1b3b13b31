"""
Errores de forja.

El core solo define excepciones; las capas (CLI/driver) se encargan del formato de salida.
"""

from typing import Optional


class ForjaError(Exception):
    """Error base de forja."""
    pass


class ValidationError(ForjaError):
    """Error de validación de una declaración de recurso."""

    def __init__(self, message: str, fields: Optional[dict] = None):
        super().__init__(message)
        self.fields = fields or {}


class ConfigError(ForjaError):
    """Error de configuración (manifiesto inválido, tipo desconocido, site dir faltante)."""
    pass


class RegistryError(ForjaError):
    """Error del registro de tipos de recurso."""
    pass


class DuplicateRegistrationError(RegistryError):
    """Un tipo de recurso se registró dos veces."""
    pass


class ResourceError(ForjaError):
    """Error de un recurso concreto; lleva el id type[title] como contexto."""

    def __init__(self, resource_id: str, message: str):
        super().__init__(f"{resource_id}: {message}")
        self.resource_id = resource_id


class TypeMismatchError(ResourceError):
    """La ruta existe pero no es del tipo esperado. Nunca se repara automáticamente."""

    def __init__(self, resource_id: str, message: str, state=None):
        super().__init__(resource_id, message)
        self.state = state


class IdentityLookupError(ResourceError):
    """No se pudo resolver un usuario o grupo (declarado o real)."""
    pass


class ChecksumError(ResourceError):
    """No se pudo leer el origen o el destino al comparar contenido."""
    pass
