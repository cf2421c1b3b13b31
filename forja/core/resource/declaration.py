"""
Decodificación de declaraciones: mapping crudo → modelo Pydantic validado,
y superposición campo a campo sobre los defaults.

Los modelos de declaración tienen todos sus campos opcionales; `model_fields_set`
distingue un campo ausente de uno declarado explícitamente con valor vacío o cero.
"""

from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from forja.core.errors import ValidationError
from forja.core.resource.state import ResourceState

D = TypeVar("D", bound="Declaration")


class Declaration(BaseModel):
    """Campos comunes a toda declaración de recurso"""
    model_config = ConfigDict(extra="forbid")

    state: Optional[ResourceState] = None

    @field_validator("state")
    @classmethod
    def check_declarable_state(cls, v):
        """unknown solo existe antes de evaluate; no se puede declarar"""
        if v == ResourceState.UNKNOWN:
            raise ValueError("state debe ser present o absent")
        return v


def _field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    """{campo: mensaje} a partir de los errores de Pydantic"""
    fields: Dict[str, str] = {}
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<declaración>"
        fields[loc] = err.get("msg", "valor inválido")
    return fields


def decode_declaration(model: Type[D], data: Optional[Mapping[str, Any]], resource_id: str) -> D:
    """
    Valida una declaración cruda contra su modelo.

    Args:
        model: Clase de declaración (subclase de Declaration)
        data: Mapping crudo (p. ej. de YAML); None equivale a declaración vacía
        resource_id: type[title] para el mensaje de error

    Returns:
        Instancia del modelo

    Raises:
        ValidationError: con un mensaje por campo inválido o desconocido
    """
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValidationError(
            f"{resource_id}: la declaración debe ser un mapping, no {type(data).__name__}",
            {"<declaración>": "se esperaba un mapping"},
        )

    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as e:
        fields = _field_errors(e)
        detail = "; ".join(f"{name}: {msg}" for name, msg in fields.items())
        raise ValidationError(f"{resource_id}: declaración inválida ({detail})", fields) from e


def overlay(baseline: Dict[str, Any], declaration: BaseModel) -> Dict[str, Any]:
    """
    Superpone sobre baseline solo los campos declarados explícitamente.
    Un valor vacío o cero declarado se conserva; null equivale a no declarado.
    """
    merged = dict(baseline)
    for name in declaration.model_fields_set:
        value = getattr(declaration, name)
        if value is None:
            continue
        merged[name] = value
    return merged
