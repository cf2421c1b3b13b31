"""
Contrato de recursos: estados, opciones, protocolo y base.
"""

from forja.core.resource.state import ResourceState, State, StateDiff
from forja.core.resource.contracts import Options, Resource, ResourceConstructor
from forja.core.resource.base import BaseResource
from forja.core.resource.declaration import Declaration, decode_declaration, overlay

__all__ = [
    "ResourceState",
    "State",
    "StateDiff",
    "Options",
    "Resource",
    "ResourceConstructor",
    "BaseResource",
    "Declaration",
    "decode_declaration",
    "overlay",
]
