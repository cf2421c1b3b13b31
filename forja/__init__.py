"""
forja - Motor de reconciliación declarativa.

Los recursos declaran un estado deseado; forja evalúa la diferencia con el estado real
y aplica las operaciones mínimas para cerrarla.
"""

__version__ = "1.0.0"
