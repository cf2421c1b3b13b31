"""
Runtime: resolución del directorio del sitio.

La ruta del sitio la decide quien llama (CLI/driver); aquí solo se resuelve.
"""

from forja.core.runtime.resolver import site_root, data_dir

__all__ = ["site_root", "data_dir"]
