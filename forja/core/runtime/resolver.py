"""
Resolución de rutas del sitio.

- site_root(): directorio del sitio; los archivos `source` de los recursos viven en <site>/data/.
- data_dir(): <site>/data.

El core NO escribe en disco; solo expone estas rutas.
"""

import os
from pathlib import Path
from typing import Optional


SITE_DIR_ENV = "FORJA_SITE_DIR"
DATA_SUBDIR = "data"


def site_root(explicit: Optional[Path] = None) -> Optional[Path]:
    """
    Directorio raíz del sitio.
    Resolución: argumento explícito → FORJA_SITE_DIR → None (sin sitio; `source` no se puede resolver).
    """
    if explicit is not None:
        return Path(explicit).expanduser().resolve()

    env_value = os.environ.get(SITE_DIR_ENV, "").strip()
    if env_value:
        return Path(env_value).expanduser().resolve()

    return None


def data_dir(site_dir: Path) -> Path:
    """Directorio de datos del sitio (origen de los archivos declarados con `source`)."""
    return Path(site_dir) / DATA_SUBDIR
