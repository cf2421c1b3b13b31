"""
Checksum de contenido de archivos (MD5).

Se lee por bloques; archivos grandes no se cargan completos en memoria.
"""

import hashlib
from pathlib import Path

CHUNK_SIZE = 64 * 1024


def file_md5(path: Path) -> str:
    """
    Digest MD5 (hex) del contenido de un archivo

    Raises:
        OSError: si el archivo no se puede leer
    """
    digest = hashlib.md5()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
