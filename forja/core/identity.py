"""
Resolución de identidades: nombres de usuario/grupo ↔ uid/gid.

Consulta las bases del sistema (pwd/grp). Un nombre o id desconocido lanza KeyError;
quien llama decide cómo reportarlo (los recursos lo convierten en IdentityLookupError).
"""

import grp
import os
import pwd
from typing import Tuple


def user_id(name: str) -> int:
    """uid de un usuario por nombre"""
    try:
        return pwd.getpwnam(name).pw_uid
    except KeyError:
        raise KeyError(f"usuario desconocido: {name!r}") from None


def group_id(name: str) -> int:
    """gid de un grupo por nombre"""
    try:
        return grp.getgrnam(name).gr_gid
    except KeyError:
        raise KeyError(f"grupo desconocido: {name!r}") from None


def user_name(uid: int) -> str:
    """Nombre del usuario con ese uid"""
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        raise KeyError(f"uid sin usuario: {uid}") from None


def group_name(gid: int) -> str:
    """Nombre del grupo con ese gid"""
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        raise KeyError(f"gid sin grupo: {gid}") from None


def current_user_and_group() -> Tuple[str, str]:
    """
    (usuario, grupo) del proceso actual.
    El grupo es el grupo primario del usuario (pw_gid), no el gid efectivo del proceso.
    """
    pw = pwd.getpwuid(os.getuid())
    return pw.pw_name, group_name(pw.pw_gid)
