"""
Recurso `file`: gestiona la existencia, permisos, propietario y (diagnóstico) contenido de un archivo.

Declaración:
    path    ruta del archivo (default: el title)
    mode    bits de permisos POSIX (default: 0644); acepta entero o string octal ("0640")
    owner   usuario propietario (default: usuario del proceso)
    group   grupo (default: grupo primario del usuario del proceso)
    source  archivo de origen relativo a <site>/data/ (opcional; solo se compara, no se copia)
    state   present | absent (default: present)
"""

import os
import stat
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

from pydantic import field_validator
from rich.console import Console

from forja.core.checksum import file_md5
from forja.core.errors import (
    ChecksumError,
    ConfigError,
    IdentityLookupError,
    TypeMismatchError,
    ValidationError,
)
from forja.core.identity import current_user_and_group, group_id, group_name, user_id, user_name
from forja.core.registry import Registry, RegistryItem
from forja.core.resource import (
    BaseResource,
    Declaration,
    Options,
    ResourceState,
    State,
    StateDiff,
    decode_declaration,
    overlay,
)
from forja.core.runtime import data_dir

FILE_RESOURCE_TYPE = "file"
FILE_RESOURCE_DESC = "gestiona archivos"
DEFAULT_MODE = 0o644
MAX_MODE = 0o7777


class FileDeclaration(Declaration):
    """Campos declarables de un recurso file; todos opcionales"""
    path: Optional[str] = None
    mode: Optional[int] = None
    owner: Optional[str] = None
    group: Optional[str] = None
    source: Optional[str] = None

    @field_validator("mode", mode="before")
    @classmethod
    def parse_octal_mode(cls, v):
        """Acepta "0640" / "0o640" además de enteros; rechaza booleanos"""
        if isinstance(v, bool):
            raise ValueError("el modo no puede ser booleano")
        if isinstance(v, str):
            text = v.strip().lower()
            if text.startswith("0o"):
                text = text[2:]
            try:
                return int(text, 8)
            except ValueError:
                raise ValueError(f"modo octal inválido: {v!r}") from None
        return v

    @field_validator("mode")
    @classmethod
    def check_mode_range(cls, v):
        if v is not None and not 0 <= v <= MAX_MODE:
            raise ValueError(f"el modo debe estar entre 0 y {MAX_MODE:o} (octal)")
        return v


# --- Comparadores de atributos ---

def permissions_changed(st: os.stat_result, mode: int) -> bool:
    """True si los bits de permisos reales difieren de los declarados (igualdad exacta)"""
    return stat.S_IMODE(st.st_mode) != mode


def file_owner(st: os.stat_result) -> Tuple[str, str]:
    """
    (usuario, grupo) reales del archivo, por nombre

    Raises:
        KeyError: si el uid o gid no tiene nombre
    """
    return user_name(st.st_uid), group_name(st.st_gid)


def owner_changed(st: os.stat_result, owner: str, group: str) -> bool:
    """
    True si el propietario o el grupo reales difieren de los declarados.
    Los nombres declarados también deben existir en el sistema.

    Raises:
        KeyError: si algún usuario o grupo (real o declarado) no se puede resolver
    """
    user_id(owner)
    group_id(group)
    actual_owner, actual_group = file_owner(st)
    return actual_owner != owner or actual_group != group


def content_changed(dst: Path, src: Path) -> bool:
    """
    True si el contenido de dst difiere del de src (MD5)

    Raises:
        OSError: si alguno de los dos no se puede leer
    """
    return file_md5(src) != file_md5(dst)


class FileResource(BaseResource):
    """Recurso que gestiona archivos"""

    def __init__(
        self,
        title: str,
        path: str,
        mode: int = DEFAULT_MODE,
        owner: str = "",
        group: str = "",
        source: Optional[str] = None,
        want: ResourceState = ResourceState.PRESENT,
    ):
        super().__init__(title, FILE_RESOURCE_TYPE, want)
        self._path = path
        self.mode = mode
        self.owner = owner
        self.group = group
        self.source = source

    @property
    def path(self) -> str:
        """Ruta gestionada; no cambia después de construir el recurso"""
        return self._path

    # --- Checks por atributo ---

    def _stat_regular_file(self, state: Optional[State] = None) -> os.stat_result:
        """stat de la ruta; TypeMismatchError si existe pero no es un archivo regular"""
        st = os.stat(self._path)
        if not stat.S_ISREG(st.st_mode):
            raise TypeMismatchError(
                self.resource_id,
                f"{self._path} existe, pero no es un archivo",
                state,
            )
        return st

    def _identity_error(self, e: KeyError) -> IdentityLookupError:
        return IdentityLookupError(self.resource_id, e.args[0] if e.args else str(e))

    def _permissions_diff(self, st: os.stat_result) -> Optional[StateDiff]:
        if not permissions_changed(st, self.mode):
            return None
        return StateDiff(
            self.resource_id, "mode", f"{self.mode:04o}", f"{stat.S_IMODE(st.st_mode):04o}"
        )

    def _owner_diff(self, st: os.stat_result) -> Optional[StateDiff]:
        try:
            if not owner_changed(st, self.owner, self.group):
                return None
            actual_owner, actual_group = file_owner(st)
        except KeyError as e:
            raise self._identity_error(e) from e
        return StateDiff(
            self.resource_id, "owner", f"{self.owner}:{self.group}", f"{actual_owner}:{actual_group}"
        )

    def source_path(self, opts: Options) -> Optional[Path]:
        """Ruta real del archivo de origen (<site>/data/<source>); None si no hay source"""
        if not self.source:
            return None
        if opts.site_dir is None:
            raise ConfigError(
                f"{self.resource_id}: source={self.source!r} requiere un directorio de sitio "
                "(--site-dir o FORJA_SITE_DIR)"
            )
        return data_dir(opts.site_dir) / self.source

    def _content_diff(self, opts: Options) -> Optional[StateDiff]:
        src = self.source_path(opts)
        if src is None:
            return None
        try:
            changed = content_changed(Path(self._path), src)
        except OSError as e:
            raise ChecksumError(self.resource_id, f"no se pudo calcular el checksum: {e}") from e
        if not changed:
            return None
        return StateDiff(self.resource_id, "content", str(src), self._path, "info")

    def _ids(self) -> Tuple[int, int]:
        try:
            return user_id(self.owner), group_id(self.group)
        except KeyError as e:
            raise self._identity_error(e) from e

    # --- Contrato ---

    def evaluate(self, console: Console, opts: Options) -> State:
        state = self.new_state()

        try:
            st = os.stat(self._path)
        except (FileNotFoundError, NotADirectoryError):
            # Un componente intermedio que no es directorio también significa que no existe
            state.current = ResourceState.ABSENT
            return state

        state.current = ResourceState.PRESENT
        if not stat.S_ISREG(st.st_mode):
            raise TypeMismatchError(
                self.resource_id,
                f"{self._path} existe, pero no es un archivo",
                state,
            )

        for diff in (self._permissions_diff(st), self._owner_diff(st), self._content_diff(opts)):
            if diff is not None:
                state.update = True
                state.diffs.append(diff)

        return state

    def create(self, console: Console, opts: Options) -> None:
        uid, gid = self._ids()

        self.printf(console, "creando archivo", opts)
        if not opts.dry_run:
            # "a" sigue symlinks colgantes y crea el destino; no trunca
            with open(self._path, "a"):
                pass

        self.printf(console, f"estableciendo propietario {self.owner}:{self.group}", opts)
        if not opts.dry_run:
            os.chown(self._path, uid, gid)

        self.printf(console, f"estableciendo permisos a {self.mode:04o}", opts)
        if not opts.dry_run:
            os.chmod(self._path, self.mode)

    def update(self, console: Console, opts: Options) -> None:
        st = self._stat_regular_file()

        # Permisos antes que ownership
        if self._permissions_diff(st) is not None:
            self.printf(console, f"estableciendo permisos a {self.mode:04o}", opts)
            if not opts.dry_run:
                os.chmod(self._path, self.mode)

        if self._owner_diff(st) is not None:
            uid, gid = self._ids()
            self.printf(console, f"estableciendo propietario {self.owner}:{self.group}", opts)
            if not opts.dry_run:
                os.chown(self._path, uid, gid)

        diff = self._content_diff(opts)
        if diff is not None:
            self.printf(console, f"el contenido difiere de {diff.desired}; no se sincroniza", opts)

    def delete(self, console: Console, opts: Options) -> None:
        # Idempotente: si ya no existe no hay nada que hacer
        if not os.path.lexists(self._path):
            return

        self.printf(console, "eliminando archivo", opts)
        if not opts.dry_run:
            os.remove(self._path)


def new_file_resource(title: str, declaration: Optional[Mapping[str, Any]]) -> FileResource:
    """
    Crea un recurso file: defaults del proceso y luego la declaración encima,
    solo en los campos que declara.

    Raises:
        ValidationError: declaración inválida
        IdentityLookupError: no se pudo resolver el usuario/grupo del proceso
    """
    resource_id = f"{FILE_RESOURCE_TYPE}[{title}]"

    try:
        default_owner, default_group = current_user_and_group()
    except KeyError as e:
        raise IdentityLookupError(resource_id, e.args[0] if e.args else str(e)) from e

    baseline = {
        "state": ResourceState.PRESENT,
        "path": title,
        "mode": DEFAULT_MODE,
        "owner": default_owner,
        "group": default_group,
        "source": None,
    }

    decl = decode_declaration(FileDeclaration, declaration, resource_id)
    values = overlay(baseline, decl)

    if not values["path"]:
        raise ValidationError(f"{resource_id}: path no puede estar vacío", {"path": "vacío"})

    return FileResource(
        title,
        path=values["path"],
        mode=values["mode"],
        owner=values["owner"],
        group=values["group"],
        source=values["source"],
        want=values["state"],
    )


def register(registry: Registry) -> None:
    """Registra el tipo `file`"""
    registry.register(RegistryItem(
        name=FILE_RESOURCE_TYPE,
        description=FILE_RESOURCE_DESC,
        constructor=new_file_resource,
    ))
