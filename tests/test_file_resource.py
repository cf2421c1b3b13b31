import os
import pwd
import stat

import pytest

from forja.core.errors import (
    ChecksumError,
    ConfigError,
    IdentityLookupError,
    TypeMismatchError,
)
from forja.core.resource import Options, ResourceState
from forja.providers.file import (
    FileResource,
    content_changed,
    new_file_resource,
    permissions_changed,
)


def _mode(path):
    return stat.S_IMODE(os.stat(path).st_mode)


def _make_file(path, mode, content=""):
    """Archivo con el modo dado, propiedad del usuario actual y su grupo primario"""
    path.write_text(content)
    pw = pwd.getpwuid(os.getuid())
    os.chown(path, pw.pw_uid, pw.pw_gid)
    os.chmod(path, mode)
    return path


def test_evaluate_absent_path(tmp_path, console, opts):
    res = new_file_resource(str(tmp_path / "a"), {"mode": 0o600})
    state = res.evaluate(console, opts)
    assert state.current == ResourceState.ABSENT
    assert state.want == ResourceState.PRESENT
    assert state.update is False
    assert state.needs_create


def test_evaluate_has_no_side_effects(tmp_path, console, opts):
    res = new_file_resource(str(tmp_path / "a"), {})
    res.evaluate(console, opts)
    res.evaluate(console, opts)
    assert list(tmp_path.iterdir()) == []


def test_create_then_converged(tmp_path, console, opts, me, output):
    path = tmp_path / "a"
    res = new_file_resource(str(path), {"mode": 0o600, "owner": me[0], "group": me[1]})

    assert res.evaluate(console, opts).needs_create
    res.create(console, opts)

    state = res.evaluate(console, opts)
    assert state.current == ResourceState.PRESENT
    assert state.want == ResourceState.PRESENT
    assert state.update is False
    assert _mode(path) == 0o600

    text = output()
    assert "creando archivo" in text
    assert "estableciendo permisos a 0600" in text
    assert f"estableciendo propietario {me[0]}:{me[1]}" in text


def test_create_applies_mode_regardless_of_umask(tmp_path, console, opts):
    path = tmp_path / "a"
    old = os.umask(0o077)
    try:
        new_file_resource(str(path), {"mode": 0o664}).create(console, opts)
    finally:
        os.umask(old)
    assert _mode(path) == 0o664


def test_permission_check_is_exact(tmp_path, console, opts):
    path = _make_file(tmp_path / "a", 0o644)

    state = new_file_resource(str(path), {"mode": 0o640}).evaluate(console, opts)
    assert state.update is True
    assert [d.field for d in state.diffs] == ["mode"]
    assert state.diffs[0].desired == "0640"
    assert state.diffs[0].actual == "0644"

    state = new_file_resource(str(path), {"mode": 0o644}).evaluate(console, opts)
    assert state.update is False
    assert state.diffs == []


def test_permissions_changed_no_superset_tolerance(tmp_path):
    path = _make_file(tmp_path / "a", 0o755)
    assert permissions_changed(os.stat(path), 0o755) is False
    assert permissions_changed(os.stat(path), 0o750) is True
    assert permissions_changed(os.stat(path), 0o777) is True


def test_update_fixes_mode_and_converges(tmp_path, console, opts, output):
    path = _make_file(tmp_path / "a", 0o644)
    res = new_file_resource(str(path), {"mode": 0o600})

    state = res.evaluate(console, opts)
    assert (state.current, state.want, state.update) == (
        ResourceState.PRESENT, ResourceState.PRESENT, True
    )

    res.update(console, opts)
    assert _mode(path) == 0o600
    assert res.evaluate(console, opts).update is False

    text = output()
    assert "estableciendo permisos a 0600" in text
    assert "estableciendo propietario" not in text


def test_update_in_sync_is_noop(tmp_path, console, opts, output):
    path = _make_file(tmp_path / "a", 0o644, "hola")
    res = new_file_resource(str(path), {})
    before = os.stat(path)

    assert res.evaluate(console, opts).update is False
    res.update(console, opts)

    after = os.stat(path)
    assert stat.S_IMODE(after.st_mode) == stat.S_IMODE(before.st_mode)
    assert (after.st_uid, after.st_gid) == (before.st_uid, before.st_gid)
    assert path.read_text() == "hola"
    assert output() == ""


def test_owner_mismatch_with_matching_mode(tmp_path, console, opts, other_user, me):
    path = _make_file(tmp_path / "a", 0o644)
    res = new_file_resource(str(path), {"owner": other_user, "group": me[1]})

    state = res.evaluate(console, opts)
    assert state.update is True
    assert [d.field for d in state.diffs] == ["owner"]
    assert state.diffs[0].desired == f"{other_user}:{me[1]}"


def test_group_mismatch(tmp_path, console, opts, other_group, me):
    path = _make_file(tmp_path / "a", 0o644)
    res = new_file_resource(str(path), {"owner": me[0], "group": other_group})
    assert res.evaluate(console, opts).update is True


def test_unknown_declared_owner_is_error(tmp_path, console, opts):
    path = _make_file(tmp_path / "a", 0o644)
    res = new_file_resource(str(path), {"owner": "forja-no-such-user"})
    with pytest.raises(IdentityLookupError) as exc:
        res.evaluate(console, opts)
    assert exc.value.resource_id == f"file[{path}]"


def test_unknown_declared_group_is_error_on_create(tmp_path, console, opts):
    path = tmp_path / "a"
    res = new_file_resource(str(path), {"group": "forja-no-such-group"})
    with pytest.raises(IdentityLookupError):
        res.create(console, opts)
    assert not path.exists()


def test_directory_is_type_mismatch(tmp_path, console, opts):
    target = tmp_path / "dir"
    target.mkdir()
    res = new_file_resource(str(target), {})

    with pytest.raises(TypeMismatchError) as exc:
        res.evaluate(console, opts)
    assert exc.value.state.current == ResourceState.PRESENT
    assert exc.value.state.update is False


def test_update_refuses_type_mismatch(tmp_path, console, opts):
    target = tmp_path / "dir"
    target.mkdir()
    with pytest.raises(TypeMismatchError):
        new_file_resource(str(target), {}).update(console, opts)
    assert target.is_dir()


def test_delete_removes_file(tmp_path, console, opts, output):
    path = _make_file(tmp_path / "a", 0o644)
    res = new_file_resource(str(path), {"state": "absent"})

    state = res.evaluate(console, opts)
    assert state.needs_delete

    res.delete(console, opts)
    assert not path.exists()
    assert res.evaluate(console, opts).in_sync
    assert "eliminando archivo" in output()


def test_delete_absent_is_noop(tmp_path, console, opts, output):
    res = new_file_resource(str(tmp_path / "a"), {"state": "absent"})
    res.delete(console, opts)
    assert output() == ""


def test_delete_propagates_os_error(tmp_path, console, opts):
    target = tmp_path / "dir"
    target.mkdir()
    with pytest.raises(OSError):
        new_file_resource(str(target), {}).delete(console, opts)


def test_dry_run_does_not_mutate(tmp_path, console, output):
    dry = Options(dry_run=True)

    path = tmp_path / "a"
    new_file_resource(str(path), {"mode": 0o600}).create(console, dry)
    assert not path.exists()

    _make_file(path, 0o644)
    new_file_resource(str(path), {"mode": 0o600}).update(console, dry)
    assert _mode(path) == 0o644

    new_file_resource(str(path), {"state": "absent"}).delete(console, dry)
    assert path.exists()

    text = output()
    assert "(dry-run)" in text
    assert "creando archivo" in text
    assert "estableciendo permisos a 0600" in text
    assert "eliminando archivo" in text


def test_content_ignored_without_source(tmp_path, console, opts):
    path = _make_file(tmp_path / "a", 0o644, "lo que sea")
    site = tmp_path / "site"
    state = new_file_resource(str(path), {}).evaluate(console, Options(site_dir=site))
    assert state.update is False


def _site_with_source(tmp_path, content):
    data = tmp_path / "site" / "data"
    data.mkdir(parents=True)
    (data / "motd").write_text(content)
    return tmp_path / "site"


def test_content_mismatch_sets_update(tmp_path, console):
    site = _site_with_source(tmp_path, "bienvenido\n")
    path = _make_file(tmp_path / "a", 0o644, "otro\n")
    res = new_file_resource(str(path), {"source": "motd"})

    state = res.evaluate(console, Options(site_dir=site))
    assert state.update is True
    assert [d.field for d in state.diffs] == ["content"]


def test_content_match(tmp_path, console):
    site = _site_with_source(tmp_path, "bienvenido\n")
    path = _make_file(tmp_path / "a", 0o644, "bienvenido\n")
    state = new_file_resource(str(path), {"source": "motd"}).evaluate(console, Options(site_dir=site))
    assert state.update is False


def test_content_is_not_synchronized_by_update(tmp_path, console, output):
    site = _site_with_source(tmp_path, "bienvenido\n")
    path = _make_file(tmp_path / "a", 0o644, "otro\n")
    res = new_file_resource(str(path), {"source": "motd"})

    res.update(console, Options(site_dir=site))
    assert path.read_text() == "otro\n"
    assert "no se sincroniza" in output()


def test_missing_source_is_checksum_error(tmp_path, console):
    (tmp_path / "site" / "data").mkdir(parents=True)
    path = _make_file(tmp_path / "a", 0o644)
    res = new_file_resource(str(path), {"source": "missing"})
    with pytest.raises(ChecksumError):
        res.evaluate(console, Options(site_dir=tmp_path / "site"))


def test_source_without_site_dir(tmp_path, console, opts):
    path = _make_file(tmp_path / "a", 0o644)
    with pytest.raises(ConfigError):
        new_file_resource(str(path), {"source": "motd"}).evaluate(console, opts)


def test_content_changed(tmp_path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.write_bytes(b"x" * 100000)
    b.write_bytes(b"x" * 100000)
    assert content_changed(a, b) is False
    b.write_bytes(b"x" * 99999 + b"y")
    assert content_changed(a, b) is True


def test_progress_lines_carry_resource_id(tmp_path, console, opts, output):
    path = tmp_path / "a"
    new_file_resource(str(path), {}).create(console, opts)
    for line in output().splitlines():
        assert line.startswith(f"file[{path}]")


def test_path_is_read_only(tmp_path):
    res = FileResource("t", path=str(tmp_path / "a"))
    with pytest.raises(AttributeError):
        res.path = "/otro"
    with pytest.raises(AttributeError):
        res.title = "otro"


def test_parent_is_a_file_means_absent(tmp_path, console, opts):
    parent = _make_file(tmp_path / "f", 0o644)
    res = new_file_resource(str(parent / "x"), {})

    state = res.evaluate(console, opts)
    assert state.current == ResourceState.ABSENT
    assert state.needs_create

    with pytest.raises(OSError):
        res.create(console, opts)


def test_create_through_dangling_symlink(tmp_path, console, opts):
    target = tmp_path / "destino"
    link = tmp_path / "enlace"
    link.symlink_to(target)
    res = new_file_resource(str(link), {"mode": 0o600})

    assert res.evaluate(console, opts).needs_create
    res.create(console, opts)

    assert link.is_symlink()
    assert target.is_file()
    assert _mode(target) == 0o600
    assert res.evaluate(console, opts).in_sync


def _record_calls(monkeypatch, fail=None):
    """Sustituye os.chmod/os.chown por funciones que registran el orden de llamada"""
    calls = []

    def fake(name):
        def call(path, *args):
            calls.append(name)
            if name == fail:
                raise PermissionError(1, "Operation not permitted", path)
        return call

    monkeypatch.setattr(os, "chmod", fake("chmod"))
    monkeypatch.setattr(os, "chown", fake("chown"))
    return calls


def test_update_repairs_owner_only(tmp_path, console, opts, other_user, me, monkeypatch, output):
    path = _make_file(tmp_path / "a", 0o644)
    res = new_file_resource(str(path), {"owner": other_user, "group": me[1]})
    calls = _record_calls(monkeypatch)

    res.update(console, opts)

    assert calls == ["chown"]
    assert f"estableciendo propietario {other_user}:{me[1]}" in output()
    assert "estableciendo permisos" not in output()


def test_update_fixes_permissions_before_ownership(tmp_path, console, opts, other_user, me, monkeypatch):
    path = _make_file(tmp_path / "a", 0o644)
    res = new_file_resource(str(path), {"mode": 0o600, "owner": other_user, "group": me[1]})
    calls = _record_calls(monkeypatch)

    res.update(console, opts)

    assert calls == ["chmod", "chown"]


def test_update_stops_on_chmod_failure(tmp_path, console, opts, other_user, me, monkeypatch):
    path = _make_file(tmp_path / "a", 0o644)
    res = new_file_resource(str(path), {"mode": 0o600, "owner": other_user, "group": me[1]})
    calls = _record_calls(monkeypatch, fail="chmod")

    with pytest.raises(PermissionError):
        res.update(console, opts)
    assert calls == ["chmod"]


def test_create_stops_when_chown_fails(tmp_path, console, opts, monkeypatch, output):
    path = tmp_path / "a"
    res = new_file_resource(str(path), {"mode": 0o600})
    calls = _record_calls(monkeypatch, fail="chown")

    with pytest.raises(PermissionError):
        res.create(console, opts)

    assert calls == ["chown"]
    assert path.exists()
    assert "estableciendo permisos" not in output()
