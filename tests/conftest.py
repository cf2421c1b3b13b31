import io
import pwd
import grp

import pytest
from rich.console import Console

from forja.core.identity import current_user_and_group
from forja.core.resource import Options


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def output(console):
    """Texto impreso en la consola del test"""
    return lambda: console.file.getvalue()


@pytest.fixture
def opts():
    return Options()


@pytest.fixture
def me():
    """(usuario, grupo) del proceso que corre los tests"""
    return current_user_and_group()


@pytest.fixture
def other_user(me):
    """Un usuario existente distinto del actual"""
    for pw in pwd.getpwall():
        if pw.pw_name != me[0]:
            return pw.pw_name
    pytest.skip("no hay otro usuario en el sistema")


@pytest.fixture
def other_group(me):
    """Un grupo existente distinto del grupo primario actual"""
    for gr in grp.getgrall():
        if gr.gr_name != me[1]:
            return gr.gr_name
    pytest.skip("no hay otro grupo en el sistema")
