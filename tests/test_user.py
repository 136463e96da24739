import pytest

from gudangpos.core import MSG_NOT_FOUND, STATUS_NOT_FOUND, STATUS_OK, Database
from gudangpos.user import change_fifo_lifo, login

PASSWORD = "password"
USERS = [("U-1", "admin", "GD-1"), ("U-2", "staff", "GD-1"), ("U-3", "other", "GD-2")]


@pytest.fixture
def accounts():
    with Database() as database:
        for id_user, username, kode_gudang in USERS:
            database.execute(
                'INSERT INTO "user" (id_user, username, password, status, kode_gudang) '
                "VALUES (?, ?, ?, 0, ?)",
                (id_user, username, PASSWORD, kode_gudang),
            )
        yield database


def test_login_success(accounts):
    result = login(accounts, "admin", PASSWORD)
    assert (result.status, result.message) == (STATUS_OK, "Sukses")
    assert result.data == {"id_user": "U-1", "status": 0, "kode_gudang": "GD-1"}


@pytest.mark.parametrize(("username", "attempt"), [("admin", "secret"), ("nobody", PASSWORD)])
def test_login_rejected(accounts, username, attempt):
    result = login(accounts, username, attempt)
    assert (result.status, result.message) == (STATUS_NOT_FOUND, MSG_NOT_FOUND)
    assert result.data["id_user"] == ""
    assert result.data["kode_gudang"] == ""


def test_change_fifo_lifo_updates_only_that_warehouse(accounts):
    result = change_fifo_lifo(accounts, 1, "GD-1")
    assert result.status == STATUS_OK
    assert result.data == {"rows": 2}
    statuses = {username: login(accounts, username, PASSWORD).data["status"] for _, username, _ in USERS}
    assert statuses == {"admin": 1, "staff": 1, "other": 0}


def test_change_fifo_lifo_unknown_warehouse(accounts):
    assert change_fifo_lifo(accounts, 1, "GD-9").data == {"rows": 0}