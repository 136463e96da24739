"""Warehouse user login and the FIFO/LIFO setting stored on users."""

from __future__ import annotations

from .core import (
    MSG_NOT_FOUND,
    STATUS_NOT_FOUND,
    STATUS_OK,
    Database,
    Response,
    ServiceError,
    rows_affected,
)

MSG_LOGIN_OK = "Sukses"


def login(db: Database, username: str, password: str) -> Response:
    """Look up a user by credentials; an unknown user gives a not-found response."""
    try:
        row = db.query_one(
            'SELECT id_user, status, kode_gudang FROM "user" WHERE username = ? AND password = ?',
            (username, password),
        )
    except ServiceError:
        row = None
    if not row or not row["id_user"]:
        return Response(
            STATUS_NOT_FOUND, MSG_NOT_FOUND, {"id_user": "", "status": 0, "kode_gudang": ""}
        )
    return Response(STATUS_OK, MSG_LOGIN_OK, row)


def change_fifo_lifo(db: Database, status: int, kode_gudang: str) -> Response:
    """Set the stock-issue order flag on every user of a warehouse."""
    count = db.execute('UPDATE "user" SET status = ? WHERE kode_gudang = ?', (status, kode_gudang))
    return rows_affected(count)