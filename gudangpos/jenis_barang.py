"""Item categories (jenis barang) of a warehouse."""

from __future__ import annotations

from .core import (
    MSG_CONDITION_UNMET,
    MSG_NOT_FOUND,
    STATUS_NOT_FOUND,
    Database,
    Response,
    ServiceError,
    ok,
    rows_affected,
)


def input_jenis_barang(db: Database, nama_jenis_barang: str, kode_gudang: str) -> Response:
    """Create a category with the next "JB-n" code."""
    co = db.next_co("jenis_barang")
    count = db.execute(
        "INSERT INTO jenis_barang (co, kode_jenis_barang, nama_jenis_barang, kode_gudang) "
        "VALUES (?, ?, ?, ?)",
        (co, f"JB-{co}", nama_jenis_barang, kode_gudang),
    )
    return rows_affected(count)


def _list_for_gudang(db: Database, kode_gudang: str) -> Response:
    rows = db.query_all(
        "SELECT kode_jenis_barang, nama_jenis_barang FROM jenis_barang WHERE kode_gudang = ?",
        (kode_gudang,),
    )
    if not rows:
        return Response(STATUS_NOT_FOUND, MSG_NOT_FOUND, [])
    return ok(rows)


def read_jenis_barang(db: Database, kode_gudang: str) -> Response:
    """List the categories of a warehouse."""
    return _list_for_gudang(db, kode_gudang)


def delete_jenis_barang(db: Database, kode_jenis_barang: str) -> Response:
    """Delete a category unless some stock item still uses it."""
    in_use = db.query_all(
        "SELECT kode_jenis_barang FROM stock WHERE kode_jenis_barang = ?", (kode_jenis_barang,)
    )
    if in_use:
        raise ServiceError(
            STATUS_NOT_FOUND, MSG_CONDITION_UNMET, {"kode_jenis_barang": kode_jenis_barang}
        )
    count = db.execute("DELETE FROM jenis_barang WHERE kode_jenis_barang = ?", (kode_jenis_barang,))
    return rows_affected(count)


def dropdown_jenis_barang(db: Database, kode_gudang: str) -> Response:
    """Code and name pairs of a warehouse's categories, for selection lists."""
    return _list_for_gudang(db, kode_gudang)