"""Shops (toko) supplied by a warehouse."""

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


def input_toko(
    db: Database, nama_toko: str, alamat: str, nomor_telpon: str, kode_gudang: str
) -> Response:
    """Create a shop with the next "TK-n" code."""
    co = db.next_co("toko")
    count = db.execute(
        "INSERT INTO toko (co, kode_toko, nama_toko, alamat, nomor_telpon, kode_gudang) "
        "VALUES (?, ?, ?, ?, ?, ?)",
        (co, f"TK-{co}", nama_toko, alamat, nomor_telpon, kode_gudang),
    )
    return rows_affected(count)


def _found_or_empty(rows: list[dict]) -> Response:
    if not rows:
        return Response(STATUS_NOT_FOUND, MSG_NOT_FOUND, [])
    return ok(rows)


def read_toko(db: Database, kode_gudang: str) -> Response:
    """List the shops of a warehouse."""
    rows = db.query_all(
        "SELECT kode_toko, nama_toko, alamat, nomor_telpon FROM toko WHERE kode_gudang = ?",
        (kode_gudang,),
    )
    return _found_or_empty(rows)


def delete_toko(db: Database, kode_toko: str) -> Response:
    """Delete a shop unless stock movements refer to it."""
    in_use = db.query_all("SELECT kode FROM stock_keluar_masuk WHERE kode = ?", (kode_toko,))
    if in_use:
        raise ServiceError(STATUS_NOT_FOUND, MSG_CONDITION_UNMET, {"kode_toko": kode_toko})
    count = db.execute("DELETE FROM toko WHERE kode_toko = ?", (kode_toko,))
    return rows_affected(count)


def dropdown_nama_toko(db: Database, kode_gudang: str) -> Response:
    """Code and name pairs of a warehouse's shops, for selection lists."""
    rows = db.query_all(
        "SELECT kode_toko, nama_toko FROM toko WHERE kode_gudang = ?", (kode_gudang,)
    )
    return _found_or_empty(rows)