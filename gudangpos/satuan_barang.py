"""Units of measure (satuan barang) of a warehouse."""

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


def input_satuan_barang(db: Database, nama_satuan_barang: str, kode_gudang: str) -> Response:
    """Create a unit with the next "SB-n" code."""
    co = db.next_co("satuan_barang")
    values = (co, kode_gudang, f"SB-{co}", nama_satuan_barang)
    return rows_affected(
        db.execute(
            "INSERT INTO satuan_barang (co, kode_gudang, kode_satuan_barang, nama_satuan_barang) "
            "VALUES (?, ?, ?, ?)",
            values,
        )
    )


def read_satuan_barang(db: Database, kode_gudang: str) -> Response:
    """List the units of a warehouse in creation order."""
    units = db.query_all(
        "SELECT kode_satuan_barang, nama_satuan_barang FROM satuan_barang "
        "WHERE kode_gudang = ? ORDER BY co ASC",
        (kode_gudang,),
    )
    return ok(units) if units else Response(STATUS_NOT_FOUND, MSG_NOT_FOUND, [])


def delete_satuan_barang(db: Database, kode_satuan_barang: str) -> Response:
    """Delete a unit unless some stock item still uses it."""
    key = (kode_satuan_barang,)
    if db.query_one("SELECT 1 FROM stock WHERE kode_satuan_barang = ?", key):
        raise ServiceError(
            STATUS_NOT_FOUND, MSG_CONDITION_UNMET, {"kode_satuan_barang": kode_satuan_barang}
        )
    return rows_affected(db.execute("DELETE FROM satuan_barang WHERE kode_satuan_barang = ?", key))