"""Suppliers of a warehouse and the items each of them delivers."""

from __future__ import annotations

from typing import Any

from .core import (
    MSG_CONDITION_UNMET,
    MSG_NOT_FOUND,
    STATUS_NOT_FOUND,
    Database,
    Response,
    ServiceError,
    ok,
    rows_affected,
    split_strings,
)


def _found_or_empty(rows: list[dict[str, Any]]) -> Response:
    if not rows:
        return Response(STATUS_NOT_FOUND, MSG_NOT_FOUND, [])
    return ok(rows)


def _supplier_items(db: Database, kode_supplier: str) -> list[dict[str, Any]]:
    return db.query_all(
        "SELECT bs.kode_stock, s.nama_barang FROM barang_supplier bs "
        "JOIN stock s ON s.kode_stock = bs.kode_stock "
        "WHERE bs.kode_supplier = ? ORDER BY bs.co ASC",
        (kode_supplier,),
    )


def input_supplier(
    db: Database, nama_supplier: str, nomor_telpon: str, kode_gudang: str, kode_stock: str
) -> Response:
    """Create a supplier "SP-n" and link it to the items of a "|a||b|" field."""
    co = db.next_co("supplier")
    kode_supplier = f"SP-{co}"
    count = db.execute(
        "INSERT INTO supplier (co, kode_supplier, nama_supplier, nomor_telpon, kode_gudang) "
        "VALUES (?, ?, ?, ?, ?)",
        (co, kode_supplier, nama_supplier, nomor_telpon, kode_gudang),
    )
    for code in split_strings(kode_stock):
        link_co = db.next_co("barang_supplier")
        count = db.execute(
            "INSERT INTO barang_supplier (co, kode_barang_supplier, kode_supplier, kode_stock) "
            "VALUES (?, ?, ?, ?)",
            (link_co, f"SPB-{link_co}", kode_supplier, code),
        )
    return rows_affected(count)


def read_supplier(db: Database, kode_gudang: str) -> Response:
    """Suppliers of a warehouse in creation order, each with the items it delivers."""
    suppliers = db.query_all(
        "SELECT kode_supplier, nama_supplier, nomor_telpon FROM supplier "
        "WHERE kode_gudang = ? ORDER BY co ASC",
        (kode_gudang,),
    )
    for supplier in suppliers:
        supplier["barang_supplier"] = _supplier_items(db, supplier["kode_supplier"])
    return _found_or_empty(suppliers)


def dropdown_nama_supplier(db: Database, kode_gudang: str) -> Response:
    """Code and name pairs of a warehouse's suppliers, for selection lists."""
    rows = db.query_all(
        "SELECT kode_supplier, nama_supplier FROM supplier WHERE kode_gudang = ?",
        (kode_gudang,),
    )
    return _found_or_empty(rows)


def delete_supplier(db: Database, kode_supplier: str, kode_stock: str) -> Response:
    """Unlink an item from a supplier; the supplier goes too once it has no items left.

    Refused when the supplier does not exist, or when receipts or pre-orders
    of that item from that supplier exist.
    """
    movements = db.query_all(
        "SELECT skm.kode FROM stock_keluar_masuk skm "
        "JOIN barang_stock_keluar_masuk bkm "
        "ON bkm.kode_stock_keluar_masuk = skm.kode_stock_keluar_masuk "
        "WHERE skm.kode = ? AND bkm.kode_stock = ?",
        (kode_supplier, kode_stock),
    )
    orders = db.query_all(
        "SELECT po.kode_supplier FROM pre_order po "
        "JOIN barang_pre_order bpo ON bpo.kode_pre_order = po.kode_pre_order "
        "WHERE po.kode_supplier = ? AND bpo.kode_stock = ?",
        (kode_supplier, kode_stock),
    )
    exists = db.query_one(
        "SELECT kode_supplier FROM supplier WHERE kode_supplier = ?", (kode_supplier,)
    )
    if movements or orders or exists is None:
        raise ServiceError(
            STATUS_NOT_FOUND,
            MSG_CONDITION_UNMET,
            {"kode_supplier": kode_supplier, "kode_stock": kode_stock},
        )

    count = db.execute(
        "DELETE FROM barang_supplier WHERE kode_supplier = ? AND kode_stock = ?",
        (kode_supplier, kode_stock),
    )
    remaining = db.query_all(
        "SELECT kode_barang_supplier FROM barang_supplier WHERE kode_supplier = ?",
        (kode_supplier,),
    )
    if not remaining:
        db.execute("DELETE FROM supplier WHERE kode_supplier = ?", (kode_supplier,))
    return rows_affected(count)


def dropdown_barang_supplier(db: Database, kode_supplier: str) -> Response:
    """Code and name pairs of the items one supplier delivers."""
    return _found_or_empty(_supplier_items(db, kode_supplier))