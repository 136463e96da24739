"""Stock items of a warehouse: creation, listings, movement history and dropdowns."""

from __future__ import annotations

from typing import Any

from .core import (
    MSG_CONDITION_UNMET,
    MSG_NOT_FOUND,
    STATUS_NOT_FOUND,
    Database,
    Response,
    ServiceError,
    from_sql_date,
    ok,
    rows_affected,
    split_ints,
    split_strings,
)


def _found_or_empty(rows: list[dict[str, Any]]) -> Response:
    if not rows:
        return Response(STATUS_NOT_FOUND, MSG_NOT_FOUND, [])
    return ok(rows)


def _issue_order(db: Database, kode_gudang: str) -> str:
    """Newest first when the warehouse flag is 0, oldest first otherwise."""
    row = db.query_one(
        "SELECT status_lifo_fifo FROM gudang WHERE kode_gudang = ?", (kode_gudang,)
    )
    status = row["status_lifo_fifo"] if row else 0
    return "DESC" if status == 0 else "ASC"


def input_barang(
    db: Database,
    nama_barang: str,
    harga_jual: str,
    kode_satuan_barang: str,
    kode_jenis_barang: str,
    kode_gudang: str,
) -> Response:
    """Create items from "|a||b|" fields, skipping names already in the warehouse."""
    names = split_strings(nama_barang)
    prices = split_ints(harga_jual)
    units = split_strings(kode_satuan_barang)
    if not len(names) == len(prices) == len(units):
        raise ValueError("nama_barang, harga_jual and kode_satuan_barang differ in length")

    inserted = 0
    for name, price, unit in zip(names, prices, units):
        existing = db.query_one(
            "SELECT kode_stock FROM stock WHERE LOWER(nama_barang) = LOWER(?) AND kode_gudang = ?",
            (name, kode_gudang),
        )
        if existing:
            continue
        co = db.next_co("stock")
        inserted += db.execute(
            "INSERT INTO stock (co, kode_stock, nama_barang, harga_jual, kode_satuan_barang, "
            "kode_jenis_barang, kode_gudang) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (co, f"ST-{co}", name, price, unit, kode_jenis_barang, kode_gudang),
        )
    return rows_affected(inserted)


def read_barang(db: Database, kode_gudang: str) -> Response:
    """Items of a warehouse grouped under their categories."""
    categories = db.query_all(
        "SELECT kode_jenis_barang, nama_jenis_barang FROM jenis_barang WHERE kode_gudang = ?",
        (kode_gudang,),
    )
    groups = []
    for category in categories:
        details = db.query_all(
            "SELECT stock.kode_stock, stock.nama_barang, stock.harga_jual, "
            "satuan_barang.nama_satuan_barang FROM stock "
            "JOIN satuan_barang ON satuan_barang.kode_satuan_barang = stock.kode_satuan_barang "
            "WHERE stock.kode_gudang = ? AND stock.kode_jenis_barang = ?",
            (kode_gudang, category["kode_jenis_barang"]),
        )
        groups.append(
            {
                "kode_jenis_barang": category["kode_jenis_barang"],
                "jenis_barang": category["nama_jenis_barang"],
                "detail_barang": details,
            }
        )
    return _found_or_empty(groups)


def delete_barang(db: Database, kode_stock: str) -> Response:
    """Delete an item unless stock movements or suppliers refer to it."""
    movements = db.query_all(
        "SELECT kode_stock FROM barang_stock_keluar_masuk WHERE kode_stock = ?", (kode_stock,)
    )
    suppliers = db.query_all(
        "SELECT kode_stock FROM barang_supplier WHERE kode_stock = ?", (kode_stock,)
    )
    if movements or suppliers:
        raise ServiceError(STATUS_NOT_FOUND, MSG_CONDITION_UNMET, {"kode_stock": kode_stock})
    count = db.execute("DELETE FROM stock WHERE kode_stock = ?", (kode_stock,))
    return rows_affected(count)


def read_stock(db: Database, kode_gudang: str, kode_jenis_barang: str = "") -> Response:
    """Items with their totals and remaining incoming batches, in issue order."""
    sql = (
        "SELECT stock.kode_stock, stock.nama_barang, stock.harga_jual, stock.jumlah, "
        "sb.nama_satuan_barang, jb.nama_jenis_barang FROM stock "
        "JOIN jenis_barang jb ON jb.kode_jenis_barang = stock.kode_jenis_barang "
        "JOIN satuan_barang sb ON sb.kode_satuan_barang = stock.kode_satuan_barang "
        "WHERE stock.kode_gudang = ?"
    )
    params: list[Any] = [kode_gudang]
    if kode_jenis_barang:
        sql += " AND stock.kode_jenis_barang = ?"
        params.append(kode_jenis_barang)
    sql += " ORDER BY stock.co ASC"
    items = db.query_all(sql, params)

    order = _issue_order(db, kode_gudang)
    for item in items:
        batches = db.query_all(
            "SELECT skm.tanggal, bs.jumlah_barang, bs.harga FROM stock_keluar_masuk skm "
            "JOIN detail_stock bs ON bs.kode_stock_keluar_masuk = skm.kode_stock_keluar_masuk "
            "WHERE bs.kode_stock = ? AND skm.status = 0 AND bs.jumlah_barang > 0 "
            f"ORDER BY skm.tanggal {order}, bs.co {order}",
            (item["kode_stock"],),
        )
        item["detail_stock"] = [
            {
                "tanggal": from_sql_date(batch["tanggal"]),
                "jumlah_barang": batch["jumlah_barang"],
                "harga": batch["harga"],
            }
            for batch in batches
        ]
    return _found_or_empty(items)


def detail_stock(db: Database, kode_gudang: str, kode_stock: str) -> Response:
    """Every incoming and outgoing movement line of one item, in issue order."""
    order = _issue_order(db, kode_gudang)
    rows = db.query_all(
        "SELECT bs.kode_barang_keluar_masuk, skm.tanggal, skm.status, stock.nama_barang, "
        "bs.jumlah_barang FROM stock_keluar_masuk skm "
        "JOIN barang_stock_keluar_masuk bs ON bs.kode_stock_keluar_masuk = skm.kode_stock_keluar_masuk "
        "JOIN stock ON bs.kode_stock = stock.kode_stock "
        f"WHERE bs.kode_stock = ? ORDER BY skm.tanggal {order}, bs.co {order}",
        (kode_stock,),
    )
    lines = [
        {
            "kode_barang_keluar_masuk": row["kode_barang_keluar_masuk"],
            "tanggal": from_sql_date(row["tanggal"]),
            "keterangan": "Masuk" if row["status"] == 0 else "Keluar",
            "nama_barang": row["nama_barang"],
            "jumlah": row["jumlah_barang"],
        }
        for row in rows
    ]
    return _found_or_empty(lines)


def dropdown_stock(db: Database, kode_gudang: str) -> Response:
    """Code and name pairs of items that are in stock."""
    rows = db.query_all(
        "SELECT kode_stock, nama_barang FROM stock WHERE kode_gudang = ? AND jumlah > 0",
        (kode_gudang,),
    )
    return _found_or_empty(rows)


def dropdown_stock_kode_nota(
    db: Database, kode_nota: str, kode_gudang: str, kode_supplier: str
) -> Response:
    """Items received on one supplier's note that still have stock left."""
    rows = db.query_all(
        "SELECT stock.kode_stock, stock.nama_barang FROM stock_keluar_masuk skm "
        "JOIN detail_stock bskm ON skm.kode_stock_keluar_masuk = bskm.kode_stock_keluar_masuk "
        "JOIN stock ON stock.kode_stock = bskm.kode_stock "
        "WHERE skm.kode_nota = ? AND skm.kode_gudang = ? AND skm.kode = ? "
        "AND bskm.jumlah_barang > 0",
        (kode_nota, kode_gudang, kode_supplier),
    )
    return _found_or_empty(rows)


def dropdown_stock_supplier(db: Database, kode_gudang: str) -> Response:
    """Code and name pairs of every item of a warehouse."""
    rows = db.query_all(
        "SELECT kode_stock, nama_barang FROM stock WHERE kode_gudang = ?", (kode_gudang,)
    )
    return _found_or_empty(rows)