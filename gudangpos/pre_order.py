"""Pre-orders placed with suppliers, and turning an accepted one into incoming stock."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable

from .core import (
    MSG_NOT_FOUND,
    STATUS_NOT_FOUND,
    Database,
    Response,
    ServiceError,
    from_sql_date,
    ok,
    rows_affected,
    to_sql_date,
)
from .stock_masuk import IncomingItem, _round_half_away, input_stock_masuk

STATUS_PENDING = 0
STATUS_SUCCESS = 1
STATUS_REJECTED = 2

MSG_LOCKED = "Barang Tidak dapat di update"
MSG_ALREADY_DONE = "Tidah dapat di edit diakrenakan sudah sukses"

_EDITABLE = (STATUS_PENDING, STATUS_REJECTED)


def input_pre_order(
    db: Database,
    tanggal: str,
    kode_nota: str,
    nama_penanggung_jawab: str,
    kode_supplier: str,
    kode_gudang: str,
    items: Iterable[IncomingItem],
) -> Response:
    """Record a pending pre-order "PO-n" with its ordered lines "BPO-n"."""
    co = db.next_co("pre_order")
    kode_pre_order = f"PO-{co}"
    count = db.execute(
        "INSERT INTO pre_order (co, kode_pre_order, tanggal, kode_nota, nama_penanggung_jawab, "
        "kode_supplier, kode_gudang, status) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            co,
            kode_pre_order,
            to_sql_date(tanggal),
            kode_nota,
            nama_penanggung_jawab,
            kode_supplier,
            kode_gudang,
            STATUS_PENDING,
        ),
    )
    for item in items:
        line_co = db.next_co("barang_pre_order")
        db.execute(
            "INSERT INTO barang_pre_order (co, kode_barang_pre_order, kode_stock, kode_pre_order, "
            "tanggal_kadaluarsa, jumlah_barang, harga, total_harga) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                line_co,
                f"BPO-{line_co}",
                item.kode_stock,
                kode_pre_order,
                to_sql_date(item.tanggal_kadaluarsa),
                item.jumlah_barang,
                item.harga,
                item.total_harga,
            ),
        )
    return rows_affected(count)


def read_pre_order(
    db: Database,
    kode_gudang: str,
    kode_supplier: str = "",
    tanggal_1: str = "",
    tanggal_2: str = "",
) -> Response:
    """List pre-orders, newest first, optionally by supplier and date (or range)."""
    sql = (
        "SELECT po.kode_pre_order, po.tanggal, po.kode_nota, s.nama_supplier, "
        "po.nama_penanggung_jawab, SUM(bpo.jumlah_barang) AS jumlah_total, "
        "SUM(bpo.total_harga) AS total_harga, po.status FROM pre_order po "
        "JOIN supplier s ON s.kode_supplier = po.kode_supplier "
        "JOIN barang_pre_order bpo ON bpo.kode_pre_order = po.kode_pre_order "
        "WHERE po.kode_gudang = ?"
    )
    params: list[Any] = [kode_gudang]
    if kode_supplier:
        sql += " AND po.kode_supplier = ?"
        params.append(kode_supplier)
    if tanggal_1 and tanggal_2:
        sql += " AND po.tanggal >= ? AND po.tanggal <= ?"
        params += [to_sql_date(tanggal_1), to_sql_date(tanggal_2)]
    elif tanggal_1:
        sql += " AND po.tanggal = ?"
        params.append(to_sql_date(tanggal_1))
    sql += " GROUP BY po.kode_pre_order ORDER BY po.co DESC"

    orders = []
    for row in db.query_all(sql, params):
        lines = db.query_all(
            "SELECT bpo.kode_barang_pre_order, s.nama_barang, bpo.tanggal_kadaluarsa, "
            "bpo.jumlah_barang, bpo.harga FROM barang_pre_order bpo "
            "JOIN stock s ON bpo.kode_stock = s.kode_stock "
            "WHERE bpo.kode_pre_order = ? ORDER BY bpo.co ASC",
            (row["kode_pre_order"],),
        )
        for line in lines:
            line["tanggal_kadaluarsa"] = from_sql_date(line["tanggal_kadaluarsa"])
        orders.append(
            {
                "kode_pre_order": row["kode_pre_order"],
                "tanggal": from_sql_date(row["tanggal"]),
                "kode_nota": row["kode_nota"],
                "nama_supplier": row["nama_supplier"],
                "penanggung_jawab": row["nama_penanggung_jawab"],
                "jumlah_total": row["jumlah_total"],
                "total_harga": row["total_harga"],
                "status": row["status"],
                "detail_stock_masuk": lines,
            }
        )
    if not orders:
        return Response(STATUS_NOT_FOUND, MSG_NOT_FOUND, [])
    return ok(orders)


def _parent_of_line(db: Database, kode_barang_pre_order: str) -> dict[str, Any]:
    """The owning pre-order of a line; refused unless it is pending or rejected."""
    row = db.query_one(
        "SELECT po.kode_pre_order, po.status FROM pre_order po "
        "JOIN barang_pre_order bpo ON bpo.kode_pre_order = po.kode_pre_order "
        "WHERE bpo.kode_barang_pre_order = ?",
        (kode_barang_pre_order,),
    )
    if row is None or row["status"] not in _EDITABLE:
        raise ServiceError(
            STATUS_NOT_FOUND, MSG_LOCKED, {"kode_barang_pre_order": kode_barang_pre_order}
        )
    return row


def update_pre_order(
    db: Database,
    kode_barang_pre_order: str,
    tanggal_kadaluarsa: str,
    jumlah_barang: float,
    harga: int,
) -> Response:
    """Change an ordered line while its pre-order is pending or rejected."""
    _parent_of_line(db, kode_barang_pre_order)
    count = db.execute(
        "UPDATE barang_pre_order SET tanggal_kadaluarsa = ?, jumlah_barang = ?, harga = ?, "
        "total_harga = ? WHERE kode_barang_pre_order = ?",
        (
            to_sql_date(tanggal_kadaluarsa),
            jumlah_barang,
            harga,
            _round_half_away(harga * jumlah_barang),
            kode_barang_pre_order,
        ),
    )
    return rows_affected(count)


def delete_pre_order(db: Database, kode_barang_pre_order: str) -> Response:
    """Remove an ordered line; the pre-order goes too once it has no lines left."""
    parent = _parent_of_line(db, kode_barang_pre_order)
    count = db.execute(
        "DELETE FROM barang_pre_order WHERE kode_barang_pre_order = ?", (kode_barang_pre_order,)
    )
    remaining = db.query_one(
        "SELECT kode_barang_pre_order FROM barang_pre_order WHERE kode_pre_order = ? LIMIT 1",
        (parent["kode_pre_order"],),
    )
    if remaining is None:
        db.execute("DELETE FROM pre_order WHERE kode_pre_order = ?", (parent["kode_pre_order"],))
    return rows_affected(count)


def update_status_pre_order(
    db: Database, kode_pre_order: str, status: int, today: date | None = None
) -> Response:
    """Set a pre-order's status; accepting it (1) books its lines as incoming stock."""
    row = db.query_one("SELECT status FROM pre_order WHERE kode_pre_order = ?", (kode_pre_order,))
    current = row["status"] if row else -1
    if current == STATUS_SUCCESS:
        raise ServiceError(STATUS_NOT_FOUND, MSG_ALREADY_DONE, {"status": status})
    if status not in (STATUS_PENDING, STATUS_SUCCESS, STATUS_REJECTED):
        raise ValueError(f"unknown pre-order status: {status!r}")

    count = db.execute(
        "UPDATE pre_order SET status = ? WHERE kode_pre_order = ?", (status, kode_pre_order)
    )
    if status != STATUS_SUCCESS:
        return rows_affected(count)

    header = db.query_one(
        "SELECT kode_nota, nama_penanggung_jawab, kode_gudang, kode_supplier FROM pre_order "
        "WHERE kode_pre_order = ?",
        (kode_pre_order,),
    ) or {"kode_nota": "", "nama_penanggung_jawab": "", "kode_gudang": "", "kode_supplier": ""}
    lines = db.query_all(
        "SELECT kode_stock, tanggal_kadaluarsa, jumlah_barang, harga FROM barang_pre_order "
        "WHERE kode_pre_order = ? ORDER BY co ASC",
        (kode_pre_order,),
    )
    items = [
        IncomingItem(
            line["kode_stock"],
            float(line["jumlah_barang"]),
            int(line["harga"]),
            from_sql_date(line["tanggal_kadaluarsa"]),
        )
        for line in lines
    ]
    received_on = (today or date.today()).strftime("%d-%m-%Y")
    input_stock_masuk(
        db,
        received_on,
        header["kode_nota"],
        header["nama_penanggung_jawab"],
        header["kode_supplier"],
        header["kode_gudang"],
        items,
    )
    return rows_affected(len(lines))