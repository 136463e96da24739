"""Incoming stock (stock masuk): receiving goods from suppliers into a warehouse."""

from __future__ import annotations

import math
from dataclasses import dataclass
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
    split_floats,
    split_ints,
    split_strings,
    to_sql_date,
)

MSG_UPDATE_ERROR = "Update Error"
MSG_LOCKED = "Barang Tidak dapat di update"

STATUS_MASUK = 0


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class IncomingItem:
    """One received line: item code, amount, unit cost and expiry date (dd-mm-yyyy)."""

    kode_stock: str
    jumlah_barang: float
    harga: int
    tanggal_kadaluarsa: str

    @property
    def total_harga(self) -> int:
        return _round_half_away(self.harga * self.jumlah_barang)


def parse_incoming_items(
    kode_stock: str, jumlah_barang: str, harga_pokok: str, tanggal_kadaluarsa: str
) -> list[IncomingItem]:
    """Build items from parallel "|a||b|" fields."""
    codes = split_strings(kode_stock)
    amounts = split_floats(jumlah_barang)
    prices = split_ints(harga_pokok)
    expiries = split_strings(tanggal_kadaluarsa)
    if not len(codes) == len(amounts) == len(prices) == len(expiries):
        raise ValueError(
            "kode_stock, jumlah_barang, harga_pokok and tanggal_kadaluarsa differ in length"
        )
    return [
        IncomingItem(code, amount, price, expiry)
        for code, amount, price, expiry in zip(codes, amounts, prices, expiries)
    ]


def _adjust_stock(db: Database, kode_stock: str, delta: float) -> None:
    row = db.query_one("SELECT jumlah FROM stock WHERE kode_stock = ?", (kode_stock,))
    current = row["jumlah"] if row else 0.0
    db.execute("UPDATE stock SET jumlah = ? WHERE kode_stock = ?", (current + delta, kode_stock))


def input_stock_masuk(
    db: Database,
    tanggal: str,
    kode_nota: str,
    nama_penanggung_jawab: str,
    kode_supplier: str,
    kode_gudang: str,
    items: Iterable[IncomingItem],
) -> Response:
    """Record a receipt "SM-n" with its lines and add the amounts to stock."""
    co = db.next_co("stock_keluar_masuk")
    kode_stock_keluar_masuk = f"SM-{co}"
    count = db.execute(
        "INSERT INTO stock_keluar_masuk (co, kode_stock_keluar_masuk, tanggal, kode_nota, "
        "nama_penanggung_jawab, kode, kode_gudang, status) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            co,
            kode_stock_keluar_masuk,
            to_sql_date(tanggal),
            kode_nota,
            nama_penanggung_jawab,
            kode_supplier,
            kode_gudang,
            STATUS_MASUK,
        ),
    )

    for item in items:
        line_co = db.next_co("barang_stock_keluar_masuk")
        values = (
            line_co,
            f"BKM-{line_co}",
            item.kode_stock,
            kode_stock_keluar_masuk,
            to_sql_date(item.tanggal_kadaluarsa),
            item.jumlah_barang,
            item.harga,
            item.total_harga,
        )
        columns = (
            "co, kode_barang_keluar_masuk, kode_stock, kode_stock_keluar_masuk, "
            "tanggal_kadaluarsa, jumlah_barang, harga, total_harga"
        )
        db.execute(
            f"INSERT INTO barang_stock_keluar_masuk ({columns}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            values,
        )
        db.execute(
            f"INSERT INTO detail_stock ({columns}, status) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0)",
            values,
        )
        _adjust_stock(db, item.kode_stock, item.jumlah_barang)

    return rows_affected(count)


def read_stock_masuk(
    db: Database,
    kode_gudang: str,
    tanggal_1: str = "",
    tanggal_2: str = "",
    kode_supplier: str = "",
) -> Response:
    """List receipts with totals and lines, optionally by date (or range) and supplier."""
    sql = (
        "SELECT skm.kode_stock_keluar_masuk, skm.tanggal, skm.kode_nota, "
        "skm.nama_penanggung_jawab, s.nama_supplier, "
        "SUM(bs.jumlah_barang) AS jumlah_total, SUM(bs.total_harga) AS total_harga "
        "FROM stock_keluar_masuk skm "
        "JOIN supplier s ON s.kode_supplier = skm.kode "
        "JOIN barang_stock_keluar_masuk bs "
        "ON bs.kode_stock_keluar_masuk = skm.kode_stock_keluar_masuk "
        "WHERE skm.kode_gudang = ? AND skm.status = 0"
    )
    params: list[Any] = [kode_gudang]
    if tanggal_1 and tanggal_2:
        sql += " AND skm.tanggal >= ? AND skm.tanggal <= ?"
        params += [to_sql_date(tanggal_1), to_sql_date(tanggal_2)]
    elif tanggal_1:
        sql += " AND skm.tanggal = ?"
        params.append(to_sql_date(tanggal_1))
    if kode_supplier:
        sql += " AND skm.kode = ?"
        params.append(kode_supplier)
    sql += " GROUP BY skm.kode_stock_keluar_masuk ORDER BY skm.co ASC"

    receipts = []
    for row in db.query_all(sql, params):
        lines = db.query_all(
            "SELECT bs.kode_barang_keluar_masuk, s.nama_barang, bs.tanggal_kadaluarsa, "
            "bs.jumlah_barang, bs.harga, bs.status FROM barang_stock_keluar_masuk bs "
            "JOIN stock s ON bs.kode_stock = s.kode_stock "
            "WHERE bs.kode_stock_keluar_masuk = ? ORDER BY bs.co ASC",
            (row["kode_stock_keluar_masuk"],),
        )
        for line in lines:
            line["tanggal_kadaluarsa"] = from_sql_date(line["tanggal_kadaluarsa"])
        receipts.append(
            {
                "kode_stock_keluar_masuk": row["kode_stock_keluar_masuk"],
                "tanggal": from_sql_date(row["tanggal"]),
                "kode_nota": row["kode_nota"],
                "penanggung_jawab": row["nama_penanggung_jawab"],
                "nama_supplier": row["nama_supplier"],
                "jumlah_total": row["jumlah_total"],
                "total_harga": row["total_harga"],
                "detail_stock_masuk": lines,
            }
        )
    if not receipts:
        return Response(STATUS_NOT_FOUND, MSG_NOT_FOUND, [])
    return ok(receipts)


def _ensure_unconsumed(db: Database, kode_barang_keluar_masuk: str) -> None:
    used = db.query_one(
        "SELECT kode_pengurangan FROM pengurangan_stock WHERE kode_barang_keluar_masuk = ?",
        (kode_barang_keluar_masuk,),
    )
    if used:
        raise ServiceError(
            STATUS_NOT_FOUND, MSG_LOCKED, {"kode_barang_keluar_masuk": kode_barang_keluar_masuk}
        )


def _load_line(db: Database, kode_barang_keluar_masuk: str) -> dict[str, Any] | None:
    return db.query_one(
        "SELECT kode_stock_keluar_masuk, kode_stock, jumlah_barang FROM barang_stock_keluar_masuk "
        "WHERE kode_barang_keluar_masuk = ?",
        (kode_barang_keluar_masuk,),
    )


def update_barang_stock_masuk(
    db: Database,
    kode_barang_keluar_masuk: str,
    tanggal_kadaluarsa: str,
    jumlah_barang: float,
    harga: int,
) -> Response:
    """Change a received line that nothing has been issued from yet."""
    _ensure_unconsumed(db, kode_barang_keluar_masuk)
    line = _load_line(db, kode_barang_keluar_masuk)
    if line is None:
        return rows_affected(0)

    _adjust_stock(db, line["kode_stock"], jumlah_barang - line["jumlah_barang"])

    values = (
        to_sql_date(tanggal_kadaluarsa),
        jumlah_barang,
        harga,
        _round_half_away(harga * jumlah_barang),
        kode_barang_keluar_masuk,
    )
    assignments = "tanggal_kadaluarsa = ?, jumlah_barang = ?, harga = ?, total_harga = ?"
    db.execute(
        f"UPDATE barang_stock_keluar_masuk SET {assignments} WHERE kode_barang_keluar_masuk = ?",
        values,
    )
    count = db.execute(
        f"UPDATE detail_stock SET {assignments} WHERE kode_barang_keluar_masuk = ?", values
    )
    return rows_affected(count)


def delete_barang_stock_masuk(db: Database, kode_barang_keluar_masuk: str) -> Response:
    """Remove a received line not yet issued from; drop the receipt once it is empty."""
    _ensure_unconsumed(db, kode_barang_keluar_masuk)
    line = _load_line(db, kode_barang_keluar_masuk)
    if line is None:
        return rows_affected(0)

    _adjust_stock(db, line["kode_stock"], -line["jumlah_barang"])
    db.execute(
        "DELETE FROM detail_stock WHERE kode_barang_keluar_masuk = ?", (kode_barang_keluar_masuk,)
    )
    count = db.execute(
        "DELETE FROM barang_stock_keluar_masuk WHERE kode_barang_keluar_masuk = ?",
        (kode_barang_keluar_masuk,),
    )
    remaining = db.query_one(
        "SELECT kode_barang_keluar_masuk FROM barang_stock_keluar_masuk "
        "WHERE kode_stock_keluar_masuk = ? LIMIT 1",
        (line["kode_stock_keluar_masuk"],),
    )
    if remaining is None:
        db.execute(
            "DELETE FROM stock_keluar_masuk WHERE kode_stock_keluar_masuk = ?",
            (line["kode_stock_keluar_masuk"],),
        )
    return rows_affected(count)