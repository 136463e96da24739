"""Outgoing stock (stock keluar): issuing goods from a warehouse to shops or suppliers."""

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

STATUS_KELUAR = 1
STATUS_CONSUMED = 1

MSG_OUT_OF_STOCK = "out of stock"


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class OutgoingItem:
    """One issued line: item code, amount and unit selling price."""

    kode_stock: str
    jumlah_barang: float
    harga: int

    @property
    def total_harga(self) -> int:
        return _round_half_away(self.harga * self.jumlah_barang)


def parse_outgoing_items(kode_stock: str, jumlah_barang: str, harga_jual: str) -> list[OutgoingItem]:
    """Build items from parallel "|a||b|" fields."""
    codes = split_strings(kode_stock)
    amounts = split_floats(jumlah_barang)
    prices = split_ints(harga_jual)
    if not len(codes) == len(amounts) == len(prices):
        raise ValueError("kode_stock, jumlah_barang and harga_jual differ in length")
    return [
        OutgoingItem(code, amount, price) for code, amount, price in zip(codes, amounts, prices)
    ]


def _ensure_available(db: Database, item: OutgoingItem) -> None:
    row = db.query_one(
        "SELECT nama_barang FROM stock WHERE kode_stock = ? AND jumlah >= ?",
        (item.kode_stock, item.jumlah_barang),
    )
    name = row["nama_barang"] if row else ""
    if not name:
        raise ServiceError(STATUS_NOT_FOUND, f"{name} {MSG_OUT_OF_STOCK}", item.kode_stock)


def _batch_order(db: Database, kode_gudang: str) -> str:
    """Newest batches first when the warehouse flag is 0, oldest first otherwise."""
    row = db.query_one(
        "SELECT status_lifo_fifo FROM gudang WHERE kode_gudang = ?", (kode_gudang,)
    )
    status = row["status_lifo_fifo"] if row else -1
    return "DESC" if status == 0 else "ASC"


def _consume_batches(
    db: Database,
    item: OutgoingItem,
    kode_barang_keluar: str,
    kode_stock_keluar: str,
    order: str,
) -> None:
    """Take the issued amount out of the incoming batches, recording each deduction."""
    batches = db.query_all(
        "SELECT skm.kode_stock_keluar_masuk, b.kode_barang_keluar_masuk, b.jumlah_barang, skm.kode "
        "FROM stock_keluar_masuk skm "
        "JOIN detail_stock b ON b.kode_stock_keluar_masuk = skm.kode_stock_keluar_masuk "
        "WHERE b.kode_stock = ? AND skm.status = 0 "
        f"ORDER BY skm.tanggal {order}, b.co {order}",
        (item.kode_stock,),
    )
    needed = item.jumlah_barang
    for batch in batches:
        available = batch["jumlah_barang"]
        done = available >= needed
        if done:
            left = available - needed
            needed = 0.0
        else:
            needed -= available
            left = 0.0

        db.execute(
            "UPDATE detail_stock SET jumlah_barang = ? WHERE kode_barang_keluar_masuk = ?",
            (left, batch["kode_barang_keluar_masuk"]),
        )
        co = db.next_co("pengurangan_stock")
        db.execute(
            "INSERT INTO pengurangan_stock (co, kode_pengurangan, kode_stock_keluar_masuk, "
            "kode_barang_keluar_masuk, kode_stock_keluar, kode_barang_keluar, kode_supplier) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                co,
                f"PE-{co}",
                batch["kode_stock_keluar_masuk"],
                batch["kode_barang_keluar_masuk"],
                kode_stock_keluar,
                kode_barang_keluar,
                batch["kode"],
            ),
        )
        db.execute(
            "UPDATE barang_stock_keluar_masuk SET status = ? "
            "WHERE kode_barang_keluar_masuk = ? AND status = 0",
            (STATUS_CONSUMED, batch["kode_barang_keluar_masuk"]),
        )
        if done:
            break


def input_stock_keluar(
    db: Database,
    tanggal: str,
    kode_nota: str,
    nama_penanggung_jawab: str,
    kode: str,
    kode_gudang: str,
    items: Iterable[OutgoingItem],
) -> Response:
    """Record an issue "SK-n", subtract it from stock and deduct it from incoming batches."""
    lines = list(items)
    for item in lines:
        _ensure_available(db, item)

    co = db.next_co("stock_keluar_masuk")
    kode_stock_keluar_masuk = f"SK-{co}"
    count = db.execute(
        "INSERT INTO stock_keluar_masuk (co, kode_stock_keluar_masuk, tanggal, kode_nota, "
        "nama_penanggung_jawab, kode, kode_gudang, status) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            co,
            kode_stock_keluar_masuk,
            to_sql_date(tanggal),
            kode_nota,
            nama_penanggung_jawab,
            kode,
            kode_gudang,
            STATUS_KELUAR,
        ),
    )

    for item in lines:
        line_co = db.next_co("barang_stock_keluar_masuk")
        kode_barang_keluar = f"BKM-{line_co}"
        db.execute(
            "INSERT INTO barang_stock_keluar_masuk (co, kode_barang_keluar_masuk, "
            "kode_stock_keluar_masuk, kode_stock, jumlah_barang, harga, total_harga) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                line_co,
                kode_barang_keluar,
                kode_stock_keluar_masuk,
                item.kode_stock,
                item.jumlah_barang,
                item.harga,
                item.total_harga,
            ),
        )

        row = db.query_one("SELECT jumlah FROM stock WHERE kode_stock = ?", (item.kode_stock,))
        current = row["jumlah"] if row else 0.0
        db.execute(
            "UPDATE stock SET jumlah = ? WHERE kode_stock = ?",
            (current - item.jumlah_barang, item.kode_stock),
        )

        _consume_batches(
            db, item, kode_barang_keluar, kode_stock_keluar_masuk, _batch_order(db, kode_gudang)
        )

    return rows_affected(count)


def _recipient_name(db: Database, kode: str) -> str:
    """Resolve a shop or supplier code to its name; other codes are returned as they are."""
    if kode.startswith("TK"):
        row = db.query_one("SELECT nama_toko FROM toko WHERE kode_toko = ?", (kode,))
        return row["nama_toko"] if row else kode
    if kode.startswith("SP"):
        row = db.query_one("SELECT nama_supplier FROM supplier WHERE kode_supplier = ?", (kode,))
        return row["nama_supplier"] if row else kode
    return kode


def read_stock_keluar(
    db: Database,
    kode_gudang: str,
    tanggal_1: str = "",
    tanggal_2: str = "",
    kode_toko: str = "",
) -> Response:
    """List issues, newest first, optionally by date (or range) and recipient."""
    sql = (
        "SELECT skm.kode_stock_keluar_masuk, skm.tanggal, skm.kode_nota, "
        "skm.nama_penanggung_jawab, skm.kode, "
        "SUM(bs.jumlah_barang) AS jumlah_total, SUM(bs.total_harga) AS total_harga "
        "FROM stock_keluar_masuk skm "
        "JOIN barang_stock_keluar_masuk bs "
        "ON bs.kode_stock_keluar_masuk = skm.kode_stock_keluar_masuk "
        "WHERE skm.kode_gudang = ? AND skm.status = 1"
    )
    params: list[Any] = [kode_gudang]
    if tanggal_1 and tanggal_2:
        sql += " AND skm.tanggal >= ? AND skm.tanggal <= ?"
        params += [to_sql_date(tanggal_1), to_sql_date(tanggal_2)]
    elif tanggal_1:
        sql += " AND skm.tanggal = ?"
        params.append(to_sql_date(tanggal_1))
    if kode_toko:
        sql += " AND skm.kode = ?"
        params.append(kode_toko)
    sql += " GROUP BY skm.kode_stock_keluar_masuk ORDER BY skm.co DESC"

    issues = []
    for row in db.query_all(sql, params):
        lines = db.query_all(
            "SELECT bs.kode_barang_keluar_masuk, s.nama_barang, bs.tanggal_kadaluarsa, "
            "bs.jumlah_barang, bs.harga FROM barang_stock_keluar_masuk bs "
            "JOIN stock s ON bs.kode_stock = s.kode_stock "
            "WHERE bs.kode_stock_keluar_masuk = ? ORDER BY bs.co ASC",
            (row["kode_stock_keluar_masuk"],),
        )
        issues.append(
            {
                "kode_stock_keluar_masuk": row["kode_stock_keluar_masuk"],
                "tanggal": from_sql_date(row["tanggal"]),
                "kode_nota": row["kode_nota"],
                "penanggung_jawab": row["nama_penanggung_jawab"],
                "nama_toko": _recipient_name(db, row["kode"]),
                "jumlah_total": row["jumlah_total"],
                "total_harga": row["total_harga"],
                "detail_stock_keluar": lines,
            }
        )
    if not issues:
        return Response(STATUS_NOT_FOUND, MSG_NOT_FOUND, [])
    return ok(issues)