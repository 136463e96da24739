"""Stock cards (kartu stock): per supplier and item, the running balance of movements."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .core import (
    MSG_NOT_FOUND,
    STATUS_NOT_FOUND,
    Database,
    Response,
    from_sql_date,
    ok,
    to_sql_date,
)

KET_MASUK = "MASUK"
KET_KELUAR = "KELUAR"
KET_AUDIT = "AUDIT"
KET_AUDIT_MASUK = "AUDIT MASUK"
KET_AUDIT_KELUAR = "AUDIT KELUAR"


@dataclass
class _Ledger:
    sisa: float = 0.0
    masuk: float = 0.0
    keluar: float = 0.0
    entries: list[dict[str, Any]] = field(default_factory=list)

    def record(self, tanggal: str, jumlah: float, keterangan: str) -> None:
        self.entries.append(
            {"tanggal": tanggal, "jumlah_barang": jumlah, "keterangan": keterangan, "sisa": self.sisa}
        )


def _date_range(tanggal_1: str, tanggal_2: str, today: date | None) -> tuple[str, str]:
    if not tanggal_1 and not tanggal_2:
        current = today or date.today()
        return current.replace(day=1).isoformat(), current.isoformat()
    return to_sql_date(tanggal_1), to_sql_date(tanggal_2)


def _pairs(db: Database, kode_gudang: str, kode_supplier: str, kode_stock: str) -> list[dict]:
    sql = (
        "SELECT s.kode_supplier, s.nama_supplier, bs.kode_stock, st.nama_barang FROM supplier s "
        "JOIN barang_supplier bs ON bs.kode_supplier = s.kode_supplier "
        "JOIN stock st ON st.kode_stock = bs.kode_stock "
        "WHERE s.kode_gudang = ?"
    )
    params: list[Any] = [kode_gudang]
    if kode_stock:
        sql += " AND bs.kode_stock = ?"
        params.append(kode_stock)
    if kode_supplier:
        sql += " AND s.kode_supplier = ?"
        params.append(kode_supplier)
    sql += " ORDER BY s.co ASC, bs.co ASC"
    return db.query_all(sql, params)


def _incoming(db: Database, ledger: _Ledger, movement: dict, pair: dict) -> None:
    rows = db.query_all(
        "SELECT bskm.jumlah_barang FROM stock_keluar_masuk skm "
        "JOIN barang_stock_keluar_masuk bskm "
        "ON skm.kode_stock_keluar_masuk = bskm.kode_stock_keluar_masuk "
        "WHERE skm.kode_stock_keluar_masuk = ? AND skm.kode = ? AND bskm.kode_stock = ? "
        "ORDER BY bskm.co ASC",
        (movement["kode_stock_keluar_masuk"], pair["kode_supplier"], pair["kode_stock"]),
    )
    tanggal = from_sql_date(movement["tanggal"])
    for row in rows:
        ledger.masuk += row["jumlah_barang"]
        ledger.sisa += row["jumlah_barang"]
        ledger.record(tanggal, row["jumlah_barang"], KET_MASUK)


def _outgoing(db: Database, ledger: _Ledger, movement: dict, pair: dict) -> None:
    rows = db.query_all(
        "SELECT bskm.jumlah_barang FROM pengurangan_stock p "
        "JOIN barang_stock_keluar_masuk bskm ON p.kode_barang_keluar = bskm.kode_barang_keluar_masuk "
        "WHERE p.kode_stock_keluar = ? AND p.kode_supplier = ? AND bskm.kode_stock = ? "
        "ORDER BY p.co ASC",
        (movement["kode_stock_keluar_masuk"], pair["kode_supplier"], pair["kode_stock"]),
    )
    tanggal = from_sql_date(movement["tanggal"])
    for row in rows:
        ledger.keluar += row["jumlah_barang"]
        ledger.sisa -= row["jumlah_barang"]
        ledger.record(tanggal, row["jumlah_barang"], KET_KELUAR)


def _audit(db: Database, ledger: _Ledger, movement: dict, pair: dict) -> None:
    rows = db.query_all(
        "SELECT da.stock_dalam_sistem, da.stock_rill FROM audit "
        "JOIN detail_audit da ON da.kode_audit = audit.kode_audit "
        "WHERE da.status = 0 AND audit.kode_audit = ? AND da.kode_supplier = ? "
        "AND audit.kode_stock = ? AND audit.status = 1",
        (movement["kode_stock_keluar_masuk"], pair["kode_supplier"], pair["kode_stock"]),
    )
    selisih = sum(row["stock_rill"] - row["stock_dalam_sistem"] for row in rows)
    if selisih > 0:
        keterangan = KET_AUDIT_MASUK
        ledger.masuk += selisih
        ledger.sisa += selisih
    elif selisih == 0:
        keterangan = KET_AUDIT
        ledger.masuk += selisih
        ledger.sisa -= selisih
    else:
        keterangan = KET_AUDIT_KELUAR
        ledger.keluar = ledger.masuk + selisih
        ledger.sisa -= selisih
    ledger.record(from_sql_date(movement["tanggal"]), selisih, keterangan)


_HANDLERS = (("SM", _incoming), ("SK", _outgoing), ("AU", _audit))


def read_kartu_stock(
    db: Database,
    kode_gudang: str,
    tanggal_1: str = "",
    tanggal_2: str = "",
    kode_supplier: str = "",
    kode_stock: str = "",
    today: date | None = None,
) -> Response:
    """Stock cards for a date range (dd-mm-yyyy); without dates, this month up to today."""
    start, end = _date_range(tanggal_1, tanggal_2, today)
    pairs = _pairs(db, kode_gudang, kode_supplier, kode_stock)
    movements = db.query_all(
        "SELECT kode_stock_keluar_masuk, tanggal FROM stock_keluar_masuk "
        "WHERE kode_gudang = ? AND tanggal >= ? AND tanggal <= ? ORDER BY tanggal ASC, co ASC",
        (kode_gudang, start, end),
    )

    cards = []
    for pair in pairs:
        ledger = _Ledger()
        for movement in movements:
            code = movement["kode_stock_keluar_masuk"]
            for prefix, handler in _HANDLERS:
                if code.startswith(prefix):
                    handler(db, ledger, movement, pair)
                    break
        if ledger.entries:
            cards.append(
                {
                    "nama_barang": pair["nama_barang"],
                    "nama_supplier": pair["nama_supplier"],
                    "jumlah_stock_masuk": ledger.masuk,
                    "jumlah_stock_keluar": ledger.keluar,
                    "detail_kartu_stock": ledger.entries,
                }
            )
    if not cards:
        return Response(STATUS_NOT_FOUND, MSG_NOT_FOUND, [])
    return ok(cards)