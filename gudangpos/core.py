"""Shared storage, response and field-parsing helpers for the warehouse services."""

from __future__ import annotations

import re
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from http import HTTPStatus
from typing import Any, Iterable, Iterator, Sequence

MSG_OK = "Suksess"
MSG_NOT_FOUND = "Status Not Found"
MSG_CONDITION_UNMET = "Erorr karena ada condition yang tidak terpenuhi"

STATUS_OK = int(HTTPStatus.OK)
STATUS_NOT_FOUND = int(HTTPStatus.NOT_FOUND)

ZERO_SQL_DATE = "0001-01-01"
ZERO_DISPLAY_DATE = "01-01-0001"

_DISPLAY_FORMAT = "%d-%m-%Y"
_SQL_FORMAT = "%Y-%m-%d"

# Column specs: "name" is text, "name:i" integer, "name:r" real.
# The first column other than "co" is the primary key.
_BATCH_COLUMNS = (
    "co:i kode_barang_keluar_masuk kode_stock_keluar_masuk kode_stock tanggal_kadaluarsa "
    "jumlah_barang:r harga:i total_harga:i status:i"
)

_TABLES: dict[str, str] = {
    "user": "id_user username password status:i kode_gudang",
    "gudang": "kode_gudang nama_gudang status_lifo_fifo:i",
    "jenis_barang": "co:i kode_jenis_barang nama_jenis_barang kode_gudang",
    "satuan_barang": "co:i kode_satuan_barang nama_satuan_barang kode_gudang",
    "toko": "co:i kode_toko nama_toko alamat nomor_telpon kode_gudang kode_kasir kode_store",
    "stock": (
        "co:i kode_stock nama_barang harga_jual:i jumlah:r "
        "kode_satuan_barang kode_jenis_barang kode_gudang"
    ),
    "stock_keluar_masuk": (
        "co:i kode_stock_keluar_masuk tanggal kode_nota nama_penanggung_jawab "
        "kode kode_gudang status:i"
    ),
    "barang_stock_keluar_masuk": _BATCH_COLUMNS,
    "detail_stock": _BATCH_COLUMNS,
    "pengurangan_stock": (
        "co:i kode_pengurangan kode_stock_keluar_masuk kode_barang_keluar_masuk "
        "kode_stock_keluar kode_barang_keluar kode_supplier"
    ),
    "supplier": "co:i kode_supplier nama_supplier nomor_telpon kode_gudang",
    "barang_supplier": "co:i kode_barang_supplier kode_supplier kode_stock",
    "pre_order": (
        "co:i kode_pre_order tanggal kode_nota nama_penanggung_jawab "
        "kode_supplier kode_gudang status:i"
    ),
    "barang_pre_order": (
        "co:i kode_barang_pre_order kode_pre_order kode_stock tanggal_kadaluarsa "
        "jumlah_barang:r harga:i total_harga:i"
    ),
    "refund": "co:i kode_refund tanggal tanggal_pengembalian kode_supplier kode_gudang status:i",
    "barang_refund": (
        "co:i kode_barang_refund kode_refund kode_nota kode_stock tanggal_stock_masuk "
        "jumlah:r keterangan"
    ),
    "audit": "co:i kode_audit tanggal kode_stock kode_gudang status:i",
    "detail_audit": (
        "co:i kode_detail_audit kode_audit kode_barang_keluar_masuk tanggal_masuk "
        "stock_dalam_sistem:r stock_rill:r selisih_stock:r kode_supplier status:i"
    ),
}

_COLUMN_TYPES = {"": ("TEXT", "''"), "i": ("INTEGER", "0"), "r": ("REAL", "0")}


def _table_sql(name: str, spec: str) -> str:
    columns = []
    has_primary = False
    for field in spec.split():
        column, _, kind = field.partition(":")
        sql_type, default = _COLUMN_TYPES[kind]
        if not has_primary and column != "co":
            columns.append(f"{column} {sql_type} PRIMARY KEY")
            has_primary = True
        else:
            columns.append(f"{column} {sql_type} NOT NULL DEFAULT {default}")
    return f'CREATE TABLE IF NOT EXISTS "{name}" ({", ".join(columns)});'


_SCHEMA = "\n".join(_table_sql(name, spec) for name, spec in _TABLES.items())

_SEPARATED_FIELD = re.compile(r"\|([^|]*)\|")


@dataclass
class Response:
    """The outcome of a service call: HTTP-style status, message and payload."""

    status: int
    message: str
    data: Any = None


class ServiceError(Exception):
    """Raised when a service call fails; carries the response it would have sent."""

    def __init__(self, status: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.data = data

    @property
    def response(self) -> Response:
        return Response(self.status, self.message, self.data)


@contextmanager
def _sql_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise ServiceError(STATUS_NOT_FOUND, MSG_NOT_FOUND, str(exc)) from exc


class Database:
    """A SQLite store holding every warehouse table."""

    def __init__(self, path: str = ":memory:") -> None:
        self.path = str(path)
        self._conn = sqlite3.connect(self.path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a writing statement, commit it and return the affected row count."""
        with _sql_errors(), self._conn:
            cursor = self._conn.execute(sql, tuple(params))
        return cursor.rowcount

    def query_one(self, sql: str, params: Sequence[Any] = ()) -> dict[str, Any] | None:
        """Return the first row of a query as a dict, or None."""
        with _sql_errors():
            row = self._conn.execute(sql, tuple(params)).fetchone()
        return dict(row) if row is not None else None

    def query_all(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Return every row of a query as a list of dicts."""
        with _sql_errors():
            rows = self._conn.execute(sql, tuple(params)).fetchall()
        return [dict(row) for row in rows]

    def next_co(self, table: str) -> int:
        """Return the next sequence number for a table (highest co plus one)."""
        if table not in _TABLES:
            raise ValueError(f"unknown table: {table!r}")
        row = self.query_one(f'SELECT co FROM "{table}" ORDER BY co DESC LIMIT 1')
        return (row["co"] if row else 0) + 1

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def split_strings(text: str) -> list[str]:
    """Split a "|a||b|" field into its values."""
    return _SEPARATED_FIELD.findall(text or "")


def split_floats(text: str) -> list[float]:
    """Split a "|1.5||2|" field into floats."""
    return [float(value) for value in split_strings(text)]


def split_ints(text: str) -> list[int]:
    """Split a "|10||20|" field into integers."""
    return [int(value) for value in split_strings(text)]


def join_separated(values: Iterable[Any]) -> str:
    """Join values into a "|a||b|" field; floats are written with six decimals."""
    return "".join(f"|{value:f}|" if isinstance(value, float) else f"|{value}|" for value in values)


def _reformat_date(text: str, source: str, sql: bool, fallback: str) -> str:
    try:
        moment = datetime.strptime(text, source)
    except (TypeError, ValueError):
        return fallback
    if sql:
        return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
    return f"{moment.day:02d}-{moment.month:02d}-{moment.year:04d}"


def to_sql_date(text: str) -> str:
    """Turn "dd-mm-yyyy" into "yyyy-mm-dd"; unreadable input gives the zero date."""
    return _reformat_date(text, _DISPLAY_FORMAT, True, ZERO_SQL_DATE)


def from_sql_date(text: str) -> str:
    """Turn "yyyy-mm-dd" into "dd-mm-yyyy"; unreadable input gives the zero date."""
    return _reformat_date(text, _SQL_FORMAT, False, ZERO_DISPLAY_DATE)


def ok(data: Any) -> Response:
    """A successful response carrying data."""
    return Response(STATUS_OK, MSG_OK, data)


def rows_affected(count: int) -> Response:
    """A successful response reporting how many rows a write touched."""
    return ok({"rows": count})