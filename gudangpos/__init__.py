"""Warehouse back office for a point-of-sale system, stored in SQLite."""

__version__ = "0.1.0"

__all__ = [
    "core",
    "jenis_barang",
    "kartu_stock",
    "pre_order",
    "satuan_barang",
    "stock",
    "stock_keluar",
    "stock_masuk",
    "supplier",
    "toko",
    "user",
]