from datetime import date

import pytest

from gudangpos.core import STATUS_NOT_FOUND, STATUS_OK, Database
from gudangpos.kartu_stock import read_kartu_stock
from gudangpos.stock import input_barang
from gudangpos.stock_keluar import OutgoingItem, input_stock_keluar
from gudangpos.stock_masuk import IncomingItem, input_stock_masuk
from gudangpos.supplier import input_supplier


@pytest.fixture
def db():
    with Database() as database:
        input_barang(database, "|Gula||Teh|", "|15000||8000|", "|SB-1||SB-1|", "JB-1", "G-1")
        input_supplier(database, "Satu", "0000", "G-1", "|ST-1|")
        input_supplier(database, "Dua", "0000", "G-1", "|ST-2|")
        input_stock_masuk(
            database, "05-03-2024", "N-1", "Budi", "SP-1", "G-1",
            [IncomingItem("ST-1", 10.0, 5000, "01-01-2025")],
        )
        input_stock_keluar(
            database, "06-03-2024", "N-2", "Budi", "TK-1", "G-1",
            [OutgoingItem("ST-1", 4.0, 15000)],
        )
        yield database


def _add_audit(db, rill, sistem):
    db.execute(
        "INSERT INTO stock_keluar_masuk (co, kode_stock_keluar_masuk, tanggal, kode_gudang, status) "
        "VALUES (99, 'AU-1', '2024-03-07', 'G-1', 2)"
    )
    db.execute(
        "INSERT INTO audit (co, kode_audit, kode_stock, kode_gudang, status) "
        "VALUES (1, 'AU-1', 'ST-1', 'G-1', 1)"
    )
    db.execute(
        "INSERT INTO detail_audit (co, kode_detail_audit, kode_audit, stock_dalam_sistem, "
        "stock_rill, kode_supplier, status) VALUES (1, 'DAU-1', 'AU-1', ?, ?, 'SP-1', 0)",
        (sistem, rill),
    )


def _card(res, nama_barang):
    return next(card for card in res.data if card["nama_barang"] == nama_barang)


def test_incoming_and_outgoing_lines(db):
    res = read_kartu_stock(db, "G-1", "01-03-2024", "31-03-2024")
    assert res.status == STATUS_OK
    card = _card(res, "Gula")
    assert card["nama_supplier"] == "Satu"
    entries = card["detail_kartu_stock"]
    assert [e["keterangan"] for e in entries] == ["MASUK", "KELUAR"]
    assert [e["tanggal"] for e in entries] == ["05-03-2024", "06-03-2024"]
    assert [e["jumlah_barang"] for e in entries] == [10.0, 4.0]
    assert card["jumlah_stock_masuk"] == 10.0
    assert card["jumlah_stock_keluar"] == 4.0
    assert entries[-1]["sisa"] == card["jumlah_stock_masuk"] - card["jumlah_stock_keluar"]


def test_pairs_without_movements_are_left_out(db):
    res = read_kartu_stock(db, "G-1", "01-03-2024", "31-03-2024")
    assert [card["nama_barang"] for card in res.data] == ["Gula"]


def test_range_without_movements_is_not_found(db):
    res = read_kartu_stock(db, "G-1", "07-03-2024", "31-03-2024")
    assert res.status == STATUS_NOT_FOUND
    assert res.data == []


def test_default_range_is_month_to_today(db):
    input_stock_masuk(
        db, "20-03-2024", "N-3", "Budi", "SP-1", "G-1",
        [IncomingItem("ST-1", 3.0, 5000, "01-01-2025")],
    )
    res = read_kartu_stock(db, "G-1", today=date(2024, 3, 15))
    dates = [e["tanggal"] for e in _card(res, "Gula")["detail_kartu_stock"]]
    assert dates == ["05-03-2024", "06-03-2024"]


def test_default_range_excludes_previous_month(db):
    res = read_kartu_stock(db, "G-1", today=date(2024, 4, 2))
    assert res.status == STATUS_NOT_FOUND


def test_filter_by_supplier(db):
    input_stock_masuk(
        db, "08-03-2024", "N-4", "Budi", "SP-2", "G-1",
        [IncomingItem("ST-2", 5.0, 3000, "01-01-2025")],
    )
    res = read_kartu_stock(db, "G-1", "01-03-2024", "31-03-2024", kode_supplier="SP-2")
    assert [card["nama_barang"] for card in res.data] == ["Teh"]
    assert res.data[0]["nama_supplier"] == "Dua"


def test_filter_by_stock(db):
    res = read_kartu_stock(db, "G-1", "01-03-2024", "31-03-2024", kode_stock="ST-2")
    assert res.status == STATUS_NOT_FOUND


def test_audit_surplus_counts_as_incoming(db):
    _add_audit(db, rill=8.0, sistem=6.0)
    res = read_kartu_stock(db, "G-1", "01-03-2024", "31-03-2024")
    card = _card(res, "Gula")
    last = card["detail_kartu_stock"][-1]
    assert last["keterangan"] == "AUDIT MASUK"
    assert last["tanggal"] == "07-03-2024"
    assert last["jumlah_barang"] == 2.0
    assert last["sisa"] == card["jumlah_stock_masuk"] - card["jumlah_stock_keluar"]


def test_audit_without_difference(db):
    _add_audit(db, rill=6.0, sistem=6.0)
    res = read_kartu_stock(db, "G-1", "01-03-2024", "31-03-2024")
    entries = _card(res, "Gula")["detail_kartu_stock"]
    assert entries[-1]["keterangan"] == "AUDIT"
    assert entries[-1]["sisa"] == entries[-2]["sisa"]


def test_audit_shortage_is_labelled_outgoing(db):
    _add_audit(db, rill=5.0, sistem=6.0)
    res = read_kartu_stock(db, "G-1", "01-03-2024", "31-03-2024")
    entries = _card(res, "Gula")["detail_kartu_stock"]
    assert entries[-1]["keterangan"] == "AUDIT KELUAR"
    assert entries[-1]["jumlah_barang"] < 0
    assert len(entries) == 3