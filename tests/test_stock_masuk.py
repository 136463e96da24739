import pytest

from gudangpos.core import STATUS_NOT_FOUND, STATUS_OK, Database, ServiceError
from gudangpos.stock_masuk import (
    IncomingItem,
    delete_barang_stock_masuk,
    input_stock_masuk,
    parse_incoming_items,
    read_stock_masuk,
    update_barang_stock_masuk,
)


@pytest.fixture
def db():
    database = Database()
    database.execute("INSERT INTO gudang (kode_gudang, status_lifo_fifo) VALUES ('G1', 0)")
    database.execute(
        "INSERT INTO supplier (co, kode_supplier, nama_supplier, kode_gudang) "
        "VALUES (1, 'SP-1', 'Sumber Jaya', 'G1')"
    )
    database.execute(
        "INSERT INTO stock (co, kode_stock, nama_barang, jumlah, kode_gudang) "
        "VALUES (1, 'ST-1', 'Beras', 0, 'G1')"
    )
    database.execute(
        "INSERT INTO stock (co, kode_stock, nama_barang, jumlah, kode_gudang) "
        "VALUES (2, 'ST-2', 'Gula', 0, 'G1')"
    )
    yield database
    database.close()


ITEMS = [
    IncomingItem("ST-1", 2.5, 1000, "01-01-2025"),
    IncomingItem("ST-2", 4.0, 2000, "02-02-2025"),
]


def _receive(db, tanggal="05-03-2024", items=ITEMS):
    return input_stock_masuk(db, tanggal, "N-1", "Budi", "SP-1", "G1", items)


def _jumlah(db, kode_stock):
    return db.query_one("SELECT jumlah FROM stock WHERE kode_stock = ?", (kode_stock,))["jumlah"]


def test_parse_incoming_items():
    items = parse_incoming_items(
        "|ST-1||ST-2|", "|2.5||4|", "|1000||2000|", "|01-01-2025||02-02-2025|"
    )
    assert items == ITEMS


def test_parse_incoming_items_length_mismatch():
    with pytest.raises(ValueError):
        parse_incoming_items("|ST-1||ST-2|", "|2.5|", "|1000||2000|", "|01-01-2025||02-02-2025|")


def test_input_creates_receipt(db):
    res = _receive(db)
    assert res.status == STATUS_OK
    assert res.data == {"rows": 1}
    header = db.query_one("SELECT * FROM stock_keluar_masuk")
    assert header["kode_stock_keluar_masuk"] == "SM-1"
    assert header["tanggal"] == "2024-03-05"
    assert header["kode"] == "SP-1"
    assert header["status"] == 0


def test_input_adds_amounts_to_stock_and_mirrors_detail(db):
    _receive(db)
    assert _jumlah(db, "ST-1") == pytest.approx(ITEMS[0].jumlah_barang)
    assert _jumlah(db, "ST-2") == pytest.approx(ITEMS[1].jumlah_barang)
    lines = db.query_all(
        "SELECT kode_barang_keluar_masuk, kode_stock, jumlah_barang, harga, total_harga "
        "FROM barang_stock_keluar_masuk ORDER BY co"
    )
    details = db.query_all(
        "SELECT kode_barang_keluar_masuk, kode_stock, jumlah_barang, harga, total_harga "
        "FROM detail_stock ORDER BY co"
    )
    assert lines == details
    assert [line["kode_barang_keluar_masuk"] for line in lines] == ["BKM-1", "BKM-2"]


def test_total_harga_rounds_half_away_from_zero():
    assert IncomingItem("ST-1", 0.5, 5, "01-01-2025").total_harga == 3


def test_second_receipt_continues_numbering(db):
    _receive(db)
    _receive(db, items=[IncomingItem("ST-1", 1.0, 500, "01-06-2025")])
    codes = [r["kode_stock_keluar_masuk"] for r in db.query_all(
        "SELECT kode_stock_keluar_masuk FROM stock_keluar_masuk ORDER BY co")]
    assert codes == ["SM-1", "SM-2"]
    assert _jumlah(db, "ST-1") == pytest.approx(2.5 + 1.0)


def test_read_lists_receipts_with_lines(db):
    _receive(db)
    res = read_stock_masuk(db, "G1")
    assert res.status == STATUS_OK
    [receipt] = res.data
    assert receipt["tanggal"] == "05-03-2024"
    assert receipt["nama_supplier"] == "Sumber Jaya"
    assert receipt["jumlah_total"] == pytest.approx(sum(i.jumlah_barang for i in ITEMS))
    assert [d["nama_barang"] for d in receipt["detail_stock_masuk"]] == ["Beras", "Gula"]
    assert receipt["detail_stock_masuk"][0]["tanggal_kadaluarsa"] == "01-01-2025"


def test_read_filters(db):
    _receive(db, tanggal="05-03-2024")
    _receive(db, tanggal="10-03-2024")
    single = read_stock_masuk(db, "G1", tanggal_1="10-03-2024")
    assert [r["tanggal"] for r in single.data] == ["10-03-2024"]
    ranged = read_stock_masuk(db, "G1", "01-03-2024", "31-03-2024", "SP-1")
    assert [r["tanggal"] for r in ranged.data] == ["05-03-2024", "10-03-2024"]
    none = read_stock_masuk(db, "G1", tanggal_1="01-01-2020")
    assert none.status == STATUS_NOT_FOUND
    assert none.data == []


def test_update_line_adjusts_stock(db):
    _receive(db)
    res = update_barang_stock_masuk(db, "BKM-1", "09-09-2026", 6.0, 1000)
    assert res.data == {"rows": 1}
    assert _jumlah(db, "ST-1") == pytest.approx(6.0)
    for table in ("barang_stock_keluar_masuk", "detail_stock"):
        row = db.query_one(
            f"SELECT * FROM {table} WHERE kode_barang_keluar_masuk = 'BKM-1'"
        )
        assert row["tanggal_kadaluarsa"] == "2026-09-09"
        assert row["jumlah_barang"] == pytest.approx(6.0)
        assert row["total_harga"] == 6000


def test_update_blocked_after_issue(db):
    _receive(db)
    db.execute(
        "INSERT INTO pengurangan_stock (co, kode_pengurangan, kode_barang_keluar_masuk) "
        "VALUES (1, 'PE-1', 'BKM-1')"
    )
    with pytest.raises(ServiceError) as info:
        update_barang_stock_masuk(db, "BKM-1", "09-09-2026", 6.0, 1000)
    assert info.value.message == "Barang Tidak dapat di update"
    assert _jumlah(db, "ST-1") == pytest.approx(2.5)


def test_delete_lines_removes_stock_and_empty_receipt(db):
    _receive(db)
    assert delete_barang_stock_masuk(db, "BKM-1").data == {"rows": 1}
    assert _jumlah(db, "ST-1") == pytest.approx(0.0)
    assert db.query_one("SELECT * FROM detail_stock WHERE kode_barang_keluar_masuk = 'BKM-1'") is None
    assert db.query_one("SELECT * FROM stock_keluar_masuk") is not None
    delete_barang_stock_masuk(db, "BKM-2")
    assert db.query_all("SELECT * FROM stock_keluar_masuk") == []
    assert read_stock_masuk(db, "G1").status == STATUS_NOT_FOUND


def test_delete_unknown_line_touches_nothing(db):
    _receive(db)
    assert delete_barang_stock_masuk(db, "BKM-99").data == {"rows": 0}
    assert len(db.query_all("SELECT * FROM barang_stock_keluar_masuk")) == len(ITEMS)