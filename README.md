# gudangpos

The warehouse (*gudang*) side of a point-of-sale system, as a library.
All data lives in one SQLite database; every service is a plain function
that takes an open `Database` as its first argument.

| Module | What it covers |
| --- | --- |
| `gudangpos.core` | `Database`, `Response`, `ServiceError`, date and list-field helpers |
| `gudangpos.satuan_barang` | units of measure (`SB-n`) |
| `gudangpos.jenis_barang` | kinds of goods (`JB-n`) |
| `gudangpos.toko` | shops supplied by the warehouse (`TK-n`) |
| `gudangpos.user` | login and the per-user FIFO/LIFO flag |
| `gudangpos.stock` | goods (`ST-n`), stock levels, movement history, dropdown lists |
| `gudangpos.stock_masuk` | incoming stock from suppliers (`SM-n`, lines `BKM-n`) |
| `gudangpos.stock_keluar` | outgoing stock (`SK-n`), deducted from incoming batches |
| `gudangpos.supplier` | suppliers (`SP-n`) and the goods each delivers (`SPB-n`) |
| `gudangpos.pre_order` | pre-orders (`PO-n`, lines `BPO-n`) |
| `gudangpos.kartu_stock` | stock cards: running balance per supplier and good |

## Installing

```
pip install .
```

Only the Python standard library is needed. To run the tests:

```
pip install ".[test]"
pytest
```

## Using it

`Database(path)` opens (or creates) a SQLite file and makes every table;
with no argument it is an in-memory database. It is a context manager and
closes itself at the end of a `with` block. Codes for new records are
numbered in sequence per table: `SB-1`, `SB-2`, …

```python
from gudangpos.core import Database, ServiceError
from gudangpos.satuan_barang import input_satuan_barang, read_satuan_barang, delete_satuan_barang
from gudangpos.jenis_barang import input_jenis_barang, dropdown_jenis_barang
from gudangpos.stock import input_barang, read_stock

with Database("warehouse.db") as db:
    input_satuan_barang(db, "Pcs", "GD-1")          # SB-1
    input_jenis_barang(db, "Minuman", "GD-1")       # JB-1
    input_barang(db, "|Teh||Kopi|", "|5000||7000|", "|SB-1||SB-1|", "JB-1", "GD-1")

    print(read_satuan_barang(db, "GD-1"))
    print(read_stock(db, "GD-1"))

    try:
        delete_satuan_barang(db, "SB-1")            # still used by goods
    except ServiceError as err:
        print(err.response)
```

### Responses and errors

Each call returns a `Response` with `status` (200 or 404), `message` and
`data`. Writes answer with `data == {"rows": n}`. Listings that find
nothing return a 404 `Response` with an empty list rather than raising.

A `ServiceError` is raised when a request is refused: deleting a unit,
kind, shop or good that is still referred to, issuing more stock than is
on hand, changing or deleting an incoming line that stock has already been
issued from, editing a pre-order that is already accepted, or any SQLite
error. `err.response` gives the `Response` it stands for. Parallel list
fields of different lengths, and an unknown pre-order status, raise
`ValueError`.

### Dates

Dates go in and come out as `DD-MM-YYYY` and are stored as `YYYY-MM-DD`.
`to_sql_date` and `from_sql_date` in `gudangpos.core` convert between the
two; text that cannot be read becomes the zero date (`0001-01-01` /
`01-01-0001`).

### Lists in one field

Several values may be written as one string with each value wrapped in
bars, such as `"|ST-1||ST-2|"`. `split_strings`, `split_floats`,
`split_ints` and `join_separated` (floats written with six decimals) read
and write that form. `parse_incoming_items` builds the `IncomingItem`
list that `input_stock_masuk` and `input_pre_order` take;
`parse_outgoing_items` builds the `OutgoingItem` list for
`input_stock_keluar`. Line totals are price × amount, rounded half away
from zero.

### Stock in, stock out and batch order

`input_stock_masuk` records a receipt, its lines, a matching batch per
line and adds the amounts to stock. `input_stock_keluar` first checks
every line against stock on hand, then records the issue, lowers the stock
and takes the amount out of the incoming batches one after another,
recording each deduction. The order of batches comes from the
`status_lifo_fifo` column of the `gudang` table: `0` takes the newest
batches first, any other value the oldest first. `read_stock` and
`detail_stock` list in the same order.

`change_fifo_lifo` sets the `status` flag on every user of a warehouse; it
does not change the `gudang` table.

### Pre-orders and stock cards

`update_status_pre_order(db, code, 1)` accepts a pending or rejected
pre-order and books its lines as incoming stock dated `today` (the
current date unless given). Lines can be changed or deleted only while
the pre-order is pending (0) or rejected (2); deleting the last line
removes the pre-order.

`read_kartu_stock` lists, per supplier and good, every receipt, issue and
audit line in a date range with the running balance; without dates it
covers the current month up to `today`.

### Logging in

```python
from gudangpos.core import Database
from gudangpos.user import login

password = "password"
with Database("warehouse.db") as db:
    print(login(db, "admin", password))
```

## What it does not do

- There is no HTTP server and no command-line tool; the package is a set
  of functions to call from your own application.
- There are no functions to create warehouses (`gudang`) or users; add
  those rows with `Database.execute`, for example
  `db.execute("INSERT INTO gudang (kode_gudang, nama_gudang, status_lifo_fifo) VALUES (?, ?, ?)", ("GD-1", "Pusat", 1))`.
- The schema has tables for refunds (`refund`, `barang_refund`) and stock
  audits (`audit`, `detail_audit`), but no functions write them. Stock
  cards show audit lines only for audit records put into the database
  directly.
- Passwords are stored and compared as plain text.