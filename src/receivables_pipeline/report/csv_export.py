"""CSV exports of the client table, the top-debt list and a single client."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Any, Iterable, Sequence

from ..core.metrics import top_by_debt
from ..core.models import MONTHS, ClientDetailRecord
from ..core.views import find_client
from ..utils import get_logger, slugify

_log = get_logger(__name__)


def to_csv(rows: Iterable[Sequence[Any]]) -> str:
    """Render rows with every field quoted and embedded quotes doubled."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if v is None else _plain(v) for v in row])
    return buf.getvalue().rstrip("\n")


def _plain(value: Any) -> Any:
    # 120000.0 -> 120000, so exports match the sheet's integer pesos.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def filtered_clients_csv(clients: Sequence[ClientDetailRecord]) -> str:
    rows = [["Cliente", "Total", "Abono", "Diferencia"]]
    rows += [[c.name, c.total, c.paid, c.balance] for c in clients]
    return to_csv(rows)


def top_debt_csv(clients: Sequence[ClientDetailRecord], n: int = 20) -> str:
    rows: list[list[Any]] = [["#", "Cliente", "Total", "Abono", "Deuda"]]
    for i, c in enumerate(top_by_debt(clients, n), start=1):
        rows.append([i, c.name, c.total, c.paid, c.balance])
    return to_csv(rows)


def client_detail_csv(client: ClientDetailRecord) -> str:
    rows: list[list[Any]] = [
        ["Cliente", client.name],
        ["Total", client.total],
        ["Abono", client.paid],
        ["Diferencia", client.balance],
        [],
        ["Mes", "Monto"],
    ]
    rows += [[m, client.monthly_amounts.get(m, 0.0)] for m in MONTHS]
    return to_csv(rows)


def client_csv_filename(name: str) -> str:
    return f"cliente_{slugify(name)}.csv"


def write_exports(
    filtered: Sequence[ClientDetailRecord],
    clients: Sequence[ClientDetailRecord],
    output_dir: str | Path,
    *,
    top_debt_rows: int = 20,
    client_name: str | None = None,
) -> list[Path]:
    """Write the CSV exports into ``output_dir`` and return their paths.

    Args:
        filtered: The client table as currently filtered and sorted.
        clients: The full client collection (for the top-debt list).
        output_dir: Destination directory.
        top_debt_rows: Length of the top-debt list.
        client_name: Also export this client's monthly detail, if found.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    files = {
        "clientes_filtrados.csv": filtered_clients_csv(filtered),
        f"top{top_debt_rows}_deuda.csv": top_debt_csv(clients, top_debt_rows),
    }
    if client_name:
        client = find_client(clients, client_name)
        if client is None:
            _log.warning("Client '%s' not found; skipping detail export", client_name)
        else:
            files[client_csv_filename(client.name)] = client_detail_csv(client)

    written = []
    for name, text in files.items():
        path = output_dir / name
        # utf-8-sig so Excel opens accented names correctly
        path.write_text(text, encoding="utf-8-sig")
        written.append(path)
        _log.info("Wrote %s", path)
    return written
