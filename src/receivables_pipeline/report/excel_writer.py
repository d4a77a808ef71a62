"""Excel report writer: KPIs, client table, periods and monthly activity."""

from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from ..core.metrics import PortfolioKpis, top_by_debt
from ..core.models import MONTHS, LoadResult, MonthlyActivity
from ..utils import format_clp, get_logger

_log = get_logger(__name__)


RECONCILIATION_LABELS = {"OK": "OK", "NEEDS_REVIEW": "Revisar", "NO_DATA": "Sin datos"}


def kpi_rows(kpis: PortfolioKpis) -> list[dict[str, Any]]:
    """Flatten the KPI bundle into labelled rows for display or export."""
    rec = kpis.reconciliation
    coherence = RECONCILIATION_LABELS[rec.status]
    if rec.status == "NEEDS_REVIEW":
        coherence = f"{coherence} ({format_clp(rec.delta)})"
    delta_sign = "+" if kpis.sales_delta > 0 else ""
    return [
        {"KPI": "Clientes", "Valor": kpis.client_count},
        {"KPI": "Venta total", "Valor": format_clp(kpis.total)},
        {"KPI": "Abono total", "Valor": format_clp(kpis.paid)},
        {"KPI": "Deuda total", "Valor": format_clp(kpis.balance)},
        {"KPI": "% Cobrado", "Valor": f"{kpis.collection_rate}%"},
        {"KPI": "Con deuda", "Valor": kpis.has_debt_count},
        {"KPI": "Sin deuda", "Valor": kpis.no_debt_count},
        {"KPI": "Periodos", "Valor": kpis.period_count},
        {"KPI": "Venta periodos", "Valor": format_clp(kpis.aggregate_gross)},
        {"KPI": "Abono periodos", "Valor": format_clp(kpis.aggregate_paid)},
        {"KPI": "Deuda periodos", "Valor": format_clp(kpis.aggregate_balance)},
        {"KPI": "Coherencia", "Valor": coherence},
        {"KPI": "Delta ventas", "Valor": f"{delta_sign}{format_clp(kpis.sales_delta)}"},
        {"KPI": "Concentración ventas", "Valor": f"{kpis.sales_concentration:.1f}%"},
        {"KPI": "Concentración deuda", "Valor": f"{kpis.debt_concentration:.1f}%"},
        {"KPI": "Variabilidad mensual", "Valor": round(kpis.variability, 3)},
    ]


def write_report(
    result: LoadResult,
    kpis: PortfolioKpis,
    activity: Sequence[MonthlyActivity],
    path: str | Path,
    *,
    top_debt_rows: int = 20,
) -> None:
    """Write the receivables report to an Excel file.

    Args:
        result: Loaded detail and aggregate records.
        kpis: Output from MetricsEngine.kpis.
        activity: Monthly activity summary for the chart sheet.
        path: Output file path (e.g. out/reporte_cobranza.xlsx).
        top_debt_rows: Number of clients in the top-debt sheet.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(kpi_rows(kpis)).to_excel(writer, sheet_name="KPIs", index=False)

        client_rows = [
            {
                "Cliente": c.name,
                **{m: c.monthly_amounts.get(m, 0.0) for m in MONTHS},
                "Total": c.total,
                "Abono": c.paid,
                "Diferencia": c.balance,
            }
            for c in result.details
        ]
        df = pd.DataFrame(client_rows, columns=["Cliente", *MONTHS, "Total", "Abono", "Diferencia"])
        df.to_excel(writer, sheet_name="Clientes", index=False)

        pd.DataFrame(
            [
                {"Periodo": a.period, "Venta": a.gross, "Abono": a.paid, "Diferencia": a.balance}
                for a in result.aggregates
            ],
            columns=["Periodo", "Venta", "Abono", "Diferencia"],
        ).to_excel(writer, sheet_name="Periodos", index=False)

        pd.DataFrame(
            [
                {
                    "Mes": m.month,
                    "Clientes activos": m.active_client_count,
                    "Total mes": m.total_amount,
                    "Promedio por cliente": m.average_per_active_client,
                }
                for m in activity
            ]
        ).to_excel(writer, sheet_name="Actividad Mensual", index=False)

        top = top_by_debt(result.details, top_debt_rows)
        pd.DataFrame(
            [
                {"#": i, "Cliente": c.name, "Total": c.total, "Abono": c.paid, "Deuda": c.balance}
                for i, c in enumerate(top, start=1)
            ],
            columns=["#", "Cliente", "Total", "Abono", "Deuda"],
        ).to_excel(writer, sheet_name="Top Deuda", index=False)

    _log.info("Wrote report to %s", path)
