"""Generación de Excel con resumen diario y curva estimada."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

_DIA_SEMANA: tuple[str, ...] = ("lun", "mar", "mie", "jue", "vie", "sab", "dom")

_SUMMARY_HEADERS: dict[str, str] = {
    "weekday": "Día",
    "day": "Fecha",
    "avg_glucose": "Glucosa prom.\n(mg/dL)",
    "time_in_range": "En rango",
    "time_below_range": "Bajo rango",
    "time_above_range": "Sobre rango",
    "rapid_units": "Insulina\nrápida (U)",
    "long_units": "Insulina\nlenta (U)",
    "total_carbs": "Carbohidratos\n(g)",
    "exercise_minutes": "Ejercicio\n(min)",
    "glucose_count": "Mediciones",
    "has_curve": "Con curva",
}

_CURVE_HEADERS: dict[str, str] = {
    "date": "Fecha",
    "time": "Hora",
    "glucose_mg_dl": "Glucosa (mg/dL)",
    "is_real": "Real",
    "real_mg_dl": "Medición (mg/dL)",
}

_WIDTHS: dict[str, int] = {
    "Día": 6,
    "Fecha": 12,
    "Hora": 8,
    "Glucosa (mg/dL)": 14,
    "Medición (mg/dL)": 14,
    "Glucosa prom.\n(mg/dL)": 14,
    "Carbohidratos\n(g)": 14,
}

_NUMBER_FORMATS: dict[str, str] = {
    "Fecha": "dd/mm/yyyy",
    "Glucosa prom.\n(mg/dL)": "0.0",
    "En rango": "0%",
    "Bajo rango": "0%",
    "Sobre rango": "0%",
    "Insulina\nrápida (U)": "0.0",
    "Insulina\nlenta (U)": "0.0",
    "Carbohidratos\n(g)": "#,##0",
    "Ejercicio\n(min)": "0",
    "Glucosa (mg/dL)": "0",
    "Medición (mg/dL)": "0",
}

_REAL_FILL = PatternFill(fill_type="solid", start_color="FFF2CC", end_color="FFF2CC")


@dataclass(frozen=True)
class ExcelLayout:
    """Sheet names for the glucose report."""

    summary_sheet: str = "Resumen diario"
    curve_sheet: str = "Curva estimada"


def _weekday_label(i: object) -> str:
    """Convierte índice 0-6 (lunes-domingo) a etiqueta de 3 letras."""
    try:
        if i is None or (isinstance(i, float) and pd.isna(i)):
            return ""
        if isinstance(i, int | float):
            idx = int(i)
            return _DIA_SEMANA[idx] if 0 <= idx < 7 else ""
        return ""
    except (ValueError, TypeError):
        return ""


def _add_weekday_column(summary_df: pd.DataFrame) -> pd.DataFrame:
    """Añade columna weekday (Día) delante de la fecha."""
    if "day" not in summary_df.columns or summary_df.empty:
        return summary_df
    out = summary_df.copy()
    out["weekday"] = pd.to_datetime(out["day"]).dt.weekday.map(_weekday_label)
    cols = ["weekday"] + [c for c in out.columns if c != "weekday"]
    return out[cols]


def write_glucose_xlsx(
    summary_df: pd.DataFrame,
    curve_df: pd.DataFrame,
    out_path: Path,
    layout: ExcelLayout,
) -> None:
    """Write the daily summary and the estimated curves to one workbook.

    Args:
        summary_df: One row per day (see ``stats.summaries_to_frame``).
        curve_df: One row per curve point (see ``stats.curve_to_frame``).
        out_path: Output path for the XLSX file.
        layout: Sheet names.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    summary = _add_weekday_column(summary_df).rename(columns=_SUMMARY_HEADERS)
    curve = curve_df.rename(columns=_CURVE_HEADERS)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        summary.to_excel(writer, index=False, sheet_name=layout.summary_sheet)
        curve.to_excel(writer, index=False, sheet_name=layout.curve_sheet)
        _format_sheet(writer.book[layout.summary_sheet])
        curve_ws = writer.book[layout.curve_sheet]
        _format_sheet(curve_ws)
        _highlight_real_rows(curve_ws)


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    """Aplica alineación y borde a las filas de datos."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    for header, idx in col_index.items():
        letter = ws.cell(row=1, column=idx).column_letter
        ws.column_dimensions[letter].width = _WIDTHS.get(header, 11)


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    for row in ws.iter_rows(min_row=2):
        for header, fmt in _NUMBER_FORMATS.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _highlight_real_rows(ws: Any) -> None:
    """Resalta las filas que son mediciones reales."""
    idx = _get_header_col_index(ws).get(_CURVE_HEADERS["is_real"])
    if idx is None:
        return
    for row in ws.iter_rows(min_row=2):
        if row[idx - 1].value:
            for cell in row:
                cell.fill = _REAL_FILL


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    col_index = _get_header_col_index(ws)
    _apply_column_widths(ws, col_index)
    _apply_number_formats(ws, col_index)
