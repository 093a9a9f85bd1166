from __future__ import annotations
from typing import List, Dict, Any, Sequence
from io import BytesIO
from datetime import date, datetime

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.styles import Font, Alignment

MAX_COLUMN_WIDTH = 50


def _cell_value(v: Any):
    if isinstance(v, (list, tuple, set)):
        return ", ".join(str(x) for x in v)
    if isinstance(v, datetime):
        return v.strftime("%Y-%m-%d %H:%M")
    if isinstance(v, date):
        return v.isoformat()
    return v


def rows_to_xlsx_bytes(
    rows: List[Dict[str, Any]],
    headers: Sequence[str],
    sheet_name: str = "Schedules",
) -> bytes:
    """
    rows: one dict per spreadsheet row, keyed by header
    List values are joined with ", ", dates rendered as ISO text.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name[:31]

    ws.append(list(headers))
    bold = Font(bold=True)
    for col_idx in range(1, len(headers) + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = bold
        cell.alignment = Alignment(horizontal="center", vertical="center")
    ws.freeze_panes = "A2"

    widths = [len(h) for h in headers]
    for r in rows:
        values = [_cell_value(r.get(h)) for h in headers]
        ws.append(values)
        for i, v in enumerate(values):
            if v is not None:
                widths[i] = max(widths[i], len(str(v)))

    for col_idx, w in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = min(w + 2, MAX_COLUMN_WIDTH)

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def make_filename(prefix: str = "schedules") -> str:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{ts}.xlsx"
