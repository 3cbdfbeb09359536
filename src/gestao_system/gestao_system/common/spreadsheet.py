from __future__ import annotations

import csv
import io
from typing import Iterable, Mapping, Sequence

import pandas as pd

CSV_MIMETYPE = "text/csv"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def rows_to_csv(rows: Iterable[Mapping], fieldnames: Sequence[str]) -> bytes:
    """CSV with a UTF-8 BOM so Excel opens accents correctly."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")


def rows_to_xlsx(rows: Iterable[Mapping], columns: Sequence[str], *, sheet_name: str) -> bytes:
    df = pd.DataFrame(list(rows), columns=list(columns))
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()
