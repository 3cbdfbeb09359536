from __future__ import annotations

import io
import json
from datetime import datetime
from typing import Any, Union

import pandas as pd

from ...core.constants import RAW_LINE_LIMIT
from ...core.exceptions import ValidationError
from ..model import RawPunch
from .base import PunchParser

XLSX_EN_NO_KEYS = ("enno", "empno", "userid", "id")
XLSX_DATE_TIME_KEYS = ("datetime", "checktime", "timestamp", "data/hora")
XLSX_NAME_KEYS = ("name", "nome", "employee")
XLSX_DEVICE_KEYS = ("tmno", "deviceid")
XLSX_MODE_KEYS = ("mode", "modo")


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if pd.isna(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def _first(row: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None and _cell_text(value):
            return value
    return None


class XlsxParser(PunchParser):
    """First worksheet of a clock export, one punch per row."""

    format_name = "xlsx"

    def parse(self, content: Union[str, bytes]) -> list[RawPunch]:
        if isinstance(content, str):
            content = content.encode("utf-8")
        try:
            df = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=object, engine="openpyxl")
        except Exception as exc:
            raise ValidationError("Arquivo XLSX inválido ou corrompido") from exc

        df = df.astype(object).where(pd.notna(df), None)

        punches: list[RawPunch] = []
        for source_row in df.to_dict(orient="records"):
            row = {str(k).strip().lower(): v for k, v in source_row.items()}

            en_no = _cell_text(_first(row, XLSX_EN_NO_KEYS))
            date_value = _first(row, XLSX_DATE_TIME_KEYS)
            if not en_no or date_value is None:
                continue

            # Spreadsheet date cells stay datetimes; the normalizer handles both.
            date_time = date_value if isinstance(date_value, datetime) else _cell_text(date_value)

            punches.append(
                RawPunch(
                    en_no=en_no,
                    date_time=date_time,
                    name=_cell_text(_first(row, XLSX_NAME_KEYS)),
                    device_id=_cell_text(_first(row, XLSX_DEVICE_KEYS)),
                    mode=_cell_text(_first(row, XLSX_MODE_KEYS)),
                    raw=json.dumps({str(k): v for k, v in source_row.items()}, ensure_ascii=False, default=str)[:RAW_LINE_LIMIT],
                )
            )

        return punches
