from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Optional, Union

from ...core.constants import RAW_LINE_LIMIT
from ...core.exceptions import ValidationError
from ..model import RawPunch
from .base import PunchParser

RECORD_TAGS = frozenset({"row", "record", "attendance", "log", "entry", "check"})

FIELD_SYNONYMS = {
    "en_no": ("enno", "userid", "idusuario", "employeeid", "pin", "usercode", "id"),
    "name": ("name", "username", "nome", "employeename", "fullname"),
    "date_time": ("datetime", "time", "timestamp", "date", "logdate", "logtime", "checktime"),
    "device_id": ("tmno", "terminalid", "deviceid", "machineid", "serialnumber"),
    "mode": ("mode", "verifymode", "checktype", "type", "status"),
}


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1].lower()


def _field_for(tag: str) -> Optional[str]:
    for field, synonyms in FIELD_SYNONYMS.items():
        if tag in synonyms:
            return field
    return None


class XmlParser(PunchParser):
    """Generic XML export: record elements with one child element per field."""

    format_name = "xml"

    def parse(self, content: Union[str, bytes]) -> list[RawPunch]:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            raise ValidationError(f"Erro ao parsear XML: {exc}") from exc

        punches: list[RawPunch] = []
        for element in root.iter():
            if not isinstance(element.tag, str) or _local(element.tag) not in RECORD_TAGS:
                continue

            values: dict[str, str] = {}
            for child in element:
                field = _field_for(_local(child.tag)) if isinstance(child.tag, str) else None
                if field and len(child) == 0:
                    values[field] = (child.text or "").strip()

            if not values.get("en_no") or not values.get("date_time"):
                continue

            punches.append(
                RawPunch(
                    en_no=values["en_no"],
                    date_time=values["date_time"],
                    name=values.get("name", ""),
                    device_id=values.get("device_id", ""),
                    mode=values.get("mode", ""),
                    raw=ET.tostring(element, encoding="unicode")[:RAW_LINE_LIMIT],
                )
            )

        return punches
