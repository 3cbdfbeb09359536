from __future__ import annotations

import re
from typing import Optional, Union

from ..model import RawPunch
from .base import DATE_TIME_KEYS, DEVICE_KEYS, EN_NO_KEYS, MODE_KEYS, NAME_KEYS, PunchParser

_SPACES = re.compile(r"\s+")


def _header_map(line: str) -> dict[str, int]:
    header: dict[str, int] = {}
    for idx, col in enumerate(line.split("\t")):
        key = col.strip().lower()
        if key in EN_NO_KEYS:
            header["en_no"] = idx
        elif key in NAME_KEYS:
            header["name"] = idx
        elif key in DATE_TIME_KEYS:
            header["date_time"] = idx
        elif key in DEVICE_KEYS:
            header["device_id"] = idx
        elif key in MODE_KEYS:
            header["mode"] = idx
    return header


def _field(fields: list[str], header: dict[str, int], name: str) -> str:
    idx = header.get(name)
    if idx is None or idx >= len(fields):
        return ""
    return fields[idx].strip()


class AttendLogTxtParser(PunchParser):
    """AttendLog TSV export. The header line is located dynamically.

    Lines starting with '#' are device metadata and skipped, as are data lines
    seen before a usable header.
    """

    format_name = "txt"

    def parse(self, content: Union[str, bytes]) -> list[RawPunch]:
        if isinstance(content, bytes):
            content = content.decode("utf-8-sig", errors="replace")

        punches: list[RawPunch] = []
        header: Optional[dict[str, int]] = None

        for line in content.split("\n"):
            clean = line.replace("\r", "").strip()
            if not clean or clean.startswith("#"):
                continue

            if header is None and ("EnNo" in clean or "Name" in clean) and "\t" in clean:
                header = _header_map(clean)
                continue

            if not header or "en_no" not in header or "date_time" not in header:
                continue

            fields = clean.split("\t")
            if len(fields) < 3:
                continue

            en_no = _field(fields, header, "en_no")
            date_time = _SPACES.sub(" ", _field(fields, header, "date_time"))
            if not en_no or not date_time:
                continue

            punches.append(
                RawPunch(
                    en_no=en_no,
                    date_time=date_time,
                    name=_field(fields, header, "name"),
                    device_id=_field(fields, header, "device_id"),
                    mode=_field(fields, header, "mode"),
                    raw=clean,
                )
            )

        return punches
