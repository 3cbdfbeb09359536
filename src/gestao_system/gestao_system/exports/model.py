from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExportFile:
    filename: str
    mimetype: str
    content: bytes
