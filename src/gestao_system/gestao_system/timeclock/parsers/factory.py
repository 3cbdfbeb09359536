from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...core.exceptions import ValidationError
from .base import PunchParser
from .txt_parser import AttendLogTxtParser
from .xlsx_parser import XlsxParser
from .xml_parser import XmlParser


def looks_like_xml(text: str) -> bool:
    trimmed = text.strip()
    return trimmed.startswith("<") and "</" in trimmed


def detect_format(filename: Optional[str], content: Optional[str] = None) -> str:
    """Format key for an upload name, or for pasted text when no file is given."""
    if not filename:
        return "xml" if content and looks_like_xml(content) else "txt"

    name = filename.strip().lower()
    if name.endswith(".txt"):
        return "txt"
    if name.endswith(".xls") or name.endswith(".xlsx"):
        return "xlsx"
    if name.endswith(".xml"):
        return "xml"
    raise ValidationError("Formato não suportado. Use TXT, XLSX ou XML.")


@dataclass
class ParserFactory:
    """Factory Pattern: map a detected format to its parser."""

    def create(self, fmt: str) -> PunchParser:
        if fmt == "txt":
            return AttendLogTxtParser()
        if fmt == "xlsx":
            return XlsxParser()
        if fmt == "xml":
            return XmlParser()
        raise ValidationError("Formato não suportado. Use TXT, XLSX ou XML.")

    def for_input(self, filename: Optional[str], content: Optional[str] = None) -> PunchParser:
        return self.create(detect_format(filename, content))
