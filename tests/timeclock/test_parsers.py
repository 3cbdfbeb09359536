from __future__ import annotations

import io
from datetime import datetime

import pandas as pd
import pytest

from src.gestao_system.gestao_system.core.exceptions import ValidationError
from src.gestao_system.gestao_system.timeclock.parsers.factory import ParserFactory, detect_format
from src.gestao_system.gestao_system.timeclock.parsers.txt_parser import AttendLogTxtParser
from src.gestao_system.gestao_system.timeclock.parsers.xlsx_parser import XlsxParser
from src.gestao_system.gestao_system.timeclock.parsers.xml_parser import XmlParser

ATTEND_LOG = (
    "# Device: ZK-01\r\n"
    "3\t1\t9\tOrphan\t1\t0\t2025-01-02 07:00:00\r\n"
    "No\tTMNo\tEnNo\tName\tMode\tDateTime\r\n"
    "1\t1\t7\tJoao\t1\t2025-01-02  08:01:00\r\n"
    "\r\n"
    "2\t1\t7\tJoao\t1\t2025/01/02 17:00\r\n"
    "3\tshort\r\n"
    "4\t1\t\tSemId\t1\t2025-01-02 09:00:00\r\n"
)


def test_txt_parser_finds_header_and_skips_noise():
    punches = AttendLogTxtParser().parse(ATTEND_LOG)

    assert [p.en_no for p in punches] == ["7", "7"]
    first = punches[0]
    assert first.date_time == "2025-01-02 08:01:00"
    assert first.name == "Joao"
    assert first.device_id == "1"
    assert first.mode == "1"
    assert first.raw.startswith("1\t1\t7\tJoao")


def test_txt_parser_accepts_bytes_with_bom():
    data = ("\ufeffEnNo\tName\tDateTime\n5\tAna\t2025-01-03 08:00:00\n").encode("utf-8")

    punches = AttendLogTxtParser().parse(data)

    assert len(punches) == 1
    assert punches[0].en_no == "5"


def test_txt_parser_without_header_returns_nothing():
    assert AttendLogTxtParser().parse("1\t7\t2025-01-02 08:00:00\n") == []


def test_xml_parser_maps_synonyms_and_strips_namespaces():
    xml = (
        '<a:Export xmlns:a="urn:clock">'
        "<a:Record><a:PIN>12</a:PIN><a:Nome>Bia</a:Nome><a:CheckTime>2025-01-05 08:00:00</a:CheckTime>"
        "<a:TerminalID>3</a:TerminalID><a:VerifyMode>face</a:VerifyMode></a:Record>"
        "<a:Record><a:PIN></a:PIN><a:CheckTime>2025-01-05 09:00:00</a:CheckTime></a:Record>"
        "</a:Export>"
    )

    punches = XmlParser().parse(xml)

    assert len(punches) == 1
    p = punches[0]
    assert (p.en_no, p.name, p.date_time, p.device_id, p.mode) == ("12", "Bia", "2025-01-05 08:00:00", "3", "face")


def test_xml_parser_rejects_malformed_content():
    with pytest.raises(ValidationError):
        XmlParser().parse("<logs><log><enno>1</enno></logs>")


def _xlsx_bytes(df: pd.DataFrame) -> bytes:
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False)
    return out.getvalue()


def test_xlsx_parser_reads_first_sheet():
    df = pd.DataFrame(
        {
            "EnNo": [7, None, 8],
            "Name": ["Joao", "Vazio", "Ana"],
            "DateTime": ["2025-01-02 08:00:00", "2025-01-02 09:00:00", datetime(2025, 1, 2, 8, 15)],
            "TMNo": [1, 1, 2],
        }
    )

    punches = XlsxParser().parse(_xlsx_bytes(df))

    assert [p.en_no for p in punches] == ["7", "8"]
    assert punches[0].date_time == "2025-01-02 08:00:00"
    assert isinstance(punches[1].date_time, datetime)
    assert punches[1].device_id == "2"
    assert '"Name": "Joao"' in punches[0].raw


def test_xlsx_parser_rejects_garbage():
    with pytest.raises(ValidationError):
        XlsxParser().parse(b"not a spreadsheet")


@pytest.mark.parametrize(
    "filename,content,expected",
    [
        ("ponto.TXT", None, "txt"),
        ("ponto.xls", None, "xlsx"),
        ("ponto.xlsx", None, "xlsx"),
        ("ponto.xml", None, "xml"),
        (None, "EnNo\tName\tDateTime", "txt"),
        (None, "  <logs><log></log></logs>", "xml"),
        (None, "<not closed", "txt"),
    ],
)
def test_detect_format(filename, content, expected):
    assert detect_format(filename, content) == expected


def test_detect_format_rejects_unknown_extension():
    with pytest.raises(ValidationError) as exc:
        detect_format("ponto.csv")
    assert "TXT, XLSX ou XML" in exc.value.message


def test_factory_builds_parser_for_format():
    factory = ParserFactory()

    assert isinstance(factory.create("txt"), AttendLogTxtParser)
    assert isinstance(factory.for_input("a.xml"), XmlParser)
    assert isinstance(factory.for_input(None, "<a></a>"), XmlParser)
