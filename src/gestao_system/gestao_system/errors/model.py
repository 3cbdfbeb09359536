from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from ..core.enums import Severity

_STACK_PATTERNS = (
    re.compile(r"at\s+.*?\s+\((.+?):(\d+):(\d+)\)"),
    re.compile(r"at\s+(.+?):(\d+):(\d+)"),
    re.compile(r"(.+?):(\d+):(\d+)"),
)

_CRITICAL_HINTS = ("cannot read", "is not defined", "maximum call stack", "out of memory")
_ERROR_HINTS = ("failed to fetch", "network error", "unauthorized")

# Ordered: first match wins.
_CATEGORY_HINTS = (
    ("null_reference", ("undefined", "null")),
    ("network", ("network", "fetch", "api")),
    ("syntax", ("syntax", "unexpected token")),
    ("type_error", ("type", "is not a function")),
    ("import_error", ("import", "module")),
    ("react_error", ("render", "react")),
)


@dataclass(frozen=True)
class ErrorLocation:
    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    component: Optional[str] = None

    def to_dict(self) -> dict:
        return {"file": self.file, "line": self.line, "column": self.column, "component": self.component}


def extract_location(stack: Optional[str]) -> ErrorLocation:
    """First ``file:line:col`` found in a stack trace."""
    if not stack:
        return ErrorLocation()

    for pattern in _STACK_PATTERNS:
        match = pattern.search(stack)
        if match:
            file = match.group(1).strip()
            base = file.rsplit("/", 1)[-1]
            component = re.sub(r"\.\w+$", "", base) or None
            return ErrorLocation(file=file, line=int(match.group(2)), column=int(match.group(3)), component=component)
    return ErrorLocation()


def categorize(message: str, source: Optional[str] = None) -> str:
    lower = (message or "").lower()
    for category, hints in _CATEGORY_HINTS:
        if any(h in lower for h in hints):
            return category
    if source == "errorboundary":
        return "component_crash"
    return "unknown"


def fingerprint(message: str, file: Optional[str] = None, component: Optional[str] = None) -> str:
    normalized = re.sub(r"\d+", "N", message or "")
    normalized = re.sub(r"'[^']*'", "'X'", normalized)
    normalized = re.sub(r'"[^"]*"', '"X"', normalized)[:200]
    parts = [p for p in (normalized, file or "", component or "") if p]
    return "|".join(parts)[:500]


def determine_severity(message: str, default: str = Severity.ERROR.value) -> str:
    lower = (message or "").lower()
    if any(h in lower for h in _CRITICAL_HINTS):
        return Severity.CRITICAL.value
    if any(h in lower for h in _ERROR_HINTS):
        return Severity.ERROR.value
    return default or Severity.ERROR.value
