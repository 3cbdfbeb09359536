from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.exceptions import ValidationError

_NON_DIGITS = re.compile(r"\D+")


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} é obrigatório")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} deve ter no mínimo {min_len} caracteres")
    return value


def only_digits(value: Any) -> str:
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


def is_numeric_id(value: Any) -> bool:
    return bool(value) and str(value).isdigit()


def parse_money(value: Any, field_name: str) -> float:
    """Accept numbers and strings with comma or dot as decimal separator."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValidationError(f"{field_name} inválido")
        return float(value)
    text = require_non_empty(value, field_name)
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        number = Decimal(text)
    except InvalidOperation as exc:
        raise ValidationError(f"{field_name} inválido") from exc
    if not number.is_finite():
        raise ValidationError(f"{field_name} inválido")
    return float(number)


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def s(value: Any) -> str:
    """String-or-empty, trimmed."""
    if value is None:
        return ""
    return str(value).strip()
