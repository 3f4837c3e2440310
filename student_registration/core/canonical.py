from __future__ import annotations

import re
from typing import Final


# Exactly four ASCII digits (str.isdigit would also accept other unicode digits).
_POSTAL_CODE: Final[re.Pattern[str]] = re.compile(r"[0-9]{4}")


def canonical_text(text: object) -> str:
    """
    Canonical text for free-text fields (names, course, address lines).

    - None becomes ""
    - Leading/trailing whitespace is trimmed
    - Inner whitespace is kept as typed
    """
    if text is None:
        return ""
    return str(text).strip()


def is_blank(text: object) -> bool:
    return canonical_text(text) == ""


def is_postal_code_format_ok(postal_code: object) -> bool:
    """
    Postal code must be exactly 4 decimal digits.
    The raw value is checked, so surrounding spaces make it malformed.
    """
    if postal_code is None:
        return False
    return _POSTAL_CODE.fullmatch(str(postal_code)) is not None


def truncate(text: object, max_length: int | None) -> str:
    """Cap input at max_length characters, like QLineEdit.setMaxLength."""
    s = "" if text is None else str(text)
    if max_length is None:
        return s
    return s[:max_length]
