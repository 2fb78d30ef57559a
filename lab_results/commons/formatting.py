from typing import Any, Optional

from lab_results.parsers.base import LINE_BREAK_MARKER


def format_date(value: Optional[str]) -> str:
    """HL7 ``YYYYMMDD[HH[MM[SS]]]`` -> ``YYYY-MM-DDTHH:MM:SS``.

    Missing hour/minute/second default to ``00``; empty input gives ``""``.

    >>> format_date("20190709151359")
    '2019-07-09T15:13:59'
    >>> format_date("201907091513")
    '2019-07-09T15:13:00'
    >>> format_date("20190709")
    '2019-07-09T00:00:00'
    """
    if not value:
        return ""
    year = value[0:4]
    month = value[4:6]
    day = value[6:8]
    hour = value[8:10] or "00"
    minute = value[10:12] or "00"
    second = value[12:14] or "00"
    return f"{year}-{month}-{day}T{hour}:{minute}:{second}"


def strip_line_breaks(text: str) -> str:
    return (text or "").replace(LINE_BREAK_MARKER, "")


def _is_empty(value: Any) -> bool:
    if value is None or value == "":
        return True
    if isinstance(value, (dict, list)) and not value:
        return True
    return False


def remove_empty_fields(value: Any) -> Any:
    """Return a pruned copy: drop None, "" and containers left empty after pruning.

    Key order and element order of what survives are untouched, so running it
    twice gives the same result as running it once.
    """
    if isinstance(value, dict):
        out = {}
        for key, item in value.items():
            pruned = remove_empty_fields(item)
            if not _is_empty(pruned):
                out[key] = pruned
        return out
    if isinstance(value, list):
        items = [remove_empty_fields(item) for item in value]
        return [item for item in items if not _is_empty(item)]
    return value
