"""Product code grammar: `MODEL '-' COLOR SIZE`.

The first dash separates the model from the tail. The size is the longest
known size token the tail ends with (case-insensitive), so `A-REDXXL` is
`XXL` and never `XL`. Whatever precedes the size is the color.

Known limitation: there is no escaping in the grammar. A color that really
ends in a size token (for example a color literally named `...XL` followed by
another size) cannot be told apart from a genuine size suffix; the
longest-match rule is applied as-is.
"""

from __future__ import annotations

from .models import SIZE_MATCH_ORDER, ParseFailure, ProductCode, Size


def match_size_suffix(tail: str) -> Size | None:
    """Return the size token `tail` ends with, or None.

    Tokens are tried longest-first so that `XL` is never read as `L`.
    """

    upper_tail = tail.upper()
    for size in SIZE_MATCH_ORDER:
        if upper_tail.endswith(size):
            return size
    return None


def parse_code(raw: str | None) -> ProductCode | ParseFailure:
    """Parse one product code into model, color and size."""

    code = "" if raw is None else str(raw).strip()
    if not code:
        return ParseFailure(raw=code, reason="empty")

    dash_index = code.find("-")
    if dash_index < 1:
        return ParseFailure(raw=code, reason="missing-dash")

    model = code[:dash_index].strip()
    tail = code[dash_index + 1 :].strip()
    if not model or not tail:
        return ParseFailure(raw=code, reason="bad-format")

    size = match_size_suffix(tail)
    if size is None:
        return ParseFailure(raw=code, reason="unknown-size")

    color = tail[: len(tail) - len(size)].strip()
    if not color:
        return ParseFailure(raw=code, reason="missing-color")

    return ProductCode(model=model, color=color, size=size, raw=code)
