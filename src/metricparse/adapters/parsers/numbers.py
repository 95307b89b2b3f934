"""Strict number conversion shared by the text sub-parsers.

Python's int() and float() accept digit separators (1_000) that metric
payloads never use; such tokens are treated as text instead.
"""


def to_int(raw: str) -> int:
    """Convert a decimal integer literal.

    Raises:
        ValueError: If raw is not a plain integer literal.
    """
    if "_" in raw:
        raise ValueError(f"invalid integer literal {raw!r}")
    return int(raw)


def to_float(raw: str) -> float:
    """Convert a float literal.

    Raises:
        ValueError: If raw is not a plain float literal.
    """
    if "_" in raw:
        raise ValueError(f"invalid float literal {raw!r}")
    return float(raw)
