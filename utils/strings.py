"""String and value coercion utilities for insight records.

The raw dataset mixes empty strings, numeric strings and real numbers in the
score and year columns.  Everything that reaches the store or the dashboard
goes through these helpers so both paths agree on what "missing" means.
"""

import math


def to_number_or_null(val) -> float | None:
    """Coerce a raw value to a float, or None when it is missing/non-numeric.

    Handles:
    - None, empty or whitespace-only strings -> None
    - bool -> None (JSON true/false is not a score)
    - int/float -> float (NaN and infinities -> None)
    - numeric strings ("7", " 2.5 ") -> float

    Examples:
        to_number_or_null("6") -> 6.0
        to_number_or_null("") -> None
        to_number_or_null("n/a") -> None
    """
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        num = float(val)
    else:
        s = str(val).strip()
        if not s:
            return None
        try:
            num = float(s)
        except ValueError:
            return None
    if math.isnan(num) or math.isinf(num):
        return None
    return num


def to_int_or_null(val) -> int | None:
    """Coerce a raw limit/skip value to an int, or None.

    Non-integral numbers are truncated toward zero.
    """
    num = to_number_or_null(val)
    if num is None:
        return None
    return int(num)


def to_year_or_null(val) -> int | float | None:
    """Coerce a raw year value, or None.

    Integral values become ``int``; a non-integral value keeps its float so
    the stored year is never silently rounded.

    Examples:
        to_year_or_null("2016") -> 2016
        to_year_or_null(2016.0) -> 2016
        to_year_or_null("2016.7") -> 2016.7
    """
    num = to_number_or_null(val)
    if num is None:
        return None
    return int(num) if num.is_integer() else num


def to_text(val) -> str:
    """Coerce a raw value to a string; None/missing become ``""``."""
    if val is None:
        return ""
    return str(val)


def fold_text(val) -> str:
    """Case-fold a value for case-insensitive comparison.

    Used by the in-memory filter and registered as the ``py_casefold`` SQL
    function, so server and client searches fold text identically.

    Example:
        fold_text("Élan") -> "élan"
    """
    return to_text(val).casefold()
