from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Context, Decimal, ROUND_HALF_UP

import numpy as np

from kpiwidget.utils.numbers import is_finite_number


@dataclass(frozen=True)
class FormatOptions:
    """
    Display options for a KPI value.

    Attributes:
        prefix: Text placed before the number (e.g. '€ ')
        suffix: Text placed after the number (e.g. '%')
        big_mark: Thousands separator; None or an empty string means the
            default single space
        decimals: Number of fractional digits after rounding
    """
    prefix: str = ''
    suffix: str = ''
    big_mark: str | None = ' '
    decimals: int = 0

    @property
    def thousands_separator(self) -> str:
        return self.big_mark or ' '


class NumberFormatter:
    """
    Renders numbers as display strings.

    Example:

        >>> NumberFormatter(FormatOptions(big_mark=',', suffix=' units'))(1234567)
            '1,234,567 units'
        >>> NumberFormatter(FormatOptions(decimals=2))(float('nan'))
            ''
    """

    def __init__(self, options: FormatOptions = None):
        self.options = options or FormatOptions()

    def __call__(self, value) -> str:
        return format_number(value, self.options)


def format_number(value, options: FormatOptions = None, **overrides) -> str:
    """
    Format a KPI value with rounding, digit grouping, prefix and suffix.

    Non-numeric, NaN and infinite values return an empty string. Rounding is
    half away from zero on the exact binary value of the float.

    Args:
        value: Number to format
        options: Formatting options; defaults to FormatOptions()
        **overrides: Individual option fields overriding `options`

    Returns:
        Display string, e.g. '€ 1 234.50'
    """
    options = options or FormatOptions()
    if overrides:
        options = replace(options, **overrides)

    if not is_finite_number(value):
        return ''

    decimals = max(int(options.decimals or 0), 0)
    # Integers convert exactly, including those beyond the float range.
    exact = Decimal(int(value)) if isinstance(value, (int, np.integer)) else Decimal(float(value))
    # Large values have hundreds of integer digits; the default 28-digit context would reject them.
    context = Context(prec=len(exact.as_tuple().digits) + decimals + 2)
    rounded = exact.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP, context=context)

    sign_str = '-' if rounded.is_signed() and rounded != 0 else ''
    value_str = f'{rounded.copy_abs():,.{decimals}f}'
    value_str = value_str.replace(',', options.thousands_separator)

    return f'{options.prefix or ""}{sign_str}{value_str}{options.suffix or ""}'
