"""
KPI reductions and comparison operations.

A KPI reduces one column of values to a single scalar. The column arrives as a
pandas Series of raw values (numbers or numeric strings); reductions that need
numbers coerce the raw values themselves, reductions that count values work on
the raw values directly.

Example:

    >>> s = pd.Series([10, '20', 'n/a'], dtype=object)
    >>> Aggregations.Sum(s)
        30.0
    >>> Aggregations.Mean(s)
        10.0
    >>> resolve('distinctCount').aggregation(s)
        3
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator

import numpy as np
import pandas as pd

from kpiwidget.diagnostics import Diagnostic
from kpiwidget.utils.logging import get_logger

logger = get_logger(__name__)

_LEADING_FLOAT = r'^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)'


@dataclass
class Aggregation:
    """
    Named reduction of a Series to a scalar KPI value.

    Attributes:
        name: Name under which the KPI is requested in the widget settings
        agg: Function that takes a Series and returns a scalar
    """
    name: str
    agg: Callable[[pd.Series], float | int]

    def __call__(self, series: pd.Series | list) -> float | int:
        """Apply the reduction; plain sequences are wrapped into an object Series."""
        return self.agg(_ensure_series_format(series))

    def __str__(self):
        return self.name

    def __hash__(self):
        return hash(self.name)

    def __eq__(self, other) -> bool:
        return isinstance(other, Aggregation) and self.name == other.name


def _ensure_series_format(values: pd.Series | list) -> pd.Series:
    if isinstance(values, pd.Series):
        return values
    return pd.Series(list(values), dtype=object)


def _coerce_to_numeric(series: pd.Series) -> pd.Series:
    """
    Convert raw values to float64; anything unparsable becomes NaN.

    Strings that are not a number as a whole use their leading number, so
    '12abc' gives 12 and '1,5' gives 1. Booleans are not numbers.

    Args:
        series: Series of numbers and/or numeric strings

    Returns:
        float64 Series aligned with the input
    """
    if series.empty:
        return pd.Series([], dtype='float64')
    is_bool = series.map(lambda v: isinstance(v, (bool, np.bool_))).astype(bool)
    numeric = pd.to_numeric(series.where(~is_bool), errors='coerce').astype('float64')

    is_text = series.map(lambda v: isinstance(v, str)).astype(bool)
    unparsed = numeric.isna() & is_text
    if unparsed.any():
        leading = series[unparsed].astype(str).str.extract(_LEADING_FLOAT, expand=False)
        numeric[unparsed] = pd.to_numeric(leading, errors='coerce').astype('float64')
    return numeric


def _sum(series: pd.Series) -> float:
    return float(_coerce_to_numeric(series).fillna(0).sum())


def _mean(series: pd.Series) -> float:
    # The denominator counts unparsable entries too, they contribute 0 to the sum.
    if len(series) == 0:
        return 0.0
    return _sum(series) / len(series)


def _count(series: pd.Series) -> int:
    return int(len(series))


def _distinct_count(series: pd.Series) -> int:
    return int(series.nunique(dropna=False))


def _duplicates(series: pd.Series) -> int:
    if series.empty:
        return 0
    return int((series.value_counts(dropna=False) > 1).sum())


def _min(series: pd.Series) -> float:
    """Minimum of parsable values; NaN when there is none."""
    return float(_coerce_to_numeric(series).min())


def _max(series: pd.Series) -> float:
    """Maximum of parsable values; NaN when there is none."""
    return float(_coerce_to_numeric(series).max())


def _normalize_name(name: str) -> str:
    return name.replace('_', '').replace('-', '').lower()


class _IterableAggregationsMeta(type):
    def __init__(cls, name, bases, namespace):
        super().__init__(name, bases, namespace)
        cls._by_normalized_name = {_normalize_name(a.name): a for a in cls}

    def __iter__(cls) -> Iterator[Aggregation]:
        return (a for name, a in cls.__dict__.items() if isinstance(a, Aggregation))


class Aggregations(metaclass=_IterableAggregationsMeta):
    """
    The enumerated KPI reductions.

    Iterating the class yields every registered Aggregation.

    Example:
        >>> [str(a) for a in Aggregations]
            ['sum', 'mean', 'count', 'distinctCount', 'duplicates', 'min', 'max']
    """

    Sum = Aggregation('sum', _sum)
    Mean = Aggregation('mean', _mean)
    Count = Aggregation('count', _count)
    DistinctCount = Aggregation('distinctCount', _distinct_count)
    Duplicates = Aggregation('duplicates', _duplicates)
    Min = Aggregation('min', _min)
    Max = Aggregation('max', _max)

    @classmethod
    def names(cls) -> list[str]:
        return [a.name for a in cls]

    @classmethod
    def get(cls, name: str) -> Aggregation | None:
        """Lookup ignoring case, '_' and '-'; the registered names stay distinct under that rule."""
        if not isinstance(name, str):
            return None
        return cls._by_normalized_name.get(_normalize_name(name))


FALLBACK_AGGREGATION = Aggregations.Count


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a KPI name: the reduction to use and any fallback diagnostics."""
    aggregation: Aggregation
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def is_fallback(self) -> bool:
        return len(self.diagnostics) > 0


def resolve(name: str) -> Resolution:
    """
    Map a KPI name to its reduction.

    Unknown names fall back to `count` and carry an 'unknown_kpi' warning;
    resolution never raises.

    Args:
        name: KPI name from the widget settings

    Returns:
        Resolution with the aggregation and diagnostics
    """
    aggregation = Aggregations.get(name)
    if aggregation is not None:
        return Resolution(aggregation)

    diagnostic = Diagnostic.warning(
        'unknown_kpi',
        f'Unknown KPI type {name!r}; falling back to {FALLBACK_AGGREGATION}. '
        f'Known types: {Aggregations.names()}.'
    )
    logger.warning(diagnostic.message)
    return Resolution(FALLBACK_AGGREGATION, (diagnostic,))


@dataclass
class OperationOfTwoValues:
    """
    Operation that combines two scalar KPI values.

    Attributes:
        name: Name of the operation as used in the widget settings
        agg: Function that takes (group1 value, group2 value) and returns a scalar
    """
    name: str
    agg: Callable[[float | int, float | int], float | int]

    def __call__(self, group1_value: float | int, group2_value: float | int) -> float | int:
        """Apply operation to two values."""
        return self.agg(group1_value, group2_value)

    def __str__(self):
        return self.name

    def __hash__(self):
        return hash(self.name)

    def __eq__(self, other) -> bool:
        return isinstance(other, OperationOfTwoValues) and self.name == other.name


class ValueComparison(OperationOfTwoValues):
    """Comparison of the group1 KPI against the group2 KPI."""
    pass


def _safe_ratio(numerator: float | int, denominator: float | int) -> float:
    # A zero denominator yields 0, never inf or an exception.
    if denominator == 0:
        return 0
    return numerator / denominator


class ValueComparisons:
    """
    Comparison operations available in comparison mode.

    Both return 0 when the group2 value is 0.

    Example:

        >>> ValueComparisons.Ratio(2, 4)  # 0.5
        >>> ValueComparisons.Share(2, 4)  # 50.0
        >>> ValueComparisons.Share(2, 0)  # 0
    """

    Ratio = ValueComparison('ratio', _safe_ratio)
    Share = ValueComparison('share', lambda g1, g2: _safe_ratio(g1, g2) * 100)

    @classmethod
    def for_name(cls, name: str) -> ValueComparison:
        for comparison in (cls.Ratio, cls.Share):
            if comparison.name == name:
                return comparison
        raise KeyError(f'No value comparison registered for {name!r}')

