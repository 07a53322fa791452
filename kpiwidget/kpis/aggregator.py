from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from kpiwidget.exceptions import MaskLengthMismatchError
from kpiwidget.kpis.aggregations import ValueComparisons, resolve
from kpiwidget.kpis.kpi import KPIResult
from kpiwidget.settings import Settings


class Aggregator:
    """
    Applies the configured KPI to a data column, or to two row groups of it.

    Without comparison the KPI is computed over all rows and the masks are
    ignored. In comparison mode the rows are partitioned with the two boolean
    masks (independently: a row may be in both, one or neither group) and the
    group KPIs are combined with the configured ValueComparison.

    Example:

        >>> settings = Settings(kpi='sum', comparison=ComparisonTypeEnum.SHARE)
        >>> Aggregator(settings).aggregate([1, 1, 1, 1], [True, True, False, False], [True] * 4).value
            50.0
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._resolution = resolve(settings.kpi)

    @property
    def aggregation(self):
        return self._resolution.aggregation

    def aggregate(
            self,
            data: pd.Series | Sequence,
            mask1: pd.Series | Sequence | None = None,
            mask2: pd.Series | Sequence | None = None,
    ) -> KPIResult:
        """
        Compute the KPI result for the given rows.

        Args:
            data: Raw values, one per row
            mask1: Group 1 membership per row (comparison mode only)
            mask2: Group 2 membership per row (comparison mode only)

        Returns:
            KPIResult carrying the value and the KPI resolution diagnostics

        Raises:
            MaskLengthMismatchError: In comparison mode, if a mask is missing or
                its length differs from the data length
        """
        data = _as_series(data)
        kpi = self._resolution.aggregation

        if not self.settings.is_comparison:
            return KPIResult(
                value=kpi(data),
                aggregation=kpi,
                n_rows=len(data),
                diagnostics=self._resolution.diagnostics,
            )

        group1 = data[_as_mask(mask1, 'group1_filter', len(data))]
        group2 = data[_as_mask(mask2, 'group2_filter', len(data))]
        group1_value = kpi(group1)
        group2_value = kpi(group2)
        comparison = ValueComparisons.for_name(self.settings.comparison.value)

        return KPIResult(
            value=comparison(group1_value, group2_value),
            aggregation=kpi,
            comparison=self.settings.comparison,
            group1_value=group1_value,
            group2_value=group2_value,
            n_rows=len(data),
            diagnostics=self._resolution.diagnostics,
        )


def aggregate(
        data: pd.Series | Sequence,
        mask1: pd.Series | Sequence | None,
        mask2: pd.Series | Sequence | None,
        settings: Settings,
) -> KPIResult:
    """Functional shortcut for Aggregator(settings).aggregate(data, mask1, mask2)."""
    return Aggregator(settings).aggregate(data, mask1, mask2)


def _as_series(data: pd.Series | Sequence | None) -> pd.Series:
    if data is None:
        return pd.Series([], dtype=object)
    if isinstance(data, pd.Series):
        return data.reset_index(drop=True)
    return pd.Series(list(data), dtype=object)


def _as_mask(mask: pd.Series | Sequence | None, name: str, n_rows: int) -> np.ndarray:
    if mask is None:
        if n_rows == 0:
            return np.zeros(0, dtype=bool)
        raise MaskLengthMismatchError(name, None, n_rows)
    values = np.asarray(mask.to_numpy() if isinstance(mask, pd.Series) else list(mask), dtype=bool)
    if len(values) != n_rows:
        raise MaskLengthMismatchError(name, len(values), n_rows)
    return values
