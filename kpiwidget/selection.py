"""
Selection-aware KPI controller.

The controller owns the baseline (the full data column and the two group masks
delivered at initialization) and keeps the displayed KPI in sync with an
externally driven row selection:

    initialize(payload)          -> state FULL, KPI over all rows
    on_selection_event([2, 3])   -> state FILTERED, KPI over rows 2 and 3 (1-based)
    on_selection_event(None)     -> state FULL again, KPI over all rows

Each event replaces the active selection wholesale. Filtered rows are gathered
in event order, so repeated identifiers yield repeated rows.
"""

from __future__ import annotations

import math
import re
from dataclasses import replace
from typing import Any, Callable, Iterable, Mapping

import numpy as np
import pandas as pd

from kpiwidget.diagnostics import Diagnostic
from kpiwidget.enums import SelectionStateEnum
from kpiwidget.exceptions import KPIWidgetError
from kpiwidget.formatting import NumberFormatter
from kpiwidget.kpis.aggregator import Aggregator
from kpiwidget.kpis.kpi import KPIResult
from kpiwidget.payload import WidgetPayload, decode_payload
from kpiwidget.settings import Settings
from kpiwidget.utils.logging import get_logger

logger = get_logger(__name__)

RenderSink = Callable[[str], None]

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


class SelectionController:
    """
    Owns the baseline of one widget instance and re-renders on every selection change.

    Args:
        render: Called with the formatted display string after every recomputation

    Example:

        >>> shown = []
        >>> controller = SelectionController(render=shown.append)
        >>> controller.initialize({'data': [10, 20, 30], 'settings': {'kpi': 'sum'}})
        >>> controller.on_selection_event([2, 3])
        >>> controller.on_selection_event(None)
        >>> shown
            ['60', '50', '60']
    """

    def __init__(self, render: RenderSink | None = None):
        self._render = render
        self._baseline: WidgetPayload | None = None
        self._aggregator: Aggregator | None = None
        self._formatter: NumberFormatter | None = None

        self._state = SelectionStateEnum.FULL
        self._active_positions: tuple[int, ...] | None = None
        self._active_data: pd.Series | None = None
        self._display_value = ''
        self._last_result: KPIResult | None = None

    @property
    def is_initialized(self) -> bool:
        return self._baseline is not None

    @property
    def baseline(self) -> WidgetPayload | None:
        return self._baseline

    @property
    def settings(self) -> Settings | None:
        return self._baseline.settings if self._baseline is not None else None

    @property
    def state(self) -> SelectionStateEnum:
        return self._state

    @property
    def active_positions(self) -> tuple[int, ...] | None:
        """0-based baseline positions of the active rows; None while all rows are active."""
        return self._active_positions

    @property
    def active_data(self) -> pd.Series | None:
        return self._active_data

    @property
    def active_keys(self) -> list | None:
        """Row identifiers of the active rows, if the payload carried a key."""
        if self._baseline is None or self._baseline.key is None:
            return None
        key = self._baseline.key
        if self._active_positions is None:
            return key.tolist()
        return [key.iloc[p] for p in self._active_positions if p < len(key)]

    @property
    def display_value(self) -> str:
        return self._display_value

    @property
    def last_result(self) -> KPIResult | None:
        return self._last_result

    def initialize(self, payload: Mapping[str, Any] | WidgetPayload) -> KPIResult:
        """
        Store a new baseline and render the KPI over all of its rows.

        The previous baseline and selection are discarded. If the payload cannot
        be used (invalid settings, mask length mismatch, ...) the controller stays
        uninitialized and an empty string is rendered.

        Args:
            payload: Raw host payload or an already decoded WidgetPayload

        Returns:
            KPIResult of the initial computation
        """
        self._baseline = None
        self._aggregator = None
        self._state = SelectionStateEnum.FULL
        self._active_positions = None
        self._active_data = None

        try:
            decoded = decode_payload(payload)
        except KPIWidgetError as e:
            return self._fail(e)

        diagnostics = list(decoded.diagnostics)
        baseline = decoded.payload
        settings = baseline.settings

        group1 = baseline.group1_filter
        if settings.is_comparison and baseline.data.empty and group1 is not None and len(group1) > 0:
            diagnostic = Diagnostic.warning(
                'empty_comparison_data',
                f'No data provided for comparison mode; defaulting to counts over {len(group1)} rows.'
            )
            logger.warning(diagnostic.message)
            diagnostics.append(diagnostic)
            baseline = replace(baseline, data=pd.Series([1] * len(group1), dtype=object))

        aggregator = Aggregator(settings)
        try:
            result = self._compute(aggregator, baseline.data, baseline.group1_filter, baseline.group2_filter)
        except KPIWidgetError as e:
            return self._fail(e, diagnostics)

        self._baseline = baseline
        self._aggregator = aggregator
        self._formatter = NumberFormatter(settings.format_options)
        self._active_data = baseline.data
        logger.debug(f'Initialized {result.name} over {baseline.n_rows} rows.')
        return self._publish(result.with_diagnostics(*diagnostics))

    def on_selection_event(self, indices: Iterable | None) -> KPIResult | None:
        """
        Apply an external selection and render the KPI over the selected rows.

        Args:
            indices: 1-based row identifiers (ints or numeric strings) of the
                selected rows; None or empty clears the selection

        Returns:
            KPIResult of the recomputation, or None if the controller has no baseline
        """
        if self._baseline is None:
            logger.warning('Selection event received before a successful initialize; ignored.')
            return None

        identifiers = _as_identifier_list(indices)
        if not identifiers:
            return self.clear_selection()

        positions, diagnostics = self._resolve_positions(identifiers)
        baseline = self._baseline
        data = _gather(baseline.data, positions)
        group1 = group2 = None
        if baseline.settings.is_comparison:
            group1 = _gather(baseline.group1_filter, positions)
            group2 = _gather(baseline.group2_filter, positions)

        self._state = SelectionStateEnum.FILTERED
        self._active_positions = tuple(positions)
        self._active_data = data
        return self._update(data, group1, group2, diagnostics)

    def clear_selection(self) -> KPIResult | None:
        """Return to the full baseline."""
        if self._baseline is None:
            return None
        self._state = SelectionStateEnum.FULL
        self._active_positions = None
        self._active_data = self._baseline.data
        return self._update(self._baseline.data, self._baseline.group1_filter, self._baseline.group2_filter)

    def _resolve_positions(self, identifiers: list) -> tuple[list[int], list[Diagnostic]]:
        n_rows = self._baseline.n_rows
        positions = []
        skipped = []
        for identifier in identifiers:
            row = _parse_row_number(identifier)
            if row is None or not 1 <= row <= n_rows:
                skipped.append(identifier)
                continue
            positions.append(row - 1)

        diagnostics = []
        if skipped:
            diagnostic = Diagnostic.warning(
                'index_out_of_range',
                f'Skipped {len(skipped)} selected row identifier(s) outside 1..{n_rows}: {skipped[:10]}'
            )
            logger.warning(diagnostic.message)
            diagnostics.append(diagnostic)
        return positions, diagnostics

    def _update(self, data, group1, group2, diagnostics: list[Diagnostic] = None) -> KPIResult:
        diagnostics = diagnostics or []
        try:
            result = self._compute(self._aggregator, data, group1, group2)
        except KPIWidgetError as e:
            return self._fail(e, diagnostics)
        return self._publish(result.with_diagnostics(*diagnostics))

    @staticmethod
    def _compute(aggregator: Aggregator, data, group1, group2) -> KPIResult:
        return aggregator.aggregate(data, group1, group2)

    def _fail(self, error: KPIWidgetError, diagnostics: list[Diagnostic] = None) -> KPIResult:
        logger.error(f'{type(error).__name__}: {error}')
        diagnostic = Diagnostic.error(_error_code(error), str(error))
        result = KPIResult(value=np.nan, diagnostics=tuple(diagnostics or []) + (diagnostic,))
        self._last_result = result
        self._set_display('')
        return result

    def _publish(self, result: KPIResult) -> KPIResult:
        self._last_result = result
        self._set_display(self._formatter(result.value))
        return result

    def _set_display(self, text: str):
        self._display_value = text
        if self._render is not None:
            self._render(text)


def _as_identifier_list(indices) -> list:
    if indices is None:
        return []
    if isinstance(indices, (str, bytes, int, float, np.integer, np.floating)):
        return [indices]
    return list(indices)


def _parse_row_number(identifier) -> int | None:
    """Parse a row identifier the way an integer prefix parser would: '3' -> 3, '3.9' -> 3, 'x' -> None."""
    if isinstance(identifier, (bool, np.bool_)):
        return None
    if isinstance(identifier, (int, np.integer)):
        return int(identifier)
    if isinstance(identifier, (float, np.floating)):
        return int(identifier) if math.isfinite(identifier) else None
    if isinstance(identifier, bytes):
        identifier = identifier.decode(errors='ignore')
    if isinstance(identifier, str):
        match = _LEADING_INT.match(identifier)
        return int(match.group(1)) if match else None
    return None


def _gather(series: pd.Series | None, positions: list[int]) -> pd.Series | None:
    if series is None:
        return None
    return series.iloc[positions].reset_index(drop=True)


def _error_code(error: KPIWidgetError) -> str:
    name = type(error).__name__.removesuffix('Error')
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()
