"""
kpiwidget: a single KPI value that follows an external row selection.

Example Usage:

    >>> from kpiwidget import KPIWidget, LocalFilterChannel
    >>> channel = LocalFilterChannel()
    >>> widget = KPIWidget(render=print, channel=channel)
    >>> widget.render_value({
    ...     'data': [1, 1, 1, 1],
    ...     'group1_filter': [True, True, False, False],
    ...     'group2_filter': [True, True, True, True],
    ...     'settings': {'kpi': 'sum', 'comparison': 'share', 'suffix': '%', 'crosstalk_group': 'rows'},
    ... })
        50%
    >>> channel.publish('rows', [1, 3])
        50%
"""

from kpiwidget.diagnostics import Diagnostic
from kpiwidget.enums import ComparisonTypeEnum, SelectionStateEnum
from kpiwidget.exceptions import (
    KPIWidgetError,
    MaskLengthMismatchError,
    UnknownComparisonError,
    InvalidPayloadError,
)
from kpiwidget.formatting import FormatOptions, NumberFormatter, format_number
from kpiwidget.settings import Settings
from kpiwidget.payload import WidgetPayload, decode_payload
from kpiwidget.kpis import Aggregations, Aggregator, KPIResult, ValueComparisons, aggregate, resolve
from kpiwidget.selection import SelectionController
from kpiwidget.channel import FilterChannel, LocalFilterChannel, Subscription
from kpiwidget.widget import KPIWidget

__all__ = [
    'Diagnostic',
    'ComparisonTypeEnum',
    'SelectionStateEnum',
    'KPIWidgetError',
    'MaskLengthMismatchError',
    'UnknownComparisonError',
    'InvalidPayloadError',
    'FormatOptions',
    'NumberFormatter',
    'format_number',
    'Settings',
    'WidgetPayload',
    'decode_payload',
    'Aggregations',
    'Aggregator',
    'KPIResult',
    'ValueComparisons',
    'aggregate',
    'resolve',
    'SelectionController',
    'FilterChannel',
    'LocalFilterChannel',
    'Subscription',
    'KPIWidget',
]
