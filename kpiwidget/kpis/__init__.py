"""
KPI computation for the widget.

Core Components:
    - Aggregation / Aggregations: the enumerated KPI reductions and resolve()
    - ValueComparison / ValueComparisons: ratio and share of two group KPIs
    - Aggregator: applies a KPI to a column or to two mask-partitioned groups
    - KPIResult: computed value with diagnostics

Workflow:

    Settings.kpi --resolve()--> Aggregation
        ↓
    Aggregator (plain or comparison mode)
        ↓
    KPIResult (value + diagnostics)
"""

from kpiwidget.kpis.aggregations import (
    Aggregation,
    Aggregations,
    Resolution,
    resolve,
    ValueComparison,
    ValueComparisons,
)
from kpiwidget.kpis.kpi import KPIResult
from kpiwidget.kpis.aggregator import Aggregator, aggregate

__all__ = [
    'Aggregation',
    'Aggregations',
    'Resolution',
    'resolve',
    'ValueComparison',
    'ValueComparisons',
    'KPIResult',
    'Aggregator',
    'aggregate',
]
