from __future__ import annotations

from dataclasses import dataclass, field, replace

from kpiwidget.diagnostics import Diagnostic
from kpiwidget.enums import ComparisonTypeEnum
from kpiwidget.kpis.aggregations import Aggregation
from kpiwidget.utils.numbers import is_finite_number


@dataclass(frozen=True)
class KPIResult:
    """
    Single computed KPI value with the context it was computed in.

    Attributes:
        value: The computed scalar (NaN when the KPI is undefined, e.g. min of nothing)
        aggregation: Reduction that produced the value (after fallback)
        comparison: Comparison mode used
        group1_value: KPI of group 1 (comparison mode only)
        group2_value: KPI of group 2 (comparison mode only)
        n_rows: Number of rows the KPI was computed over
        diagnostics: Non-fatal events raised while computing
    """

    value: float | int
    aggregation: Aggregation | None = None
    comparison: ComparisonTypeEnum = ComparisonTypeEnum.NONE
    group1_value: float | int | None = None
    group2_value: float | int | None = None
    n_rows: int = 0
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def is_finite(self) -> bool:
        return is_finite_number(self.value)

    @property
    def name(self) -> str:
        """
        Human-readable name, e.g. 'sum' or 'sum share'.
        """
        parts = [str(self.aggregation) if self.aggregation else 'undefined']
        if self.comparison.is_comparison:
            parts.append(self.comparison.value)
        return ' '.join(parts)

    def with_diagnostics(self, *diagnostics: Diagnostic) -> KPIResult:
        return replace(self, diagnostics=self.diagnostics + tuple(diagnostics))

    def __repr__(self) -> str:
        return f"KPIResult(name='{self.name}', value={self.value}, n_rows={self.n_rows})"
