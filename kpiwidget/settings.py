from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from kpiwidget.enums import ComparisonTypeEnum
from kpiwidget.formatting import FormatOptions


@dataclass(frozen=True)
class Settings:
    """
    Immutable widget configuration for one render cycle.

    Attributes:
        kpi: Name of the KPI reduction (see Aggregations.names())
        comparison: Comparison mode between the two row groups
        format_options: Display options for the computed value
        crosstalk_group: Name of the filter channel to follow, if any
    """

    kpi: str | None = 'count'
    comparison: ComparisonTypeEnum = ComparisonTypeEnum.NONE
    format_options: FormatOptions = field(default_factory=FormatOptions)
    crosstalk_group: str | None = None

    @property
    def is_comparison(self) -> bool:
        return self.comparison.is_comparison

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Settings:
        """
        Build settings from the raw `settings` mapping of a widget payload.

        Missing formatting fields take the FormatOptions defaults. An unknown
        truthy `comparison` raises UnknownComparisonError.

        Args:
            raw: Mapping with keys kpi, comparison, prefix, suffix, big_mark,
                decimals, crosstalk_group (all optional)

        Returns:
            Settings instance
        """
        raw = raw or {}
        format_options = FormatOptions(
            prefix=_as_text(raw.get('prefix')),
            suffix=_as_text(raw.get('suffix')),
            big_mark=None if raw.get('big_mark') is None else str(raw.get('big_mark')),
            decimals=_as_int(raw.get('decimals'), default=0),
        )
        crosstalk_group = raw.get('crosstalk_group')
        return cls(
            kpi=raw.get('kpi'),
            comparison=ComparisonTypeEnum.from_setting(raw.get('comparison')),
            format_options=format_options,
            crosstalk_group=str(crosstalk_group) if crosstalk_group else None,
        )


def _as_text(value) -> str:
    if value is None:
        return ''
    return str(value)


def _as_int(value, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
