from __future__ import annotations

from enum import Enum

from kpiwidget.exceptions import UnknownComparisonError


class ComparisonTypeEnum(Enum):
    """
    How the two row groups are contrasted in comparison mode.

    NONE: plain KPI over the whole column, group masks are ignored
    RATIO: kpi(group1) / kpi(group2)
    SHARE: kpi(group1) / kpi(group2) * 100
    """

    NONE = "none"
    RATIO = "ratio"
    SHARE = "share"

    @property
    def is_comparison(self) -> bool:
        return self is not ComparisonTypeEnum.NONE

    @classmethod
    def from_setting(cls, value) -> ComparisonTypeEnum:
        """
        Map the raw `comparison` setting onto the enum.

        Falsy values (False, None, '') and 'none' mean no comparison. Any other
        value that is not 'ratio' or 'share' raises UnknownComparisonError.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return cls.NONE
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnknownComparisonError(
            f"Unknown comparison {value!r}; expected one of {[c.value for c in cls]} or a falsy value."
        )


class SelectionStateEnum(Enum):
    """Whether an external row selection currently restricts the baseline."""

    FULL = "full"  # all baseline rows active
    FILTERED = "filtered"  # an explicit index set is active
