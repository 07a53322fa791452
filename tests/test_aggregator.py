import pandas as pd
import pytest

from diagnostic_helpers import codes
from kpiwidget.enums import ComparisonTypeEnum
from kpiwidget.exceptions import MaskLengthMismatchError
from kpiwidget.formatting import format_number
from kpiwidget.kpis.aggregator import Aggregator, aggregate
from kpiwidget.settings import Settings

RATIO = ComparisonTypeEnum.RATIO
SHARE = ComparisonTypeEnum.SHARE


class TestPlainMode:

    def test_kpi_over_all_rows(self):
        result = aggregate([1, 2, 3], None, None, Settings(kpi='sum'))
        assert result.value == 6.0
        assert result.n_rows == 3
        assert result.comparison is ComparisonTypeEnum.NONE
        assert result.group1_value is None

    def test_masks_are_ignored(self):
        result = aggregate([1, 2, 3], [True], [False, False], Settings(kpi='count'))
        assert result.value == 3

    def test_accepts_series_with_any_index(self):
        data = pd.Series([4, 6], index=['a', 'b'], dtype=object)
        assert aggregate(data, None, None, Settings(kpi='mean')).value == 5.0

    def test_unknown_kpi_diagnostic_is_carried(self):
        result = aggregate([1, 2], None, None, Settings(kpi='median'))
        assert result.value == 2
        assert codes(result.diagnostics) == ['unknown_kpi']


class TestComparisonMode:

    def test_share_scenario(self):
        result = aggregate(
            [1, 1, 1, 1],
            [True, True, False, False],
            [True, True, True, True],
            Settings(kpi='sum', comparison=SHARE),
        )
        assert result.group1_value == 2
        assert result.group2_value == 4
        assert result.value == 50
        assert format_number(result.value, suffix='%') == '50%'

    def test_ratio(self):
        result = aggregate([10, 20, 30], [False, False, True], [True, True, False], Settings(kpi='sum', comparison=RATIO))
        assert result.value == pytest.approx(1.0)

    def test_groups_may_overlap(self):
        result = aggregate([1, 2, 3], [True, True, True], [True, False, False], Settings(kpi='sum', comparison=RATIO))
        assert result.value == 6.0

    def test_rows_in_neither_group_are_ignored(self):
        result = aggregate([5, 100, 5], [True, False, False], [False, False, True], Settings(kpi='sum', comparison=RATIO))
        assert result.value == 1.0

    @pytest.mark.parametrize('comparison', [RATIO, SHARE])
    def test_empty_input_yields_zero(self, comparison):
        result = aggregate([], [], [], Settings(kpi='sum', comparison=comparison))
        assert result.value == 0
        assert result.is_finite

    def test_zero_denominator_yields_zero_without_diagnostic(self):
        result = aggregate([1, 2], [True, True], [False, False], Settings(kpi='sum', comparison=SHARE))
        assert result.value == 0
        assert result.diagnostics == ()

    def test_count_kpi_in_comparison(self):
        result = aggregate(['a', 'b', 'c'], [True, False, True], [True, True, True], Settings(kpi='count', comparison=SHARE))
        assert result.value == pytest.approx(200 / 3)

    def test_mask_length_mismatch_raises(self):
        with pytest.raises(MaskLengthMismatchError) as e:
            aggregate([1, 2, 3], [True, False], [True, True, True], Settings(kpi='sum', comparison=RATIO))
        assert e.value.mask_name == 'group1_filter'
        assert e.value.mask_length == 2
        assert e.value.data_length == 3

    def test_missing_mask_raises(self):
        with pytest.raises(MaskLengthMismatchError):
            aggregate([1, 2, 3], [True, True, True], None, Settings(kpi='sum', comparison=RATIO))

    def test_missing_masks_on_empty_data_are_fine(self):
        assert aggregate([], None, None, Settings(kpi='sum', comparison=RATIO)).value == 0

    def test_aggregator_exposes_resolved_kpi(self):
        assert Aggregator(Settings(kpi='max')).aggregation.name == 'max'

    def test_result_name(self):
        result = aggregate([1], [True], [True], Settings(kpi='mean', comparison=SHARE))
        assert result.name == 'mean share'
