import numpy as np
import pytest

from kpiwidget.formatting import FormatOptions, NumberFormatter, format_number


class TestFormatNumber:

    def test_zero_with_decimals(self):
        assert format_number(0, decimals=2) == '0.00'

    def test_grouping_with_custom_mark(self):
        assert format_number(1234567, big_mark=',', decimals=0) == '1,234,567'

    def test_default_mark_is_a_space(self):
        assert format_number(1234567) == '1 234 567'
        assert format_number(1234567, FormatOptions(big_mark=None)) == '1 234 567'

    def test_empty_mark_falls_back_to_a_space(self):
        assert format_number(1234567, big_mark='') == '1 234 567'
        assert FormatOptions(big_mark='').thousands_separator == ' '

    def test_fraction_is_never_grouped(self):
        assert format_number(1234567.891, big_mark=',', decimals=2) == '1,234,567.89'
        assert format_number(1.23456, decimals=5) == '1.23456'

    def test_short_numbers_are_not_grouped(self):
        assert format_number(999, big_mark=',') == '999'
        assert format_number(1000, big_mark=',') == '1,000'

    def test_negative_numbers(self):
        assert format_number(-1234567.5, big_mark=',', decimals=1) == '-1,234,567.5'

    def test_prefix_and_suffix(self):
        assert format_number(1500, prefix='€', suffix=' total', big_mark='.') == '€1.500 total'
        assert format_number(50.0, suffix='%') == '50%'

    @pytest.mark.parametrize('value, decimals, expected', [
        (2.5, 0, '3'),
        (-2.5, 0, '-3'),
        (0.125, 2, '0.13'),
        (1.005, 2, '1.00'),  # 1.005 is stored as 1.00499999...
        (66.6666, 0, '67'),
        (-0.4, 0, '0'),
    ])
    def test_rounding_is_half_away_from_zero_on_exact_value(self, value, decimals, expected):
        assert format_number(value, decimals=decimals) == expected

    def test_negative_decimals_are_treated_as_zero(self):
        assert format_number(12.7, decimals=-2) == '13'

    @pytest.mark.parametrize('value', [float('nan'), float('inf'), -np.inf, None, '12', True, [1]])
    def test_non_finite_or_non_numeric_gives_empty_string(self, value):
        assert format_number(value, prefix='$', suffix='%') == ''

    def test_numpy_scalars(self):
        assert format_number(np.float64(1234.5), decimals=1) == '1 234.5'
        assert format_number(np.int64(42)) == '42'

    def test_very_large_values_do_not_fail(self):
        assert format_number(1e30) == '1 000 000 000 000 000 019 884 624 838 656'
        assert format_number(1.7e308, decimals=2).endswith('.00')

    def test_integers_beyond_float_range_are_formatted_exactly(self):
        assert format_number(10 ** 400) == '10' + ' 000' * 133
        assert format_number(-(10 ** 400), big_mark=',', decimals=2) == '-10' + ',000' * 133 + '.00'
        assert format_number(10 ** 20 + 1) == '100 000 000 000 000 000 001'


class TestNumberFormatter:

    def test_uses_its_options(self):
        formatter = NumberFormatter(FormatOptions(prefix='~', decimals=1))
        assert formatter(12.34) == '~12.3'

    def test_defaults(self):
        assert NumberFormatter()(1234) == '1 234'
