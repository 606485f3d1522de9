from __future__ import annotations

import pytest

import alphadec as ad
from ad_model import InvalidRangeError


def test_hierarchy_factors():
    assert (ad.PERIODS_PER_YEAR, ad.ARCS_PER_PERIOD, ad.BARS_PER_ARC, ad.BEATS_PER_BAR) == (26, 10, 26, 10)
    assert ad.SCALE == 1_000_000


@pytest.mark.parametrize(
    "year,leap",
    [(2023, False), (2024, True), (1900, False), (2000, True), (2100, False), (2400, True), (4, True), (1, False)],
)
def test_gregorian_leap_rule(year, leap):
    assert ad.is_leap_year(year) is leap
    assert ad.days_in_year(year) == (366 if leap else 365)


def test_unit_sizes_common_year():
    sizes = ad.unit_sizes(2023)
    assert sizes.year_total == 365 * 86_400_000 * 1_000_000
    assert sizes.period == 1_212_923_076_923_076
    assert sizes.arc == 121_292_307_692_307
    assert sizes.bar == 4_665_088_757_396
    assert sizes.beat == 466_508_875_739


def test_unit_sizes_leap_year():
    sizes = ad.unit_sizes(2024)
    assert sizes.year_total == 366 * 86_400_000 * 1_000_000
    assert sizes.period == 1_216_246_153_846_153
    assert sizes.arc == 121_624_615_384_615
    assert sizes.bar == 4_677_869_822_485
    assert sizes.beat == 467_786_982_248


def test_truncated_remainders_are_not_carried():
    # the slack is left to the last unit of each level, a few scaled units only
    common = ad.unit_sizes(2023)
    assert common.year_total - 26 * common.period == 24
    assert common.period - 10 * common.arc == 6
    assert common.arc - 26 * common.bar == 11
    assert common.bar - 10 * common.beat == 6

    leap = ad.unit_sizes(2024)
    assert leap.year_total - 26 * leap.period == 22


def test_scaled_helpers():
    assert ad.to_scaled(7) == 7_000_000
    assert ad.from_scaled(1_999_999) == 1
    assert ad.from_scaled_ceil(0) == 0
    assert ad.from_scaled_ceil(1) == 1
    assert ad.from_scaled_ceil(1_000_000) == 1
    assert ad.from_scaled_ceil(1_000_001) == 2


def test_scaled_values_stay_exact_beyond_64_bits():
    sizes = ad.unit_sizes(9999)
    big = sizes.year_total * 26 * ad.SCALE
    assert big > 2**64
    assert big // (26 * ad.SCALE) == sizes.year_total


# --- Letter codec -------------------------------------------------------------


def test_index_to_letter_bounds():
    assert ad.index_to_letter(0) == "A"
    assert ad.index_to_letter(25) == "Z"
    with pytest.raises(InvalidRangeError):
        ad.index_to_letter(26)
    with pytest.raises(InvalidRangeError):
        ad.index_to_letter(-1)
    with pytest.raises(InvalidRangeError):
        ad.index_to_letter(True)


def test_letter_codec_is_a_bijection_on_a_to_z():
    letters = [ad.index_to_letter(i) for i in range(26)]
    assert "".join(letters) == "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    assert [ad.letter_to_index(c) for c in letters] == list(range(26))


@pytest.mark.parametrize("bad", ["a", "z", "AA", "", "1", "_", "É", None])
def test_letter_to_index_rejects_non_letters(bad):
    with pytest.raises(InvalidRangeError):
        ad.letter_to_index(bad)


def test_index_to_digit_bounds():
    assert ad.index_to_digit(0) == "0"
    assert ad.index_to_digit(9) == "9"
    with pytest.raises(InvalidRangeError):
        ad.index_to_digit(10)
    with pytest.raises(InvalidRangeError):
        ad.index_to_digit(-1)


def test_range_errors_are_value_errors():
    with pytest.raises(ValueError, match="must be 0-25"):
        ad.index_to_letter(99)
