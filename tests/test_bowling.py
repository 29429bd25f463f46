"""
Bowling aggregation
===================
Overs summed as balls, undefined ratios as None, best figures.
"""
import pytest

from club_stats.bowling import aggregate_bowling
from club_stats.errors import InvalidArgument
from club_stats.models import BestFigures

from conftest import bowl


def test_best_figures_fewer_runs_breaks_wicket_tie():
    rows = [bowl(1, 9, "4.0", 40, 3), bowl(2, 9, "4.0", 50, 5), bowl(3, 9, "4.0", 20, 5)]
    s = aggregate_bowling(rows, 9)
    assert s.best_figures == BestFigures(5, 20)
    assert s.best_figures.display() == "5/20"
    assert s.five_wicket_hauls == 2


def test_half_overs_add_up_in_balls():
    rows = [bowl(1, 9, 0.5, 4, 0), bowl(2, 9, 0.5, 6, 1)]
    s = aggregate_bowling(rows, 9)
    assert s.total_balls == 10
    assert s.overs_display == "1.4"


def test_ratios():
    rows = [bowl(1, 9, "4.0", 30, 2, maidens=1), bowl(2, 9, "3.3", 24, 1)]
    s = aggregate_bowling(rows, 9)
    assert s.innings == 2
    assert s.total_balls == 45
    assert s.overs_display == "7.3"
    assert s.runs_conceded == 54
    assert s.wickets == 3
    assert s.maidens == 1
    assert s.average == pytest.approx(18.0)
    assert s.economy == pytest.approx(54 / 7.5)
    assert s.strike_rate == pytest.approx(15.0)


def test_wicketless_ratios_are_undefined():
    s = aggregate_bowling([bowl(1, 9, "4.0", 31, 0)], 9)
    assert s.average is None
    assert s.strike_rate is None
    assert s.economy == pytest.approx(7.75)
    assert s.best_figures.display() == "0/31"


def test_no_rows_gives_empty_summary():
    s = aggregate_bowling([], 9)
    assert s.innings == 0
    assert s.total_balls == 0
    assert s.overs_display == "0.0"
    assert s.average is None
    assert s.economy is None
    assert s.strike_rate is None
    assert s.best_figures is None


def test_hauls_and_extras():
    rows = [
        bowl(1, 9, "4.0", 22, 4, wides=3),
        bowl(2, 9, "4.0", 18, 6, no_balls=1),
        bowl(3, 9, "4.0", 40, 4, wides=1, no_balls=2),
    ]
    s = aggregate_bowling(rows, 9)
    assert s.four_wicket_hauls == 2
    assert s.five_wicket_hauls == 1
    assert s.wides == 4
    assert s.no_balls == 3
    assert s.matches == 3


def test_malformed_overs_fails_whole_aggregation():
    rows = [bowl(1, 9, "4.0", 20, 1), bowl(2, 9, "3.6", 20, 1)]
    with pytest.raises(InvalidArgument, match="balls-in-over must be 0-5"):
        aggregate_bowling(rows, 9)


@pytest.mark.parametrize(
    "row",
    [
        bowl(1, 9, "4.0", -1, 0),
        bowl(1, 9, "4.0", 10, -1),
        bowl(1, 9, "4.0", 10, 11),
        bowl(1, 9, "4.0", 10, 0, maidens=-2),
        bowl(1, 9, "4.0", 10, 0, wides=-1),
        bowl(1, 9, "4.0", "abc", 0),
        bowl(1, 9, "4.0", 10, None),
        bowl(1, 9, "4.0", 10, 0, no_balls="two"),
        bowl(1, 9, "-1.0", 10, 0),
    ],
)
def test_invalid_rows_rejected(row):
    with pytest.raises(InvalidArgument):
        aggregate_bowling([row], 9)
