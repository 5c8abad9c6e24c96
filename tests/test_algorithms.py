"""
Unit tests for tiling algorithms.
"""

import pytest

from autotile.algorithms import (
    BSPAlgorithm,
    ColumnsAlgorithm,
    FibonacciAlgorithm,
    MasterStackAlgorithm,
    MonocleAlgorithm,
    RowsAlgorithm,
    ThreeColumnAlgorithm,
    TilingAlgorithm,
    TilingParams,
)
from autotile.algorithms.algorithm_base import solve_two_widths
from autotile.geometry import Rect, Size

ALL_ALGORITHMS = [
    MasterStackAlgorithm,
    ColumnsAlgorithm,
    RowsAlgorithm,
    BSPAlgorithm,
    FibonacciAlgorithm,
    MonocleAlgorithm,
    ThreeColumnAlgorithm,
]


def zones_for(algorithm, state, screen, inner_gap=0, outer_gap=0, min_sizes=None):
    return algorithm.calculate_zones(
        TilingParams(
            window_count=state.tiled_window_count(),
            screen=screen,
            state=state,
            inner_gap=inner_gap,
            outer_gap=outer_gap,
            min_sizes=min_sizes or [],
        )
    )


@pytest.mark.unit
class TestDistributionHelpers:
    """Test the shared space-distribution helpers."""

    def test_distribute_evenly_remainder_goes_first(self):
        """Test leftover pixels go to the first parts."""
        assert TilingAlgorithm.distribute_evenly(100, 3) == [34, 33, 33]

    def test_distribute_evenly_empty(self):
        """Test zero parts gives an empty list."""
        assert TilingAlgorithm.distribute_evenly(100, 0) == []

    def test_distribute_with_gaps(self):
        """Test gaps are subtracted before distributing."""
        assert TilingAlgorithm.distribute_with_gaps(100, 3, 10) == [27, 27, 26]

    def test_distribute_with_gaps_no_room(self):
        """Test every part gets 1px when gaps eat all space."""
        assert TilingAlgorithm.distribute_with_gaps(10, 5, 5) == [1, 1, 1, 1, 1]

    def test_distribute_with_min_sizes_surplus(self):
        """Test parts get their minimum plus an even share of the rest."""
        assert TilingAlgorithm.distribute_with_min_sizes(1000, 2, 0, [700, 0]) == [850, 150]

    def test_distribute_with_min_sizes_overconstrained(self):
        """Test impossible minimums share the space proportionally."""
        sizes = TilingAlgorithm.distribute_with_min_sizes(1000, 2, 0, [800, 600])

        assert sizes == [572, 428]
        assert sum(sizes) == 1000

    def test_inner_rect_collapses_to_center(self):
        """Test an oversized outer gap leaves a 1px centered strip."""
        assert TilingAlgorithm.inner_rect(Rect(0, 0, 100, 100), 60) == Rect(49, 49, 1, 1)

    def test_solve_two_widths_honors_minimum(self):
        """Test the second column grows to its minimum."""
        assert solve_two_widths(1000, 0.6, 0, 500) == (500, 500)

    def test_solve_two_widths_overconstrained(self):
        """Test impossible minimums split proportionally."""
        assert solve_two_widths(1000, 0.5, 800, 600) == (571, 429)

    def test_solve_two_widths_never_zero(self):
        """Test tiny or negative content still gives two 1px columns."""
        assert solve_two_widths(2, 0.1, 0, 0) == (1, 1)
        assert solve_two_widths(0, 0.6, 0, 0) == (1, 1)
        assert solve_two_widths(-40, 0.6, 0, 0) == (1, 1)
        assert solve_two_widths(10, 0.5, 0, 900) == (1, 9)


PARTITION_TOTALS = [0, 1, 2, 7, 13, 97, 101, 1009, 1920, 4096, 65537]
PARTITION_COUNTS = list(range(1, 61))


@pytest.mark.unit
class TestPartitionCompleteness:
    """Test the distribution helpers hand out exactly the space they are given."""

    @pytest.mark.parametrize("total", PARTITION_TOTALS)
    @pytest.mark.parametrize("count", PARTITION_COUNTS)
    def test_distribute_evenly(self, total, count):
        """Test parts sum to the total and differ by at most one pixel."""
        parts = TilingAlgorithm.distribute_evenly(total, count)

        assert len(parts) == count
        assert sum(parts) == total
        assert max(parts) - min(parts) <= 1

    @pytest.mark.parametrize("total", PARTITION_TOTALS)
    @pytest.mark.parametrize("count", PARTITION_COUNTS)
    @pytest.mark.parametrize("gap", [0, 1, 8, 50])
    def test_distribute_with_gaps(self, total, count, gap):
        """Test parts plus gaps fill the total whenever every part gets a pixel."""
        parts = TilingAlgorithm.distribute_with_gaps(total, count, gap)
        gaps = (count - 1) * gap

        assert len(parts) == count
        assert min(parts) >= 1
        if total - gaps >= count:
            assert sum(parts) + gaps == total
            assert max(parts) - min(parts) <= 1
        else:
            assert parts == [1] * count

    @pytest.mark.parametrize("total", PARTITION_TOTALS)
    @pytest.mark.parametrize("count", PARTITION_COUNTS)
    @pytest.mark.parametrize("gap", [0, 8])
    def test_distribute_with_min_sizes(self, total, count, gap):
        """Test parts plus gaps fill the total and honor minimums that fit."""
        min_sizes = [(i * 37) % 300 for i in range(count)]
        min_sizes[0] = 5000
        parts = TilingAlgorithm.distribute_with_min_sizes(total, count, gap, min_sizes)
        gaps = (count - 1) * gap

        assert len(parts) == count
        assert min(parts) >= 1
        if total - gaps >= count:
            assert sum(parts) + gaps == total
            if sum(min_sizes) <= total - gaps:
                assert all(p >= m for p, m in zip(parts, min_sizes))
        else:
            assert parts == [1] * count


@pytest.mark.unit
class TestDegenerateAreas:
    """Test algorithms on screens too small for their gaps."""

    @pytest.mark.parametrize("algorithm_class", ALL_ALGORITHMS)
    @pytest.mark.parametrize("width", [1, 2, 3, 50, 100, 101])
    @pytest.mark.parametrize("count", [2, 3, 5])
    def test_zones_stay_valid(self, algorithm_class, make_state, width, count):
        """Test every zone keeps a positive size when gaps eat the screen."""
        zones = zones_for(algorithm_class(), make_state(count), Rect(0, 0, width, 600), 50, 50)

        assert len(zones) == count
        assert all(zone.is_valid() for zone in zones)

    def test_master_stack_narrow_screen(self, make_state):
        """Test master and stack each keep a 1px column on a 100px screen."""
        zones = zones_for(MasterStackAlgorithm(), make_state(2), Rect(0, 0, 100, 600), 50, 50)

        assert [zone.width for zone in zones] == [1, 1]


@pytest.mark.unit
class TestCommonContract:
    """Test behaviour every algorithm shares."""

    @pytest.mark.parametrize("algorithm_class", ALL_ALGORITHMS)
    def test_zero_windows(self, algorithm_class, state, standard_area):
        """Test no windows means no zones."""
        assert zones_for(algorithm_class(), state, standard_area) == []

    @pytest.mark.parametrize("algorithm_class", ALL_ALGORITHMS)
    def test_invalid_screen(self, algorithm_class, make_state):
        """Test an empty screen rectangle gives no zones."""
        assert zones_for(algorithm_class(), make_state(2), Rect(0, 0, 0, 0)) == []

    @pytest.mark.parametrize("algorithm_class", ALL_ALGORITHMS)
    def test_single_window_fills_inner_area(self, algorithm_class, make_state, standard_area):
        """Test a single window gets the screen minus the outer gap."""
        zones = zones_for(algorithm_class(), make_state(1), standard_area, 10, 10)

        assert zones == [Rect(10, 10, 1900, 1060)]

    @pytest.mark.parametrize("algorithm_class", ALL_ALGORITHMS)
    @pytest.mark.parametrize("count", [2, 3, 5, 8, 13])
    def test_one_zone_per_window(self, algorithm_class, count, make_state, standard_area):
        """Test every algorithm returns exactly one valid zone per window."""
        zones = zones_for(algorithm_class(), make_state(count), standard_area, 8, 8)

        assert len(zones) == count
        assert all(zone.is_valid() for zone in zones)

    @pytest.mark.parametrize("algorithm_class", ALL_ALGORITHMS)
    def test_metadata(self, algorithm_class):
        """Test algorithms describe themselves."""
        algorithm = algorithm_class()

        assert algorithm.name
        assert algorithm.description
        assert algorithm.icon
        assert 0.1 <= algorithm.default_split_ratio() <= 0.9


@pytest.mark.unit
class TestMasterStack:
    """Test master + stack layout."""

    def test_three_windows(self, make_state, square_area):
        """Test one master on the left and two stacked on the right."""
        zones = zones_for(MasterStackAlgorithm(), make_state(3), square_area)

        assert zones == [
            Rect(0, 0, 600, 1000),
            Rect(600, 0, 400, 500),
            Rect(600, 500, 400, 500),
        ]

    def test_gaps(self, make_state, standard_area):
        """Test inner and outer gaps separate the columns."""
        state = make_state(2)
        state.set_split_ratio(0.5)

        zones = zones_for(MasterStackAlgorithm(), state, standard_area, 10, 10)

        assert zones == [Rect(10, 10, 945, 1060), Rect(965, 10, 945, 1060)]

    def test_two_masters(self, make_state, square_area):
        """Test multiple masters share the master column."""
        state = make_state(4)
        state.set_master_count(2)

        zones = zones_for(MasterStackAlgorithm(), state, square_area)

        assert zones[0] == Rect(0, 0, 600, 500)
        assert zones[1] == Rect(0, 500, 600, 500)
        assert zones[2] == Rect(600, 0, 400, 500)
        assert zones[3] == Rect(600, 500, 400, 500)

    def test_all_masters_use_full_width(self, make_state, square_area):
        """Test no stack column when every window is a master."""
        state = make_state(2)
        state.set_master_count(2)

        zones = zones_for(MasterStackAlgorithm(), state, square_area)

        assert zones == [Rect(0, 0, 1000, 500), Rect(0, 500, 1000, 500)]

    def test_stack_minimum_width(self, make_state, square_area):
        """Test the stack column widens to its windows' minimum width."""
        zones = zones_for(
            MasterStackAlgorithm(),
            make_state(2),
            square_area,
            min_sizes=[Size(0, 0), Size(500, 0)],
        )

        assert zones == [Rect(0, 0, 500, 1000), Rect(500, 0, 500, 1000)]

    def test_needs_state(self, square_area):
        """Test no zones without a state to read the master area from."""
        params = TilingParams(window_count=2, screen=square_area)

        assert MasterStackAlgorithm().calculate_zones(params) == []

    def test_capabilities(self):
        """Test master + stack supports master count and split ratio."""
        algorithm = MasterStackAlgorithm()

        assert algorithm.supports_master_count()
        assert algorithm.supports_split_ratio()
        assert algorithm.master_zone_index() == 0
        assert algorithm.default_max_windows() == 4


@pytest.mark.unit
class TestColumnsAndRows:
    """Test equal columns and rows."""

    def test_columns_remainder(self, make_state, square_area):
        """Test leftover pixels go to the first column."""
        zones = zones_for(ColumnsAlgorithm(), make_state(3), square_area)

        assert zones == [
            Rect(0, 0, 334, 1000),
            Rect(334, 0, 333, 1000),
            Rect(667, 0, 333, 1000),
        ]

    def test_columns_with_gap(self, make_state, square_area):
        """Test columns are separated by the inner gap."""
        zones = zones_for(ColumnsAlgorithm(), make_state(3), square_area, inner_gap=10)

        assert [z.x for z in zones] == [0, 337, 674]
        assert [z.width for z in zones] == [327, 327, 326]

    def test_columns_minimum_width(self, make_state, square_area):
        """Test a column with a minimum width gets it."""
        zones = zones_for(
            ColumnsAlgorithm(),
            make_state(2),
            square_area,
            min_sizes=[Size(700, 0), Size(0, 0)],
        )

        assert [z.width for z in zones] == [850, 150]

    def test_rows(self, make_state, square_area):
        """Test rows stack top to bottom."""
        zones = zones_for(RowsAlgorithm(), make_state(4), square_area)

        assert [z.y for z in zones] == [0, 250, 500, 750]
        assert all(z.width == 1000 and z.height == 250 for z in zones)

    def test_no_master(self):
        """Test columns and rows have no master zone."""
        assert ColumnsAlgorithm().master_zone_index() == -1
        assert RowsAlgorithm().master_zone_index() == -1


@pytest.mark.unit
class TestMonocle:
    """Test monocle layout."""

    def test_every_window_fills_area(self, make_state, square_area):
        """Test all windows get the same full-size zone."""
        zones = zones_for(MonocleAlgorithm(), make_state(3), square_area, 10, 5)

        assert zones == [Rect(5, 5, 990, 990)] * 3

    def test_capabilities(self):
        """Test monocle has no master zone and allows ten windows."""
        algorithm = MonocleAlgorithm()

        assert algorithm.master_zone_index() == -1
        assert algorithm.default_max_windows() == 10


@pytest.mark.unit
class TestFibonacci:
    """Test dwindle layout."""

    def test_three_windows(self, make_state, square_area):
        """Test splits alternate between left/right and top/bottom."""
        state = make_state(3)
        state.set_split_ratio(0.5)

        zones = zones_for(FibonacciAlgorithm(), state, square_area)

        assert zones == [
            Rect(0, 0, 500, 1000),
            Rect(500, 0, 500, 500),
            Rect(500, 500, 500, 500),
        ]

    def test_four_windows(self, make_state, square_area):
        """Test the third split is left/right again."""
        state = make_state(4)
        state.set_split_ratio(0.5)

        zones = zones_for(FibonacciAlgorithm(), state, square_area)

        assert zones[2] == Rect(500, 500, 250, 500)
        assert zones[3] == Rect(750, 500, 250, 500)

    def test_many_windows_share_small_remainder(self, make_state, small_area):
        """Test windows past the splitting limit still get zones."""
        zones = zones_for(FibonacciAlgorithm(), make_state(20), small_area)

        assert len(zones) == 20
        assert all(z.is_valid() for z in zones)


@pytest.mark.unit
class TestBSP:
    """Test binary space partitioning."""

    def test_two_windows(self, make_state, square_area):
        """Test a square screen splits left/right first."""
        state = make_state(2)
        state.set_split_ratio(0.5)

        zones = zones_for(BSPAlgorithm(), state, square_area)

        assert zones == [Rect(0, 0, 500, 1000), Rect(500, 0, 500, 1000)]

    def test_three_windows_split_largest_leaf(self, make_state, square_area):
        """Test the third window splits a tall leaf top/bottom."""
        state = make_state(3)
        state.set_split_ratio(0.5)

        zones = zones_for(BSPAlgorithm(), state, square_area)

        assert zones == [
            Rect(0, 0, 500, 500),
            Rect(0, 500, 500, 500),
            Rect(500, 0, 500, 1000),
        ]

    def test_tree_persists_between_calls(self, make_state, square_area):
        """Test the tree grows and shrinks with the window count."""
        algorithm = BSPAlgorithm()

        zones_for(algorithm, make_state(3), square_area)
        assert algorithm.leaf_count == 3

        zones_for(algorithm, make_state(5), square_area)
        assert algorithm.leaf_count == 5

        zones_for(algorithm, make_state(2), square_area)
        assert algorithm.leaf_count == 2

    def test_same_count_same_zones(self, make_state, square_area):
        """Test repeated calculations are stable."""
        algorithm = BSPAlgorithm()

        first = zones_for(algorithm, make_state(4), square_area, 8, 8)
        second = zones_for(algorithm, make_state(4), square_area, 8, 8)

        assert first == second

    def test_reset(self, make_state, square_area):
        """Test reset() drops the tree."""
        algorithm = BSPAlgorithm()
        zones_for(algorithm, make_state(3), square_area)

        algorithm.reset()

        assert algorithm.leaf_count == 0

    def test_tiny_screen_falls_back_to_columns(self, make_state):
        """Test degenerate splits fall back to equal columns."""
        zones = zones_for(BSPAlgorithm(), make_state(4), Rect(0, 0, 40, 3), inner_gap=2)

        assert len(zones) == 4
        assert all(z.is_valid() for z in zones)
        assert all(z.height == 3 for z in zones)


@pytest.mark.unit
class TestThreeColumn:
    """Test centered master layout."""

    def test_three_windows(self, make_state, standard_area):
        """Test master in the center with one window on each side."""
        zones = zones_for(ThreeColumnAlgorithm(), make_state(3), standard_area, 10, 20)

        assert zones == [
            Rect(402, 20, 1116, 1040),
            Rect(20, 20, 372, 1040),
            Rect(1528, 20, 372, 1040),
        ]

    def test_five_windows_alternate_sides(self, make_state, standard_area):
        """Test odd stack windows go left and even ones go right."""
        zones = zones_for(ThreeColumnAlgorithm(), make_state(5), standard_area, 10, 20)

        assert zones[1] == Rect(20, 20, 372, 515)
        assert zones[2] == Rect(1528, 20, 372, 515)
        assert zones[3] == Rect(20, 545, 372, 515)
        assert zones[4] == Rect(1528, 545, 372, 515)

    def test_two_windows_split_by_ratio(self, make_state, standard_area):
        """Test two windows use a plain two-column split."""
        state = make_state(2)
        state.set_split_ratio(0.5)

        zones = zones_for(ThreeColumnAlgorithm(), state, standard_area, 10, 20)

        assert zones == [Rect(20, 20, 935, 1040), Rect(965, 20, 935, 1040)]

    def test_narrow_screen_falls_back_to_columns(self, make_state):
        """Test screens too narrow for three columns get equal columns."""
        zones = zones_for(ThreeColumnAlgorithm(), make_state(3), Rect(0, 0, 120, 500))

        assert zones == [
            Rect(0, 0, 40, 500),
            Rect(40, 0, 40, 500),
            Rect(80, 0, 40, 500),
        ]

    def test_side_column_minimum(self, make_state, standard_area):
        """Test side columns never drop below 50px."""
        state = make_state(3)
        state.set_split_ratio(0.9)

        zones = zones_for(ThreeColumnAlgorithm(), state, standard_area)

        assert zones[1].width >= 50
        assert zones[2].width >= 50
