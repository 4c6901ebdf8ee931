"""Tests for dashboard/scales.py: band/linear scales, pie layout and arc paths."""

import math

import pytest

from dashboard.scales import (
    TAU,
    BandScale,
    LinearScale,
    arc_path,
    fmt,
    pie_layout,
    tick_increment,
    ticks,
)


class TestFmt:
    @pytest.mark.parametrize("value,expected", [
        (1.23456, "1.235"),
        (2.0, "2"),
        (2.5, "2.5"),
        (-0.0001, "0"),
        (-1.5, "-1.5"),
        (0, "0"),
    ])
    def test_values(self, value, expected):
        assert fmt(value) == expected


class TestBandScale:
    def test_padding_and_alignment(self):
        x = BandScale(["a", "b", "c"], (0, 100), padding=0.3)
        assert x.step == pytest.approx(100 / 3.3)
        assert x.bandwidth == pytest.approx(100 / 3.3 * 0.7)
        assert x("a") == pytest.approx(x.start)
        # Centred: equal outer gaps on both sides.
        assert x("c") + x.bandwidth == pytest.approx(100 - x("a"))

    def test_no_padding_fills_range(self):
        x = BandScale(["a", "b"], (0, 100))
        assert x("a") == 0
        assert x("b") == 50
        assert x.bandwidth == 50

    def test_unknown_value(self):
        assert BandScale(["a"], (0, 10))("z") is None


class TestTicks:
    def test_integer_step(self):
        assert ticks(0, 10, 5) == [0, 2, 4, 6, 8, 10]

    def test_fractional_step(self):
        assert ticks(0, 1, 5) == pytest.approx([0, 0.2, 0.4, 0.6, 0.8, 1.0])

    def test_reversed_domain(self):
        assert ticks(10, 0, 5) == [10, 8, 6, 4, 2, 0]

    def test_degenerate(self):
        assert ticks(3, 3, 5) == [3]
        assert ticks(0, 10, 0) == []

    def test_tick_increment(self):
        assert tick_increment(0, 10, 5) == 2
        assert tick_increment(0, 100, 10) == 10
        assert tick_increment(0, 1, 5) == -5
        assert tick_increment(5, 5, 5) == 0


class TestLinearScale:
    def test_mapping(self):
        y = LinearScale((0, 10), (300, 0))
        assert y(0) == 300
        assert y(5) == 150
        assert y(10) == 0

    def test_degenerate_domain_maps_to_middle(self):
        assert LinearScale((4, 4), (0, 100))(4) == 50

    def test_nice_default_count(self):
        assert LinearScale((0, 8.7), (0, 1)).nice().domain == (0, 9)

    def test_nice_with_count(self):
        assert LinearScale((0, 8.7), (0, 1)).nice(5).domain == (0, 10)

    def test_nice_has_no_negative_zero(self):
        d0, _ = LinearScale((0, 8.7), (0, 1)).nice().domain
        assert math.copysign(1, d0) == 1

    def test_tick_format(self):
        y = LinearScale((0, 10), (0, 1))
        assert y.tick_format(5)(4) == "4"
        y = LinearScale((0, 1), (0, 1))
        assert y.tick_format(5)(0.4) == "0.4"


class TestPieLayout:
    def test_angles_in_input_order(self):
        slices = pie_layout([{"value": 1}, {"value": 1}, {"value": 2}])
        assert [s.index for s in slices] == [0, 1, 2]
        assert slices[0].start_angle == 0
        assert slices[0].end_angle == pytest.approx(math.pi / 2)
        assert slices[1].end_angle == pytest.approx(math.pi)
        assert slices[2].end_angle == pytest.approx(TAU)

    def test_padding_consumes_share(self):
        slices = pie_layout([{"value": 1}, {"value": 1}], pad_angle=0.1)
        assert slices[-1].end_angle == pytest.approx(TAU)
        widths = [s.end_angle - s.start_angle for s in slices]
        assert widths[0] == pytest.approx(widths[1])
        assert all(s.pad_angle == 0.1 for s in slices)

    def test_non_positive_value_gets_no_width(self):
        slices = pie_layout([{"value": 3}, {"value": 0}, {"value": -1}])
        assert slices[1].start_angle == slices[1].end_angle
        assert slices[2].start_angle == slices[2].end_angle
        assert slices[0].end_angle == pytest.approx(TAU)

    def test_custom_accessor(self):
        slices = pie_layout([("a", 1), ("b", 3)], value=lambda d: d[1])
        assert slices[1].value == 3
        assert slices[1].data == ("b", 3)

    def test_empty(self):
        assert pie_layout([]) == []


class TestArcPath:
    def test_zero_radius(self):
        assert arc_path(0, 0, 0, math.pi) == "M0,0Z"

    def test_quarter_wedge(self):
        assert arc_path(0, 10, 0, math.pi / 2) == "M0,-10A10,10,0,0,1,10,0L0,0Z"

    def test_quarter_annulus(self):
        assert arc_path(5, 10, 0, math.pi / 2) == (
            "M0,-10A10,10,0,0,1,10,0L5,0A5,5,0,0,0,0,-5Z"
        )

    def test_large_arc_flag(self):
        d = arc_path(0, 10, 0, 1.5 * math.pi)
        assert d.startswith("M0,-10A10,10,0,1,1,")

    def test_full_circle(self):
        assert arc_path(0, 10, 0, TAU) == "M0,-10A10,10,0,1,1,0,10A10,10,0,1,1,0,-10Z"

    def test_full_ring_has_inner_circle(self):
        d = arc_path(5, 10, 0, TAU)
        assert "M0,-5A5,5,0,1,0,0,5A5,5,0,1,0,0,-5" in d

    def test_pad_angle_narrows_outer_edge(self):
        plain = arc_path(5, 10, 0, math.pi / 2)
        padded = arc_path(5, 10, 0, math.pi / 2, pad_angle=0.1)
        assert plain != padded
        assert not padded.startswith("M0,-10")
