"""Scale, layout and path helpers for the server-rendered SVG charts.

These follow the d3 conventions the charts were designed around:

- ``BandScale``: evenly spaced bands with inner/outer padding, centred
- ``LinearScale``: continuous mapping with ``nice()`` domain rounding and
  round-number ``ticks()``
- ``pie_layout``: start/end angles for each value, in input order, with padding
- ``arc_path``: SVG path for an annular sector; angle 0 is 12 o'clock and
  angles grow clockwise
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Sequence

TAU = 2 * math.pi
EPSILON = 1e-12

# Thresholds for rounding a raw tick step to 1, 2, 5 or 10 x 10^k.
_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def fmt(value: float) -> str:
    """Compact number for SVG attributes: at most 3 decimals, no trailing zeros."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


# ── Band scale ────────────────────────────────────────────────────────────────

class BandScale:
    """Map discrete domain values to evenly spaced bands across a range."""

    def __init__(self, domain: Sequence[Any], range_: tuple[float, float],
                 padding: float = 0.0, align: float = 0.5):
        self.domain = list(domain)
        self.range = range_
        self.padding_inner = padding
        self.padding_outer = padding
        self.align = align
        self._index = {value: i for i, value in enumerate(self.domain)}
        self._rescale()

    def _rescale(self) -> None:
        n = len(self.domain)
        r0, r1 = self.range
        self.step = (r1 - r0) / max(1, n - self.padding_inner + self.padding_outer * 2)
        self.start = r0 + (r1 - r0 - self.step * (n - self.padding_inner)) * self.align
        self.bandwidth = self.step * (1 - self.padding_inner)

    def __call__(self, value: Any) -> float | None:
        i = self._index.get(value)
        if i is None:
            return None
        return self.start + self.step * i


# ── Linear scale ──────────────────────────────────────────────────────────────

def _js_round(x: float) -> int:
    # Half rounds toward +infinity, like Math.round.
    return math.floor(x + 0.5)


def tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    """Return ``(i1, i2, inc)`` describing round-number ticks in [start, stop].

    A positive ``inc`` is the step; a negative one means the step is
    ``1 / -inc`` (used for sub-unit steps to avoid float error).
    """
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = 10 ** -power / factor
        i1 = _js_round(start * inc)
        i2 = _js_round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = 10 ** power * factor
        i1 = _js_round(start / inc)
        i2 = _js_round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return tick_spec(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    if stop == start or count <= 0:
        return 0
    return tick_spec(start, stop, count)[2]


def ticks(start: float, stop: float, count: float) -> list[float]:
    """Round-number tick values between *start* and *stop* (ascending)."""
    if count <= 0:
        return []
    if start == stop:
        return [start]
    lo, hi = min(start, stop), max(start, stop)
    i1, i2, inc = tick_spec(lo, hi, count)
    if i2 < i1:
        return []
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        values = [(i1 + i) * inc for i in range(i2 - i1 + 1)]
    return values if start <= stop else values[::-1]


class LinearScale:
    """Map a continuous domain onto a continuous range."""

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]):
        self.domain = domain
        self.range = range_

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def nice(self, count: int = 10) -> LinearScale:
        """Extend the domain outward to round numbers; returns self."""
        d0, d1 = self.domain
        reverse = d1 < d0
        start, stop = (d1, d0) if reverse else (d0, d1)
        prestep = None
        for _ in range(10):
            step = tick_increment(start, stop, count)
            if step == prestep:
                break
            if step > 0:
                start = math.floor(start / step) * step
                stop = math.ceil(stop / step) * step
            elif step < 0:
                start = math.ceil(start * step) / step
                stop = math.floor(stop * step) / step
            else:
                break
            prestep = step
        # Adding 0.0 turns -0.0 into 0.0.
        start, stop = start + 0.0, stop + 0.0
        self.domain = (stop, start) if reverse else (start, stop)
        return self

    def ticks(self, count: int = 10) -> list[float]:
        return ticks(self.domain[0], self.domain[1], count)

    def tick_format(self, count: int = 10):
        """Return a formatter with just enough decimals for the tick step."""
        d0, d1 = self.domain
        step = tick_increment(min(d0, d1), max(d0, d1), count)
        if step < 0:
            step = 1 / -step
        precision = max(0, -math.floor(math.log10(abs(step)))) if step else 0
        return lambda value: f"{value:,.{precision}f}"


# ── Pie layout and arcs ──────────────────────────────────────────────────────

@dataclass
class PieSlice:
    data: Any
    index: int
    value: float
    start_angle: float
    end_angle: float
    pad_angle: float


def pie_layout(items: Sequence[Any], value=lambda d: d["value"],
               pad_angle: float = 0.0, start_angle: float = 0.0,
               end_angle: float = TAU) -> list[PieSlice]:
    """Lay out *items* around a circle in input order.

    Non-positive values get a zero-width slice.  Each slice is followed by
    ``pad_angle`` of empty space, capped so the padding never exceeds the
    share of a single slice.
    """
    n = len(items)
    if not n:
        return []
    da = min(TAU, max(-TAU, end_angle - start_angle))
    pad = min(abs(da) / n, pad_angle)
    pa = -pad if da < 0 else pad
    values = [float(value(item)) for item in items]
    total = sum(v for v in values if v > 0)
    k = (da - n * pa) / total if total else 0

    slices = []
    a0 = start_angle
    for i, (item, v) in enumerate(zip(items, values)):
        a1 = a0 + (v * k if v > 0 else 0) + pa
        slices.append(PieSlice(item, i, v, a0, a1, pad))
        a0 = a1
    return slices


def _asin(x: float) -> float:
    if x >= 1:
        return math.pi / 2
    if x <= -1:
        return -math.pi / 2
    return math.asin(x)


def _point(r: float, angle: float) -> str:
    return f"{fmt(r * math.sin(angle))},{fmt(-r * math.cos(angle))}"


def arc_path(inner_radius: float, outer_radius: float, start_angle: float,
             end_angle: float, pad_angle: float = 0.0) -> str:
    """SVG path data for an annular sector centred on the origin.

    ``inner_radius`` of 0 draws a pie wedge.  A sweep of a full turn draws a
    complete ring as two half arcs per radius.  Padding is removed from both
    edges as a constant linear gap, so the gap is narrower in angle on the
    outer edge than on the inner one.
    """
    r0, r1 = sorted((inner_radius, outer_radius))
    if r1 <= EPSILON:
        return "M0,0Z"

    a0, a1 = start_angle, end_angle
    da = abs(a1 - a0)
    cw = a1 > a0

    if da > TAU - EPSILON:
        # Full ring: two half-circle arcs per radius.
        half = a0 + math.pi
        d = (f"M{_point(r1, a0)}A{fmt(r1)},{fmt(r1)},0,1,1,{_point(r1, half)}"
             f"A{fmt(r1)},{fmt(r1)},0,1,1,{_point(r1, a0)}")
        if r0 > EPSILON:
            d += (f"M{_point(r0, a0)}A{fmt(r0)},{fmt(r0)},0,1,0,{_point(r0, half)}"
                  f"A{fmt(r0)},{fmt(r0)},0,1,0,{_point(r0, a0)}")
        return d + "Z"

    a00, a10, a01, a11 = a0, a1, a0, a1
    da0 = da1 = da
    ap = pad_angle / 2
    if ap > EPSILON:
        rp = math.sqrt(r0 * r0 + r1 * r1)
        p0 = _asin(rp / r0 * math.sin(ap)) if r0 > EPSILON else math.pi / 2
        p1 = _asin(rp / r1 * math.sin(ap))
        da0 -= p0 * 2
        if da0 > EPSILON:
            p0 = p0 if cw else -p0
            a00 += p0
            a10 -= p0
        else:
            da0 = 0
            a00 = a10 = (a0 + a1) / 2
        da1 -= p1 * 2
        if da1 > EPSILON:
            p1 = p1 if cw else -p1
            a01 += p1
            a11 -= p1
        else:
            da1 = 0
            a01 = a11 = (a0 + a1) / 2

    sweep = 1 if cw else 0
    large1 = 1 if da1 > math.pi else 0
    d = f"M{_point(r1, a01)}"
    if da1 > EPSILON:
        d += f"A{fmt(r1)},{fmt(r1)},0,{large1},{sweep},{_point(r1, a11)}"

    if r0 <= EPSILON:
        return d + "L0,0Z"

    d += f"L{_point(r0, a10)}"
    if da0 > EPSILON:
        large0 = 1 if da0 > math.pi else 0
        d += f"A{fmt(r0)},{fmt(r0)},0,{large0},{1 - sweep},{_point(r0, a00)}"
    return d + "Z"
