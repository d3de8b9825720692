"""Arc geometry shared by the arc aggregator and path validation."""

from __future__ import annotations

import math

import numpy as np

from .base import Plane, Point

TWO_PI = 2.0 * math.pi


def _plane_axes(plane: Plane) -> tuple[int, int, int]:
    """Indices of the (u, v, normal) axes for *plane*.

    The (u, v) order keeps counter-clockwise positive about the normal.
    """
    if plane is Plane.XY:
        return 0, 1, 2
    if plane is Plane.ZX:
        return 2, 0, 1
    return 1, 2, 0


def _project(p: Point, plane: Plane) -> tuple[float, float]:
    u, v, _ = _plane_axes(plane)
    return p[u], p[v]


def distance(a: Point, b: Point) -> float:
    return math.dist(a, b)


def arc_radius(start: Point, center: Point, plane: Plane = Plane.XY) -> float:
    su, sv = _project(start, plane)
    cu, cv = _project(center, plane)
    return math.hypot(su - cu, sv - cv)


def arc_sweep(
    start: Point,
    end: Point,
    center: Point,
    clockwise: bool,
    plane: Plane = Plane.XY,
) -> float:
    """Angular extent in radians, always in ``(0, 2*pi]``.

    Coincident start and end points describe a full circle.
    """
    su, sv = _project(start, plane)
    eu, ev = _project(end, plane)
    cu, cv = _project(center, plane)
    a0 = math.atan2(sv - cv, su - cu)
    a1 = math.atan2(ev - cv, eu - cu)
    sweep = (a0 - a1) if clockwise else (a1 - a0)
    sweep %= TWO_PI
    if math.isclose(sweep, 0.0, abs_tol=1e-12) or math.isclose(sweep, TWO_PI):
        return TWO_PI
    return sweep


def max_chord_angle(radius: float, tolerance: float) -> float:
    """Largest angular step whose chord deviates at most *tolerance* from the arc."""
    if radius <= 0.0 or tolerance >= radius:
        return math.pi / 2.0
    ratio = max(-1.0, min(1.0, 1.0 - tolerance / radius))
    return 2.0 * math.acos(ratio)


def linearize_arc(
    start: Point,
    center: Point,
    end: Point,
    clockwise: bool,
    plane: Plane,
    sweep: float,
    tolerance: float,
) -> list[Point]:
    """Break an arc into chords no further than *tolerance* from the arc.

    Returns the chord end points after *start*; the last one is *end*.
    The coordinate along the plane normal is interpolated linearly.
    """
    u_idx, v_idx, w_idx = _plane_axes(plane)
    radius = arc_radius(start, center, plane)
    step = max_chord_angle(radius, tolerance)
    n = max(1, int(math.ceil(sweep / step - 1e-9)))

    direction = -1.0 if clockwise else 1.0
    a0 = math.atan2(start[v_idx] - center[v_idx], start[u_idx] - center[u_idx])
    angles = a0 + direction * np.linspace(sweep / n, sweep, n)
    us = center[u_idx] + radius * np.cos(angles)
    vs = center[v_idx] + radius * np.sin(angles)
    ws = np.linspace(start[w_idx], end[w_idx], n + 1)[1:]

    points: list[Point] = []
    for u, v, w in zip(us, vs, ws):
        coords = [0.0, 0.0, 0.0]
        coords[u_idx], coords[v_idx], coords[w_idx] = float(u), float(v), float(w)
        points.append(Point(*coords))
    points[-1] = Point(float(end[0]), float(end[1]), float(end[2]))
    return points
