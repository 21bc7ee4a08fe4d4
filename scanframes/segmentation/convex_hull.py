# (c) Copyright Datacraft, 2026
"""Convex hull by Andrew's monotone chain."""
from typing import Iterable, Sequence

import numpy as np

from .geometry import cross
from .models import Point2D

PointLike = Point2D | Sequence[float]


def as_xy_array(points: Iterable[PointLike] | np.ndarray) -> np.ndarray:
	"""Coerce points to a float64 (N, 2) array."""
	if isinstance(points, np.ndarray):
		return points.reshape(-1, 2).astype(np.float64, copy=False)
	rows = [(p.x, p.y) if isinstance(p, Point2D) else (p[0], p[1]) for p in points]
	return np.asarray(rows, dtype=np.float64).reshape(-1, 2)


def _half_hull(points: list) -> list:
	hull = []
	for p in points:
		# <= 0 drops collinear points, keeping only the extreme vertices
		while len(hull) >= 2 and cross(hull[-2], hull[-1], p) <= 0:
			hull.pop()
		hull.append(p)
	hull.pop()  # repeated as the first point of the other chain
	return hull


def convex_hull(points: Iterable[PointLike] | np.ndarray) -> list[Point2D]:
	"""Vertices of the convex hull in counter-clockwise order.

	Returns the input itself for zero or one point. Collinear inputs give a
	hull of fewer than three vertices; callers deal with that.
	"""
	xy = as_xy_array(points)
	if len(xy) == 0:
		return []

	order = np.lexsort((xy[:, 1], xy[:, 0]))
	pts = [tuple(p) for p in xy[order].tolist()]
	if len(pts) <= 1:
		return [Point2D(*pts[0])]

	lower = _half_hull(pts)
	upper = _half_hull(pts[::-1])
	return [Point2D(x, y) for x, y in lower + upper]
