# (c) Copyright Datacraft, 2026
"""Planar geometry shared by the hull, rectangle and extraction code."""
import logging
import math
from typing import Iterable, NamedTuple

from .models import Point2D

logger = logging.getLogger(__name__)


class NormalizedRotation(NamedTuple):
	rotation: float
	width: float
	height: float


class Bounds(NamedTuple):
	min_x: float
	min_y: float
	max_x: float
	max_y: float

	@property
	def width(self) -> float:
		return self.max_x - self.min_x

	@property
	def height(self) -> float:
		return self.max_y - self.min_y


def cross(o, a, b) -> float:
	"""Z component of (a - o) x (b - o) for (x, y) pairs; positive for a counter-clockwise turn."""
	return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def rotate_point(point: Point2D, angle_rad: float) -> Point2D:
	"""Rotate about the origin."""
	cos = math.cos(angle_rad)
	sin = math.sin(angle_rad)
	return Point2D(
		x=point.x * cos - point.y * sin,
		y=point.x * sin + point.y * cos,
	)


def axis_aligned_bounds(points: Iterable[Point2D]) -> Bounds:
	xs, ys = zip(*((p.x, p.y) for p in points))
	return Bounds(min(xs), min(ys), max(xs), max(ys))


def fold_angle(degrees: float) -> float:
	"""Fold an angle into (-180, 180]."""
	angle = math.fmod(degrees, 360.0)
	if angle > 180:
		angle -= 360
	elif angle <= -180:
		angle += 360
	return angle


def normalize_rotation(rotation: float, width: float, height: float) -> NormalizedRotation:
	"""Canonicalize a rectangle's rotation to (-45, 45].

	A rectangle rotated by r is the same rectangle rotated by r +/- 180, and
	the same rectangle with width and height swapped when rotated by r +/- 90.
	"""
	angle = fold_angle(rotation)

	# Near +/-180 is visually the same as near 0
	if angle > 135 or angle <= -135:
		angle = fold_angle(angle + 180)

	if angle > 45:
		angle -= 90
		width, height = height, width
	elif angle <= -45:
		angle += 90
		width, height = height, width

	logger.debug(
		f"normalize_rotation: {rotation:.2f} -> {angle:.2f} degrees, "
		f"dimensions {width:.1f}x{height:.1f}"
	)
	return NormalizedRotation(rotation=angle, width=width, height=height)
