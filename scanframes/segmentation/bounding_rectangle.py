# (c) Copyright Datacraft, 2026
"""Minimum-area oriented rectangle by rotating calipers over the convex hull."""
import logging
import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from scanframes import constants as const
from . import orientation
from .convex_hull import PointLike, as_xy_array, convex_hull
from .errors import InsufficientPointsError, RegionTooSmallError
from .geometry import normalize_rotation, rotate_point
from .models import BoundingFrame, Point2D, ProcessingConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaliperCandidate:
	"""Rectangle flush with one hull edge, described by its center."""
	center: Point2D
	width: float
	height: float
	angle: float  # degrees
	area: float
	edge_index: int


def _edge_candidate(hull: np.ndarray, index: int) -> CaliperCandidate:
	p1 = hull[index]
	p2 = hull[(index + 1) % len(hull)]
	edge_angle = math.atan2(p2[1] - p1[1], p2[0] - p1[0])

	# Rotate every vertex by -edge_angle so the edge lies along the x axis
	cos, sin = math.cos(edge_angle), math.sin(edge_angle)
	xs = hull[:, 0] * cos + hull[:, 1] * sin
	ys = -hull[:, 0] * sin + hull[:, 1] * cos

	min_x, max_x = float(xs.min()), float(xs.max())
	min_y, max_y = float(ys.min()), float(ys.max())
	width = max_x - min_x
	height = max_y - min_y

	center = rotate_point(
		Point2D(x=(min_x + max_x) / 2, y=(min_y + max_y) / 2),
		edge_angle,
	)
	return CaliperCandidate(
		center=center,
		width=width,
		height=height,
		angle=math.degrees(edge_angle),
		area=width * height,
		edge_index=index,
	)


def rotating_calipers(hull: list[Point2D]) -> CaliperCandidate:
	"""Smallest-area candidate over all hull edges.

	Ties keep the first edge reaching the minimum, so the result depends only
	on the hull's vertex order.
	"""
	vertices = np.array([(p.x, p.y) for p in hull], dtype=np.float64)

	best: CaliperCandidate | None = None
	for index in range(len(vertices)):
		candidate = _edge_candidate(vertices, index)
		if best is None or candidate.area < best.area:
			best = candidate
	return best


def _axis_aligned_frame(xy: np.ndarray) -> BoundingFrame:
	min_x, min_y = xy.min(axis=0)
	max_x, max_y = xy.max(axis=0)
	return BoundingFrame(
		x=float(min_x),
		y=float(min_y),
		width=float(max_x - min_x),
		height=float(max_y - min_y),
		rotation=0.0,
	)


def minimal_bounding_rectangle(
	points: Iterable[PointLike] | np.ndarray,
	min_area: float = const.DEFAULT_MIN_AREA,
	config: ProcessingConfig | None = None,
) -> BoundingFrame:
	"""Find the minimum-area rectangle enclosing ``points``.

	Args:
		points: Region pixels or any planar point set
		min_area: Reject rectangles smaller than this
		config: Enables the optional PCA / angle refinement passes

	Returns:
		Corner-based frame with rotation normalized to (-45, 45]

	Raises:
		InsufficientPointsError: fewer than three points
		RegionTooSmallError: the minimum rectangle is smaller than min_area
	"""
	xy = as_xy_array(points)
	if len(xy) < 3:
		raise InsufficientPointsError("Not enough points to compute bounding rectangle")

	logger.debug(f"Computing bounding box for {len(xy)} points")
	hull = convex_hull(xy)
	logger.debug(f"Convex hull has {len(hull)} vertices")

	if len(hull) < 3:
		# All points collinear: fall back to the axis-aligned box
		return _axis_aligned_frame(xy)

	best = rotating_calipers(hull)
	p1 = hull[best.edge_index]
	p2 = hull[(best.edge_index + 1) % len(hull)]
	logger.debug(
		f"Minimal rectangle: {best.width:.1f}x{best.height:.1f}, rotation={best.angle:.1f}, "
		f"edge {best.edge_index}/{len(hull) - 1} from ({p1.x:.0f}, {p1.y:.0f}) to ({p2.x:.0f}, {p2.y:.0f})"
	)

	if best.area < min_area:
		raise RegionTooSmallError(best.area, min_area)

	center, width, height, angle = best.center, best.width, best.height, best.angle
	if config is not None and (config.use_pca or config.enable_angle_refine):
		final_angle = angle
		if config.use_pca:
			final_angle = orientation.choose_best_angle(
				final_angle,
				orientation.principal_axis_angle(xy),
				xy,
			)
		if config.enable_angle_refine:
			final_angle = orientation.refine_angle(
				xy,
				final_angle,
				config.angle_refine_window,
				config.angle_refine_iterations,
			)
		if final_angle != angle:
			# Re-measure so the frame still encloses every point
			angle = final_angle
			center, width, height = orientation.oriented_extent(xy, angle)

	normalized = normalize_rotation(angle, width, height)

	# Center-based to corner-based
	half_diagonal = rotate_point(
		Point2D(x=-normalized.width / 2, y=-normalized.height / 2),
		math.radians(normalized.rotation),
	)
	return BoundingFrame(
		x=center.x + half_diagonal.x,
		y=center.y + half_diagonal.y,
		width=normalized.width,
		height=normalized.height,
		rotation=normalized.rotation,
	)
