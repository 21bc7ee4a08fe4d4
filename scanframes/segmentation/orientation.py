# (c) Copyright Datacraft, 2026
"""Optional orientation estimates that can override the calipers angle."""
import logging
import math

import numpy as np

from scanframes import constants as const
from .geometry import fold_angle
from .models import Point2D

logger = logging.getLogger(__name__)

GOLDEN_LOW = 0.382
GOLDEN_HIGH = 0.618


def principal_axis_angle(points: np.ndarray) -> float | None:
	"""Angle in degrees of the major axis of the point cloud.

	Returns None for fewer than three points or when the covariance is
	isotropic and no axis stands out.
	"""
	if len(points) < 3:
		return None

	centered = points - points.mean(axis=0)
	sxx = float(np.dot(centered[:, 0], centered[:, 0]))
	syy = float(np.dot(centered[:, 1], centered[:, 1]))
	sxy = float(np.dot(centered[:, 0], centered[:, 1]))

	if abs(sxx - syy) < 1e-10 and abs(sxy) < 1e-10:
		logger.debug("PCA: equal eigenvalues, no dominant axis")
		return None

	angle = math.degrees(0.5 * math.atan2(2 * sxy, sxx - syy))
	logger.debug(f"PCA orientation: {angle:.2f} degrees")
	return angle


def oriented_extent(
	points: np.ndarray,
	angle_deg: float,
) -> tuple[Point2D, float, float]:
	"""Bounding box of ``points`` in a frame rotated by ``angle_deg``.

	Returns (center, width, height), the center in the unrotated frame.
	"""
	angle = math.radians(angle_deg)
	cos, sin = math.cos(angle), math.sin(angle)
	xr = points[:, 0] * cos + points[:, 1] * sin
	yr = -points[:, 0] * sin + points[:, 1] * cos

	min_x, max_x = float(xr.min()), float(xr.max())
	min_y, max_y = float(yr.min()), float(yr.max())
	cx = (min_x + max_x) / 2
	cy = (min_y + max_y) / 2
	center = Point2D(x=cx * cos - cy * sin, y=cx * sin + cy * cos)
	return center, max_x - min_x, max_y - min_y


def projected_height(points: np.ndarray, angle_deg: float) -> float:
	"""Extent of the points across the direction ``angle_deg``."""
	angle = math.radians(angle_deg)
	yr = -points[:, 0] * math.sin(angle) + points[:, 1] * math.cos(angle)
	return float(yr.max() - yr.min())


def refine_angle(
	points: np.ndarray,
	initial_deg: float,
	window_deg: float = 3.0,
	iterations: int = 10,
) -> float:
	"""Golden-section search for the angle minimizing the projected height."""
	lo = initial_deg - window_deg
	hi = initial_deg + window_deg

	for _ in range(iterations):
		m1 = lo + (hi - lo) * GOLDEN_LOW
		m2 = lo + (hi - lo) * GOLDEN_HIGH
		if projected_height(points, m1) < projected_height(points, m2):
			hi = m2
		else:
			lo = m1

	refined = (lo + hi) / 2
	logger.debug(
		f"Angle refinement: {initial_deg:.2f} -> {refined:.2f} "
		f"(delta {refined - initial_deg:.2f})"
	)
	return refined


def align_to(angle_deg: float, reference_deg: float, period: float = 90.0) -> float:
	"""Equivalent of ``angle_deg`` modulo ``period`` closest to ``reference_deg``.

	A rectangle rotated by a is the same rectangle rotated by a + 90 with its
	sides swapped, so orientations only matter modulo 90 degrees.
	"""
	half = period / 2
	delta = (angle_deg - reference_deg) % period
	if delta > half:
		delta -= period
	return reference_deg + delta


def choose_best_angle(
	calipers_deg: float,
	pca_deg: float | None,
	points: np.ndarray,
) -> float:
	"""Keep the calipers angle unless PCA is clearly different and tighter."""
	if pca_deg is None:
		return calipers_deg

	pca_aligned = align_to(pca_deg, calipers_deg)

	height_calipers = projected_height(points, calipers_deg)
	height_pca = projected_height(points, pca_aligned)
	angle_diff = abs(fold_angle(calipers_deg - pca_aligned))

	if angle_diff > const.PCA_MIN_ANGLE_DIFF and height_pca < height_calipers:
		logger.debug(
			f"Using PCA angle {pca_aligned:.2f} (height {height_pca:.1f} < {height_calipers:.1f})"
		)
		return pca_aligned

	logger.debug(f"Using calipers angle {calipers_deg:.2f} (height {height_calipers:.1f})")
	return calipers_deg
