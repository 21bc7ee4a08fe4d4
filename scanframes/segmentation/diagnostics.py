# (c) Copyright Datacraft, 2026
"""Debug overlays showing what a detection saw.

Not part of detection itself: callers opt in and decide where the output goes.
"""
import logging

import cv2
import numpy as np

from .models import BoundingFrame, Point2D, Region
from .raster import Raster, round_half_up

logger = logging.getLogger(__name__)

# RGB, the overlay keeps the raster's channel order
REGION_COLOR = (255, 0, 0)
SEED_COLOR = (0, 255, 0)
SEED_RING_COLOR = (0, 0, 255)
FRAME_COLOR = (0, 0, 255)

SEED_RING_RADII = range(15, 21)
SEED_MARK_HALF_SIZE = 2


def render_debug_overlay(
	raster: Raster,
	region: Region | None = None,
	seed: Point2D | None = None,
	frame: BoundingFrame | None = None,
) -> np.ndarray:
	"""Draw region, seed and frame on a copy of ``raster``.

	All inputs must be in the raster's coordinates (for a downsampled
	detection, pass the downsampled raster and the scaled frame).

	Returns:
		RGB uint8 array of the raster's shape
	"""
	overlay = raster.pixels.copy()

	if region is not None:
		xs = region.points[:, 0]
		ys = region.points[:, 1]
		overlay[ys, xs] = REGION_COLOR

	if seed is not None:
		center = (round_half_up(seed.x), round_half_up(seed.y))
		for radius in SEED_RING_RADII:
			cv2.circle(overlay, center, radius, SEED_RING_COLOR, 1)
		h = SEED_MARK_HALF_SIZE
		cv2.rectangle(
			overlay,
			(center[0] - h, center[1] - h),
			(center[0] + h, center[1] + h),
			SEED_COLOR,
			-1,
		)

	if frame is not None:
		corners = np.array(
			[[round_half_up(c.x), round_half_up(c.y)] for c in frame.corners()],
			dtype=np.int32,
		)
		cv2.polylines(overlay, [corners], True, FRAME_COLOR, 1)

	return overlay


def encode_png(overlay: np.ndarray) -> bytes:
	"""PNG bytes for an RGB overlay."""
	ok, png_data = cv2.imencode(".png", cv2.cvtColor(overlay, cv2.COLOR_RGB2BGR))
	if not ok:
		raise ValueError("Could not encode debug overlay as PNG")
	return png_data.tobytes()
