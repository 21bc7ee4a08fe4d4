# (c) Copyright Datacraft, 2026
"""Breadth-first region growing from a seed pixel."""
import logging
from collections import deque

import numpy as np

from scanframes import constants as const
from .color import PredicateFn
from .errors import EmptyRegionError, OutOfBoundsError
from .models import Point2D, Region
from .raster import Raster, round_half_up

logger = logging.getLogger(__name__)


def _neighbour_offsets(step: int) -> list[tuple[int, int]]:
	"""8-connected neighbourhood (N, S, E, W and diagonals) at ``step`` stride."""
	return [
		(-step, 0),
		(step, 0),
		(0, -step),
		(0, step),
		(-step, -step),
		(step, -step),
		(-step, step),
		(step, step),
	]


def flood_fill(
	raster: Raster,
	seed: Point2D | tuple[float, float],
	predicate: PredicateFn,
	step: int = 1,
	max_pixels: int = const.DEFAULT_MAX_PIXELS,
) -> Region:
	"""Grow the region of pixels connected to ``seed`` that satisfy ``predicate``.

	Args:
		raster: Image to fill
		seed: Starting point; rounded to the nearest pixel
		predicate: ``(candidate, seed_color) -> bool``
		step: Neighbour stride
		max_pixels: Stop growing once the region reaches this size

	Returns:
		Region of distinct, in-bounds pixels 8-connected to the seed

	Raises:
		OutOfBoundsError: seed outside the raster
		EmptyRegionError: no pixel passed the predicate
	"""
	if step < 1:
		raise ValueError("step must be >= 1")
	if max_pixels < 1:
		raise ValueError("max_pixels must be positive")

	seed = Point2D.coerce(seed)
	seed_x = round_half_up(seed.x)
	seed_y = round_half_up(seed.y)
	if not raster.in_bounds(seed_x, seed_y):
		raise OutOfBoundsError(
			f"Seed point ({seed.x}, {seed.y}) out of image bounds "
			f"{raster.width}x{raster.height}"
		)

	width, height = raster.size
	seed_color = raster.pixel(seed_x, seed_y)
	offsets = _neighbour_offsets(step)

	# Owned by this call only; never shared between requests
	visited = bytearray(width * height)
	queue = deque([seed_y * width + seed_x])
	region: list[int] = []
	pixels_checked = 0
	truncated = False

	while queue:
		idx = queue.popleft()
		if visited[idx]:
			continue
		visited[idx] = 1
		pixels_checked += 1

		y, x = divmod(idx, width)
		# Evaluated per dequeued pixel; no whole-raster maps
		if not predicate(raster.pixel(x, y), seed_color):
			continue

		region.append(idx)
		if len(region) >= max_pixels:
			truncated = True
			break

		for dx, dy in offsets:
			nx = x + dx
			ny = y + dy
			if 0 <= nx < width and 0 <= ny < height:
				n_idx = ny * width + nx
				if not visited[n_idx]:
					queue.append(n_idx)

	if truncated:
		logger.warning(
			f"Flood fill stopped at the pixel limit ({max_pixels}); region may be incomplete"
		)
	logger.debug(f"Flood fill: checked {pixels_checked} pixels, found {len(region)} pixels")

	if not region:
		raise EmptyRegionError(f"No region found around seed ({seed_x}, {seed_y})")

	indices = np.asarray(region, dtype=np.int64)
	points = np.column_stack((indices % width, indices // width))
	return Region(points=points, seed=(seed_x, seed_y), truncated=truncated)
