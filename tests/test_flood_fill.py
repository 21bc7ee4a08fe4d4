# (c) Copyright Datacraft, 2026
import tracemalloc
from collections import deque
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from scanframes.segmentation.color import brightness_predicate, white_boundary_predicate
from scanframes.segmentation.errors import EmptyRegionError, OutOfBoundsError
from scanframes.segmentation.flood_fill import flood_fill
from scanframes.segmentation.raster import Raster
from tests.utils import PHOTO_COLOR, blank_sheet, draw_photo


def _as_set(region) -> set[tuple[int, int]]:
	return {(int(x), int(y)) for x, y in region.points}


def _is_connected(pixels: set[tuple[int, int]], seed: tuple[int, int], step: int = 1) -> bool:
	seen = {seed}
	queue = deque([seed])
	while queue:
		x, y = queue.popleft()
		for dx in (-step, 0, step):
			for dy in (-step, 0, step):
				n = (x + dx, y + dy)
				if n in pixels and n not in seen:
					seen.add(n)
					queue.append(n)
	return seen == pixels


def test_fills_exactly_the_photo(axis_aligned_sheet):
	raster = Raster(axis_aligned_sheet)
	region = flood_fill(raster, (200, 150), brightness_predicate(50))

	assert len(region) == 101 * 51
	assert region.seed == (200, 150)
	assert not region.truncated
	xs, ys = region.points[:, 0], region.points[:, 1]
	assert (xs.min(), xs.max(), ys.min(), ys.max()) == (150, 250, 125, 175)


def test_region_pixels_are_distinct_in_bounds_and_accepted(rotated_sheet):
	raster = Raster(rotated_sheet)
	predicate = brightness_predicate(50)
	region = flood_fill(raster, (200, 150), predicate)

	pixels = _as_set(region)
	assert len(pixels) == len(region)
	seed_color = raster.pixel(200, 150)
	for x, y in pixels:
		assert raster.in_bounds(x, y)
		assert predicate(raster.pixel(x, y), seed_color)


def test_region_is_connected_to_seed(rotated_sheet):
	region = flood_fill(Raster(rotated_sheet), (200, 150), brightness_predicate(50))
	assert _is_connected(_as_set(region), (200, 150))


def test_separate_photos_are_not_merged():
	canvas = blank_sheet(200, 100)
	draw_photo(canvas, (50, 50), 40, 40)
	draw_photo(canvas, (150, 50), 40, 40)

	region = flood_fill(Raster(canvas), (50, 50), brightness_predicate(50))

	assert len(region) == 41 * 41
	assert (150, 50) not in region


def test_diagonal_neighbours_are_connected():
	canvas = blank_sheet(10, 10)
	for i in range(10):
		canvas[i, i] = PHOTO_COLOR

	region = flood_fill(Raster(canvas), (0, 0), brightness_predicate(50))

	assert _as_set(region) == {(i, i) for i in range(10)}


@pytest.mark.parametrize('seed', [(-1, 10), (10, -1), (200, 10), (10, 100)])
def test_seed_outside_raster(seed):
	raster = Raster(blank_sheet(200, 100))
	with pytest.raises(OutOfBoundsError):
		flood_fill(raster, seed, brightness_predicate(50))


def test_seed_is_rounded_half_up(axis_aligned_sheet):
	region = flood_fill(Raster(axis_aligned_sheet), (199.5, 149.5), brightness_predicate(50))
	assert region.seed == (200, 150)


def test_predicate_rejecting_seed_gives_empty_region(axis_aligned_sheet):
	with pytest.raises(EmptyRegionError):
		flood_fill(Raster(axis_aligned_sheet), (200, 150), lambda candidate, seed_color: False)


def test_pixel_limit_truncates_region(axis_aligned_sheet, caplog):
	region = flood_fill(Raster(axis_aligned_sheet), (200, 150), brightness_predicate(50), max_pixels=500)

	assert len(region) == 500
	assert region.truncated
	assert "pixel limit" in caplog.text
	assert _is_connected(_as_set(region), (200, 150))


def test_callable_and_value_predicates_agree(rotated_sheet):
	raster = Raster(rotated_sheet)
	predicate = brightness_predicate(50)

	vectorized = flood_fill(raster, (200, 150), predicate)
	per_pixel = flood_fill(raster, (200, 150), lambda c, s: predicate(c, s))

	assert _as_set(vectorized) == _as_set(per_pixel)


def test_white_boundary_crosses_inner_edges():
	canvas = blank_sheet(200, 100)
	draw_photo(canvas, (100, 50), 120, 60)
	# A bright band inside the photo that a brightness predicate would not cross
	canvas[20:81, 95:105] = (200, 200, 200)

	by_brightness = flood_fill(Raster(canvas), (60, 50), brightness_predicate(50))
	by_boundary = flood_fill(Raster(canvas), (60, 50), white_boundary_predicate(230))

	assert (140, 50) not in by_brightness
	assert (140, 50) in by_boundary
	assert len(by_boundary) == 121 * 61


def test_step_visits_a_sparse_grid(axis_aligned_sheet):
	region = flood_fill(Raster(axis_aligned_sheet), (200, 150), brightness_predicate(50), step=2)

	assert np.all(region.points[:, 0] % 2 == 0)
	assert np.all(region.points[:, 1] % 2 == 0)
	assert _is_connected(_as_set(region), (200, 150), step=2)


@pytest.mark.parametrize('kwargs', [{'step': 0}, {'max_pixels': 0}])
def test_invalid_arguments(axis_aligned_sheet, kwargs):
	with pytest.raises(ValueError):
		flood_fill(Raster(axis_aligned_sheet), (200, 150), brightness_predicate(50), **kwargs)


def test_concurrent_fills_are_independent(two_photo_sheet):
	raster = Raster.from_image(two_photo_sheet)
	seeds = [(150, 150), (430, 150)] * 4

	def fill(seed):
		return _as_set(flood_fill(raster, seed, brightness_predicate(50)))

	with ThreadPoolExecutor(max_workers=4) as executor:
		results = list(executor.map(fill, seeds))

	left, right = fill((150, 150)), fill((430, 150))
	assert left.isdisjoint(right)
	for seed, result in zip(seeds, results):
		assert result == (left if seed == (150, 150) else right)


def test_raster_is_not_modified(axis_aligned_sheet):
	before = axis_aligned_sheet.copy()
	raster = Raster(axis_aligned_sheet)
	flood_fill(raster, (200, 150), brightness_predicate(50))

	assert np.array_equal(raster.pixels, before)
	assert not raster.pixels.flags.writeable


def test_small_pixel_limit_keeps_fill_cheap_on_large_scan():
	width, height = 2000, 1500
	raster = Raster(np.full((height, width, 3), 90, dtype=np.uint8))

	tracemalloc.start()
	try:
		region = flood_fill(raster, (1000, 750), brightness_predicate(50), max_pixels=10)
		_, peak = tracemalloc.get_traced_memory()
	finally:
		tracemalloc.stop()

	assert len(region) == 10
	assert region.truncated
	# The visited flags (one byte per pixel) are the only raster-sized allocation
	assert peak < 2 * width * height
