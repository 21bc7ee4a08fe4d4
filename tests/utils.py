# (c) Copyright Datacraft, 2026
"""Synthetic scans with photos of known geometry."""
import math

import numpy as np

PHOTO_COLOR = (60, 90, 120)  # brightness 90


def draw_photo(
	canvas: np.ndarray,
	center: tuple[float, float],
	width: float,
	height: float,
	rotation: float = 0.0,
	color: tuple[int, int, int] = PHOTO_COLOR,
) -> np.ndarray:
	"""Paint a filled rectangle rotated by ``rotation`` degrees onto ``canvas``.

	A pixel is painted when its center lies inside the rectangle, so an
	axis-aligned photo spans exactly ``width`` pixels between its outermost
	pixel centers.
	"""
	ys, xs = np.mgrid[0:canvas.shape[0], 0:canvas.shape[1]]
	angle = math.radians(rotation)
	dx = xs - center[0]
	dy = ys - center[1]
	u = dx * math.cos(angle) + dy * math.sin(angle)
	v = -dx * math.sin(angle) + dy * math.cos(angle)
	inside = (np.abs(u) <= width / 2 + 1e-9) & (np.abs(v) <= height / 2 + 1e-9)
	canvas[inside] = color
	return canvas


def blank_sheet(width: int = 400, height: int = 300) -> np.ndarray:
	return np.full((height, width, 3), 255, dtype=np.uint8)


def sheet_with_photo(
	rotation: float = 0.0,
	photo_size: tuple[float, float] = (100, 50),
	center: tuple[float, float] = (200, 150),
	sheet_size: tuple[int, int] = (400, 300),
	color: tuple[int, int, int] = PHOTO_COLOR,
) -> np.ndarray:
	canvas = blank_sheet(*sheet_size)
	return draw_photo(canvas, center, photo_size[0], photo_size[1], rotation, color)


def rect_points(x: float, y: float, width: float, height: float, rotation: float = 0.0) -> np.ndarray:
	"""Integer grid points filling a (possibly rotated) rectangle."""
	canvas = np.zeros((int(y + height * 2 + width * 2), int(x + width * 2 + height * 2), 3), np.uint8)
	cx = x + width / 2
	cy = y + height / 2
	draw_photo(canvas, (cx, cy), width, height, rotation, color=(1, 1, 1))
	ys, xs = np.nonzero(canvas[:, :, 0])
	return np.column_stack((xs, ys)).astype(np.float64)
