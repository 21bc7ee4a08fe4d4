# (c) Copyright Datacraft, 2026
"""Read-only RGB pixel access over a scanned sheet."""
import logging
import math
from typing import Any

import numpy as np
from PIL import Image

from .models import RGB

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
	"""Round .5 away from zero for positive values, like Math.round."""
	return int(math.floor(value + 0.5))


class Raster:
	"""Fixed-size RGB buffer shared read-only between requests.

	Pixels are held in a ``(height, width, 3)`` uint8 numpy array whose
	writeable flag is cleared, so concurrent requests can read it without
	locking.
	"""

	def __init__(self, pixels: np.ndarray):
		if pixels.ndim == 2:
			pixels = np.stack([pixels] * 3, axis=-1)
		if pixels.ndim != 3 or pixels.shape[2] < 3:
			raise ValueError(f"Expected an RGB array, got shape {pixels.shape}")

		# Own copy, so freezing it leaves the caller's array writeable
		pixels = np.array(pixels[:, :, :3], dtype=np.uint8, order='C')
		pixels.flags.writeable = False
		self._pixels = pixels

	@classmethod
	def from_image(cls, image: Image.Image) -> 'Raster':
		if image.mode != 'RGB':
			image = image.convert('RGB')
		return cls(np.array(image))

	@classmethod
	def coerce(cls, image: Any) -> 'Raster':
		"""Accept a Raster, a PIL image or a numpy array."""
		if isinstance(image, cls):
			return image
		if isinstance(image, Image.Image):
			return cls.from_image(image)
		if isinstance(image, np.ndarray):
			return cls(image)
		raise TypeError(f"Unsupported image type: {type(image).__name__}")

	@property
	def pixels(self) -> np.ndarray:
		return self._pixels

	@property
	def width(self) -> int:
		return self._pixels.shape[1]

	@property
	def height(self) -> int:
		return self._pixels.shape[0]

	@property
	def size(self) -> tuple[int, int]:
		return (self.width, self.height)

	def in_bounds(self, x: int, y: int) -> bool:
		return 0 <= x < self.width and 0 <= y < self.height

	def pixel(self, x: int, y: int) -> RGB:
		r, g, b = self._pixels[y, x]
		return (int(r), int(g), int(b))

	def to_image(self) -> Image.Image:
		return Image.fromarray(self._pixels)

	def downsample(self, factor: float) -> 'Raster':
		"""Resize by ``factor``; a factor of 1.0 returns the raster itself."""
		if factor == 1.0:
			return self

		width = max(1, round_half_up(self.width * factor))
		height = max(1, round_half_up(self.height * factor))
		logger.debug(
			f"Downsampling {self.width}x{self.height} -> {width}x{height} (factor: {factor})"
		)
		resized = self.to_image().resize(
			(width, height),
			resample=Image.Resampling.BILINEAR,
		)
		return Raster.from_image(resized)
