# (c) Copyright Datacraft, 2026
"""Data models for seed-based frame detection."""
import math
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any

import numpy as np

from scanframes import constants as const
from .errors import EmptyRegionError

RGB = tuple[int, int, int]


class PredicateKind(str, Enum):
	"""Strategies for deciding whether a pixel belongs to the seed's photo."""
	BRIGHTNESS = 'brightness'  # brightness close to the seed's
	WHITE_BOUNDARY = 'white_boundary'  # anything that is not near-white


@dataclass(frozen=True)
class Point2D:
	x: float
	y: float

	@classmethod
	def coerce(cls, value: 'Point2D | tuple[float, float] | dict') -> 'Point2D':
		"""Accept a Point2D, an (x, y) pair or a {'x': .., 'y': ..} mapping."""
		if isinstance(value, cls):
			return value
		if isinstance(value, dict):
			return cls(x=float(value['x']), y=float(value['y']))
		x, y = value
		return cls(x=float(x), y=float(y))

	def to_dict(self) -> dict[str, float]:
		return {'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class BoundingFrame:
	"""Oriented rectangle around one photo.

	(x, y) is the corner the rotation is applied about; the other corners
	are obtained by rotating the (width, height) rectangle by ``rotation``
	degrees and translating it to (x, y).
	"""
	x: float
	y: float
	width: float
	height: float
	rotation: float = 0.0  # degrees, normalized to (-45, 45]

	def __post_init__(self):
		if self.width < 0 or self.height < 0:
			raise ValueError("Frame width and height must not be negative")

	@property
	def area(self) -> float:
		return self.width * self.height

	@property
	def center(self) -> Point2D:
		angle = math.radians(self.rotation)
		cos, sin = math.cos(angle), math.sin(angle)
		half_w, half_h = self.width / 2, self.height / 2
		return Point2D(
			x=self.x + half_w * cos - half_h * sin,
			y=self.y + half_w * sin + half_h * cos,
		)

	def corners(self) -> list[Point2D]:
		"""Corners in drawing order, starting at the frame origin."""
		angle = math.radians(self.rotation)
		cos, sin = math.cos(angle), math.sin(angle)
		return [
			Point2D(self.x + cx * cos - cy * sin, self.y + cx * sin + cy * cos)
			for cx, cy in (
				(0.0, 0.0),
				(self.width, 0.0),
				(self.width, self.height),
				(0.0, self.height),
			)
		]

	def scaled(self, factor: float) -> 'BoundingFrame':
		"""Scale position and size; rotation is unaffected by scaling."""
		return replace(
			self,
			x=self.x * factor,
			y=self.y * factor,
			width=self.width * factor,
			height=self.height * factor,
		)

	def to_dict(self) -> dict[str, float]:
		return asdict(self)

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> 'BoundingFrame':
		return cls(
			x=data['x'],
			y=data['y'],
			width=data['width'],
			height=data['height'],
			rotation=data.get('rotation', 0.0),
		)


@dataclass(frozen=True)
class CropRect:
	"""Axis-aligned integer rectangle inside the source raster."""
	x: int
	y: int
	width: int
	height: int

	@property
	def box(self) -> tuple[int, int, int, int]:
		"""(left, upper, right, lower) as used by ``PIL.Image.crop``."""
		return (self.x, self.y, self.x + self.width, self.y + self.height)

	def to_dict(self) -> dict[str, int]:
		return asdict(self)


@dataclass(frozen=True)
class FrameExtraction:
	"""Full-resolution crop parameters for one detected frame."""
	frame: BoundingFrame  # in original image coordinates
	crop_rect: CropRect
	counter_rotation: float = 0.0  # degrees to rotate the crop by, 0 inside the dead zone

	@property
	def needs_rotation(self) -> bool:
		return self.counter_rotation != 0.0

	def to_dict(self) -> dict[str, Any]:
		return {
			'frame': self.frame.to_dict(),
			'crop_rect': self.crop_rect.to_dict(),
			'counter_rotation': self.counter_rotation,
		}


@dataclass(frozen=True, eq=False)
class Region:
	"""Pixels flood-filled from a seed, as an (N, 2) array of (x, y)."""
	points: np.ndarray
	seed: tuple[int, int]
	truncated: bool = False  # the fill stopped at max_pixels

	def __post_init__(self):
		if len(self.points) == 0:
			raise EmptyRegionError("No region found")

	def __len__(self) -> int:
		return len(self.points)

	def __contains__(self, item) -> bool:
		x, y = item
		return bool(np.any((self.points[:, 0] == x) & (self.points[:, 1] == y)))


@dataclass(frozen=True)
class ProcessingConfig:
	"""Per-request options. Never mutated; use ``dataclasses.replace``."""
	downsample_factor: float = const.DEFAULT_DOWNSAMPLE_FACTOR
	brightness_threshold: float = const.DEFAULT_BRIGHTNESS_THRESHOLD
	bright_seed_threshold: float = const.DEFAULT_BRIGHT_SEED_THRESHOLD
	min_area: float = const.DEFAULT_MIN_AREA
	padding: int = const.DEFAULT_PADDING

	bright_seed_cutoff: float = const.BRIGHT_SEED_CUTOFF
	predicate: PredicateKind = PredicateKind.BRIGHTNESS
	white_threshold: float = const.DEFAULT_WHITE_THRESHOLD
	max_pixels: int = const.DEFAULT_MAX_PIXELS
	step: int = 1
	rotation_dead_zone: float = const.ROTATION_DEAD_ZONE

	# Orientation refinement
	use_pca: bool = False
	enable_angle_refine: bool = False
	angle_refine_window: float = 3.0
	angle_refine_iterations: int = 10

	# Rendering
	tight_crop: bool = False
	crop_inset: int = 0

	def __post_init__(self):
		"""Validate option ranges."""
		if not 0.0 < self.downsample_factor <= 1.0:
			raise ValueError("downsample_factor must be in (0, 1]")
		if self.min_area < 0:
			raise ValueError("min_area must not be negative")
		if self.padding < 0 or self.crop_inset < 0:
			raise ValueError("padding and crop_inset must not be negative")
		if self.max_pixels < 1:
			raise ValueError("max_pixels must be positive")
		if self.step < 1:
			raise ValueError("step must be >= 1")
		if self.angle_refine_iterations < 0:
			raise ValueError("angle_refine_iterations must not be negative")
		# str values arriving from task payloads
		if not isinstance(self.predicate, PredicateKind):
			object.__setattr__(self, 'predicate', PredicateKind(self.predicate))

	def to_dict(self) -> dict[str, Any]:
		data = asdict(self)
		data['predicate'] = self.predicate.value
		return data

	@classmethod
	def from_dict(cls, data: dict[str, Any] | None) -> 'ProcessingConfig':
		"""Build from a plain mapping, ignoring unknown keys."""
		if not data:
			return cls()
		known = {f.name for f in fields(cls)}
		return cls(**{k: v for k, v in data.items() if k in known})

	@classmethod
	def from_settings(cls, settings=None) -> 'ProcessingConfig':
		"""Defaults taken from the environment-backed worker settings."""
		if settings is None:
			from scanframes.config import get_settings
			settings = get_settings()

		return cls(
			downsample_factor=settings.frames_downsample_factor,
			brightness_threshold=settings.frames_brightness_threshold,
			bright_seed_threshold=settings.frames_bright_seed_threshold,
			bright_seed_cutoff=settings.frames_bright_seed_cutoff,
			white_threshold=settings.frames_white_threshold,
			min_area=settings.frames_min_area,
			padding=settings.frames_padding,
			max_pixels=settings.frames_max_pixels,
			rotation_dead_zone=settings.frames_rotation_dead_zone,
			tight_crop=settings.frames_tight_crop,
			crop_inset=settings.frames_crop_inset,
		)


@dataclass
class SegmentedPhoto:
	"""Result of running the whole pipeline for one seed."""
	seed: Point2D
	frame: BoundingFrame  # original image coordinates
	extraction: FrameExtraction
	region_size: int = 0
	region_truncated: bool = False

	# Cropped and de-rotated photo (PIL.Image), when rendering was requested
	image: Any | None = None

	# Frame in the downsampled raster, for drawing on a preview
	scaled_frame: BoundingFrame | None = None

	# Flood-filled pixels in downsampled coordinates
	region: Region | None = None

	warnings: list[str] = field(default_factory=list)

	@property
	def width(self) -> int:
		return self.image.width if self.image is not None else 0

	@property
	def height(self) -> int:
		return self.image.height if self.image is not None else 0

	def to_dict(self) -> dict[str, Any]:
		"""Convert to dictionary for serialization (image excluded)."""
		return {
			'seed': self.seed.to_dict(),
			'frame': self.frame.to_dict(),
			'scaled_frame': self.scaled_frame.to_dict() if self.scaled_frame else None,
			'crop_rect': self.extraction.crop_rect.to_dict(),
			'counter_rotation': self.extraction.counter_rotation,
			'region_size': self.region_size,
			'region_truncated': self.region_truncated,
			'width': self.width,
			'height': self.height,
			'warnings': self.warnings,
		}
