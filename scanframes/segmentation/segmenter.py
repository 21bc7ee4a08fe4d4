# (c) Copyright Datacraft, 2026
"""Seed-based photo segmentation - find and cut out one photo per seed point."""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable

from PIL import Image

from .bounding_rectangle import minimal_bounding_rectangle
from .color import select_predicate
from .errors import FrameDetectionError, OutOfBoundsError
from .extraction import extract_frame, render_extraction
from .flood_fill import flood_fill
from .models import BoundingFrame, Point2D, ProcessingConfig, Region, SegmentedPhoto
from .raster import Raster, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedScan:
	"""Full-resolution and downsampled rasters of one sheet.

	Both are read-only and can be shared by every seed on the sheet.
	"""
	original: Raster
	scaled: Raster
	downsample_factor: float
	image: Image.Image | None = None  # source image used for rendering crops

	def scale_seed(self, seed: Point2D) -> Point2D:
		"""Seed in original coordinates to a pixel of the downsampled raster."""
		x = round_half_up(seed.x)
		y = round_half_up(seed.y)
		if not self.original.in_bounds(x, y):
			raise OutOfBoundsError(
				f"Seed point ({seed.x}, {seed.y}) out of image bounds "
				f"{self.original.width}x{self.original.height}"
			)

		factor = self.downsample_factor
		return Point2D(
			x=min(round_half_up(seed.x * factor), self.scaled.width - 1),
			y=min(round_half_up(seed.y * factor), self.scaled.height - 1),
		)


def detect_frame(
	raster: Raster,
	seed: Point2D | tuple[float, float],
	config: ProcessingConfig | None = None,
) -> tuple[BoundingFrame, Region]:
	"""Flood fill from ``seed`` and fit the minimum-area rectangle.

	Works entirely in the coordinates of ``raster``; no resampling.
	"""
	config = config or ProcessingConfig()
	seed = Point2D.coerce(seed)

	if not raster.in_bounds(round_half_up(seed.x), round_half_up(seed.y)):
		raise OutOfBoundsError(
			f"Seed point ({seed.x}, {seed.y}) out of image bounds {raster.width}x{raster.height}"
		)

	seed_color = raster.pixel(round_half_up(seed.x), round_half_up(seed.y))
	predicate = select_predicate(seed_color, config)
	region = flood_fill(
		raster,
		seed,
		predicate,
		step=config.step,
		max_pixels=config.max_pixels,
	)
	frame = minimal_bounding_rectangle(region.points, config.min_area, config)
	return frame, region


class FrameSegmenter:
	"""Find the frame of the photo under each seed point of a scanned sheet.

	Every call is synchronous and self-contained: nothing is cached between
	calls and the input image is never modified, so one segmenter can serve
	many threads.

	Example usage:
		segmenter = FrameSegmenter(ProcessingConfig(padding=20))
		frame = segmenter.generate_frame(image, (478, 673))

		for photo in segmenter.segment_many(image, seeds):
			if isinstance(photo, FrameDetectionError):
				continue
			photo.image.save(...)
	"""

	def __init__(self, config: ProcessingConfig | None = None):
		"""Initialize the segmenter.

		Args:
			config: Processing options; defaults are used when omitted
		"""
		self.config = config or ProcessingConfig()

	def prepare(self, image: Any) -> PreparedScan:
		"""Load ``image`` into rasters at full and downsampled resolution."""
		if isinstance(image, PreparedScan):
			return image

		original = Raster.coerce(image)
		scaled = original.downsample(self.config.downsample_factor)
		return PreparedScan(
			original=original,
			scaled=scaled,
			downsample_factor=self.config.downsample_factor,
			image=image if isinstance(image, Image.Image) else None,
		)

	def generate_frame(self, image: Any, seed: Point2D | tuple[float, float]) -> BoundingFrame:
		"""Frame of the photo under ``seed``, in original image coordinates."""
		scan = self.prepare(image)
		scaled_frame, _ = detect_frame(
			scan.scaled,
			scan.scale_seed(Point2D.coerce(seed)),
			self.config,
		)
		return extract_frame(
			scan.original,
			scaled_frame,
			scan.downsample_factor,
			self.config.padding,
			self.config.rotation_dead_zone,
		).frame

	def segment(
		self,
		image: Any,
		seed: Point2D | tuple[float, float],
		render: bool = True,
	) -> SegmentedPhoto:
		"""Run the whole pipeline for one seed.

		Args:
			image: PIL image, numpy array, Raster or PreparedScan
			seed: Point inside the photo, in original image coordinates
			render: Also cut out and de-rotate the photo

		Returns:
			SegmentedPhoto with the frame, crop parameters and image
		"""
		scan = self.prepare(image)
		seed = Point2D.coerce(seed)

		scaled_frame, region = detect_frame(scan.scaled, scan.scale_seed(seed), self.config)
		extraction = extract_frame(
			scan.original,
			scaled_frame,
			scan.downsample_factor,
			self.config.padding,
			self.config.rotation_dead_zone,
		)

		photo = SegmentedPhoto(
			seed=seed,
			frame=extraction.frame,
			extraction=extraction,
			region_size=len(region),
			region_truncated=region.truncated,
			scaled_frame=scaled_frame,
			region=region,
		)
		if region.truncated:
			photo.warnings.append(
				f"Region reached the {self.config.max_pixels} pixel limit and may be incomplete"
			)

		if render:
			source = scan.image if scan.image is not None else scan.original.to_image()
			photo.image = render_extraction(
				source,
				extraction,
				tight=self.config.tight_crop,
				inset=self.config.crop_inset,
			)

		return photo

	def segment_many(
		self,
		image: Any,
		seeds: Iterable[Point2D | tuple[float, float]],
		render: bool = True,
		max_workers: int | None = None,
	) -> list[SegmentedPhoto | FrameDetectionError]:
		"""Segment several photos of one sheet in parallel.

		Seeds share the same read-only rasters. Results come back in seed
		order; a seed whose detection failed yields its FrameDetectionError
		in place of a result. Other exceptions propagate.
		"""
		scan = self.prepare(image)
		seeds = [Point2D.coerce(s) for s in seeds]

		def _run(seed: Point2D) -> SegmentedPhoto | FrameDetectionError:
			try:
				return self.segment(scan, seed, render=render)
			except FrameDetectionError as e:
				logger.debug(f"Seed ({seed.x}, {seed.y}) failed: {e}")
				return e

		with ThreadPoolExecutor(max_workers=max_workers) as executor:
			return list(executor.map(_run, seeds))


def generate_frame(
	image: Any,
	seed: Point2D | tuple[float, float],
	config: ProcessingConfig | None = None,
) -> BoundingFrame:
	"""Detect the frame of the photo containing ``seed``.

	Args:
		image: PIL image, numpy array or Raster of the whole sheet
		seed: Point inside the photo, in original image coordinates
		config: Processing options

	Returns:
		BoundingFrame in original image coordinates
	"""
	return FrameSegmenter(config).generate_frame(image, seed)


def segment(
	image: Any,
	seed: Point2D | tuple[float, float],
	config: ProcessingConfig | None = None,
	render: bool = True,
) -> SegmentedPhoto:
	return FrameSegmenter(config).segment(image, seed, render=render)


def segment_many(
	image: Any,
	seeds: Iterable[Point2D | tuple[float, float]],
	config: ProcessingConfig | None = None,
	render: bool = True,
	max_workers: int | None = None,
) -> list[SegmentedPhoto | FrameDetectionError]:
	return FrameSegmenter(config).segment_many(
		image,
		seeds,
		render=render,
		max_workers=max_workers,
	)
