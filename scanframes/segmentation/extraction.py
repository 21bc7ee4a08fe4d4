# (c) Copyright Datacraft, 2026
"""Map detected frames to full-resolution crop and rotation parameters."""
import logging
import math
from typing import Any

import numpy as np
from PIL import Image

from scanframes import constants as const
from .geometry import axis_aligned_bounds, fold_angle, rotate_point
from .models import BoundingFrame, CropRect, FrameExtraction, Point2D
from .raster import Raster, round_half_up

logger = logging.getLogger(__name__)


def _image_size(image: Any) -> tuple[int, int]:
	if isinstance(image, (Raster, Image.Image)):
		return image.size
	if isinstance(image, np.ndarray):
		return image.shape[1], image.shape[0]
	width, height = image
	return int(width), int(height)


def scale_to_original(scaled_frame: BoundingFrame, downsample_factor: float) -> BoundingFrame:
	"""Frame from downsampled-image space to original-image space."""
	if downsample_factor == 1.0:
		return scaled_frame
	return scaled_frame.scaled(1 / downsample_factor)


def padded_crop_rect(
	frame: BoundingFrame,
	image_size: tuple[int, int],
	padding: int,
) -> CropRect:
	"""Axis-aligned box of the frame's corners plus padding, clamped to the image."""
	image_width, image_height = image_size
	bounds = axis_aligned_bounds(frame.corners())

	left = max(0, round_half_up(bounds.min_x - padding))
	top = max(0, round_half_up(bounds.min_y - padding))
	right = min(image_width, round_half_up(bounds.max_x + padding))
	bottom = min(image_height, round_half_up(bounds.max_y + padding))

	return CropRect(
		x=left,
		y=top,
		width=max(0, right - left),
		height=max(0, bottom - top),
	)


def extract_frame(
	original_image: Any,
	scaled_frame: BoundingFrame,
	downsample_factor: float,
	padding: int = const.DEFAULT_PADDING,
	dead_zone: float = const.ROTATION_DEAD_ZONE,
) -> FrameExtraction:
	"""Crop rectangle and counter-rotation for a frame found on a downsampled image.

	Args:
		original_image: Full-resolution image (Raster, PIL image, numpy array or (width, height))
		scaled_frame: Frame in downsampled coordinates
		downsample_factor: Factor the image was reduced by before detection
		padding: Margin around the frame in original pixels
		dead_zone: Rotations up to this many degrees are left alone

	Returns:
		FrameExtraction; ``counter_rotation`` follows the frame's convention
		(positive turns the x axis towards y) and is 0.0 inside the dead zone.
	"""
	frame = scale_to_original(scaled_frame, downsample_factor)
	crop_rect = padded_crop_rect(frame, _image_size(original_image), padding)

	rotation = fold_angle(frame.rotation)
	counter_rotation = -rotation if abs(rotation) > dead_zone else 0.0

	logger.debug(
		f"Frame {frame.width:.0f}x{frame.height:.0f} at ({frame.x:.0f}, {frame.y:.0f}), "
		f"rotation={frame.rotation:.1f}; crop {crop_rect.width}x{crop_rect.height} "
		f"at ({crop_rect.x}, {crop_rect.y}), counter rotation {counter_rotation:.1f}"
	)
	return FrameExtraction(frame=frame, crop_rect=crop_rect, counter_rotation=counter_rotation)


def _tight_box(
	extraction: FrameExtraction,
	cropped_size: tuple[int, int],
	result_size: tuple[int, int],
	inset: int,
) -> tuple[int, int, int, int]:
	"""Box of the frame itself inside the (possibly rotated) crop."""
	frame = extraction.frame
	crop = extraction.crop_rect
	center = frame.center

	# Frame center relative to the middle of the crop, then carried through
	# the rotation, which turns about the crop's middle.
	offset = Point2D(
		x=center.x - crop.x - cropped_size[0] / 2,
		y=center.y - crop.y - cropped_size[1] / 2,
	)
	offset = rotate_point(offset, math.radians(extraction.counter_rotation))
	cx = result_size[0] / 2 + offset.x
	cy = result_size[1] / 2 + offset.y

	left = max(0, round_half_up(cx - frame.width / 2) + inset)
	top = max(0, round_half_up(cy - frame.height / 2) + inset)
	right = min(result_size[0], round_half_up(cx + frame.width / 2) - inset)
	bottom = min(result_size[1], round_half_up(cy + frame.height / 2) - inset)
	return (left, top, max(left + 1, right), max(top + 1, bottom))


def render_extraction(
	image: Image.Image,
	extraction: FrameExtraction,
	tight: bool = False,
	inset: int = 0,
) -> Image.Image:
	"""Cut the frame out of the full-resolution image and turn it upright.

	Args:
		image: Full-resolution source image
		extraction: Output of ``extract_frame``
		tight: Trim the result to the frame itself, dropping padding and the
			corners exposed by the rotation
		inset: Extra pixels trimmed from each edge of a tight crop, to remove
			fringing from the background

	Returns:
		New PIL image; the source is left untouched
	"""
	cropped = image.crop(extraction.crop_rect.box)
	result = cropped

	if extraction.needs_rotation:
		logger.debug(f"Rotating crop by {extraction.counter_rotation:.1f} degrees")
		# PIL turns counter-clockwise for positive angles; frames use the
		# opposite convention in image coordinates.
		result = cropped.rotate(
			-extraction.counter_rotation,
			expand=True,
			resample=Image.Resampling.BICUBIC,
			fillcolor='white',
		)

	if tight:
		box = _tight_box(extraction, cropped.size, result.size, inset)
		result = result.crop(box)

	return result
