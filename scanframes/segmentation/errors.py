# (c) Copyright Datacraft, 2026
"""Failure kinds of a single frame detection request."""


class FrameDetectionError(ValueError):
	"""Base class; ``kind`` names the failure for callers and task payloads."""
	kind = 'frame_detection'


class OutOfBoundsError(FrameDetectionError):
	"""Seed point lies outside the raster."""
	kind = 'out_of_bounds'


class EmptyRegionError(FrameDetectionError):
	"""Flood fill did not accept a single pixel."""
	kind = 'empty_region'


class InsufficientPointsError(FrameDetectionError):
	"""Fewer than three points to build a rectangle from."""
	kind = 'insufficient_points'


class RegionTooSmallError(FrameDetectionError):
	"""Minimum bounding rectangle is smaller than the configured area."""
	kind = 'region_too_small'

	def __init__(self, area: float, min_area: float):
		self.area = area
		self.min_area = min_area
		super().__init__(f"Region too small: {area:.0f} < {min_area}")
