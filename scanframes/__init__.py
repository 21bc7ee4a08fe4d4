# (c) Copyright Datacraft, 2026
"""Split scanned sheets of photographs into individual, upright images."""
from .segmentation import (
	BoundingFrame,
	FrameSegmenter,
	Point2D,
	ProcessingConfig,
	generate_frame,
	segment,
	segment_many,
)

__all__ = [
	'BoundingFrame',
	'FrameSegmenter',
	'Point2D',
	'ProcessingConfig',
	'generate_frame',
	'segment',
	'segment_many',
]
