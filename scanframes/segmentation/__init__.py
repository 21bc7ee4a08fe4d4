# (c) Copyright Datacraft, 2026
"""Seed-based photo segmentation.

Finds the oriented frame of the photo under a seed point on a scanned sheet
and cuts it out upright.
"""
from .segmenter import FrameSegmenter, PreparedScan, detect_frame, generate_frame, segment, segment_many
from .models import (
	BoundingFrame,
	CropRect,
	FrameExtraction,
	Point2D,
	PredicateKind,
	ProcessingConfig,
	Region,
	SegmentedPhoto,
)
from .errors import (
	EmptyRegionError,
	FrameDetectionError,
	InsufficientPointsError,
	OutOfBoundsError,
	RegionTooSmallError,
)

__all__ = [
	'FrameSegmenter',
	'PreparedScan',
	'detect_frame',
	'generate_frame',
	'segment',
	'segment_many',
	'BoundingFrame',
	'CropRect',
	'FrameExtraction',
	'Point2D',
	'PredicateKind',
	'ProcessingConfig',
	'Region',
	'SegmentedPhoto',
	'EmptyRegionError',
	'FrameDetectionError',
	'InsufficientPointsError',
	'OutOfBoundsError',
	'RegionTooSmallError',
]
