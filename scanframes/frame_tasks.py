# (c) Copyright Datacraft, 2026
"""Celery tasks for splitting scanned sheets into photos."""
import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any

from celery import shared_task
from PIL import Image

from scanframes import config
from scanframes import constants as const
from scanframes.segmentation import (
	FrameDetectionError,
	FrameSegmenter,
	Point2D,
	ProcessingConfig,
	SegmentedPhoto,
)
from scanframes.segmentation.diagnostics import encode_png, render_debug_overlay

logger = logging.getLogger(__name__)
settings = config.get_settings()


@shared_task(name=const.SPLIT_SCAN)
def split_scan(
	image_path: str,
	seeds: list,
	output_dir: str | None = None,
	overrides: dict | None = None,
	debug: bool = False,
) -> dict:
	"""
	Detect and cut out one photo per seed point of a scanned sheet.

	This task:
	1. Loads the scan
	2. Runs frame detection for every seed in parallel
	3. Saves the upright photos (and optional debug overlays) to output_dir
	4. Writes processing_metadata.json next to them

	Args:
		image_path: Path of the scanned sheet
		seeds: Seed points in image coordinates, as {"x", "y"} dicts or pairs
		output_dir: Where to write the photos; nothing is written when None.
			Relative paths (here and for image_path) start at the media root
		overrides: ProcessingConfig fields overriding the configured defaults
		debug: Also write overlays showing region, seed and frame

	Returns:
		Dict with one entry per detected frame and one per failed seed
	"""
	start_time = time.time()
	logger.info(f"Splitting {image_path} with {len(seeds)} seeds")

	result = {
		"image_path": image_path,
		"status": "completed",
		"frames": [],
		"failed": [],
		"error": None,
	}

	try:
		processing_config = build_config(overrides)
		out_dir = _media_path(output_dir) if output_dir else None
		basename = Path(image_path).stem

		with Image.open(_media_path(image_path)) as img:
			image = img.convert("RGB")

		segmenter = FrameSegmenter(processing_config)
		scan = segmenter.prepare(image)
		points = [Point2D.coerce(s) for s in seeds]

		outcomes = segmenter.segment_many(
			scan,
			points,
			render=out_dir is not None,
			max_workers=settings.frames_max_workers,
		)

		for index, (seed, outcome) in enumerate(zip(points, outcomes)):
			if isinstance(outcome, FrameDetectionError):
				logger.error(f"Seed {index} ({seed.x}, {seed.y}) of {basename} failed: {outcome}")
				result["failed"].append({
					"index": index,
					"seed": seed.to_dict(),
					"kind": outcome.kind,
					"error": str(outcome),
				})
				continue

			entry: dict[str, Any] = {"index": index, **outcome.to_dict()}
			if out_dir is not None:
				entry["image_path"] = str(_save_photo(outcome, out_dir, basename, index))
				if debug:
					entry["debug_path"] = str(
						_save_debug_overlay(scan, outcome, out_dir, basename, index)
					)
			result["frames"].append(entry)

		if out_dir is not None:
			_save_metadata(result, processing_config, out_dir)

		logger.info(
			f"Split {basename}: {len(result['frames'])}/{len(points)} frames detected"
		)

	except Exception as e:
		logger.error(f"Splitting {image_path} failed: {e}")
		result["status"] = "failed"
		result["error"] = str(e)

	result["processing_time_ms"] = (time.time() - start_time) * 1000
	return result


def _media_path(path: str) -> Path:
	"""Relative paths are taken from the media root."""
	path = Path(path)
	if path.is_absolute():
		return path
	return Path(settings.scanframes__main__media_root) / path


def build_config(overrides: dict | None = None) -> ProcessingConfig:
	"""Configured defaults with per-job overrides applied."""
	base = ProcessingConfig.from_settings(settings)
	if not overrides:
		return base
	return ProcessingConfig.from_dict({**base.to_dict(), **overrides})


def _save_photo(photo: SegmentedPhoto, out_dir: Path, basename: str, index: int) -> Path:
	"""Save the cropped photo as PNG."""
	images_dir = out_dir / const.SEGMENTS
	images_dir.mkdir(parents=True, exist_ok=True)

	output_path = images_dir / f"{basename}_{index}.{const.PNG}"
	photo.image.save(output_path, format="PNG", optimize=True)
	return output_path


def _save_debug_overlay(scan, photo: SegmentedPhoto, out_dir: Path, basename: str, index: int) -> Path:
	"""Overlay drawn on the downsampled scan, where detection ran."""
	debug_dir = out_dir / const.DEBUG
	debug_dir.mkdir(parents=True, exist_ok=True)

	overlay = render_debug_overlay(
		scan.scaled,
		region=photo.region,
		seed=scan.scale_seed(photo.seed),
		frame=photo.scaled_frame,
	)
	output_path = debug_dir / f"debug_{basename}_{index}.{const.PNG}"
	output_path.write_bytes(encode_png(overlay))
	return output_path


def _save_metadata(result: dict, processing_config: ProcessingConfig, out_dir: Path) -> None:
	metadata = {
		"timestamp": datetime.utcnow().isoformat(),
		"config": processing_config.to_dict(),
		**result,
	}
	out_dir.mkdir(parents=True, exist_ok=True)
	(out_dir / "processing_metadata.json").write_text(json.dumps(metadata, indent=2))
