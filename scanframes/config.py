from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from scanframes import constants as const


class Settings(BaseSettings):
	scanframes__main__media_root: Path = Path(".")

	# Frame detection defaults
	frames_downsample_factor: float = const.DEFAULT_DOWNSAMPLE_FACTOR
	frames_brightness_threshold: float = const.DEFAULT_BRIGHTNESS_THRESHOLD
	frames_bright_seed_threshold: float = const.DEFAULT_BRIGHT_SEED_THRESHOLD
	frames_bright_seed_cutoff: float = const.BRIGHT_SEED_CUTOFF
	frames_white_threshold: float = const.DEFAULT_WHITE_THRESHOLD
	frames_min_area: float = const.DEFAULT_MIN_AREA
	frames_padding: int = const.DEFAULT_PADDING
	frames_max_pixels: int = const.DEFAULT_MAX_PIXELS
	frames_rotation_dead_zone: float = const.ROTATION_DEAD_ZONE

	# Output
	frames_tight_crop: bool = False
	frames_crop_inset: int = 0
	frames_max_workers: int | None = None


@lru_cache()
def get_settings():
	return Settings()
