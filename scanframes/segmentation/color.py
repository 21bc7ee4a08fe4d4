# (c) Copyright Datacraft, 2026
"""Color predicates deciding which pixels grow a seed's region."""
import logging
from dataclasses import dataclass
from typing import Callable

from .models import RGB, PredicateKind, ProcessingConfig

logger = logging.getLogger(__name__)

# Any (candidate, seed_color) -> bool callable can drive a flood fill
PredicateFn = Callable[[RGB, RGB], bool]


def calculate_brightness(color: RGB) -> float:
	"""Average of the RGB channels (0-255)."""
	return (color[0] + color[1] + color[2]) / 3


@dataclass(frozen=True)
class ColorPredicate:
	"""A threshold plus a strategy tag.

	Instances are immutable and hold no state, so one predicate can be shared
	by flood fills running in parallel.
	"""
	kind: PredicateKind
	threshold: float

	def __call__(self, candidate: RGB, seed_color: RGB) -> bool:
		brightness = calculate_brightness(candidate)
		if self.kind == PredicateKind.WHITE_BOUNDARY:
			return brightness < self.threshold
		return abs(brightness - calculate_brightness(seed_color)) < self.threshold


def brightness_predicate(threshold: float) -> ColorPredicate:
	"""Accept pixels whose brightness is within ``threshold`` of the seed's."""
	return ColorPredicate(PredicateKind.BRIGHTNESS, threshold)


def white_boundary_predicate(white_threshold: float = 250) -> ColorPredicate:
	"""Accept everything darker than ``white_threshold``; stop at the white background."""
	return ColorPredicate(PredicateKind.WHITE_BOUNDARY, white_threshold)


def select_predicate(seed_color: RGB, config: ProcessingConfig) -> ColorPredicate:
	"""Pick the predicate for a seed.

	Bright seeds (brightness above ``config.bright_seed_cutoff``) sit close to
	the background, so they get the stricter ``bright_seed_threshold`` to keep
	the region from leaking into the sheet.
	"""
	if config.predicate == PredicateKind.WHITE_BOUNDARY:
		return white_boundary_predicate(config.white_threshold)

	seed_brightness = calculate_brightness(seed_color)
	is_bright_seed = seed_brightness > config.bright_seed_cutoff
	threshold = config.bright_seed_threshold if is_bright_seed else config.brightness_threshold

	logger.debug(
		f"Seed pixel RGB{tuple(seed_color)}, brightness {seed_brightness:.1f}, "
		f"using threshold {threshold}{' (bright seed)' if is_bright_seed else ''}"
	)
	return brightness_predicate(threshold)
