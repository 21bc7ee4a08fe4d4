# (c) Copyright Datacraft, 2026
import numpy as np
import pytest
from PIL import Image

from tests.utils import blank_sheet, draw_photo, sheet_with_photo


@pytest.fixture
def axis_aligned_sheet() -> np.ndarray:
	"""100x50 photo centered at (200, 150) on a 400x300 white sheet."""
	return sheet_with_photo()


@pytest.fixture
def rotated_sheet() -> np.ndarray:
	"""100x50 photo rotated by 30 degrees, centered at (200, 150)."""
	return sheet_with_photo(rotation=30)


@pytest.fixture
def two_photo_sheet() -> Image.Image:
	"""Two photos side by side on a 600x300 sheet, as a PIL image."""
	canvas = blank_sheet(600, 300)
	draw_photo(canvas, (150, 150), 160, 100, rotation=10)
	draw_photo(canvas, (430, 150), 120, 180, rotation=-20, color=(140, 40, 40))
	return Image.fromarray(canvas)
