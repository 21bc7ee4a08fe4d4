# (c) Copyright Datacraft, 2026
DEFAULT_DOWNSAMPLE_FACTOR = 0.5
DEFAULT_BRIGHTNESS_THRESHOLD = 50
DEFAULT_BRIGHT_SEED_THRESHOLD = 30
BRIGHT_SEED_CUTOFF = 180  # seeds brighter than this use the stricter threshold
DEFAULT_WHITE_THRESHOLD = 230
DEFAULT_MIN_AREA = 100
DEFAULT_PADDING = 10  # pixels
DEFAULT_MAX_PIXELS = 500_000
ROTATION_DEAD_ZONE = 5.0  # degrees
PCA_MIN_ANGLE_DIFF = 5.0  # degrees

PNG = "png"
SEGMENTS = "segments"
DEBUG = "debug"

# Celery tasks
SPLIT_SCAN = "scanframes.frame_tasks.split_scan"
