"""Default configuration, constants, and limits for HeatSmith."""

# --- Security limits ---
MAX_GRID_DIMENSION = 16384  # 16K cells per side
MAX_GRID_PIXELS = 100_000_000  # 100 megapixels
MAX_LUT_RESOLUTION = 65536
MIN_LUT_RESOLUTION = 2
MIN_SOURCE_WIDTH = 2

# --- Allowed file extensions ---
IMAGE_EXTENSIONS = frozenset({
    ".png", ".tiff", ".tif", ".bmp", ".jpg", ".jpeg",
})
DATA_EXTENSIONS = frozenset({".npy", ".csv", ".txt"})
OUTPUT_EXTENSIONS = frozenset({".png", ".tiff", ".tif"})  # formats that keep alpha

# --- Default render parameters ---
DEFAULT_LUT_RESOLUTION = 256
DEFAULT_BACKEND = "numpy"
DEFAULT_WORKERS = 1

# --- Pixel format ---
RGBA_CHANNELS = 4
OPAQUE_ALPHA = 255
