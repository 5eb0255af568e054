"""Custom exception hierarchy for HeatSmith."""


class HeatSmithError(Exception):
    """Base exception for all HeatSmith errors."""


class ConfigurationError(HeatSmithError):
    """Invalid renderer, LUT, or grid configuration."""


class ImageError(HeatSmithError):
    """Errors related to image loading or saving."""


class ImageFormatError(ImageError):
    """Unsupported or corrupted image format."""


class ImageDimensionError(ImageError):
    """Image dimensions exceed limits or are mismatched."""


class DataFormatError(HeatSmithError):
    """Unsupported or malformed scalar data file."""


class RenderError(HeatSmithError):
    """Errors during heatmap rendering."""
