"""HeatSmith: scalar-field heatmap rendering through a 1D color LUT."""

__version__ = "0.1.0"

from heatsmith.core.lut import build_lut
from heatsmith.core.types import Backend, LUTData, RenderConfig
from heatsmith.errors import ConfigurationError, HeatSmithError
from heatsmith.pipeline.renderer import HeatmapRenderer, render_heatmap

__all__ = [
    "Backend",
    "ConfigurationError",
    "HeatSmithError",
    "HeatmapRenderer",
    "LUTData",
    "RenderConfig",
    "build_lut",
    "render_heatmap",
]
