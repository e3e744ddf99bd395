"""
Image color quantization on top of the kmeans clustering core.
"""

from .batch import quantize_many
from .pipeline import QuantizedImage, quantize_image
from .pixels import MAX_SIZE, extract_pixels, load_image, scaled_size
from .reconstruct import (
    PaletteEntry,
    build_quantized_image,
    centroid_colors,
    palette,
    quantized_pixels,
    render_palette,
    rgb_to_hex,
    write_palette_csv,
)
from .visualization import ScatterData, scatter_data

__all__ = [
    "quantize_image",
    "quantize_many",
    "QuantizedImage",
    "MAX_SIZE",
    "load_image",
    "extract_pixels",
    "scaled_size",
    "PaletteEntry",
    "centroid_colors",
    "rgb_to_hex",
    "quantized_pixels",
    "build_quantized_image",
    "palette",
    "write_palette_csv",
    "render_palette",
    "ScatterData",
    "scatter_data",
]
