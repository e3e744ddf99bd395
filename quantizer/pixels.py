"""
Pixel extraction: decode an image and turn it into an (N, 3) array of RGB triples.
"""

from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image

# Longer image side is scaled down to this many pixels before clustering
MAX_SIZE = 300


def load_image(path: Union[str, Path]) -> Image.Image:
    """Open an image file and return it as an RGB image (alpha is dropped)."""
    with Image.open(path) as image:
        return image.convert("RGB")


def scaled_size(width: int, height: int, max_size: int = MAX_SIZE) -> Tuple[int, int]:
    """Fit (width, height) inside a max_size box, keeping aspect ratio and rounding down."""
    if max_size < 1:
        raise ValueError(f"max_size must be >= 1, got {max_size}")
    if width > max_size or height > max_size:
        ratio = min(max_size / width, max_size / height)
        width = max(1, int(width * ratio))
        height = max(1, int(height * ratio))
    return width, height


def extract_pixels(image: Image.Image, max_size: int = MAX_SIZE) -> Tuple[Tuple[int, int], np.ndarray]:
    """
    Downscale an image and read its pixels in row-major order.

    Args:
        image: Any PIL image; converted to RGB, alpha channel discarded
        max_size: Maximum length of the longer side

    Returns:
        ((width, height), pixels) where pixels is a uint8 array of shape (width * height, 3)
    """
    rgb = image.convert("RGB")
    size = scaled_size(rgb.width, rgb.height, max_size)
    if size != rgb.size:
        rgb = rgb.resize(size, Image.Resampling.BILINEAR)
    pixels = np.asarray(rgb, dtype=np.uint8).reshape(-1, 3)
    return size, pixels
