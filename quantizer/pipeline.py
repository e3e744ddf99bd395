"""
End-to-end color quantization of a single image.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

import numpy as np
from PIL import Image

from kmeans import ClusteringResult, KMeansConfig, fit
from kmeans.utils import RandomState

from .pixels import MAX_SIZE, extract_pixels, load_image
from .reconstruct import PaletteEntry, build_quantized_image, palette

ImageSource = Union[str, Path, Image.Image]


@dataclass(frozen=True)
class QuantizedImage:
    size: Tuple[int, int]
    pixels: np.ndarray
    result: ClusteringResult

    @property
    def image(self) -> Image.Image:
        return build_quantized_image(self.result, self.size)

    @property
    def palette(self) -> List[PaletteEntry]:
        return palette(self.result)


def quantize_image(
    source: ImageSource,
    n_colors: int,
    random_state: RandomState,
    max_iters: int = 100,
    tol: float = 1e-4,
    max_size: int = MAX_SIZE,
    should_stop: Optional[Callable[[], bool]] = None,
    verbose: bool = False,
) -> QuantizedImage:
    """
    Reduce an image to ``n_colors`` colors.

    Args:
        source: Path to an image file or an already-decoded PIL image
        n_colors: Number of clusters (1 <= n_colors <= number of extracted pixels)
        random_state: Integer seed or numpy Generator for centroid seeding
        max_iters: Iteration budget for the clustering
        tol: Convergence tolerance in RGB units
        max_size: Longer image side is scaled down to this before clustering
        should_stop: Optional cancellation check passed to the clustering loop
        verbose: Whether to print clustering progress

    Returns:
        QuantizedImage with the extracted pixels and the clustering result
    """
    image = source if isinstance(source, Image.Image) else load_image(source)
    size, pixels = extract_pixels(image, max_size=max_size)
    if verbose:
        print(f"Extracted {pixels.shape[0]} pixels at {size[0]}x{size[1]}")

    config = KMeansConfig(n_clusters=n_colors, max_iters=max_iters, tol=tol)
    result = fit(pixels, config, random_state, should_stop=should_stop, verbose=verbose)
    return QuantizedImage(size=size, pixels=pixels, result=result)
