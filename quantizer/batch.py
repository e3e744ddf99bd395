"""
Quantize several images concurrently.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Sequence

import numpy as np

from .pipeline import ImageSource, QuantizedImage, quantize_image


def quantize_many(
    sources: Sequence[ImageSource],
    n_colors: int,
    seed: int,
    max_workers: Optional[int] = None,
    **kwargs: Any,
) -> List[QuantizedImage]:
    """
    Quantize images on a thread pool.

    Every image gets its own Generator spawned from ``SeedSequence(seed)``, so
    results depend only on the seed and the image's position, never on
    scheduling order.

    Returns:
        Results in the same order as ``sources``. The first failure is re-raised.
    """
    children = np.random.SeedSequence(seed).spawn(len(sources))
    rngs = [np.random.default_rng(child) for child in children]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(quantize_image, source, n_colors, rng, **kwargs)
            for source, rng in zip(sources, rngs)
        ]
        return [future.result() for future in futures]
