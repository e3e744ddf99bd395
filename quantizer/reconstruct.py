"""
Image reconstruction and palette reporting from a clustering result.
"""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from kmeans import ClusteringResult


@dataclass(frozen=True)
class PaletteEntry:
    index: int
    rgb: Tuple[int, int, int]
    hex: str
    count: int
    percentage: float


def centroid_colors(centroids: np.ndarray) -> np.ndarray:
    """Round float centroids to integer channel values (half rounds up), clipped to 0..255."""
    return np.clip(np.floor(np.asarray(centroids, dtype=np.float64) + 0.5), 0, 255).astype(np.uint8)


def rgb_to_hex(rgb: Sequence[int]) -> str:
    r, g, b = [int(x) for x in rgb]
    return f"#{r:02X}{g:02X}{b:02X}"


def quantized_pixels(result: ClusteringResult) -> np.ndarray:
    """Each pixel replaced by its centroid's rounded color, shape (N, 3) uint8."""
    return centroid_colors(result.centroids)[result.labels]


def build_quantized_image(result: ClusteringResult, size: Tuple[int, int]) -> Image.Image:
    """
    Paint an opaque RGB image from cluster assignments.

    Args:
        result: Clustering of the image's pixels in row-major order
        size: (width, height) the pixels were extracted at
    """
    width, height = size
    if width * height != result.labels.shape[0]:
        raise ValueError(
            f"Size {width}x{height} does not match {result.labels.shape[0]} assigned pixels"
        )
    return Image.fromarray(quantized_pixels(result).reshape(height, width, 3))


def palette(result: ClusteringResult) -> List[PaletteEntry]:
    """Palette entries in cluster order, with pixel counts and coverage percentages."""
    colors = centroid_colors(result.centroids)
    counts = result.cluster_sizes()
    total = counts.sum()
    entries = []
    for index, (color, count) in enumerate(zip(colors, counts)):
        rgb = tuple(int(c) for c in color)
        entries.append(PaletteEntry(
            index=index,
            rgb=rgb,
            hex=rgb_to_hex(rgb),
            count=int(count),
            percentage=float(count) / total * 100 if total else 0.0,
        ))
    return entries


def write_palette_csv(entries: Sequence[PaletteEntry], path: Union[str, Path]) -> None:
    """Save palette information to a CSV file, one row per color."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', newline='', encoding='utf-8') as csvfile:
        fieldnames = ['Color Number', 'RGB', 'Hex', 'Count', 'Percentage']
        writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
        writer.writeheader()
        for entry in entries:
            writer.writerow({
                'Color Number': entry.index + 1,
                'RGB': entry.rgb,
                'Hex': entry.hex,
                'Count': entry.count,
                'Percentage': f"{entry.percentage:.2f}%",
            })


def render_palette(entries: Sequence[PaletteEntry], swatch_size: int = 50, spacing: int = 10) -> Image.Image:
    """
    Draw the palette as a row of numbered swatches.

    Swatch labels are drawn in black or white depending on swatch brightness.
    """
    n_colors = max(len(entries), 1)
    width = n_colors * (swatch_size + spacing) + spacing
    height = swatch_size + 2 * spacing
    image = Image.new('RGB', (width, height), 'white')
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    for i, entry in enumerate(entries):
        x0 = spacing + i * (swatch_size + spacing)
        y0 = spacing
        draw.rectangle([(x0, y0), (x0 + swatch_size, y0 + swatch_size)], fill=entry.rgb, outline='black')

        brightness = 0.299 * entry.rgb[0] + 0.587 * entry.rgb[1] + 0.114 * entry.rgb[2]
        text_color = 'white' if brightness < 128 else 'black'
        draw.text((x0 + 5, y0 + 5), str(entry.index + 1), fill=text_color, font=font)

    return image
