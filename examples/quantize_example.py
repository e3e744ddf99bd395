#!/usr/bin/env python3
"""Color quantization examples on a generated sample image.

Draws a small landscape (sky gradient, trees, trunks, grass), reduces it to a
handful of colors and prints the palette and clustering statistics.
"""

import numpy as np
from PIL import Image, ImageDraw

from kmeans import KMeans, evaluate_clustering
from quantizer import quantize_image, quantize_many, scatter_data


def _vertical_gradient(draw, box, top, bottom):
    x0, y0, x1, y1 = box
    for y in range(y0, y1):
        t = (y - y0) / max(1, y1 - y0 - 1)
        color = tuple(int(round(a + (b - a) * t)) for a, b in zip(top, bottom))
        draw.line([(x0, y), (x1 - 1, y)], fill=color)


def create_nature_sample() -> Image.Image:
    """200x150 landscape with a handful of dominant colors."""
    image = Image.new('RGB', (200, 150))
    draw = ImageDraw.Draw(image)

    # Sky
    _vertical_gradient(draw, (0, 0, 200, 75), (0x87, 0xCE, 0xEB), (0x98, 0xD8, 0xE8))
    # Trees
    for x, y, w, h in [(20, 50, 30, 60), (60, 45, 25, 65), (120, 55, 35, 55), (170, 40, 20, 70)]:
        draw.rectangle([x, y, x + w - 1, y + h - 1], fill=(0x22, 0x8B, 0x22))
    # Trunks
    for x, w in [(32, 6), (70, 5), (135, 5), (178, 4)]:
        draw.rectangle([x, 90, x + w - 1, 109], fill=(0x8B, 0x45, 0x13))
    # Grass
    _vertical_gradient(draw, (0, 110, 200, 150), (0x32, 0xCD, 0x32), (0x22, 0x8B, 0x22))
    return image


def simple_example():
    """Quantize the sample to 4 colors and show the palette."""
    print("🎯 Color Quantization Example")
    print("=" * 50)

    sample = create_nature_sample()
    quantized = quantize_image(sample, n_colors=4, random_state=42, verbose=True)
    result = quantized.result

    print(f"\nResults:")
    print(f"  Converged: {result.converged} after {result.n_iter} iterations")
    print(f"  Final inertia: {result.inertia:.2f}")
    print(f"\nPalette:")
    for entry in quantized.palette:
        print(f"  #{entry.index + 1} {entry.hex}  {entry.percentage:5.1f}%")

    metrics = evaluate_clustering(quantized.pixels, result, sample_size=2000)
    print(f"\nCluster distribution:")
    print(f"  Average cluster size: {metrics['avg_cluster_size']:.1f}")
    print(f"  Largest cluster: {metrics['max_cluster_size']}")
    print(f"  Smallest cluster: {metrics['min_cluster_size']}")
    print(f"  Silhouette score: {metrics['silhouette_score']}")

    view = scatter_data(quantized.pixels, result)
    print(f"\nColor-space view: {view.points.shape[0]} sampled points (stride {view.stride})")
    return quantized


def k_comparison_example():
    """Compare inertia for several palette sizes on the same pixels."""
    print("\n📊 Palette Size Comparison")
    print("=" * 50)

    pixels = np.asarray(create_nature_sample(), dtype=np.uint8).reshape(-1, 3)
    for k in range(2, 10):
        result = KMeans(n_clusters=k, random_state=0).fit(pixels)
        print(f"  k={k}: inertia={result.inertia:12.1f}  iterations={result.n_iter}")


def batch_example():
    """Quantize the sample at several sizes concurrently."""
    print("\n🧵 Batch Example")
    print("=" * 50)

    sample = create_nature_sample()
    sources = [sample, sample.resize((100, 75)), sample.resize((50, 38))]
    for quantized in quantize_many(sources, n_colors=5, seed=7, max_workers=3):
        width, height = quantized.size
        print(f"  {width}x{height}: {[entry.hex for entry in quantized.palette]}")


if __name__ == "__main__":
    simple_example()
    k_comparison_example()
    batch_example()
