"""
Command-line color quantizer.

Example:
    kmeans-quantize photo.jpg -k 6 --output photo_6.png --palette-csv palette.csv
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from kmeans import KMeansError

from .pipeline import quantize_image
from .pixels import MAX_SIZE
from .reconstruct import render_palette, write_palette_csv


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reduce an image's colors with K-means clustering")
    parser.add_argument("input", help="Path to the input image")
    parser.add_argument("-k", "--colors", type=int, default=4,
                        help="Number of colors (clusters) (default: 4)")
    parser.add_argument("--max-iters", type=int, default=100,
                        help="Maximum number of K-means iterations (default: 100)")
    parser.add_argument("--tol", type=float, default=1e-4,
                        help="Convergence tolerance in RGB units (default: 1e-4)")
    parser.add_argument("--seed", type=int, default=42,
                        help="Random seed for centroid seeding (default: 42)")
    parser.add_argument("--max-size", type=int, default=MAX_SIZE,
                        help=f"Longer side is scaled down to this many pixels (default: {MAX_SIZE})")
    parser.add_argument("--output", help="Where to save the quantized image (default: <input>_k<colors>.png)")
    parser.add_argument("--palette-csv", help="Save palette information to this CSV file")
    parser.add_argument("--palette-image", help="Save the palette swatches to this image file")
    parser.add_argument("--plot", help="Save a 3D color-space scatter to this file (needs matplotlib)")
    parser.add_argument("--verbose", action="store_true", help="Print clustering progress")
    return parser


def _default_output(input_path: Path, colors: int) -> Path:
    return input_path.with_name(f"{input_path.stem}_k{colors}.png")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.max_size < 1:
        parser.error(f"--max-size must be >= 1, got {args.max_size}")

    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else _default_output(input_path, args.colors)

    try:
        quantized = quantize_image(
            input_path,
            n_colors=args.colors,
            random_state=args.seed,
            max_iters=args.max_iters,
            tol=args.tol,
            max_size=args.max_size,
            verbose=args.verbose,
        )
    except OSError as e:
        print(f"❌ Cannot read image {input_path}: {e}", file=sys.stderr)
        return 1
    except KMeansError as e:
        print(f"❌ Clustering failed: {e}", file=sys.stderr)
        return 1

    result = quantized.result
    output_path.parent.mkdir(parents=True, exist_ok=True)
    quantized.image.save(output_path)

    width, height = quantized.size
    status = "converged" if result.converged else "did not converge"
    print(f"Clustered {width}x{height} = {width * height} pixels into {result.n_clusters} colors")
    print(f"  Iterations: {result.n_iter} ({status})")
    print(f"  Inertia: {result.inertia:.2f}")
    print("Palette:")
    entries = quantized.palette
    for entry in entries:
        print(f"  #{entry.index + 1}: RGB {entry.rgb} {entry.hex} - {entry.percentage:.2f}%")

    if args.palette_csv:
        write_palette_csv(entries, args.palette_csv)
        print(f"Palette saved to {args.palette_csv}")
    if args.palette_image:
        palette_path = Path(args.palette_image)
        palette_path.parent.mkdir(parents=True, exist_ok=True)
        render_palette(entries).save(palette_path)
        print(f"Palette swatches saved to {palette_path}")
    if args.plot:
        from .visualization import plot_color_space, scatter_data

        plot_color_space(scatter_data(quantized.pixels, result), args.plot)
        print(f"Color-space plot saved to {args.plot}")

    print(f"✅ Quantized image saved to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
