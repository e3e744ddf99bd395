"""
Color-space view of a clustering: sampled pixels and centroids in normalised RGB.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np

from kmeans import ClusteringResult

# Upper bound on plotted pixels; the rest are skipped by a fixed stride
MAX_POINTS = 2000


@dataclass(frozen=True)
class ScatterData:
    points: np.ndarray     # (M, 3) sampled pixel colors scaled to 0-1
    labels: np.ndarray     # (M,) cluster index of each sampled pixel
    centroids: np.ndarray  # (k, 3) centroid colors scaled to 0-1
    stride: int


def scatter_data(pixels: np.ndarray, result: ClusteringResult, max_points: int = MAX_POINTS) -> ScatterData:
    """
    Sample every ``max(1, N // max_points)``-th pixel for plotting.

    Coordinates are channel values divided by 255; labels come from the
    clustering result so points and centroids agree with the quantized image.
    """
    pixels = np.asarray(pixels)
    if pixels.shape[0] != result.labels.shape[0]:
        raise ValueError(
            f"{pixels.shape[0]} pixels given for a result over {result.labels.shape[0]} points"
        )
    stride = max(1, pixels.shape[0] // max_points)
    return ScatterData(
        points=pixels[::stride].astype(np.float64) / 255.0,
        labels=result.labels[::stride].copy(),
        centroids=np.asarray(result.centroids, dtype=np.float64) / 255.0,
        stride=stride,
    )


def plot_color_space(
    data: ScatterData,
    path: Union[str, Path],
    point_size: float = 4.0,
    show_connections: bool = False,
) -> Path:
    """
    Render sampled pixels and centroids as a static 3D scatter in the RGB cube.

    Pixels are drawn in their own color, centroids as large outlined markers.
    With ``show_connections`` each pixel is joined to its centroid by a faint line.
    Requires the ``plot`` extra (matplotlib).
    """
    from matplotlib.figure import Figure

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig = Figure(figsize=(7, 7))
    ax = fig.add_subplot(projection='3d')

    if show_connections:
        for point, label in zip(data.points, data.labels):
            centroid = data.centroids[label]
            ax.plot(
                [point[0], centroid[0]], [point[1], centroid[1]], [point[2], centroid[2]],
                color='#666666', alpha=0.3, linewidth=0.5,
            )

    ax.scatter(
        data.points[:, 0], data.points[:, 1], data.points[:, 2],
        c=data.points, s=point_size, depthshade=False,
    )
    ax.scatter(
        data.centroids[:, 0], data.centroids[:, 1], data.centroids[:, 2],
        c=np.clip(data.centroids, 0.0, 1.0), s=point_size * 40, edgecolors='black', linewidths=1.0,
    )

    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_zlim(0, 1)
    ax.set_xlabel('R')
    ax.set_ylabel('G')
    ax.set_zlabel('B')
    ax.set_title(f"{data.centroids.shape[0]} clusters, every {data.stride} pixel(s)")

    fig.savefig(path, dpi=100)
    return path
