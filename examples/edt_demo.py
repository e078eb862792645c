"""
Example demonstrating the distance and feature transform on a 2-D grid.
"""

import numpy as np
import matplotlib.pyplot as plt

from py_edt import configure_logging, transform, feature_indices


def main():
    configure_logging("INFO", "plain")

    # A few scattered seeds on a 120x160 grid
    rng = np.random.default_rng(42)
    grid = np.zeros((120, 160), dtype=bool)
    rows = rng.integers(0, grid.shape[0], size=25)
    cols = rng.integers(0, grid.shape[1], size=25)
    grid[rows, cols] = True

    features, squared = transform(grid)
    distances = np.sqrt(squared)

    # Label each voxel by the seed it is nearest to (discrete Voronoi regions)
    nearest = feature_indices(features)
    labels = np.ravel_multi_index(tuple(nearest), grid.shape)
    _, labels = np.unique(labels, return_inverse=True)
    labels = labels.reshape(grid.shape)

    print(f"Grid shape: {grid.shape}")
    print(f"Seeds: {np.count_nonzero(grid)}")
    print(f"Max distance: {distances.max():.2f}")
    print(f"Mean distance: {distances.mean():.2f}")

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    im = axes[0].imshow(distances, cmap="magma")
    axes[0].scatter(cols, rows, c="cyan", s=8)
    axes[0].set_title("Euclidean distance to nearest seed")
    fig.colorbar(im, ax=axes[0])

    axes[1].imshow(labels, cmap="tab20")
    axes[1].scatter(cols, rows, c="black", s=8)
    axes[1].set_title("Feature transform (nearest seed)")

    plt.tight_layout()
    plt.savefig("edt_demo.png", dpi=150)
    print("\nSaved visualization to edt_demo.png")


if __name__ == "__main__":
    main()
