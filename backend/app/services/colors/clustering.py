"""
K-means clustering of sampled RGB pixels into dominant colors.

The clusterer runs a fixed number of Lloyd iterations with no convergence
check. Initial centers come from a uniform shuffle of the input points
drawn from an injectable random source, so results are reproducible under
a seed. Ties during assignment go to the lowest center index and a cluster
that loses all of its members keeps its previous center.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
from loguru import logger

from app.config import config


PointsLike = Union[np.ndarray, Sequence[Sequence[int]]]


class InvalidInputError(ValueError):
    """Raised when points or a cluster count cannot be clustered."""
    pass


@dataclass
class ClusterResult:
    """
    Outcome of a clustering run.

    Attributes:
        centers: Rounded cluster centers, shape (k, 3) uint8
        counts: Members per center from the final assignment pass, shape (k,)
        iterations: Number of iterations that were run
    """
    centers: np.ndarray
    counts: np.ndarray
    iterations: int

    @property
    def ratios(self) -> np.ndarray:
        """Share of points assigned to each center."""
        total = int(self.counts.sum())
        if total == 0:
            return np.zeros(len(self.counts), dtype=np.float64)
        return self.counts / total


def as_points(points: PointsLike) -> np.ndarray:
    """
    Convert a point sequence into a float (N, 3) array.

    Raises:
        InvalidInputError: If points are not finite RGB triples in [0, 255]
    """
    try:
        arr = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Points must be numeric RGB triples: {e}") from e

    if arr.size == 0:
        return arr.reshape(0, 3)

    if arr.ndim != 2 or arr.shape[1] != 3:
        raise InvalidInputError(f"Points must have shape (N, 3), got {arr.shape}")

    if not np.all(np.isfinite(arr)):
        raise InvalidInputError("Points contain non-finite values")

    if arr.min() < 0 or arr.max() > 255:
        raise InvalidInputError(
            f"Point components must be in [0, 255], got range "
            f"[{arr.min():g}, {arr.max():g}]"
        )

    return arr


def validate_cluster_count(k, n_points: int) -> int:
    """Check that k is a positive integer no larger than the number of points."""
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise InvalidInputError(f"Cluster count must be an integer, got {type(k).__name__}")
    if k <= 0:
        raise InvalidInputError(f"Cluster count must be positive, got {k}")
    if k > n_points:
        raise InvalidInputError(f"Cluster count {k} exceeds number of points {n_points}")
    return int(k)


def assign_points(points: np.ndarray, centers: np.ndarray) -> np.ndarray:
    """Index of the nearest center for every point (lowest index on ties)."""
    diff = points[:, None, :] - centers[None, :, :]
    distances = np.sqrt(np.einsum('nkc,nkc->nk', diff, diff))
    # argmin returns the first occurrence of the minimum
    return np.argmin(distances, axis=1)


def update_centers(points: np.ndarray, labels: np.ndarray,
                   centers: np.ndarray) -> tuple:
    """
    Recompute centers as the mean of their members.

    Returns:
        Tuple of (new_centers, counts). Centers with no members are copied
        unchanged from ``centers``.
    """
    k = len(centers)
    counts = np.bincount(labels, minlength=k)
    sums = np.zeros_like(centers)
    np.add.at(sums, labels, points)

    new_centers = centers.copy()
    occupied = counts > 0
    new_centers[occupied] = sums[occupied] / counts[occupied, None]
    return new_centers, counts


def round_centers(centers: np.ndarray) -> np.ndarray:
    """Round to the nearest integer with halves going up, as uint8."""
    return np.clip(np.floor(centers + 0.5), 0, 255).astype(np.uint8)


class ColorClusterer:
    """
    Fixed-iteration k-means over RGB points.

    Example:
        >>> clusterer = ColorClusterer(rng_seed=7)
        >>> centers = clusterer.cluster([[0, 0, 0], [255, 255, 255]], k=2)
        >>> centers.shape
        (2, 3)
    """

    def __init__(self, iterations: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None,
                 rng_seed: Optional[int] = None):
        """
        Initialize the clusterer.

        Args:
            iterations: Number of k-means iterations (defaults to config.MAX_ITERATIONS)
            rng: Random generator used for initial center selection. It is
                consumed across calls.
            rng_seed: Seed for a fresh generator on every call. Ignored when
                ``rng`` is given.
        """
        self.iterations = config.MAX_ITERATIONS if iterations is None else iterations
        if not config.validate_iterations(self.iterations):
            raise InvalidInputError(f"Iteration count must be in [1, 1000], got {self.iterations}")
        self._rng = rng
        self.rng_seed = rng_seed

    def _generator(self) -> np.random.Generator:
        if self._rng is not None:
            return self._rng
        return np.random.default_rng(self.rng_seed)

    def initial_centers(self, points: np.ndarray, k: int) -> np.ndarray:
        """Shuffle the points uniformly and take the first k as centers."""
        order = self._generator().permutation(len(points))
        return points[order[:k]].copy()

    def cluster_from(self, points: PointsLike, initial_centers: PointsLike) -> ClusterResult:
        """Run the iterations from explicitly chosen starting centers."""
        pts = as_points(points)
        centers = as_points(initial_centers)
        if len(centers) == 0:
            raise InvalidInputError("At least one initial center is required")
        if len(pts) == 0:
            raise InvalidInputError("No points supplied")

        counts = np.zeros(len(centers), dtype=np.int64)
        for _ in range(self.iterations):
            labels = assign_points(pts, centers)
            centers, counts = update_centers(pts, labels, centers)

        empty = int(np.sum(counts == 0))
        if empty:
            logger.debug(f"{empty} of {len(centers)} clusters ended empty and kept their previous center")

        return ClusterResult(
            centers=round_centers(centers),
            counts=counts,
            iterations=self.iterations,
        )

    def cluster_with_counts(self, points: PointsLike, k: int) -> ClusterResult:
        """
        Cluster points into k colors and report cluster sizes.

        Raises:
            InvalidInputError: If points are malformed, k <= 0 or k exceeds
                the number of points
        """
        pts = as_points(points)
        k = validate_cluster_count(k, len(pts))

        logger.debug(f"Clustering {len(pts)} points into k={k} over {self.iterations} iterations")
        return self.cluster_from(pts, self.initial_centers(pts, k))

    def cluster(self, points: PointsLike, k: int) -> np.ndarray:
        """Cluster points into k representative colors, shape (k, 3) uint8."""
        return self.cluster_with_counts(points, k).centers


def cluster_colors(points: PointsLike, k: int, rng_seed: Optional[int] = None,
                   iterations: Optional[int] = None) -> np.ndarray:
    """Convenience wrapper around ColorClusterer.cluster."""
    return ColorClusterer(iterations=iterations, rng_seed=rng_seed).cluster(points, k)
