# yapf: disable
import logging
import numpy as np
from typing import Sequence, Union

from quickpose.data_structure.camera import Ray
from quickpose.utils.log_utils import get_logger

# yapf: enable


def multi_ray_intersect(rays: Sequence[Ray],
                        weights: Union[None, Sequence[float],
                                       np.ndarray] = None) -> np.ndarray:
    """Closest point to a bundle of rays in the weighted least-squares
    sense.

    For ray i with unit direction d, N_i = w_i * (d * d^T - I), and the
    point x solves sum(N_i) * x = sum(N_i * origin_i).

    Args:
        rays (Sequence[Ray]):
            At least two rays, not all parallel.
        weights (Union[None, Sequence[float], np.ndarray], optional):
            Positive weight of each ray. Defaults to None, all ones.

    Returns:
        np.ndarray: The point in shape [3, ].
    """
    if weights is None:
        weights = np.ones(len(rays))
    mat_a = np.zeros((3, 3), dtype=np.float64)
    vec_b = np.zeros(3, dtype=np.float64)
    identity = np.identity(3, dtype=np.float64)
    for ray, weight in zip(rays, weights):
        direction = ray.direction
        mat_n = weight * (np.outer(direction, direction) - identity)
        mat_a += mat_n
        vec_b += mat_n.dot(ray.origin)
    try:
        return np.linalg.solve(mat_a, vec_b)
    except np.linalg.LinAlgError:
        return np.linalg.lstsq(mat_a, vec_b, rcond=None)[0]


class MultiRayTriangulator:

    def __init__(self,
                 min_n_rays: int = 2,
                 square_confidence: bool = True,
                 logger: Union[None, str, logging.Logger] = None) -> None:
        """Triangulator fusing camera rays of one joint into a 3D point.

        Args:
            min_n_rays (int, optional):
                Minimum number of rays for a valid point.
                Defaults to 2.
            square_confidence (bool, optional):
                Whether to weight each ray by its confidence squared,
                instead of the confidence itself. Defaults to True.
            logger (Union[None, str, logging.Logger], optional):
                Logger for logging. If None, root logger will be selected.
                Defaults to None.
        """
        self.logger = get_logger(logger)
        if min_n_rays < 2:
            self.logger.error('At least two rays are needed to ' +
                              f'triangulate, got min_n_rays={min_n_rays}.')
            raise ValueError
        self.min_n_rays = min_n_rays
        self.square_confidence = square_confidence

    def get_weights(self, confidences: Sequence[float]) -> np.ndarray:
        weights = np.asarray(confidences, dtype=np.float64)
        if self.square_confidence:
            weights = weights * weights
        return weights

    def triangulate(self, rays: Sequence[Ray],
                    confidences: Sequence[float]) -> np.ndarray:
        """Triangulate one point from rays and their confidences.

        Args:
            rays (Sequence[Ray]):
                Rays of the same joint from different cameras.
            confidences (Sequence[float]):
                Detection confidence of each ray.

        Raises:
            ValueError: Less than min_n_rays rays, or less than min_n_rays
                rays with a positive confidence, are given.

        Returns:
            np.ndarray: The point in shape [3, ].
        """
        if len(rays) < self.min_n_rays:
            self.logger.error(f'Triangulation needs {self.min_n_rays} ' +
                              f'rays or more, got {len(rays)}.')
            raise ValueError
        if len(rays) != len(confidences):
            self.logger.error('Rays and confidences differ in length.')
            raise ValueError
        weights = self.get_weights(confidences)
        n_weighted = int((weights > 0).sum())
        if n_weighted < self.min_n_rays:
            self.logger.error(f'Triangulation needs {self.min_n_rays} ' +
                              'rays with positive confidence or more, ' +
                              f'got {n_weighted}.')
            raise ValueError
        return multi_ray_intersect(rays, weights)
