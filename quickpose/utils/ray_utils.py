import numpy as np

# when |dot(dir_a, dir_b)| falls below this, the distance is taken
# from origin b to line a
PARALLEL_EPS = 1e-4


def line2linedist(pa: np.ndarray, raya: np.ndarray, pb: np.ndarray,
                  rayb: np.ndarray) -> float:
    """Distance between two 3D lines, each given by an origin and a unit
    direction.

    Args:
        pa (np.ndarray): Origin of line a, in shape [3, ].
        raya (np.ndarray): Unit direction of line a, in shape [3, ].
        pb (np.ndarray): Origin of line b, in shape [3, ].
        rayb (np.ndarray): Unit direction of line b, in shape [3, ].

    Returns:
        float: The distance.
    """
    if abs(np.vdot(raya, rayb)) < PARALLEL_EPS:
        return point2linedist(pa, pb, raya)
    else:
        ve = np.cross(raya, rayb)
        ve = ve / np.linalg.norm(ve)
        return float(abs(np.vdot((pa - pb), ve)))


def point2linedist(pa: np.ndarray, pb: np.ndarray, ray: np.ndarray) -> float:
    ve = np.cross(pa - pb, ray)
    return float(np.linalg.norm(ve))


def ray2raydist(ray_a, ray_b) -> float:
    """Distance between two Ray instances."""
    return line2linedist(ray_a.origin, ray_a.direction, ray_b.origin,
                         ray_b.direction)
