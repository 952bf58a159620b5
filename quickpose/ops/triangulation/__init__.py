from quickpose.ops.triangulation.builder import (  # noqa:F401
    TRIANGULATORS, build_triangulator,
)
from quickpose.ops.triangulation.multi_ray_triangulator import (  # noqa:F401
    MultiRayTriangulator, multi_ray_intersect,
)

__all__ = [
    'TRIANGULATORS', 'MultiRayTriangulator', 'build_triangulator',
    'multi_ray_intersect'
]
