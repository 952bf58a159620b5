from mmengine.registry import Registry

from .multi_ray_triangulator import MultiRayTriangulator

TRIANGULATORS = Registry('triangulator')

TRIANGULATORS.register_module(
    name='MultiRayTriangulator', module=MultiRayTriangulator)


def build_triangulator(cfg) -> MultiRayTriangulator:
    """Build a triangulator instance."""
    return TRIANGULATORS.build(cfg)
