# yapf: disable
from .log_utils import get_logger, setup_logger
from .ray_utils import line2linedist, point2linedist, ray2raydist

# yapf: enable

__all__ = [
    'get_logger', 'line2linedist', 'point2linedist', 'ray2raydist',
    'setup_logger'
]
