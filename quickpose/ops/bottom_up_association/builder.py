# yapf: disable
from mmengine.registry import Registry

from .cluster_resolver import ClusterResolver
from .hypothesis_search import HypothesisSearch
from .quickpose_associator import QuickPoseAssociator

# yapf: enable

BOTTOM_UP_ASSOCIATORS = Registry('bottom_up_associator')

BOTTOM_UP_ASSOCIATORS.register_module(
    name='QuickPoseAssociator', module=QuickPoseAssociator)
BOTTOM_UP_ASSOCIATORS.register_module(
    name='HypothesisSearch', module=HypothesisSearch)
BOTTOM_UP_ASSOCIATORS.register_module(
    name='ClusterResolver', module=ClusterResolver)


def build_bottom_up_associator(cfg) -> QuickPoseAssociator:
    """Build bottom_up_associator."""
    return BOTTOM_UP_ASSOCIATORS.build(cfg)
