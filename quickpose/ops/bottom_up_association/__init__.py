from .builder import BOTTOM_UP_ASSOCIATORS, build_bottom_up_associator
from .cluster_resolver import ClusterResolver
from .hypothesis_search import NO_CHOICE, Cluster, HypothesisSearch
from .quickpose_associator import QuickPoseAssociator

__all__ = [
    'BOTTOM_UP_ASSOCIATORS', 'Cluster', 'ClusterResolver', 'HypothesisSearch',
    'NO_CHOICE', 'QuickPoseAssociator', 'build_bottom_up_associator'
]
